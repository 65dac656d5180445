"""
Undo and redo management for the editor.
Merges compatible consecutive commands so a drag stroke undoes in one step.
"""

import logging
from typing import List, Optional

from ..constants import DEFAULT_MAX_HISTORY
from ..errors import CommandValidationError
from ..events import (
    EventBus,
    HistoryCleared,
    HistoryExecuted,
    HistoryMerged,
    HistoryRedone,
    HistoryStatus,
    HistoryUndone,
)
from .base import Command

logger = logging.getLogger(__name__)


class CommandHistory:
    def __init__(
        self,
        max_size: int = DEFAULT_MAX_HISTORY,
        events: Optional[EventBus] = None,
        merging_enabled: bool = True,
    ):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.events = events
        self.undo_stack: List[Command] = []
        self.redo_stack: List[Command] = []
        self.merging_enabled = merging_enabled
        # Top of the undo stack, unless a stroke boundary has cut it loose
        self._merge_target: Optional[Command] = None

    def _emit(self, event):
        if self.events is not None:
            self.events.emit(event)

    def execute(self, command: Command, allow_merge: bool = True):
        if command is None:
            raise CommandValidationError("Command is required")

        target = self._merge_target
        if allow_merge and self.merging_enabled and target is not None and target.can_merge(command):
            # Apply first so a failing command never reaches the merged stroke
            command.execute()
            target.merge(command)
            self.redo_stack.clear()
            logger.debug("Merged %r into %r", command.description, target.description)
            self._emit(HistoryMerged(target, command))
            self._emit(self.status())
            return

        command.execute()
        command.executed = True
        self.undo_stack.append(command)
        self._merge_target = command
        self.redo_stack.clear()
        self._enforce_size_limit()

        logger.debug("Executed %r", command.description)
        self._emit(HistoryExecuted(command))
        self._emit(self.status())

    def undo(self) -> bool:
        if not self.undo_stack:
            logger.debug("Nothing to undo")
            return False

        command = self.undo_stack[-1]
        command.undo()
        self.undo_stack.pop()
        self.redo_stack.append(command)
        self._merge_target = self.undo_stack[-1] if self.undo_stack else None

        logger.debug("Undid %r", command.description)
        self._emit(HistoryUndone(command, command.description))
        self._emit(self.status())
        return True

    def redo(self) -> bool:
        if not self.redo_stack:
            logger.debug("Nothing to redo")
            return False

        command = self.redo_stack[-1]
        command.execute()
        self.redo_stack.pop()
        self.undo_stack.append(command)
        self._merge_target = command

        logger.debug("Redid %r", command.description)
        self._emit(HistoryRedone(command, command.description))
        self._emit(self.status())
        return True

    def clear(self):
        had_commands = bool(self.undo_stack or self.redo_stack)
        self.undo_stack.clear()
        self.redo_stack.clear()
        self._merge_target = None

        if had_commands:
            self._emit(HistoryCleared())
            self._emit(self.status())

    def set_merging_enabled(self, enabled: bool):
        self.merging_enabled = enabled
        if not enabled:
            self._merge_target = None

    def end_stroke(self):
        """Mark a gesture boundary so the next command starts a new undo step."""
        self.set_merging_enabled(False)
        self.set_merging_enabled(True)

    def _enforce_size_limit(self):
        while len(self.undo_stack) > self.max_size:
            dropped = self.undo_stack.pop(0)
            logger.debug("History full, dropped %r", dropped.description)

    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def size(self) -> int:
        return len(self.undo_stack) + len(self.redo_stack)

    def status(self) -> HistoryStatus:
        return HistoryStatus(
            can_undo=self.can_undo(),
            can_redo=self.can_redo(),
            undo_count=len(self.undo_stack),
            redo_count=len(self.redo_stack),
            next_undo_description=self.undo_stack[-1].description if self.undo_stack else None,
            next_redo_description=self.redo_stack[-1].description if self.redo_stack else None,
        )

    def undo_stack_snapshot(self) -> List[Command]:
        return list(self.undo_stack)

    def redo_stack_snapshot(self) -> List[Command]:
        return list(self.redo_stack)
