"""
Command pattern base class for undoable operations.
"""

import time
from abc import ABC, abstractmethod
from typing import Optional

from ..errors import CommandValidationError, MergeError


def now_ms() -> int:
    return int(time.time() * 1000)


class Command(ABC):
    """Base class for every undoable scene mutation."""

    def __init__(self, description: str, timestamp: Optional[int] = None):
        if not description:
            raise CommandValidationError("Command description is required")
        self.description = description
        self.timestamp = now_ms() if timestamp is None else timestamp
        self.executed = False

    @abstractmethod
    def execute(self):
        """Apply the command. Called again by redo."""
        raise NotImplementedError

    @abstractmethod
    def undo(self):
        """Restore the exact state from before execute()."""
        raise NotImplementedError

    def can_merge(self, other: "Command") -> bool:
        return False

    def merge(self, other: "Command"):
        raise MergeError(f"{type(self).__name__} does not support merging")

    def age_ms(self) -> int:
        return now_ms() - self.timestamp

    def __str__(self) -> str:
        clock = time.strftime("%H:%M:%S", time.localtime(self.timestamp / 1000))
        return f"{self.description} ({clock})"
