"""
Undoable cell modifications: painting, erasing and every other per-cell edit.
Supports merging so a continuous stroke becomes a single undo step.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Union

from ..constants import MERGE_WINDOW_MS
from ..errors import CommandValidationError, MergeError
from ..events import CellChanged
from ..models import Cell
from .base import Command

if TYPE_CHECKING:
    from ..events import EventBus
    from ..layer import Layer

_CELL_KEYS = ("ch", "fg", "bg")


@dataclass(slots=True)
class CellChange:
    index: int
    before: Cell
    after: Cell


ChangeLike = Union[CellChange, Mapping[str, Any]]


def _coerce_cell(value: Any, label: str) -> Cell:
    if isinstance(value, Cell):
        return value
    if isinstance(value, Mapping):
        missing = [key for key in _CELL_KEYS if key not in value]
        if missing:
            raise CommandValidationError(f"{label} is missing {', '.join(missing)}")
        return Cell.from_dict(value)
    raise CommandValidationError(f"{label} must be a cell")


def _coerce_change(position: int, change: ChangeLike, cell_limit: Optional[int] = None) -> CellChange:
    if isinstance(change, CellChange):
        index, before, after = change.index, change.before, change.after
    elif isinstance(change, Mapping):
        index, before, after = change.get("index"), change.get("before"), change.get("after")
    else:
        raise CommandValidationError(f"Change {position}: must be a CellChange or mapping")

    if not isinstance(index, int) or isinstance(index, bool):
        raise CommandValidationError(f"Change {position}: index must be an integer")
    if cell_limit is not None and not 0 <= index < cell_limit:
        raise CommandValidationError(f"Change {position}: index {index} is outside the grid (0..{cell_limit - 1})")
    if before is None or after is None:
        raise CommandValidationError(f"Change {position}: must have before and after states")
    return CellChange(
        index,
        _coerce_cell(before, f"Change {position} before"),
        _coerce_cell(after, f"Change {position} after"),
    )


def _describe(tool: str, count: int, merged: bool = True) -> str:
    verb = {"brush": "Paint", "eraser": "Erase"}.get(tool, "Modify")
    if count == 1 and not merged:
        return f"{verb} cell"
    return f"{verb} {count} cell{'' if count == 1 else 's'}"


class CellCommand(Command):
    """A batch of (index, before, after) cell changes applied to one layer."""

    merge_window_ms = MERGE_WINDOW_MS

    def __init__(
        self,
        description: str,
        layer: "Layer",
        changes: Sequence[ChangeLike],
        tool: str = "unknown",
        events: Optional["EventBus"] = None,
        width: Optional[int] = None,
        timestamp: Optional[int] = None,
    ):
        if not description:
            raise CommandValidationError("CellCommand description is required")
        if layer is None:
            raise CommandValidationError("CellCommand layer is required")
        if isinstance(changes, (str, bytes, Mapping)) or not isinstance(changes, Sequence):
            raise CommandValidationError("CellCommand changes must be a list")
        if not changes:
            raise CommandValidationError("CellCommand changes must not be empty")

        if width is None:
            width = getattr(layer, "width", None)
        height = getattr(layer, "height", None)
        cell_limit = width * height if width is not None and height is not None else None

        validated = [_coerce_change(i, change, cell_limit) for i, change in enumerate(changes)]
        super().__init__(description, timestamp)

        self.layer = layer
        self.changes: List[CellChange] = validated
        self.tool = tool or "unknown"
        self.events = events
        self.width = width

        # Last change per index; the one whose `after` is the final state
        self._by_index: Dict[int, CellChange] = {c.index: c for c in self.changes}

    def _write(self, change_index: int, cell: Cell):
        if self.width is None:
            # No grid geometry: the index is an opaque key for the target.
            # No CellChanged is emitted since there are no coordinates to report.
            self.layer.set_cell_at(change_index, cell)
            return

        y, x = divmod(change_index, self.width)
        self.layer.set_cell(x, y, cell)
        if self.events is not None:
            self.events.emit(CellChanged(x, y, self.layer.id, cell))

    def _apply(self, changes: Sequence[CellChange], forward: bool):
        """Write every change, rolling back the ones already written if a write fails."""
        written: List[CellChange] = []
        try:
            for change in changes:
                self._write(change.index, change.after if forward else change.before)
                written.append(change)
        except Exception:
            for change in reversed(written):
                self._write(change.index, change.before if forward else change.after)
            raise

    def execute(self):
        self._apply(self.changes, forward=True)
        self.executed = True

    def undo(self):
        self._apply(list(reversed(self.changes)), forward=False)

    def can_merge(self, other: Command) -> bool:
        if not isinstance(other, CellCommand):
            return False
        if other.layer is not self.layer or other.tool != self.tool:
            return False

        elapsed = other.timestamp - self.timestamp
        if elapsed < 0 or elapsed > self.merge_window_ms:
            return False

        return not self.has_conflicting_overlap(other)

    def has_conflicting_overlap(self, other: "CellCommand") -> bool:
        """True if some shared cell was changed in between the two commands."""
        seen = set()
        for change in other.changes:
            if change.index in seen:
                continue
            seen.add(change.index)
            mine = self._by_index.get(change.index)
            if mine is not None and mine.after != change.before:
                return True
        return False

    def merge(self, other: Command):
        if not self.can_merge(other):
            raise MergeError("Cannot merge incompatible commands")

        for change in other.changes:
            existing = self._by_index.get(change.index)
            if existing is not None:
                # Keep the original `before` so undo reverts the whole stroke
                existing.after = change.after
            else:
                added = CellChange(change.index, change.before, change.after)
                self.changes.append(added)
                self._by_index[added.index] = added

        self.description = _describe(self.tool, len(self._by_index))
        self.timestamp = max(self.timestamp, other.timestamp)

    def cell_count(self) -> int:
        return len(self._by_index)

    def affected_indices(self) -> List[int]:
        return list(self._by_index)

    @classmethod
    def from_single_cell(
        cls,
        layer: "Layer",
        index: int,
        before: Cell,
        after: Cell,
        tool: str = "unknown",
        events: Optional["EventBus"] = None,
        width: Optional[int] = None,
        timestamp: Optional[int] = None,
    ) -> "CellCommand":
        return cls(
            _describe(tool, 1, merged=False),
            layer,
            [CellChange(index, before, after)],
            tool=tool,
            events=events,
            width=width,
            timestamp=timestamp,
        )

    @classmethod
    def from_multiple_cells(
        cls,
        layer: "Layer",
        changes: Sequence[ChangeLike],
        tool: str = "unknown",
        events: Optional["EventBus"] = None,
        width: Optional[int] = None,
        timestamp: Optional[int] = None,
    ) -> "CellCommand":
        return cls(
            _describe(tool, len(changes)),
            layer,
            changes,
            tool=tool,
            events=events,
            width=width,
            timestamp=timestamp,
        )
