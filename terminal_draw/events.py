"""
Typed event bus connecting the editor core to the rendering shell.

Every event is a small dataclass bound to exactly one ``EventType``. Listeners
subscribe by ``EventType`` (or its string value); unknown names are rejected
at subscription time.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Dict, List, Optional, Union

from .models import Cell

if TYPE_CHECKING:
    from .commands.base import Command

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    CELL_CHANGED = "cell:changed"
    HISTORY_EXECUTED = "history:executed"
    HISTORY_UNDONE = "history:undone"
    HISTORY_REDONE = "history:redone"
    HISTORY_MERGED = "history:merged"
    HISTORY_CLEARED = "history:cleared"
    HISTORY_CHANGED = "history:changed"
    TOOL_PICKED = "tool:picked"
    TOOL_ANCHOR = "tool:anchor"
    LAYER_ADDED = "layer:added"
    LAYER_REMOVED = "layer:removed"
    LAYER_REORDERED = "layer:reordered"
    SCENE_RESIZED = "scene:resized"
    PROJECT_SAVED = "project:saved"
    PROJECT_LOADED = "project:loaded"
    PROJECT_ERROR = "project:error"


class Event:
    """Base for event payloads; subclasses set ``type``."""

    type: ClassVar[EventType]


@dataclass(frozen=True)
class CellChanged(Event):
    type: ClassVar[EventType] = EventType.CELL_CHANGED
    x: int
    y: int
    layer_id: str
    cell: Cell


@dataclass(frozen=True)
class HistoryExecuted(Event):
    type: ClassVar[EventType] = EventType.HISTORY_EXECUTED
    command: "Command"


@dataclass(frozen=True)
class HistoryUndone(Event):
    type: ClassVar[EventType] = EventType.HISTORY_UNDONE
    command: "Command"
    description: str


@dataclass(frozen=True)
class HistoryRedone(Event):
    type: ClassVar[EventType] = EventType.HISTORY_REDONE
    command: "Command"
    description: str


@dataclass(frozen=True)
class HistoryMerged(Event):
    type: ClassVar[EventType] = EventType.HISTORY_MERGED
    command: "Command"
    merged_with: "Command"


@dataclass(frozen=True)
class HistoryCleared(Event):
    type: ClassVar[EventType] = EventType.HISTORY_CLEARED


@dataclass(frozen=True)
class HistoryStatus(Event):
    type: ClassVar[EventType] = EventType.HISTORY_CHANGED
    can_undo: bool
    can_redo: bool
    undo_count: int
    redo_count: int
    next_undo_description: Optional[str]
    next_redo_description: Optional[str]


@dataclass(frozen=True)
class CellPicked(Event):
    type: ClassVar[EventType] = EventType.TOOL_PICKED
    x: int
    y: int
    layer_id: str
    cell: Cell


@dataclass(frozen=True)
class ToolAnchor(Event):
    """Anchor marker for shape tools; ``x``/``y`` of None hides it."""

    type: ClassVar[EventType] = EventType.TOOL_ANCHOR
    tool: str
    x: Optional[int]
    y: Optional[int]


@dataclass(frozen=True)
class LayerAdded(Event):
    type: ClassVar[EventType] = EventType.LAYER_ADDED
    layer_id: str
    index: int


@dataclass(frozen=True)
class LayerRemoved(Event):
    type: ClassVar[EventType] = EventType.LAYER_REMOVED
    layer_id: str
    index: int


@dataclass(frozen=True)
class LayerReordered(Event):
    type: ClassVar[EventType] = EventType.LAYER_REORDERED
    layer_id: str
    from_index: int
    to_index: int


@dataclass(frozen=True)
class SceneResized(Event):
    type: ClassVar[EventType] = EventType.SCENE_RESIZED
    width: int
    height: int
    old_width: int
    old_height: int


@dataclass(frozen=True)
class ProjectSaved(Event):
    type: ClassVar[EventType] = EventType.PROJECT_SAVED
    path: str
    name: str
    size: int


@dataclass(frozen=True)
class ProjectLoaded(Event):
    type: ClassVar[EventType] = EventType.PROJECT_LOADED
    path: str
    name: str
    timestamp: str


@dataclass(frozen=True)
class ProjectError(Event):
    type: ClassVar[EventType] = EventType.PROJECT_ERROR
    path: str
    error: str


Listener = Callable[[Any], None]


class EventBus:
    """Synchronous publish/subscribe, delivered in subscription order."""

    def __init__(self):
        self._listeners: Dict[EventType, List[Listener]] = defaultdict(list)

    @staticmethod
    def _resolve(event_type: Union[EventType, str]) -> EventType:
        # EventType("typo") raises ValueError, so a misspelled name fails here
        return EventType(event_type)

    def on(self, event_type: Union[EventType, str], callback: Listener) -> Callable[[], bool]:
        """Subscribe; returns a function that unsubscribes again."""
        if not callable(callback):
            raise TypeError("Callback must be callable")
        etype = self._resolve(event_type)
        self._listeners[etype].append(callback)
        return lambda: self.off(etype, callback)

    def off(self, event_type: Union[EventType, str], callback: Listener) -> bool:
        etype = self._resolve(event_type)
        callbacks = self._listeners.get(etype)
        if not callbacks or callback not in callbacks:
            return False
        callbacks.remove(callback)
        if not callbacks:
            del self._listeners[etype]
        return True

    def emit(self, event: Event) -> int:
        """Deliver ``event`` to its listeners; returns how many ran cleanly."""
        count = 0
        for callback in list(self._listeners.get(event.type, ())):
            try:
                callback(event)
                count += 1
            except Exception:
                logger.exception("Error in listener for %r", event.type.value)
        return count

    def clear(self, event_type: Union[EventType, str, None] = None):
        if event_type is None:
            self._listeners.clear()
        else:
            self._listeners.pop(self._resolve(event_type), None)

    def listener_count(self, event_type: Union[EventType, str]) -> int:
        return len(self._listeners.get(self._resolve(event_type), ()))

    def has_listeners(self, event_type: Union[EventType, str]) -> bool:
        return self.listener_count(event_type) > 0

    def event_types(self) -> List[EventType]:
        return list(self._listeners.keys())


@dataclass
class EventRecorder:
    """Listener that keeps every event it receives. Handy for shells and tests."""

    events: List[Event] = field(default_factory=list)

    def __call__(self, event: Event):
        self.events.append(event)

    def of_type(self, event_type: Union[EventType, str]) -> List[Event]:
        etype = EventType(event_type)
        return [e for e in self.events if e.type is etype]

    def attach(self, bus: EventBus, *event_types: EventType):
        for etype in event_types or tuple(EventType):
            bus.on(etype, self)
        return self
