"""
Pytest configuration and shared fixtures for terminal-draw tests.
"""

import random

import pytest

from terminal_draw.commands import CommandHistory
from terminal_draw.editor import EditorSession
from terminal_draw.events import EventBus, EventRecorder
from terminal_draw.layer import Layer
from terminal_draw.models import Cell
from terminal_draw.scene import Scene


@pytest.fixture
def scene():
    """Create a small 10x10 scene with the default three layers."""
    return Scene(10, 10)


@pytest.fixture
def layer(scene):
    """The scene's active layer ("mid")."""
    return scene.get_active_layer()


@pytest.fixture
def bare_layer():
    """Create a standalone 5x5 layer."""
    return Layer("test", "Test", 5, 5)


@pytest.fixture
def bus():
    """Create a fresh EventBus."""
    return EventBus()


@pytest.fixture
def recorder(bus):
    """Record every event emitted on the bus fixture."""
    return EventRecorder().attach(bus)


@pytest.fixture
def history(bus):
    """Create a CommandHistory that reports to the bus fixture."""
    return CommandHistory(events=bus)


@pytest.fixture
def session():
    """Create an EditorSession with default config and a 10x10 scene."""
    return EditorSession(scene=Scene(10, 10))


@pytest.fixture
def rng():
    """Deterministic random source for spray tests."""
    return random.Random(1234)


@pytest.fixture
def red_x():
    """A red "X" cell on a blue background."""
    return Cell("X", 1, 4)
