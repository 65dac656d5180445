"""
Tests for cells, layers and scenes.
"""

import pytest

from terminal_draw.errors import OutOfBoundsError
from terminal_draw.layer import Layer
from terminal_draw.models import Cell, DrawingMode, EMPTY_CELL, LineStyle
from terminal_draw.scene import Scene


class TestCell:
    """Test the Cell value type."""

    def test_defaults(self):
        """Test a new cell is a white space on a transparent background."""
        cell = Cell()
        assert (cell.char, cell.fg, cell.bg) == (" ", 7, -1)
        assert cell.is_empty()

    def test_equality_by_fields(self):
        """Test cells compare by value."""
        assert Cell("A", 1, 2) == Cell("A", 1, 2)
        assert Cell("A", 1, 2) != Cell("A", 1, 3)

    def test_cell_is_immutable(self):
        """Test fields cannot be reassigned."""
        cell = Cell("A")
        with pytest.raises(AttributeError):
            cell.char = "B"

    def test_dict_round_trip(self):
        """Test the ch/fg/bg mapping form."""
        cell = Cell("█", 3, 0)
        assert cell.to_dict() == {"ch": "█", "fg": 3, "bg": 0}
        assert Cell.from_dict(cell.to_dict()) == cell

    def test_not_empty_with_background(self):
        """Test a space with a background color is not empty."""
        assert not Cell(" ", 7, 2).is_empty()

    def test_drawing_mode_line_style(self):
        """Test smart drawing modes map onto line styles."""
        assert DrawingMode.DOUBLE.line_style is LineStyle.DOUBLE
        with pytest.raises(ValueError):
            DrawingMode.NORMAL.line_style


class TestLayer:
    """Test layer storage."""

    def test_new_layer_is_empty(self, bare_layer):
        """Test every coordinate holds the default cell."""
        assert all(cell == EMPTY_CELL for cell in bare_layer.iter_cells())

    def test_set_and_get(self, bare_layer, red_x):
        """Test writing a cell and reading it back."""
        bare_layer.set_cell(2, 3, red_x)
        assert bare_layer.get_cell(2, 3) == red_x
        assert bare_layer.get_cell_at(bare_layer.cell_index(2, 3)) == red_x

    @pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (5, 0), (0, 5)])
    def test_out_of_bounds_rejected(self, bare_layer, x, y):
        """Test coordinates outside the grid are never wrapped."""
        with pytest.raises(OutOfBoundsError):
            bare_layer.get_cell(x, y)
        with pytest.raises(IndexError):
            bare_layer.set_cell(x, y, Cell("A"))

    def test_invalid_dimensions(self):
        """Test zero-sized layers are rejected."""
        with pytest.raises(ValueError):
            Layer("x", "X", 0, 3)

    def test_fill_and_clear(self, bare_layer, red_x):
        """Test fill() writes everywhere and clear() resets."""
        bare_layer.fill(red_x)
        assert bare_layer.get_cell(4, 4) == red_x
        bare_layer.clear()
        assert bare_layer.get_cell(4, 4) == EMPTY_CELL

    def test_region_copy_and_paste(self, bare_layer, red_x):
        """Test regions clip at the grid edge."""
        bare_layer.set_cell(4, 4, red_x)
        region = bare_layer.get_region(4, 4, 2, 2)
        assert region[0][0] == red_x
        assert region[1][1] == EMPTY_CELL

        written = bare_layer.set_region(0, 0, region)
        assert written == 4
        assert bare_layer.get_cell(0, 0) == red_x

    def test_snapshot_restore(self, bare_layer, red_x):
        """Test restore() undoes later writes."""
        snap = bare_layer.snapshot()
        bare_layer.set_cell(1, 1, red_x)
        bare_layer.restore(snap)
        assert bare_layer.get_cell(1, 1) == EMPTY_CELL

    def test_clone_is_independent(self, bare_layer, red_x):
        """Test a clone does not share storage."""
        bare_layer.locked = True
        copy = bare_layer.clone()
        copy.set_cell(0, 0, red_x)
        assert copy.locked
        assert bare_layer.get_cell(0, 0) == EMPTY_CELL

    def test_to_text(self, bare_layer):
        """Test plain-text rendering of the glyphs."""
        bare_layer.set_cell(0, 0, Cell("A"))
        lines = bare_layer.to_text().split("\n")
        assert len(lines) == 5
        assert lines[0] == "A    "

    def test_stats(self, bare_layer):
        """Test cell statistics."""
        bare_layer.set_cell(0, 0, Cell("A"))
        bare_layer.set_cell(1, 0, Cell("A"))
        stats = bare_layer.stats()
        assert stats["total_cells"] == 25
        assert stats["non_empty_count"] == 2
        assert stats["empty_count"] == 23
        assert stats["char_frequency"] == {"A": 2}

    def test_dict_round_trip(self, bare_layer, red_x):
        """Test layer serialization keeps flags and cells."""
        bare_layer.set_cell(3, 1, red_x)
        bare_layer.visible = False
        restored = Layer.from_dict(bare_layer.to_dict())
        assert restored.get_cell(3, 1) == red_x
        assert restored.visible is False
        assert restored.name == "Test"

    def test_from_dict_rejects_wrong_cell_count(self, bare_layer):
        """Test cell arrays must cover the whole grid."""
        data = bare_layer.to_dict()
        data["cells"] = data["cells"][:-1]
        with pytest.raises(ValueError):
            Layer.from_dict(data)


class TestScene:
    """Test scene layer management."""

    def test_default_layers(self, scene):
        """Test the bg/mid/fg layer stack with mid active."""
        assert [layer.id for layer in scene.layers] == ["bg", "mid", "fg"]
        assert scene.active_layer_id == "mid"
        assert scene.get_active_layer().name == "Middle"

    def test_set_active_layer(self, scene):
        """Test only existing layers can become active."""
        assert scene.set_active_layer("fg")
        assert not scene.set_active_layer("nope")
        assert scene.active_layer_id == "fg"

    def test_add_layer(self, scene):
        """Test layers are added on top and ids stay unique."""
        layer = Layer("extra", "Extra", 10, 10)
        assert scene.add_layer(layer)
        assert scene.layers[-1] is layer
        assert not scene.add_layer(Layer("extra", "Again", 10, 10))

    def test_add_mismatched_layer(self, scene):
        """Test layers must share the scene size."""
        with pytest.raises(ValueError):
            scene.add_layer(Layer("small", "Small", 3, 3))

    def test_remove_layer_repoints_active(self, scene):
        """Test removing the active layer activates the bottom one."""
        assert scene.remove_layer("mid")
        assert scene.active_layer_id == "bg"

    def test_cannot_remove_last_layer(self):
        """Test the last layer always survives."""
        scene = Scene(4, 4, layers=[Layer("only", "Only", 4, 4)])
        assert not scene.remove_layer("only")
        assert not scene.remove_layer("missing")

    def test_reorder_layers(self, scene):
        """Test moving a layer within the stack."""
        assert scene.reorder_layers(0, 2)
        assert [layer.id for layer in scene.layers] == ["mid", "fg", "bg"]
        assert not scene.reorder_layers(0, 3)

    def test_next_layer_id(self, scene):
        """Test generated ids skip existing ones."""
        scene.layers[0].id = "layer-4"
        assert scene.next_layer_id() == "layer-5"

    def test_resize(self, scene, red_x):
        """Test resizing updates every layer and the scene size."""
        scene.layers[0].set_cell(0, 0, red_x)
        snapshots = scene.resize(4, 3)
        assert (scene.width, scene.height) == (4, 3)
        assert all((layer.width, layer.height) == (4, 3) for layer in scene.layers)
        assert scene.layers[0].get_cell(0, 0) == red_x
        assert snapshots[0].width == 10

    def test_dict_round_trip(self, scene, red_x):
        """Test scene serialization."""
        scene.get_layer("fg").set_cell(9, 9, red_x)
        scene.set_active_layer("fg")
        restored = Scene.from_dict(scene.to_dict())
        assert restored.active_layer_id == "fg"
        assert restored.get_layer("fg").get_cell(9, 9) == red_x
        assert (restored.width, restored.height) == (10, 10)

    def test_from_dict_empty_layers(self, scene):
        """Test an explicit empty layer list is an error, not the defaults."""
        data = scene.to_dict()
        data["layers"] = []
        with pytest.raises(ValueError):
            Scene.from_dict(data)

    def test_from_dict_without_layers(self):
        """Test omitting layers gives the default stack."""
        restored = Scene.from_dict({"w": 4, "h": 3})
        assert [layer.id for layer in restored.layers] == ["bg", "mid", "fg"]

    def test_from_dict_unknown_active_layer(self, scene):
        """Test a dangling active layer falls back to the default."""
        data = scene.to_dict()
        data["activeLayerId"] = "ghost"
        restored = Scene.from_dict(data)
        assert restored.active_layer_id == "mid"
