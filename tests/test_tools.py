"""
Tests for the drawing tools, driven through pointer events the way a shell would.
"""

import pytest

from terminal_draw.events import EventType
from terminal_draw.models import Cell, DrawingMode, EMPTY_CELL, FillMode, PaintMode
from terminal_draw.tools import (
    BrushTool,
    CircleTool,
    EraserTool,
    FloodFillTool,
    LineTool,
    PickerTool,
    RectangleTool,
    SprayTool,
    Tool,
    ToolKind,
    create_tool,
)
from terminal_draw.tools.spray import PRESETS, next_density_char


class AlwaysHit:
    """Random source that makes every spray roll succeed."""

    def random(self):
        return 0.0


def row(layer, y, width=None):
    width = width or layer.width
    return "".join(layer.get_cell(x, y).char for x in range(width))


def drag(tool, scene, points, bus=None):
    first, *rest = points
    tool.on_pointer_down(*first, scene, bus)
    for point in rest:
        tool.on_pointer_drag(*point, scene, bus)
    tool.on_pointer_up(*points[-1], scene, bus)


class TestBrush:
    """Test freehand painting."""

    def test_stroke_is_one_undo_step(self, scene, layer, history, bus):
        """Test down/drag/drag/up paints three cells and undoes at once."""
        brush = BrushTool(history, Cell("#", 2, -1))
        drag(brush, scene, [(1, 1), (2, 1), (3, 1)], bus)

        assert row(layer, 1, 5) == " ### "
        assert layer.get_cell(2, 1) == Cell("#", 2, -1)
        assert len(history.undo_stack) == 1
        assert history.undo_stack[0].description == "Paint 3 cells"

        history.undo()
        assert row(layer, 1, 5) == "     "

    def test_separate_strokes(self, scene, history):
        """Test lifting the pointer starts a new undo step."""
        brush = BrushTool(history)
        drag(brush, scene, [(0, 0), (1, 0)])
        drag(brush, scene, [(0, 5)])
        assert len(history.undo_stack) == 2

    def test_drag_without_down_ignored(self, scene, history):
        """Test drags outside a stroke do nothing."""
        BrushTool(history).on_pointer_drag(1, 1, scene)
        assert not history.can_undo()

    def test_out_of_bounds_ignored(self, scene, history):
        """Test clicks past the grid edge are dropped."""
        BrushTool(history).on_pointer_down(10, 0, scene)
        assert not history.can_undo()

    def test_locked_layer_skipped(self, scene, layer, history):
        """Test locked layers are never painted."""
        layer.locked = True
        drag(BrushTool(history), scene, [(1, 1)])
        assert not history.can_undo()
        assert layer.get_cell(1, 1) == EMPTY_CELL

    def test_fg_paint_mode(self, scene, layer, history):
        """Test fg mode keeps the glyph and background."""
        layer.set_cell(0, 0, Cell("A", 1, 4))
        drag(BrushTool(history, Cell("#", 2, 6), paint_mode=PaintMode.FG), scene, [(0, 0)])
        assert layer.get_cell(0, 0) == Cell("A", 2, 4)

    def test_smart_mode_joins_corner(self, scene, layer, history):
        """Test box mode rewrites earlier cells as the stroke turns."""
        brush = BrushTool(history, drawing_mode=DrawingMode.SINGLE)
        drag(brush, scene, [(0, 0), (1, 0), (1, 1)])

        assert row(layer, 0, 3) == "─┐ "
        assert row(layer, 1, 3) == " │ "
        assert len(history.undo_stack) == 1

        history.undo()
        assert row(layer, 0, 3) == "   "

    def test_smart_mode_tee_into_existing_line(self, scene, layer, history):
        """Test painting under a line turns it into a tee."""
        for x in range(3):
            layer.set_cell(x, 0, Cell("─", 5, -1))
        drag(BrushTool(history, drawing_mode="single"), scene, [(1, 1)])

        assert row(layer, 0, 3) == "─┬─"
        assert layer.get_cell(1, 0).fg == 5
        assert layer.get_cell(1, 1).char == "│"


class TestEraser:
    """Test erasing."""

    def test_erase(self, scene, layer, history, red_x):
        """Test cells reset to the empty cell."""
        layer.set_cell(4, 4, red_x)
        drag(EraserTool(history), scene, [(4, 4), (5, 4)])
        assert layer.get_cell(4, 4) == EMPTY_CELL
        assert history.undo_stack[0].tool == "eraser"

        history.undo()
        assert layer.get_cell(4, 4) == red_x


class TestLine:
    """Test the line tool."""

    def test_normal_line(self, scene, layer, history):
        """Test a horizontal line of the current glyph."""
        drag(LineTool(history, Cell("=", 7, -1)), scene, [(0, 2), (2, 2), (4, 2)])
        assert row(layer, 2, 6) == "===== "
        assert len(history.undo_stack) == 1

    def test_smart_staircase(self, scene, layer, history):
        """Test a diagonal in box mode becomes connected corners."""
        drag(LineTool(history, drawing_mode=DrawingMode.SINGLE), scene, [(0, 0), (2, 2)])
        assert row(layer, 0, 3) == "│  "
        assert row(layer, 1, 3) == "└┐ "
        assert row(layer, 2, 3) == " └─"

    def test_anchor_events(self, scene, history, bus, recorder):
        """Test the anchor is shown on down and hidden on up."""
        drag(LineTool(history), scene, [(1, 1), (3, 1)], bus)
        anchors = recorder.of_type(EventType.TOOL_ANCHOR)
        assert [(a.tool, a.x, a.y) for a in anchors] == [("line", 1, 1), ("line", None, None)]

    def test_locked_layer_no_anchor(self, scene, layer, history):
        """Test a locked layer never starts a line."""
        layer.locked = True
        tool = LineTool(history)
        tool.on_pointer_down(0, 0, scene)
        assert tool.anchor is None


class TestRectangle:
    """Test the rectangle tool."""

    def test_single_outline(self, scene, layer, history):
        """Test a box-drawn outline with corners."""
        drag(RectangleTool(history, drawing_mode=DrawingMode.SINGLE), scene, [(0, 0), (3, 2)])
        assert row(layer, 0, 4) == "┌──┐"
        assert row(layer, 1, 4) == "│  │"
        assert row(layer, 2, 4) == "└──┘"

    def test_double_outline(self, scene, layer, history):
        """Test a double outline dragged from the bottom-right."""
        drag(RectangleTool(history, drawing_mode="double"), scene, [(2, 2), (0, 0)])
        assert row(layer, 0, 3) == "╔═╗"
        assert row(layer, 2, 3) == "╚═╝"

    def test_filled(self, scene, layer, history):
        """Test filled mode covers the interior with the current glyph."""
        drag(RectangleTool(history, Cell("#", 7, -1), fill_mode=FillMode.FILLED), scene, [(0, 0), (2, 1)])
        assert row(layer, 0, 4) == "### "
        assert row(layer, 1, 4) == "### "
        assert history.undo_stack[0].cell_count() == 6

    def test_crossing_other_style(self, scene, layer, history):
        """Test a single outline over a double line gets a mixed junction."""
        for y in range(5):
            layer.set_cell(2, y, Cell("║", 7, -1))
        drag(RectangleTool(history, drawing_mode=DrawingMode.SINGLE), scene, [(0, 1), (4, 3)])
        assert layer.get_cell(2, 1).char == "╫"
        assert layer.get_cell(2, 3).char == "╫"
        assert layer.get_cell(2, 2).char == "║"
        assert layer.get_cell(0, 1).char == "┌"


class TestCircle:
    """Test the circle tool."""

    def test_radius_from_drag(self, scene, history):
        """Test the radius is the rounded drag distance."""
        tool = CircleTool(history)
        tool.on_pointer_down(5, 5, scene)
        tool.on_pointer_drag(7, 7, scene)
        assert tool.radius() == 3

    def test_outline(self, scene, layer, history):
        """Test the outline passes through the axis points only."""
        drag(CircleTool(history, Cell("o", 7, -1)), scene, [(5, 5), (8, 5)])
        for x, y in [(8, 5), (2, 5), (5, 8), (5, 2)]:
            assert layer.get_cell(x, y).char == "o"
        assert layer.get_cell(5, 5) == EMPTY_CELL

    def test_filled(self, scene, layer, history):
        """Test filled circles include the center."""
        drag(CircleTool(history, fill_mode=FillMode.FILLED), scene, [(5, 5), (6, 5)])
        assert history.undo_stack[0].cell_count() == 5
        assert layer.get_cell(5, 5).char == "█"

    def test_clipped_at_edges(self, scene, history):
        """Test circles running off the grid are clipped."""
        drag(CircleTool(history), scene, [(0, 0), (3, 0)])
        command = history.undo_stack[0]
        assert all(0 <= i < 100 for i in command.affected_indices())

    def test_smart_outline_uses_box_glyphs(self, scene, layer, history):
        """Test box mode draws the outline with line glyphs."""
        drag(CircleTool(history, drawing_mode=DrawingMode.SINGLE), scene, [(5, 5), (8, 5)])
        assert layer.get_cell(8, 5).char == "│"
        assert layer.get_cell(5, 2).char == "─"

    def test_ellipse(self, scene, layer, history):
        """Test ellipse mode uses separate radii."""
        drag(CircleTool(history, Cell("o", 7, -1), ellipse=True), scene, [(5, 5), (9, 7)])
        assert layer.get_cell(9, 5).char == "o"
        assert layer.get_cell(5, 7).char == "o"


class TestFloodFill:
    """Test flood fill."""

    def test_fills_enclosed_region(self, scene, layer, history):
        """Test the fill stops at a wall."""
        for y in range(10):
            layer.set_cell(3, y, Cell("|", 7, -1))
        FloodFillTool(history, Cell("~", 4, -1)).on_pointer_down(0, 0, scene)

        assert row(layer, 0, 5) == "~~~| "
        assert history.undo_stack[0].cell_count() == 30

    def test_noop_when_already_filled(self, scene, history):
        """Test filling with the same cell records nothing."""
        FloodFillTool(history, EMPTY_CELL).on_pointer_down(0, 0, scene)
        assert not history.can_undo()

    def test_fills_do_not_merge(self, scene, layer, history):
        """Test each click is its own undo step."""
        layer.set_cell(5, 0, Cell("|"))
        tool = FloodFillTool(history)
        tool.on_pointer_down(0, 0, scene)
        tool.on_pointer_down(5, 0, scene)
        assert len(history.undo_stack) == 2

    def test_glyph_mode_region(self, scene, layer, history):
        """Test glyph mode matches on character only."""
        layer.set_cell(0, 0, Cell(".", 1, -1))
        layer.set_cell(1, 0, Cell(".", 2, -1))
        tool = FloodFillTool(history, Cell("#", 7, -1), paint_mode=PaintMode.GLYPH)
        assert sorted(tool.region(layer, 0, 0)) == [(0, 0), (1, 0)]


class TestSpray:
    """Test the spray tool."""

    def test_first_hit_uses_lightest_glyph(self, scene, layer, history):
        """Test sprayed cells start at the lightest preset glyph."""
        spray = SprayTool(history, Cell(".", 3, -1), radius=2, coverage=0.5, rng=AlwaysHit())
        drag(spray, scene, [(5, 5)])
        assert layer.get_cell(5, 5) == Cell(".", 3, -1)
        assert history.undo_stack[0].cell_count() == 13

    def test_repeat_hits_get_denser(self, scene, layer, history):
        """Test each burst advances one density step."""
        spray = SprayTool(history, radius=2, coverage=0.5, rng=AlwaysHit())
        drag(spray, scene, [(5, 5), (5, 5)])
        assert layer.get_cell(5, 5).char == "-"

    def test_densest_only_recolors(self, history):
        """Test the densest glyph keeps its glyph but takes the new color."""
        spray = SprayTool(history, Cell(".", 2, -1))
        assert spray._sprayed(Cell("#", 5, 1)) == Cell("#", 2, 1)
        assert spray._sprayed(Cell("#", 2, 1)) is None

    def test_seeded_rng(self, scene, layer, history, rng):
        """Test sprayed cells stay inside the radius."""
        spray = SprayTool(history, radius=3, coverage=0.5, rng=rng)
        drag(spray, scene, [(5, 5)])
        for x, y in ((x, y) for y in range(10) for x in range(10)):
            if layer.get_cell(x, y).char != " ":
                assert (x - 5) ** 2 + (y - 5) ** 2 <= 9

    def test_invalid_settings(self, history):
        """Test presets, radii and coverages are checked."""
        spray = SprayTool(history)
        with pytest.raises(ValueError):
            spray.set_preset("sparkles")
        with pytest.raises(ValueError):
            spray.set_radius(4)
        with pytest.raises(ValueError):
            spray.set_coverage(0.3)

    def test_next_density_char(self):
        """Test density stepping saturates at the end."""
        blocks = PRESETS["blocks"]
        assert next_density_char("x", blocks) == "░"
        assert next_density_char("░", blocks) == "▒"
        assert next_density_char("█", blocks) == "█"


class TestPicker:
    """Test the picker tool."""

    def test_pick_emits_event(self, scene, layer, bus, recorder, red_x):
        """Test picking reports the cell without editing."""
        layer.set_cell(2, 3, red_x)
        picker = PickerTool()
        picker.on_pointer_down(2, 3, scene, bus)

        picked = recorder.of_type(EventType.TOOL_PICKED)
        assert len(picked) == 1
        assert (picked[0].x, picked[0].y, picked[0].layer_id, picked[0].cell) == (2, 3, "mid", red_x)
        assert picker.last_picked == red_x

    def test_pick_locked_layer(self, scene, layer):
        """Test picking works on locked layers."""
        layer.locked = True
        picker = PickerTool()
        picker.on_pointer_down(0, 0, scene)
        assert picker.last_picked == EMPTY_CELL


class TestCreateTool:
    """Test the tool factory."""

    @pytest.mark.parametrize("kind", list(ToolKind))
    def test_every_kind(self, kind, history):
        """Test each kind builds a Tool with the matching name."""
        tool = create_tool(kind, history)
        assert isinstance(tool, Tool)
        assert tool.name == kind.value

    def test_options_passed_through(self, history):
        """Test keyword options reach the constructor."""
        tool = create_tool("spray", history, preset="blocks")
        assert tool.preset == "blocks"

    def test_unknown_kind(self, history):
        """Test unknown kinds are rejected."""
        with pytest.raises(ValueError):
            create_tool("lasso", history)
