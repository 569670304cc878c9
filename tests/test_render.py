"""Tests for render module."""

import math

import pytest
from PIL import Image
from dot_txt import glyph_table
from dot_txt.canvas import Canvas
from dot_txt.config import GLYPH_TABLE_ENV
from dot_txt.glyph_table import TABLE_SIZE, GlyphTable
from dot_txt.render import debug_height, render_debug, render_image, render_text

LEFT = 1 | 8 | 64 | 512 | 4096
TOP = 0b111
BOTTOM = 0b111 << 12

# --- Fixtures ---


@pytest.fixture
def box_table():
    """Blank everywhere except the patterns a box outline produces."""
    chars = [" "] * TABLE_SIZE
    chars[TOP] = "-"
    chars[BOTTOM] = "_"
    chars[LEFT] = "|"
    chars[LEFT | TOP] = "+"
    chars[LEFT | BOTTOM] = "L"
    return GlyphTable("".join(chars))


@pytest.fixture
def box():
    canvas = Canvas(9.0, (1, 1))
    canvas.draw_rect((0.0, 0.0), (9.0, 9.0))
    return canvas


@pytest.fixture
def builtin_table(monkeypatch):
    monkeypatch.delenv(GLYPH_TABLE_ENV, raising=False)
    glyph_table._cached_table.cache_clear()
    yield
    glyph_table._cached_table.cache_clear()


# --- Tests ---


class TestRenderText:
    def test_box(self, box, box_table):
        assert render_text(box, box_table) == "+--|\nL__|\n"

    def test_top_row_is_dashes(self, box_table):
        canvas = Canvas(9.0, (1, 1))
        canvas.draw_line((3.0, 0.0), (11.0, 0.0))
        assert render_text(canvas, box_table).splitlines()[0] == " ---"

    def test_trailing_whitespace_trimmed(self, box_table):
        canvas = Canvas(9.0, (1, 1))
        canvas.draw_line((0.0, 0.0), (2.0, 0.0))
        assert render_text(canvas, box_table) == "-\n"

    def test_interior_whitespace_kept(self, box_table):
        canvas = Canvas(9.0, (1, 1))
        canvas.draw_line((0.0, 0.0), (2.0, 0.0))
        canvas.draw_line((6.0, 0.0), (8.0, 0.0))
        assert render_text(canvas, box_table) == "- -\n"

    def test_text_cells(self, box_table):
        canvas = Canvas(9.0, (1, 1))
        canvas.draw_string((3.0, 0.0), "hi")
        assert render_text(canvas, box_table) == " hi\n"

    def test_empty_canvas(self, box_table):
        assert render_text(Canvas(9.0), box_table) == "\n"

    def test_footnotes(self, box_table):
        canvas = Canvas(9.0, (1, 1))
        canvas.draw_line((0.0, 0.0), (2.0, 0.0))
        canvas.add_footnote("a long label")
        canvas.add_footnote("another")
        assert render_text(canvas, box_table) == "-\n\n[1]: a long label\n[2]: another\n"

    def test_default_table(self, builtin_table):
        canvas = Canvas(9.0, (1, 1))
        canvas.draw_line((1.0, 0.0), (1.0, 4.0))
        assert render_text(canvas) == "|\n"
        assert str(canvas) == "|\n"


class TestRenderDebug:
    @pytest.mark.parametrize("rows", [0, 1, 2, 3, 4, 7])
    def test_height_formula(self, rows):
        assert debug_height(rows) == 2 * rows + math.ceil((rows + 1) / 2)

    @pytest.mark.parametrize("rows", [1, 2, 3])
    def test_line_count(self, rows):
        canvas = Canvas(9.0, (1, 1))
        canvas.draw_line((0.0, 0.0), (0.0, rows * 5 - 1.0))
        assert canvas.row_count == rows
        assert render_debug(canvas).count("\n") == debug_height(rows)

    def test_upper_half(self):
        canvas = Canvas(9.0, (1, 1))
        canvas.draw_line((0.0, 0.0), (2.0, 0.0))
        assert render_debug(canvas) == "▀▀▀\n\n\n"

    def test_full_block(self):
        canvas = Canvas(9.0, (1, 1))
        canvas.draw_line((0.0, 0.0), (0.0, 1.0))
        assert render_debug(canvas) == "█\n\n\n"

    def test_lower_half(self):
        canvas = Canvas(9.0, (1, 1))
        canvas.draw_line((1.0, 1.0), (1.0, 1.0))
        assert render_debug(canvas) == " ▄\n\n\n"

    def test_text_on_middle_row(self):
        canvas = Canvas(9.0, (1, 1))
        canvas.draw_string((0.0, 0.0), "A")
        assert render_debug(canvas) == "\n A\n\n"

    def test_text_in_second_row(self):
        canvas = Canvas(9.0, (1, 1))
        canvas.draw_string((3.0, 5.0), "B")
        lines = render_debug(canvas).split("\n")
        # pixel row 7 is the lower half of output line 3
        assert lines[3] == "    B"

    def test_box(self, box):
        lines = render_debug(box).splitlines()
        assert lines[0] == "█" + "▀" * 8 + "█"
        assert lines[1] == "█        █"
        assert lines[4] == "█" + "▄" * 8 + "█"

    def test_no_footnotes(self):
        canvas = Canvas(9.0, (1, 1))
        canvas.add_footnote("hidden")
        assert "hidden" not in render_debug(canvas)

    def test_format_spec(self, box):
        assert format(box, "debug") == render_debug(box)
        with pytest.raises(ValueError):
            format(box, "fancy")


class TestRenderImage:
    def test_size_and_pixels(self):
        canvas = Canvas(9.0, (1, 1))
        canvas.draw_line((0.0, 0.0), (2.0, 0.0))
        img = render_image(canvas, pixel_size=2)
        assert isinstance(img, Image.Image)
        assert img.mode == "1"
        assert img.size == (24, 10)
        assert img.getpixel((0, 0)) == 0
        assert img.getpixel((5, 1)) == 0
        assert img.getpixel((0, 2)) == 255
        assert img.getpixel((6, 0)) == 255

    def test_empty_canvas(self):
        assert render_image(Canvas(9.0)).size == (12, 5)

    def test_bad_pixel_size(self, box):
        with pytest.raises(ValueError):
            render_image(box, pixel_size=0)
