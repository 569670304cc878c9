"""Turn a Canvas into text (glyph table or exact block mode) or an image."""

import logging
from typing import List, Optional

import numpy as np
from PIL import Image

from .bitmap import CELL_HEIGHT, CELL_WIDTH
from .canvas import Canvas, TextCell
from .glyph_table import GlyphTable, default_glyph_table

logger = logging.getLogger(__name__)

# (upper, lower) pixel -> block element
_HALF_BLOCKS = {
    (False, False): " ",
    (True, True): "█",  # full block
    (True, False): "▀",  # upper half
    (False, True): "▄",  # lower half
}

_LABEL_ROW = CELL_HEIGHT // 2
_LABEL_COL = CELL_WIDTH // 2


def _join(lines: List[str]) -> str:
    return "".join(line.rstrip() + "\n" for line in lines)


# -----------------------------
# Heuristic (glyph table) mode
# -----------------------------
def render_text(canvas: Canvas, table: Optional[GlyphTable] = None) -> str:
    """
    Render with each bitmap cell replaced by its glyph table character.

    Args:
        canvas: the drawing
        table: lookup table; the process default when None

    Returns:
        Newline-terminated lines, trailing whitespace stripped, followed by
        a blank line and "[n]: text" footnotes if the canvas has any.
        An empty canvas gives a single empty line.
    """
    if table is None:
        table = default_glyph_table()

    lines = []
    for cells in canvas.rows():
        line = []
        for content in cells:
            if isinstance(content, TextCell):
                line.append(content.char)
            else:
                line.append(table.lookup(content))
        lines.append("".join(line))
    if not lines:
        lines.append("")

    footnotes = canvas.footnotes
    if footnotes:
        lines.append("")
        lines.extend(f"[{i}]: {note}" for i, note in enumerate(footnotes, start=1))

    logger.debug("Rendered %d rows in glyph mode", canvas.row_count)
    return _join(lines)


# -----------------------------
# Debug (half block) mode
# -----------------------------
def debug_height(row_count: int) -> int:
    """Output lines for row_count cell rows: two pixel rows per line."""
    return 2 * row_count + (row_count + 2) // 2


def render_debug(canvas: Canvas) -> str:
    """
    Render every pixel exactly, two pixel rows per line using half blocks.

    Text cells show their character in the cell's middle column on the
    line that covers the cell's middle pixel row.
    """
    out_w = canvas.width * CELL_WIDTH
    out_h = debug_height(canvas.row_count)

    pixels = canvas.pixel_array()
    sampled = np.zeros((out_h * 2, out_w), dtype=bool)
    sampled[: pixels.shape[0]] = pixels

    lines = []
    for y in range(out_h):
        upper_y, lower_y = 2 * y, 2 * y + 1
        on_label_row = upper_y % CELL_HEIGHT == _LABEL_ROW or lower_y % CELL_HEIGHT == _LABEL_ROW
        line = []
        for x in range(out_w):
            if on_label_row and x % CELL_WIDTH == _LABEL_COL:
                content = canvas.cell(x // CELL_WIDTH, upper_y // CELL_HEIGHT)
                if isinstance(content, TextCell):
                    line.append(content.char)
                    continue
            line.append(_HALF_BLOCKS[(bool(sampled[upper_y, x]), bool(sampled[lower_y, x]))])
        lines.append("".join(line))

    logger.debug("Rendered %d rows in debug mode (%d lines)", canvas.row_count, out_h)
    return _join(lines)


# -----------------------------
# Image export
# -----------------------------
def render_image(canvas: Canvas, pixel_size: int = 1) -> Image.Image:
    """Black-on-white bilevel image of the pixel grid, each pixel pixel_size wide."""
    if pixel_size < 1:
        raise ValueError(f"pixel_size must be at least 1, got {pixel_size}")

    pixels = canvas.pixel_array()
    if pixels.shape[0] == 0:
        pixels = np.zeros((CELL_HEIGHT, pixels.shape[1]), dtype=bool)

    big = pixels.repeat(pixel_size, axis=0).repeat(pixel_size, axis=1)
    gray = np.where(big, 0, 255).astype(np.uint8)
    return Image.fromarray(gray).convert("1")
