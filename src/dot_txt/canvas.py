"""
ASCII art canvas.

Input coordinates map to pixels and character cells as follows:

  - pixel column = trunc(x * scale.x),  pixel row = trunc(y * scale.y)
  - cell column  = pixel column // 3,   cell row  = pixel row // 5

so every character position is also a 3x5 pixel bitmap. Writing a text
character to a cell overrides any bitmap there for good. Cells that only
ever hold a bitmap are turned into characters by a GlyphTable at render
time.
"""

import logging
import unicodedata
from dataclasses import dataclass
from typing import Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

from .bitmap import CELL_HEIGHT, CELL_WIDTH, BitmapCell

logger = logging.getLogger(__name__)


class InputCoord(NamedTuple):
    x: float
    y: float


class PixelCoord(NamedTuple):
    x: int
    y: int


class CharCoord(NamedTuple):
    col: int
    row: int


@dataclass(frozen=True)
class TextCell:
    """A cell holding a literal character."""

    char: str


Cell = Union[BitmapCell, TextCell]
Point = Union[InputCoord, Tuple[float, float], Sequence[float]]


# -----------------------------
# Line rasterization
# -----------------------------
def bresenham(a: PixelCoord, b: PixelCoord) -> Iterator[PixelCoord]:
    """
    Yield every pixel on the line from a to b, both ends included.

    Steps along the major axis. On a half-step tie the pixel stays on the
    current minor row, so (0, 0) -> (2, 1) passes through (1, 0).
    """
    x0, y0 = a
    x1, y1 = b
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    steep = dy > dx
    major, minor = (dy, dx) if steep else (dx, dy)
    err = minor - major
    for _ in range(major + 1):
        yield PixelCoord(x0, y0)
        if err >= 0:
            if steep:
                x0 += sx
            else:
                y0 += sy
            err -= major
        if steep:
            y0 += sy
        else:
            x0 += sx
        err += minor


# -----------------------------
# Canvas
# -----------------------------
class Canvas:
    def __init__(self, width: float, scale: Point = (1.0, 1.0)):
        """
        Args:
            width: width of the drawing in pixels; the canvas gets
                int(width / 3) + 1 columns, at least one
            scale: (x, y) factors from input coordinates to pixels
        """
        self._width = max(int(width / CELL_WIDTH), 0) + 1
        self._scale = InputCoord(float(scale[0]), float(scale[1]))
        # Row-major; rows past the end are implicitly empty.
        self._cells: List[Cell] = []
        self._footnotes: List[str] = []

    # --- geometry ---

    @property
    def width(self) -> int:
        return self._width

    @property
    def scale(self) -> InputCoord:
        return self._scale

    @property
    def row_count(self) -> int:
        return -(-len(self._cells) // self._width)

    def to_pixel(self, coord: Point) -> PixelCoord:
        return PixelCoord(
            int(coord[0] * self._scale.x),
            int(coord[1] * self._scale.y),
        )

    @staticmethod
    def split_pixel(coord: PixelCoord) -> Optional[Tuple[CharCoord, int, int]]:
        """Pixel -> (cell, x within cell, y within cell); None for negative pixels."""
        if coord.x < 0 or coord.y < 0:
            return None
        return (
            CharCoord(coord.x // CELL_WIDTH, coord.y // CELL_HEIGHT),
            coord.x % CELL_WIDTH,
            coord.y % CELL_HEIGHT,
        )

    def to_cell(self, coord: Point) -> Optional[CharCoord]:
        split = self.split_pixel(self.to_pixel(coord))
        return split[0] if split else None

    # --- cell storage ---

    def _offset(self, cc: CharCoord) -> Optional[int]:
        if cc.col < 0 or cc.row < 0 or cc.col >= self._width:
            return None
        return cc.col + self._width * cc.row

    def _cell_for_write(self, cc: CharCoord) -> Optional[int]:
        """Offset of cc, growing the buffer to include it; None if not addressable."""
        offset = self._offset(cc)
        if offset is None:
            return None
        missing = offset + 1 - len(self._cells)
        if missing > 0:
            self._cells.extend(BitmapCell() for _ in range(missing))
        return offset

    def cell(self, col: int, row: int) -> Cell:
        """Copy of the content at (col, row); unwritten or out-of-range cells read as empty bitmaps."""
        offset = self._offset(CharCoord(col, row))
        if offset is None or offset >= len(self._cells):
            return BitmapCell()
        content = self._cells[offset]
        if isinstance(content, BitmapCell):
            return content.copy()
        return content

    def rows(self) -> Iterator[List[Cell]]:
        for row in range(self.row_count):
            yield [self.cell(col, row) for col in range(self._width)]

    def set_char(self, cc: CharCoord, char: str) -> None:
        offset = self._cell_for_write(cc)
        if offset is not None:
            self._cells[offset] = TextCell(char)

    def pixel(self, x: int, y: int) -> bool:
        """Pixel state; False for text cells and anything out of range."""
        split = self.split_pixel(PixelCoord(x, y))
        if split is None:
            return False
        cc, px, py = split
        content = self.cell(cc.col, cc.row)
        if isinstance(content, BitmapCell):
            return content.read(px, py)
        return False

    def set_pixel(self, coord: PixelCoord, value: bool = True) -> None:
        split = self.split_pixel(coord)
        if split is None:
            return
        cc, px, py = split
        offset = self._cell_for_write(cc)
        if offset is None:
            return
        content = self._cells[offset]
        if isinstance(content, BitmapCell):
            content.write(px, py, value)

    def pixel_array(self) -> np.ndarray:
        """Bool array (rows * 5, width * 3) of every pixel; text cells are blank."""
        out = np.zeros((self.row_count * CELL_HEIGHT, self._width * CELL_WIDTH), dtype=bool)
        for row, cells in enumerate(self.rows()):
            for col, content in enumerate(cells):
                if not isinstance(content, BitmapCell):
                    continue
                for px, py in content.lit_pixels():
                    out[row * CELL_HEIGHT + py, col * CELL_WIDTH + px] = True
        return out

    # --- footnotes ---

    @property
    def footnotes(self) -> Tuple[str, ...]:
        return tuple(self._footnotes)

    def add_footnote(self, text: str) -> int:
        """Append a footnote and return its 1-based reference number."""
        self._footnotes.append(text)
        return len(self._footnotes)

    # --- drawing ---

    def draw_string(self, origin: Point, text: str) -> None:
        """
        Write text starting at the cell containing origin.

        Newlines return to the starting column one row down; other control
        characters are skipped. Characters past the last column are dropped.
        """
        start = self.to_cell(origin)
        if start is None:
            logger.debug("Dropping string at negative coordinate %r", tuple(origin))
            return
        col, row = start
        for ch in text:
            if ch == "\n":
                col = start.col
                row += 1
            elif unicodedata.category(ch) != "Cc":
                self.set_char(CharCoord(col, row), ch)
                col += 1

    def draw_rect(self, a: Point, b: Point) -> None:
        """
        Draw the outline of the box with corners a and b.

        a must be the top-left corner and b the bottom-right one; with
        reversed corners the affected edges are simply not drawn.
        """
        a = self.to_pixel(a)
        b = self.to_pixel(b)
        for x in range(a.x, b.x + 1):
            self.set_pixel(PixelCoord(x, a.y))
            self.set_pixel(PixelCoord(x, b.y))
        for y in range(a.y, b.y + 1):
            self.set_pixel(PixelCoord(a.x, y))
            self.set_pixel(PixelCoord(b.x, y))

    def draw_line(self, a: Point, b: Point) -> None:
        for p in bresenham(self.to_pixel(a), self.to_pixel(b)):
            self.set_pixel(p)

    def draw_polyline(self, points: Iterable[Point]) -> None:
        points = list(points)
        for a, b in zip(points, points[1:]):
            self.draw_line(a, b)

    # --- output ---

    def __str__(self):
        from .render import render_text

        return render_text(self)

    def __format__(self, spec):
        if spec == "debug":
            from .render import render_debug

            return render_debug(self)
        if spec:
            raise ValueError(f"unknown canvas format: {spec!r}")
        return str(self)
