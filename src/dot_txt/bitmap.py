"""3x5 pixel cells and the similarity metric used to pick glyphs for them."""

import math

CELL_WIDTH = 3
CELL_HEIGHT = 5
CELL_BITS = CELL_WIDTH * CELL_HEIGHT
CELL_MASK = (1 << CELL_BITS) - 1

# Cost charged for a pixel with no lit neighbour in the other cell.
MISS_PENALTY = 2.0

# (dx, dy, distance) for the 3x3 neighbourhood around a pixel.
NEIGHBOURHOOD = tuple(
    (dx, dy, math.sqrt(dx * dx + dy * dy)) for dx in (-1, 0, 1) for dy in (-1, 0, 1)
)


# -----------------------------
# Bitmap cell
# -----------------------------
class BitmapCell:
    """
    A 3x5 monochrome pixel block.

    Pixel (x, y) lives in bit ``x + 3 * y``, so bit 0 is the top-left pixel
    and bit 14 the bottom-right one. (0, 0) is top-left, (2, 4) bottom-right.
    """

    __slots__ = ("_bits",)

    def __init__(self, bits: int = 0):
        self._bits = bits & CELL_MASK

    @classmethod
    def from_packed_bits(cls, bits: int) -> "BitmapCell":
        """
        Build a cell from a literal written row by row, top row first.

        The literal reads like the glyph: 0b000_000_000_000_111 is an '_',
        0b011_010_010_010_011 is a '['. The shift plus 16-bit reversal
        below must stay exactly as is, generated tables depend on it.
        """
        bits = (bits << 1) & 0xFFFF
        bits = ((bits >> 8) | (bits << 8)) & 0xFFFF
        bits = ((bits >> 4) & 0x0F0F) | ((bits << 4) & 0xF0F0)
        bits = ((bits >> 2) & 0x3333) | ((bits << 2) & 0xCCCC)
        bits = ((bits >> 1) & 0x5555) | ((bits << 1) & 0xAAAA)
        return cls(bits)

    @property
    def bits(self) -> int:
        return self._bits

    @staticmethod
    def _in_range(x: int, y: int) -> bool:
        return 0 <= x < CELL_WIDTH and 0 <= y < CELL_HEIGHT

    def read(self, x: int, y: int) -> bool:
        """Return the pixel at (x, y); anything out of range is off."""
        if not self._in_range(x, y):
            return False
        return bool(self._bits & (1 << (x + y * CELL_WIDTH)))

    def write(self, x: int, y: int, value: bool = True) -> None:
        """Set or clear the pixel at (x, y). Out-of-range writes are ignored."""
        if not self._in_range(x, y):
            return
        mask = 1 << (x + y * CELL_WIDTH)
        if value:
            self._bits |= mask
        else:
            self._bits &= ~mask

    def copy(self) -> "BitmapCell":
        return BitmapCell(self._bits)

    def lit_pixels(self):
        """Yield (x, y) for every pixel that is on, row by row."""
        for y in range(CELL_HEIGHT):
            for x in range(CELL_WIDTH):
                if self.read(x, y):
                    yield x, y

    def __eq__(self, other):
        if not isinstance(other, BitmapCell):
            return NotImplemented
        return self._bits == other._bits

    def __hash__(self):
        return hash(self._bits)

    def __repr__(self):
        return f"BitmapCell(0b{self._bits:015b})"


# -----------------------------
# Similarity metric
# -----------------------------
def one_way_cost(a: BitmapCell, b: BitmapCell) -> float:
    """Sum, over lit pixels of a, of the distance to the nearest lit pixel of b."""
    cost = 0.0
    for x, y in a.lit_pixels():
        nearest = MISS_PENALTY
        for dx, dy, dist in NEIGHBOURHOOD:
            if b.read(x + dx, y + dy):
                nearest = min(nearest, dist)
        cost += nearest
    return cost


def glyph_distance(a: BitmapCell, b: BitmapCell) -> float:
    """
    Score how visually close two cells are.

    Zero means identical, larger values mean less similar. Only a
    one-pixel neighbourhood is considered, so this is cheap per pair but
    meant for building lookup tables offline, not for per-frame use.
    """
    return one_way_cost(a, b) + one_way_cost(b, a)
