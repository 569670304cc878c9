#!/usr/bin/env python3
"""
Glyph tables map every possible 3x5 bitmap to its best-matching character.

A table holds one character per bit pattern (32768 of them). It is built
from a short list of reference characters with hand-drawn bitmaps, picking
for each pattern the reference whose bitmap is most similar. The search is
too slow to run per render, so tables are generated once and stored as a
flat 32768-character text file.
"""

import argparse
import logging
import sys
from functools import lru_cache
from typing import Callable, Iterable, Optional, Sequence, Tuple

import numpy as np

from .bitmap import (
    CELL_BITS,
    CELL_HEIGHT,
    CELL_WIDTH,
    MISS_PENALTY,
    NEIGHBOURHOOD,
    BitmapCell,
)
from .config import LOG_LEVELS, configure_logging, resolve_table_path

logger = logging.getLogger(__name__)

ESC = "\x1b"

TABLE_SIZE = 1 << CELL_BITS
PROGRESS_INTERVAL = 100

# Distances are sums of 0, 1, sqrt(2) and 2; rounding keeps equal sums equal
# so that ties always go to the earliest reference. A plain float scan would
# let summation order break a handful of these ties (7 of the 32768 patterns
# with DEFAULT_REFERENCE_GLYPHS, e.g. 21661 and 21909), so tables built here
# can differ from ones built that way in those slots.
ROUND_DECIMALS = 9

# Filler for every slot when there is nothing to match against.
NO_MATCH = "?"

ProgressCallback = Callable[[float], None]


# -----------------------------
# Reference glyphs
# -----------------------------
_P = BitmapCell.from_packed_bits

DEFAULT_REFERENCE_GLYPHS: Tuple[Tuple[str, BitmapCell], ...] = (
    (" ", _P(0b000_000_000_000_000)),
    ("_", _P(0b000_000_000_000_111)),
    (".", _P(0b000_000_000_111_000)),
    ("-", _P(0b000_000_111_000_000)),
    ("'", _P(0b000_111_000_000_000)),
    ("`", _P(0b111_000_000_000_000)),
    ("|", _P(0b001_001_001_001_001)),
    ("|", _P(0b010_010_010_010_010)),
    ("|", _P(0b100_100_100_100_100)),
    ("+", _P(0b010_010_111_010_010)),
    (".", _P(0b000_000_100_100_100)),
    (".", _P(0b000_000_010_010_010)),
    (".", _P(0b000_000_001_001_001)),
    ("'", _P(0b100_100_100_000_000)),
    ("'", _P(0b010_010_010_000_000)),
    ("'", _P(0b001_001_001_000_000)),
    ("\\", _P(0b100_110_010_011_001)),
    ("/", _P(0b001_011_010_110_100)),
    ("[", _P(0b011_010_010_010_011)),
    ("]", _P(0b110_010_010_010_110)),
    ("(", _P(0b001_010_010_010_001)),
    (")", _P(0b100_010_010_010_100)),
    ("{", _P(0b011_010_110_010_011)),
    ("}", _P(0b110_010_011_010_110)),
    ("<", _P(0b001_010_100_010_001)),
    (">", _P(0b100_010_001_010_100)),
    (".", _P(0b000_000_000_010_000)),
    (",", _P(0b000_000_000_010_100)),
    ("=", _P(0b000_111_000_111_000)),
    ("'", _P(0b010_010_000_000_000)),
    ('"', _P(0b101_101_000_000_000)),
    ("`", _P(0b100_010_000_000_000)),
    ("+", _P(0b000_010_111_010_000)),
    ("#", _P(0b101_111_101_111_101)),
)

del _P


# -----------------------------
# Vectorized similarity
# -----------------------------
def pixel_matrix(bits: np.ndarray) -> np.ndarray:
    """N bit values -> N x 15 float matrix, column k is pixel bit k."""
    bits = np.asarray(bits, dtype=np.int64)
    return ((bits[:, None] >> np.arange(CELL_BITS)) & 1).astype(np.float64)


def nearest_cost_map(pixels: np.ndarray) -> np.ndarray:
    """
    pixels: N x 15 matrix from pixel_matrix()
    returns N x 15: for every pixel position, the distance to the nearest
    lit pixel in the 3x3 neighbourhood, or MISS_PENALTY if there is none
    """
    grid = pixels.reshape(-1, CELL_HEIGHT, CELL_WIDTH) > 0
    padded = np.pad(grid, ((0, 0), (1, 1), (1, 1)))

    cost = np.full(grid.shape, MISS_PENALTY, dtype=np.float64)
    for dx, dy, dist in NEIGHBOURHOOD:
        shifted = padded[:, 1 + dy : 1 + dy + CELL_HEIGHT, 1 + dx : 1 + dx + CELL_WIDTH]
        cost = np.where(shifted, np.minimum(cost, dist), cost)
    return cost.reshape(-1, CELL_BITS)


def distance_matrix(pattern_bits: np.ndarray, reference_bits: np.ndarray) -> np.ndarray:
    """Symmetric glyph distance for every (pattern, reference) pair, N x M."""
    patterns = pixel_matrix(pattern_bits)
    references = pixel_matrix(reference_bits)
    forward = patterns @ nearest_cost_map(references).T
    backward = nearest_cost_map(patterns) @ references.T
    return forward + backward


# -----------------------------
# Glyph table
# -----------------------------
class GlyphTableError(ValueError):
    """Raised when a serialized glyph table does not have exactly 32768 characters."""


class GlyphTable:
    """Immutable 32768-entry bitmap -> character lookup table."""

    __slots__ = ("_chars",)

    def __init__(self, chars: str):
        if len(chars) != TABLE_SIZE:
            raise GlyphTableError(
                f"glyph table must hold exactly {TABLE_SIZE} characters, got {len(chars)}"
            )
        self._chars = chars

    @classmethod
    def generate(
        cls,
        references: Iterable[Tuple[str, BitmapCell]],
        progress: Optional[ProgressCallback] = None,
    ) -> "GlyphTable":
        """
        Build a table by exhaustive search over the reference set.

        Args:
            references: ordered (character, bitmap) pairs; characters may repeat
            progress: called with a fraction in [0, 1] after every block of
                PROGRESS_INTERVAL patterns, ending with 1.0

        Returns:
            The table. Ties go to the earliest reference entry. An empty
            reference set gives a table of NO_MATCH characters.
        """
        references = list(references)
        if not references:
            logger.warning("Empty reference set; every pattern maps to %r", NO_MATCH)
            if progress is not None:
                progress(1.0)
            return cls(NO_MATCH * TABLE_SIZE)

        chars = [ch for ch, _ in references]
        reference_bits = np.array([cell.bits for _, cell in references], dtype=np.int64)
        logger.debug("Generating glyph table from %d reference glyphs", len(references))

        out = []
        for start in range(0, TABLE_SIZE, PROGRESS_INTERVAL):
            stop = min(start + PROGRESS_INTERVAL, TABLE_SIZE)
            dist = distance_matrix(np.arange(start, stop, dtype=np.int64), reference_bits)
            best = np.argmin(np.round(dist, ROUND_DECIMALS), axis=1)
            out.extend(chars[int(i)] for i in best)
            if progress is not None:
                progress(stop / TABLE_SIZE)

        return cls("".join(out))

    @classmethod
    def deserialize(cls, data: str) -> "GlyphTable":
        return cls(data)

    def serialize(self) -> str:
        return self._chars

    def lookup(self, cell: BitmapCell) -> str:
        return self._chars[cell.bits]

    @classmethod
    def load(cls, path: str) -> "GlyphTable":
        logger.debug("Loading glyph table from %s", path)
        with open(path, "r", encoding="utf-8", newline="") as f:
            data = f.read()
        try:
            return cls.deserialize(data)
        except GlyphTableError as e:
            raise GlyphTableError(f"{path}: {e}") from None

    def save(self, path: str) -> None:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(self._chars)
        logger.debug("Wrote glyph table to %s", path)

    def __len__(self):
        return TABLE_SIZE

    def __eq__(self, other):
        if not isinstance(other, GlyphTable):
            return NotImplemented
        return self._chars == other._chars

    def __hash__(self):
        return hash(self._chars)


@lru_cache(maxsize=None)
def _cached_table(path: Optional[str]) -> GlyphTable:
    if path:
        return GlyphTable.load(path)
    logger.info("No glyph table configured; generating from built-in references")
    return GlyphTable.generate(DEFAULT_REFERENCE_GLYPHS)


def default_glyph_table() -> GlyphTable:
    """Process-wide table: the configured artifact if any, else a generated one."""
    return _cached_table(resolve_table_path())


# -----------------------------
# CLI
# -----------------------------
def _print_progress(fraction: float) -> None:
    sys.stderr.write(f"\r{ESC}[KGenerating... {fraction * 100:.1f}%")
    sys.stderr.flush()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Generate a glyph table from the built-in reference glyphs."""
    parser = argparse.ArgumentParser(
        description="Generate a 3x5 bitmap -> character glyph table"
    )
    parser.add_argument(
        "-o",
        "--output",
        default="glyphs.txt",
        help="Output table file (default: glyphs.txt)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Do not show generation progress",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=LOG_LEVELS,
        help="Set the logging level (default: WARNING)",
    )
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    table = GlyphTable.generate(
        DEFAULT_REFERENCE_GLYPHS, progress=None if args.quiet else _print_progress
    )
    if not args.quiet:
        sys.stderr.write(f"\r{ESC}[KGenerating... done\n")

    try:
        table.save(args.output)
    except OSError as e:
        logger.error("Failed to write %s: %s", args.output, e)
        return 1

    logger.info("Glyph table written to %s", args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
