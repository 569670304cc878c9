import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional, Tuple

# Environment variable naming a pre-generated glyph table artifact.
GLYPH_TABLE_ENV = "DOT_TXT_GLYPH_TABLE"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_FORMAT = "%(levelname)s: %(message)s"


@dataclass
class RenderOptions:
    # canvas
    target_width: Optional[float] = None  # None => take it from the scene
    scale: Tuple[float, float] = (1.0, 1.0)

    # output
    debug: bool = False
    table_path: Optional[str] = None
    output_path: Optional[str] = None
    png_path: Optional[str] = None
    pixel_size: int = 4


def resolve_table_path(explicit: Optional[str] = None) -> Optional[str]:
    """Pick the glyph table artifact: explicit path, then the environment, else None."""
    if explicit:
        return explicit
    return os.environ.get(GLYPH_TABLE_ENV) or None


def configure_logging(level_name: str = "WARNING") -> None:
    numeric_level = getattr(logging, level_name.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING
    logging.basicConfig(stream=sys.stderr, level=numeric_level, format=LOG_FORMAT)
