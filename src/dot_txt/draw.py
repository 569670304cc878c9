#!/usr/bin/env python3
"""Draw a scene of boxes and edges as ASCII art."""

import argparse
import logging
import sys
from typing import Optional, Sequence

from .canvas import Canvas
from .config import LOG_LEVELS, RenderOptions, configure_logging, resolve_table_path
from .glyph_table import GlyphTable, default_glyph_table
from .render import render_debug, render_image, render_text
from .scene import draw_graph, load_scene

logger = logging.getLogger(__name__)


def render_canvas(canvas: Canvas, options: RenderOptions) -> str:
    """Text for canvas in the mode options ask for."""
    if options.debug:
        return render_debug(canvas)

    path = resolve_table_path(options.table_path)
    table = GlyphTable.load(path) if path else default_glyph_table()
    return render_text(canvas, table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a scene as ASCII art")

    parser.add_argument(
        "scene",
        nargs="?",
        default=None,
        help="Scene JSON file (nodes with position/size, edges with points)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show exact pixels with half-block characters instead of glyphs",
    )
    parser.add_argument(
        "--table",
        default=None,
        help="Glyph table file (default: $DOT_TXT_GLYPH_TABLE, else generated)",
    )
    parser.add_argument(
        "--scale",
        nargs=2,
        type=float,
        default=(1.0, 1.0),
        metavar=("SX", "SY"),
        help="Scale from scene units to pixels (a cell is 3x5 pixels)",
    )
    parser.add_argument(
        "-w",
        "--width",
        type=float,
        default=None,
        help="Canvas width in pixels (default: scaled scene width)",
    )
    parser.add_argument(
        "--png",
        default=None,
        help="Also save the exact pixel grid as an image",
    )
    parser.add_argument(
        "--pixel-size",
        type=int,
        default=4,
        help="Image size of one canvas pixel (used with --png)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=LOG_LEVELS,
        help="Set the logging level (default: WARNING)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the render command."""
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else list(argv)

    # If no args, show help and exit 0
    if not argv:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.scene is None:
        print("Error: no scene file given", file=sys.stderr)
        parser.print_help()
        return 1

    options = RenderOptions(
        target_width=args.width,
        scale=tuple(args.scale),
        debug=args.debug,
        table_path=args.table,
        output_path=args.output,
        png_path=args.png,
        pixel_size=args.pixel_size,
    )

    try:
        graph = load_scene(args.scene)
        canvas = draw_graph(graph, scale=options.scale, width=options.target_width)
        output = render_canvas(canvas, options)
        if options.png_path:
            render_image(canvas, pixel_size=options.pixel_size).save(options.png_path)
            logger.info("Pixel image written to %s", options.png_path)
    except (ValueError, OSError) as e:
        # SceneError, GlyphTableError and bad --pixel-size are all ValueErrors
        logger.error("%s", e)
        return 1

    if options.output_path:
        try:
            with open(options.output_path, "w", encoding="utf-8") as f:
                f.write(output)
        except OSError as e:
            logger.error("Failed to write %s: %s", options.output_path, e)
            return 1
    else:
        sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
