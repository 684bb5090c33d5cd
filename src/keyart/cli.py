import argparse
import logging
import sys
from pathlib import Path

from keyart.charsets import PRINTABLE_KEYS
from keyart.converter import DEFAULT_BRIGHTEN, DEFAULT_DOWNSCALE, image_to_keys
from keyart.generator import DEFAULT_SCALE, build_table
from keyart.mapper import DEFAULT_BLOCK_HEIGHT, DEFAULT_BLOCK_WIDTH
from keyart.model import BrightnessTable


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Render an image as brightness-matched key art")
    parser.add_argument("image", help="Path to input image")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("-f", "--font", default=None, help="Measure keys with this font instead of the default table")
    source.add_argument("-t", "--table", default=None, help="Load a table saved with --save-table")
    parser.add_argument("--scale", type=float, default=DEFAULT_SCALE, help=f"Font size in pixels (default: {DEFAULT_SCALE})")
    parser.add_argument("-k", "--keys", default=PRINTABLE_KEYS, help="Keys to measure (default: printable ASCII)")
    parser.add_argument("--save-table", default=None, help="Write the table used to this path")
    parser.add_argument("--workers", type=int, default=None, help="Threads used to measure keys")
    parser.add_argument(
        "-d", "--downscale", type=int, default=DEFAULT_DOWNSCALE, help=f"Shrink factor (default: {DEFAULT_DOWNSCALE})"
    )
    parser.add_argument(
        "-b", "--brighten", type=int, default=DEFAULT_BRIGHTEN, help=f"Brightness offset (default: {DEFAULT_BRIGHTEN})"
    )
    parser.add_argument("--block-width", type=int, default=DEFAULT_BLOCK_WIDTH)
    parser.add_argument("--block-height", type=int, default=DEFAULT_BLOCK_HEIGHT)
    parser.add_argument("-o", "--output", default=None, help="Write to a file instead of stdout")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    return parser.parse_args(argv)


def main(argv=None):
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"File not found: {image_path}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.font is not None:
            table = build_table(args.font, args.keys, args.scale, workers=args.workers)
        elif args.table is not None:
            table = BrightnessTable.load(args.table)
        else:
            table = BrightnessTable.default()
        if args.save_table is not None:
            table.save(args.save_table)
        grid = image_to_keys(
            image_path,
            table,
            downscale=args.downscale,
            brightness=args.brighten,
            block_width=args.block_width,
            block_height=args.block_height,
        )
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.output is not None:
        Path(args.output).write_text(str(grid) + "\n", encoding="utf-8")
    else:
        print(grid)
