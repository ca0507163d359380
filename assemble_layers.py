#!/usr/bin/env python3
"""
Assemble a multi-layer UBVFF Type 2 image from its converted layers.

Some Type 2 images (e.g. 00100.bin referencing 00089, 00093 and 00097) are
made of several layers, each stored as its own command/points pair.  Convert
every layer with ubvff2_to_svg.py first; this tool then follows the assembly
file's includes and stitches the layer SVGs into one document:

    python assemble_layers.py data/00100.bin auto
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from ubvff.assembly import assemble_layers
from ubvff.errors import UbvffError
from ubvff.logging import CommandLogger
from ubvff.naming import AUTO, assembly_svg_name

NAME_LIMIT = 255


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Unusual Binary Vector File Format Type 2, assemble from layers."
    )
    parser.add_argument("commands", type=str, help="Assembly command file (NNNNN.bin)")
    parser.add_argument("output", type=str, help='SVG destination; "auto" swaps .bin for .svg')
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logger = CommandLogger()
    if len(args.commands) > NAME_LIMIT or len(args.output) > NAME_LIMIT:
        logger.error("file name too long")
        return 1
    try:
        output = assembly_svg_name(args.commands) if args.output == AUTO else args.output
        result = assemble_layers(args.commands, output, logger=logger)
    except (UbvffError, OSError) as exc:
        logger.error(str(exc))
        print("exiting due to error.")
        return 1

    if result.written:
        logger.progress(f"{len(result.refs)} layers assembled into {output}")
    print("done")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
