#!/usr/bin/env python3
"""
Analyser and SVG converter for UBVFF Type 2 files.

Type 2 images are split between a command file and a points file, both named
``NNNNN.bin``.  The command file's footer records which points file belongs
to it, so ``auto`` can stand in for the points file name.  Example:

    python ubvff2_to_svg.py data/00053.bin auto --svgdump auto

Multi-layer images reference their layers from an assembly file; convert the
layers first, then run assemble_layers.py on the assembly file.
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from ubvff.errors import UbvffError
from ubvff.logging import DETAIL_COMMANDS, CommandLogger
from ubvff.naming import AUTO, auto_svg_name, points_file_name
from ubvff.type2 import decode_type2, read_type2_preamble


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Unusual Binary Vector File Format Type 2, analyser and SVG converter."
    )
    parser.add_argument("commands", type=str, help="Command file (NNNNN.bin)")
    parser.add_argument(
        "points",
        type=str,
        help='Points file; "auto" uses the number stored in the command file footer',
    )
    parser.add_argument(
        "--svgdump",
        metavar="OUTPUT",
        help='Write an SVG file; "auto" derives the name from the command file',
    )
    parser.add_argument("--more", action="count", default=0, help="Display more analysis information")
    parser.add_argument("--less", action="count", default=0, help="Display less analysis information")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logger = CommandLogger(detail=DETAIL_COMMANDS + args.more - args.less)
    try:
        output = None
        if args.svgdump:
            output = auto_svg_name(args.commands) if args.svgdump == AUTO else args.svgdump
        with open(args.commands, "rb") as commands:
            header, footer = read_type2_preamble(commands)
            points_name = args.points
            if points_name == AUTO:
                points_name = points_file_name(args.commands, footer.points_file_number)
            with open(points_name, "rb") as points:
                logger.progress(f"command file ({header.command_count:5d} commands) : {args.commands}")
                logger.progress(f"points file                  : {points_name}")
                if output is None:
                    result = decode_type2(commands, points, logger=logger)
                else:
                    logger.progress(f"svg output file              : {output}")
                    with open(output, "w+b") as sink:
                        result = decode_type2(commands, points, svg=sink, logger=logger)
    except (UbvffError, OSError) as exc:
        logger.error(str(exc))
        print("exiting due to error.")
        return 1

    if not result.ok:
        print("exiting due to error.")
        return 1
    print("done.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
