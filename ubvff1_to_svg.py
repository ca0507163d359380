#!/usr/bin/env python3
"""
Analyser and SVG converter for UBVFF Type 1 files.

Type 1 keeps the whole image in one file (``tscp001.BIN``, ``006pooh.BIN``
and friends).  Without ``--svgdump`` the tool only lists the decoded
commands; with it, the same pass writes an SVG document.  Example:

    python ubvff1_to_svg.py tscp001.BIN --svgdump auto --less
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from ubvff.errors import UbvffError
from ubvff.logging import DETAIL_COMMANDS, CommandLogger
from ubvff.naming import AUTO, auto_svg_name
from ubvff.type1 import decode_type1


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Unusual Binary Vector File Format Type 1, analyser and SVG converter."
    )
    parser.add_argument("input", type=str, help="Path to a Type 1 .BIN file")
    parser.add_argument(
        "--svgdump",
        metavar="OUTPUT",
        help='Write an SVG file; "auto" derives the name from the input',
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
            output = auto_svg_name(args.input) if args.svgdump == AUTO else args.svgdump
        with open(args.input, "rb") as source:
            if output is None:
                result = decode_type1(source, logger=logger)
            else:
                logger.progress(f"dumping SVG to : {output}")
                with open(output, "wb") as sink:
                    result = decode_type1(source, svg=sink, logger=logger)
    except (UbvffError, OSError) as exc:
        logger.error(str(exc))
        print("exiting due to error.")
        return 1

    logger.progress(
        f"Decoded {result.commands} commands, {len(result.layers)} layers and {len(result.paths)} paths from {Path(args.input).name}"
    )
    if not result.ok:
        print("exiting due to error.")
        return 1
    print("done.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
