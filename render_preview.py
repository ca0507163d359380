#!/usr/bin/env python3
"""
Render UBVFF Type 1/Type 2 drawings to PNG previews without an SVG viewer.

The decoders record every finished path alongside the SVG they write, so the
preview uses exactly the geometry and paint the SVG would.  Cubics are
flattened with numpy and the result is rasterized with Pillow.  Example:

    python render_preview.py type1 tscp001.BIN --output tscp001.png --size 512
    python render_preview.py type2 00053.bin auto --output 00053.png
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, List, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw

from ubvff.entities import PathEntity, Point
from ubvff.logging import DETAIL_SUMMARY, CommandLogger
from ubvff.naming import AUTO, points_file_name
from ubvff.type1 import decode_type1
from ubvff.type2 import decode_type2, read_type2_preamble

CUBIC_STEPS = 16


def sample_cubic(
    start: Tuple[float, float],
    c1: Tuple[float, float],
    c2: Tuple[float, float],
    end: Tuple[float, float],
    steps: int = CUBIC_STEPS,
) -> np.ndarray:
    """Return ``steps`` points along the Bézier curve, excluding ``start``."""

    t = np.linspace(0.0, 1.0, steps + 1)[1:, None]
    mt = 1.0 - t
    ctrl = np.array([start, c1, c2, end], dtype=float)
    return (
        (mt**3) * ctrl[0]
        + 3.0 * (mt**2) * t * ctrl[1]
        + 3.0 * mt * (t**2) * ctrl[2]
        + (t**3) * ctrl[3]
    )


def flatten_path(path: PathEntity, scale: int) -> List[List[Tuple[float, float]]]:
    """Split a path into polylines, one per subpath, in drawing units."""

    def xy(point: Point) -> Tuple[float, float]:
        return point.scaled(scale)

    rings: List[List[Tuple[float, float]]] = []
    current: List[Tuple[float, float]] = []
    for op, points in path.ops:
        if op == "M":
            if len(current) > 1:
                rings.append(current)
            current = [xy(points[0])]
        elif op == "L":
            current.append(xy(points[0]))
        elif op == "C" and current:
            curve = sample_cubic(current[-1], xy(points[0]), xy(points[1]), xy(points[2]))
            current.extend((float(x), float(y)) for x, y in curve)
        elif op == "Z" and current:
            current.append(current[0])
    if len(current) > 1:
        rings.append(current)
    return rings


def _build_transform(
    viewbox: Tuple[int, int, int, int],
    size_px: int,
) -> Tuple[Callable[[Tuple[float, float]], Tuple[float, float]], float]:
    min_x, min_y, max_x, max_y = viewbox
    width = max(max_x - min_x, 1e-9)
    height = max(max_y - min_y, 1e-9)
    scale = min(size_px / width, size_px / height)
    offset_x = (size_px - width * scale) / 2.0
    offset_y = (size_px - height * scale) / 2.0

    def transform(point: Tuple[float, float]) -> Tuple[float, float]:
        # SVG and image rows both grow downwards, so no flip.
        return (point[0] - min_x) * scale + offset_x, (point[1] - min_y) * scale + offset_y

    return transform, scale


def render_png(
    paths: Sequence[PathEntity],
    viewbox: Tuple[int, int, int, int],
    scale: int,
    destination: Path,
    size_px: int,
) -> None:
    if not paths:
        raise RuntimeError("No renderable paths were decoded.")
    transform, px_per_unit = _build_transform(viewbox, size_px)

    image = Image.new("RGBA", (size_px, size_px), (255, 255, 255, 0))
    draw = ImageDraw.Draw(image)
    for path in paths:
        rings = [[transform(pt) for pt in ring] for ring in flatten_path(path, scale)]
        if path.fill is not None:
            fill = (path.fill.r & 0xFF, path.fill.g & 0xFF, path.fill.b & 0xFF, 255)
            for ring in rings:
                if len(ring) > 2:
                    draw.polygon(ring, fill=fill)
        if path.stroke is not None:
            stroke = (path.stroke.r & 0xFF, path.stroke.g & 0xFF, path.stroke.b & 0xFF, 255)
            width = max(1, int(round(path.stroke_width / scale * px_per_unit)))
            for ring in rings:
                draw.line(ring, fill=stroke, width=width)

    destination.parent.mkdir(parents=True, exist_ok=True)
    image.save(destination)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a UBVFF drawing to a PNG preview.")
    parser.add_argument("variant", choices=("type1", "type2"), help="Input file format")
    parser.add_argument("input", type=str, help="Type 1 file, or Type 2 command file")
    parser.add_argument("points", nargs="?", default=AUTO, help='Type 2 points file (default "auto")')
    parser.add_argument("--output", type=Path, required=True, help="Destination PNG path")
    parser.add_argument("--size", type=int, default=400, help="Square output size in pixels (default: 400)")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logger = CommandLogger(detail=DETAIL_SUMMARY)
    try:
        with open(args.input, "rb") as source:
            if args.variant == "type1":
                result = decode_type1(source, logger=logger)
            else:
                _, footer = read_type2_preamble(source)
                points_name = args.points
                if points_name == AUTO:
                    points_name = points_file_name(args.input, footer.points_file_number)
                with open(points_name, "rb") as points:
                    result = decode_type2(source, points, logger=logger)
        render_png(result.paths, result.viewbox, result.scale, args.output, args.size)
    except (OSError, RuntimeError) as exc:
        logger.error(str(exc))
        print("exiting due to error.")
        return 1
    logger.progress(f"Preview PNG written to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
