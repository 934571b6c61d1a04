"""
Command-line entry point to make thumbnails of image files.

Usage:
    python -m thumbnailer.cli photo.jpg other.png --output-dir thumbs [--size 200x200]
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from thumbnailer.app_context import initialize_app
from thumbnailer.models.dimension import Dimension
from thumbnailer.resizers.factories import resizer_factory_for
from thumbnailer.tasks.task import file_thumbnail_task


def _parse_size(value: str) -> Dimension:
    try:
        width, height = (int(part) for part in value.lower().split("x"))
        return Dimension.of(width, height)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid size {value!r}, expected WIDTHxHEIGHT") from exc


def _parse_region(value: str) -> tuple[int, int, int, int]:
    try:
        left, top, right, bottom = (int(part) for part in value.split(","))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid region {value!r}, expected LEFT,TOP,RIGHT,BOTTOM") from exc
    return (left, top, right, bottom)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create thumbnails of image files.")
    parser.add_argument("inputs", nargs="+", type=Path, help="Image files to thumbnail.")
    parser.add_argument("--output-dir", type=Path, required=True, help="Directory for the thumbnails.")
    sizing = parser.add_mutually_exclusive_group()
    sizing.add_argument("--size", type=_parse_size, help="Bounding box, e.g. 200x200.")
    sizing.add_argument("--scale", type=float, help="Scale factor, e.g. 0.25.")
    parser.add_argument("--format", dest="output_format", help="Output format, 'original' or 'determine'.")
    parser.add_argument("--quality", type=float, help="Output quality between 0.0 and 1.0.")
    parser.add_argument("--region", type=_parse_region, help="Crop box of the source, LEFT,TOP,RIGHT,BOTTOM.")
    parser.add_argument("--resizer", help="auto, null, bilinear, bicubic or progressive.")
    parser.add_argument("--no-exif", action="store_true", help="Ignore Exif orientation.")
    parser.add_argument("--config", type=Path, help="Config file (defaults to the user config).")
    parser.add_argument("--log-dir", type=Path, help="Also write logs to this directory.")
    return parser


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.size is not None:
        overrides["size"] = args.size
    if args.scale is not None:
        overrides["scale"] = (args.scale, args.scale)
    if args.output_format:
        overrides["output_format"] = args.output_format
    if args.quality is not None:
        overrides["output_quality"] = args.quality
    if args.resizer:
        overrides["resizer_factory"] = resizer_factory_for(args.resizer)
    if args.region is not None:
        overrides["source_region"] = args.region
    if args.no_exif:
        overrides["use_exif_orientation"] = False
    return overrides


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        context = initialize_app(config_path=args.config, log_dir=args.log_dir, **_overrides(args))
    except ValueError as exc:
        parser.error(str(exc))

    args.output_dir.mkdir(parents=True, exist_ok=True)
    tasks = [
        file_thumbnail_task(context.parameter, path, args.output_dir / path.name)
        for path in args.inputs
    ]
    result = context.batch_service.run(tasks)

    summary = {
        "total": result.total,
        "processed": result.processed,
        "failed": result.failed,
        "errors": result.errors,
        "outputs": [str(path) for path in result.destinations],
    }
    print(json.dumps(summary, indent=2))
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
