"""
Resampling strategies used to draw a source raster into a destination raster.

`Resizers` only names a strategy; `resize()` dispatches to the drawing
function registered for it. The destination's size is the target size and the
destination is written in place.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List

from PIL import Image

from thumbnailer.models.dimension import Dimension


class Resizers(Enum):
    """Available resampling strategies."""

    NULL = "null"
    BILINEAR = "bilinear"
    BICUBIC = "bicubic"
    PROGRESSIVE = "progressive"

    def resize(self, source: Image.Image, destination: Image.Image) -> None:
        resize(self, source, destination)


def _check(source: Image.Image | None, destination: Image.Image | None) -> None:
    if source is None or destination is None:
        raise ValueError("The source and/or destination image is None.")


def _matching_mode(source: Image.Image, destination: Image.Image) -> Image.Image:
    if source.mode == destination.mode:
        return source
    return source.convert(destination.mode)


def _draw(source: Image.Image, destination: Image.Image, resample: Image.Resampling) -> None:
    """Interpolate the whole of `source` over the whole destination."""
    scaled = source.resize(destination.size, resample)
    destination.paste(scaled, (0, 0))


def _region(scratch: Image.Image, size: Dimension) -> Image.Image:
    if size.width > scratch.width or size.height > scratch.height:
        raise AssertionError(f"Region {size} exceeds scratch raster {scratch.width}x{scratch.height}")
    return scratch.crop((0, 0, size.width, size.height))


def _null_resize(source: Image.Image, destination: Image.Image) -> None:
    _check(source, destination)
    destination.paste(_matching_mode(source, destination), (0, 0))


def _bilinear_resize(source: Image.Image, destination: Image.Image) -> None:
    _check(source, destination)
    _draw(_matching_mode(source, destination), destination, Image.Resampling.BILINEAR)


def _bicubic_resize(source: Image.Image, destination: Image.Image) -> None:
    _check(source, destination)
    _draw(_matching_mode(source, destination), destination, Image.Resampling.BICUBIC)


def progressive_steps(source: Dimension, target: Dimension) -> List[Dimension]:
    """
    Intermediate sizes drawn by the progressive bilinear resize.

    The first entry is the size the source is first drawn at; every following
    entry is at most half of the previous one (never below the target) and the
    last entry is the target itself. An empty list means a single bilinear
    draw is enough (no side shrinks by more than 2x).
    """
    current_width, current_height = source
    target_width, target_height = target

    if target_width * 2 >= current_width and target_height * 2 >= current_height:
        return []

    start_width, start_height = target_width, target_height
    while start_width < current_width and start_height < current_height:
        start_width *= 2
        start_height *= 2

    # Mixed growth/shrink can leave one side of the doubled size short of the
    # target; the first step never goes below the target.
    current_width = max(start_width // 2, target_width)
    current_height = max(start_height // 2, target_height)
    steps = [Dimension(current_width, current_height)]

    while current_width >= target_width * 2 and current_height >= target_height * 2:
        current_width = max(current_width // 2, target_width)
        current_height = max(current_height // 2, target_height)
        steps.append(Dimension(current_width, current_height))

    return steps


def _progressive_bilinear_resize(source: Image.Image, destination: Image.Image) -> None:
    _check(source, destination)
    source = _matching_mode(source, destination)
    steps = progressive_steps(Dimension.of_image(source), Dimension.of_image(destination))
    if not steps:
        _draw(source, destination, Image.Resampling.BILINEAR)
        return

    first, *halvings = steps

    # One scratch raster per call, sized to the largest intermediate step.
    # Before each halving the region (0, 0, *previous) holds the last step;
    # afterwards the region (0, 0, *step) holds the new one. Only that region
    # is resampled; stale pixels of larger steps lie outside it.
    scratch = Image.new(destination.mode, first)
    _draw(source, scratch, Image.Resampling.BILINEAR)

    previous = first
    for step in halvings:
        if step.width > previous.width or step.height > previous.height:
            raise AssertionError(f"Halving step {step} exceeds previous step {previous}")
        reduced = _region(scratch, previous).resize(step, Image.Resampling.BILINEAR)
        scratch.paste(reduced, (0, 0))
        previous = step

    _draw(_region(scratch, previous), destination, Image.Resampling.BILINEAR)


_RESIZE_FUNCTIONS: Dict[Resizers, Callable[[Image.Image, Image.Image], None]] = {
    Resizers.NULL: _null_resize,
    Resizers.BILINEAR: _bilinear_resize,
    Resizers.BICUBIC: _bicubic_resize,
    Resizers.PROGRESSIVE: _progressive_bilinear_resize,
}


def resize(strategy: Resizers, source: Image.Image, destination: Image.Image) -> None:
    """Draw `source` into `destination` using `strategy`."""
    _RESIZE_FUNCTIONS[strategy](source, destination)
