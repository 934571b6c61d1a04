"""
Thumbnail size policies: fit/fill a fixed box, or scale by a factor.
"""

from __future__ import annotations

import math

from thumbnailer.models.dimension import Dimension
from thumbnailer.models.parameter import ThumbnailParameter


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def fixed_size(
    source: Dimension,
    target: Dimension,
    keep_aspect_ratio: bool = True,
    fit_within: bool = True,
) -> Dimension:
    """
    Size for a thumbnail made to `target`.

    With `keep_aspect_ratio`, the source ratio is preserved and the thumbnail
    either fits inside the box (`fit_within`) or covers it.
    """
    width, height = target
    if keep_aspect_ratio:
        source_ratio = source.width / source.height
        target_ratio = target.width / target.height
        if source_ratio != target_ratio:
            if fit_within == (source_ratio > target_ratio):
                height = _round_half_up(target.width / source_ratio)
            else:
                width = _round_half_up(target.height * source_ratio)
    return Dimension.promoted(width, height)


def scaled_size(source: Dimension, width_factor: float, height_factor: float) -> Dimension:
    if width_factor <= 0 or height_factor <= 0:
        raise ValueError("The scaling factor must be greater than zero.")
    return Dimension.promoted(
        _round_half_up(source.width * width_factor),
        _round_half_up(source.height * height_factor),
    )


def target_size(param: ThumbnailParameter, source: Dimension) -> Dimension:
    """Thumbnail size for `source` under `param`."""
    if param.size is not None:
        return fixed_size(source, param.size, param.keep_aspect_ratio, param.fit_within_dimensions)
    width_factor, height_factor = param.scale
    return scaled_size(source, width_factor, height_factor)


def draft_size(param: ThumbnailParameter | None) -> Dimension | None:
    """
    Smallest size a decoder may reduce the source to while reading (JPEG DCT
    scaling), or None when the source must be decoded at full size.

    The box is square so it still covers the thumbnail after a quarter-turn
    orientation fix. Covering the box and scaling by factor need the full
    raster, as does a source region given in full-size pixels.
    """
    if param is None or param.size is None or param.source_region is not None:
        return None
    if param.keep_aspect_ratio and not param.fit_within_dimensions:
        return None
    side = max(param.size)
    return Dimension(side, side)
