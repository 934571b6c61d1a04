"""
Immutable thumbnail settings, validated once at construction.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Tuple

from thumbnailer.filters.pipeline import ImageFilter
from thumbnailer.models.dimension import Dimension
from thumbnailer.models.formats import ORIGINAL_FORMAT
from thumbnailer.resizers.factories import (
    DEFAULT_RESIZER_FACTORY,
    ResizerFactory,
    resizer_factory_for,
)
from thumbnailer.utils.imaging import is_supported_output_format, supported_output_formats


@dataclass(frozen=True)
class ThumbnailParameter:
    """
    How to make one thumbnail.

    Exactly one of `size` (target box) or `scale` (width, height factors) is
    set. `image_mode` None means the thumbnail follows the source's mode.
    `source_region` is a (left, top, right, bottom) box of the stored raster
    to make the thumbnail from; it is clipped to the image bounds.
    `output_quality` is 0.0-1.0 or None for the writer's default.
    """

    size: Dimension | None = None
    scale: Tuple[float, float] | None = None
    keep_aspect_ratio: bool = True
    fit_within_dimensions: bool = True
    output_format: str = ORIGINAL_FORMAT
    output_quality: float | None = None
    image_mode: str | None = None
    filters: Tuple[ImageFilter, ...] = ()
    use_exif_orientation: bool = True
    resizer_factory: ResizerFactory = field(default=DEFAULT_RESIZER_FACTORY)
    source_region: Tuple[int, int, int, int] | None = None

    def __post_init__(self) -> None:
        if (self.size is None) == (self.scale is None):
            raise ValueError("Exactly one of size or scale must be specified.")
        if self.size is not None:
            object.__setattr__(self, "size", Dimension.of(*self.size))
        if self.scale is not None:
            width_factor, height_factor = (float(f) for f in self.scale)
            if not all(math.isfinite(f) and f > 0 for f in (width_factor, height_factor)):
                raise ValueError(f"The scaling factor must be greater than zero, got {self.scale}.")
            object.__setattr__(self, "scale", (width_factor, height_factor))
        if not self.output_format or not self.output_format.strip():
            raise ValueError("Output format must be a non-empty string.")
        if not is_supported_output_format(self.output_format):
            choices = ", ".join(supported_output_formats())
            raise ValueError(f"Unsupported output format: {self.output_format!r} (supported: {choices})")
        if self.output_quality is not None and not 0.0 <= self.output_quality <= 1.0:
            raise ValueError(f"Output quality must be between 0.0 and 1.0, got {self.output_quality}.")
        if self.resizer_factory is None:
            raise ValueError("Resizer factory cannot be None.")
        if any(image_filter is None for image_filter in self.filters):
            raise ValueError("Filters must not contain None.")
        object.__setattr__(self, "filters", tuple(self.filters))
        if self.source_region is not None:
            object.__setattr__(self, "source_region", _checked_region(self.source_region))

    @classmethod
    def from_config(cls, config: Mapping[str, Any], **overrides: Any) -> "ThumbnailParameter":
        """Build from a loaded config dict (see config.defaults); kwargs win."""
        thumb_cfg = config.get("thumbnail", {})
        quality = thumb_cfg.get("output_quality")
        kwargs: dict[str, Any] = {
            "keep_aspect_ratio": bool(thumb_cfg.get("keep_aspect_ratio", True)),
            "fit_within_dimensions": bool(thumb_cfg.get("fit_within", True)),
            "output_format": str(thumb_cfg.get("output_format", ORIGINAL_FORMAT)),
            "output_quality": float(quality) if quality is not None else None,
            "image_mode": thumb_cfg.get("image_mode") or None,
            "use_exif_orientation": bool(config.get("exif", {}).get("use_orientation", True)),
            "resizer_factory": resizer_factory_for(str(config.get("resizer", {}).get("strategy", "auto"))),
        }
        if thumb_cfg.get("source_region") is not None:
            kwargs["source_region"] = tuple(thumb_cfg["source_region"])
        if "scale" in thumb_cfg:
            factor = thumb_cfg["scale"]
            kwargs["scale"] = tuple(factor) if isinstance(factor, (list, tuple)) else (factor, factor)
        else:
            kwargs["size"] = Dimension.of(int(thumb_cfg.get("width", 160)), int(thumb_cfg.get("height", 160)))
        kwargs.update(overrides)
        if "scale" in overrides and "size" not in overrides:
            kwargs.pop("size", None)
        if "size" in overrides and "scale" not in overrides:
            kwargs.pop("scale", None)
        return cls(**kwargs)


def _checked_region(region: Tuple[int, int, int, int]) -> Tuple[int, int, int, int]:
    if len(region) != 4:
        raise ValueError(f"Source region must be (left, top, right, bottom), got {region!r}.")
    left, top, right, bottom = (int(value) for value in region)
    if left < 0 or top < 0:
        raise ValueError(f"Source region must not start at a negative position, got {region!r}.")
    if right <= left or bottom <= top:
        raise ValueError(f"Source region must have a positive width and height, got {region!r}.")
    return (left, top, right, bottom)
