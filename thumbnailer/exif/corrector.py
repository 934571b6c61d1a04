"""
Map an Exif orientation to the operations that bring the raster upright.
"""

from __future__ import annotations

from typing import Mapping, Tuple

from thumbnailer.exif.orientation import Orientation
from thumbnailer.filters.pipeline import Pipeline
from thumbnailer.filters.transforms import Transform

# Applied left to right; flip-after-rotate matters for 4, 5 and 7.
_OPERATIONS: Mapping[Orientation, Tuple[Transform, ...]] = {
    Orientation.TOP_LEFT: (),
    Orientation.TOP_RIGHT: (Transform.FLIP_HORIZONTAL,),
    Orientation.BOTTOM_RIGHT: (Transform.ROTATE_180,),
    Orientation.BOTTOM_LEFT: (Transform.ROTATE_180, Transform.FLIP_HORIZONTAL),
    Orientation.LEFT_TOP: (Transform.ROTATE_RIGHT_90, Transform.FLIP_HORIZONTAL),
    Orientation.RIGHT_TOP: (Transform.ROTATE_RIGHT_90,),
    Orientation.RIGHT_BOTTOM: (Transform.ROTATE_LEFT_90, Transform.FLIP_HORIZONTAL),
    Orientation.LEFT_BOTTOM: (Transform.ROTATE_LEFT_90,),
}


def operations_for(orientation: Orientation | None) -> Tuple[Transform, ...]:
    """Ordered operations that normalize `orientation` to top-left."""
    if orientation is None:
        return ()
    return _OPERATIONS[Orientation(orientation)]


def filter_for_orientation(orientation: Orientation | None) -> Pipeline:
    return Pipeline(operations_for(orientation))
