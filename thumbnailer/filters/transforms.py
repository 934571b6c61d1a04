"""
Lossless flips and quarter-turn rotations used to fix image orientation.
"""

from __future__ import annotations

from enum import Enum

from PIL import Image


class Transform(Enum):
    """Geometric operation applied to a whole raster."""

    FLIP_HORIZONTAL = "flip_horizontal"
    FLIP_VERTICAL = "flip_vertical"
    ROTATE_LEFT_90 = "rotate_left_90"
    ROTATE_RIGHT_90 = "rotate_right_90"
    ROTATE_180 = "rotate_180"

    def apply(self, image: Image.Image) -> Image.Image:
        return apply_transform(self, image)


# Pillow's ROTATE_90 turns counter-clockwise; "right" here means clockwise.
_TRANSPOSE_METHODS: dict[Transform, Image.Transpose] = {
    Transform.FLIP_HORIZONTAL: Image.Transpose.FLIP_LEFT_RIGHT,
    Transform.FLIP_VERTICAL: Image.Transpose.FLIP_TOP_BOTTOM,
    Transform.ROTATE_LEFT_90: Image.Transpose.ROTATE_90,
    Transform.ROTATE_RIGHT_90: Image.Transpose.ROTATE_270,
    Transform.ROTATE_180: Image.Transpose.ROTATE_180,
}


def apply_transform(transform: Transform, image: Image.Image) -> Image.Image:
    """Return a new raster with `transform` applied."""
    if image is None:
        raise ValueError("Cannot transform a None image.")
    return image.transpose(_TRANSPOSE_METHODS[transform])
