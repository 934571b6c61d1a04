"""
Width/height pair used for source and thumbnail sizes.
"""

from __future__ import annotations

from typing import NamedTuple

from PIL import Image


class Dimension(NamedTuple):
    """Positive (width, height) pair."""

    width: int
    height: int

    @classmethod
    def of(cls, width: int, height: int) -> "Dimension":
        """Validated constructor; both sides must be >= 1."""
        if width <= 0:
            raise ValueError(f"Width must be greater than zero, got {width}.")
        if height <= 0:
            raise ValueError(f"Height must be greater than zero, got {height}.")
        return cls(int(width), int(height))

    @classmethod
    def promoted(cls, width: int, height: int) -> "Dimension":
        """Build from computed sizes, promoting a rounded-down 0 to 1."""
        return cls.of(width or 1, height or 1)

    @classmethod
    def of_image(cls, image: Image.Image) -> "Dimension":
        return cls(*image.size)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"
