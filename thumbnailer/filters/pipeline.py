"""
Ordered chain of image filters.
"""

from __future__ import annotations

from typing import Iterable, List, Protocol, Tuple, runtime_checkable

from PIL import Image


@runtime_checkable
class ImageFilter(Protocol):
    """Anything that maps one raster to another."""

    def apply(self, image: Image.Image) -> Image.Image:
        ...


class Pipeline:
    """Applies its filters in insertion order; is itself an ImageFilter."""

    def __init__(self, filters: Iterable[ImageFilter] = ()) -> None:
        if filters is None:
            raise ValueError("Cannot create a pipeline from None.")
        self._filters: List[ImageFilter] = []
        self.add_all(filters)

    def add(self, image_filter: ImageFilter) -> None:
        self._filters.append(self._checked(image_filter))

    def add_first(self, image_filter: ImageFilter) -> None:
        self._filters.insert(0, self._checked(image_filter))

    def add_all(self, filters: Iterable[ImageFilter]) -> None:
        if filters is None:
            raise ValueError("A sequence of image filters must not be None.")
        for image_filter in filters:
            self.add(image_filter)

    @property
    def filters(self) -> Tuple[ImageFilter, ...]:
        return tuple(self._filters)

    def apply(self, image: Image.Image) -> Image.Image:
        if not self._filters:
            return image
        result = image.copy()
        for image_filter in self._filters:
            result = image_filter.apply(result)
        return result

    def __len__(self) -> int:
        return len(self._filters)

    def __repr__(self) -> str:
        return f"Pipeline({self._filters!r})"

    @staticmethod
    def _checked(image_filter: ImageFilter) -> ImageFilter:
        if image_filter is None:
            raise ValueError("An image filter must not be None.")
        return image_filter
