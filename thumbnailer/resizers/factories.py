"""
Choose a resampling strategy for a given source/thumbnail size pair.
"""

from __future__ import annotations

from typing import Protocol

from thumbnailer.models.dimension import Dimension
from thumbnailer.resizers.strategies import Resizers

DEFAULT_RESIZER = Resizers.PROGRESSIVE


def select_resizer(source: Dimension, target: Dimension) -> Resizers:
    """
    Pick the strategy expected to give the best quality for the size change.

    - same size: plain copy
    - both sides grow: bicubic
    - both sides shrink: progressive bilinear when both shrink by more than
      half, otherwise a single bilinear pass
    - anything else: the default strategy
    """
    source_width, source_height = source
    target_width, target_height = target

    if target_width == source_width and target_height == source_height:
        return Resizers.NULL
    if target_width > source_width and target_height > source_height:
        return Resizers.BICUBIC
    if target_width < source_width and target_height < source_height:
        if target_width < source_width // 2 and target_height < source_height // 2:
            return Resizers.PROGRESSIVE
        return Resizers.BILINEAR
    return DEFAULT_RESIZER


class ResizerFactory(Protocol):
    def get_resizer(
        self, source: Dimension | None = None, target: Dimension | None = None
    ) -> Resizers:
        ...


class DefaultResizerFactory:
    """Size-aware selection backed by `select_resizer`."""

    def get_resizer(
        self, source: Dimension | None = None, target: Dimension | None = None
    ) -> Resizers:
        if source is None or target is None:
            return DEFAULT_RESIZER
        return select_resizer(source, target)

    def __repr__(self) -> str:
        return "DefaultResizerFactory()"


class FixedResizerFactory:
    """Always hands out the same strategy, whatever the sizes."""

    def __init__(self, resizer: Resizers) -> None:
        if resizer is None:
            raise ValueError("Resizer cannot be None.")
        self.resizer = resizer

    def get_resizer(
        self, source: Dimension | None = None, target: Dimension | None = None
    ) -> Resizers:
        return self.resizer

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FixedResizerFactory) and other.resizer is self.resizer

    def __hash__(self) -> int:
        return hash(self.resizer)

    def __repr__(self) -> str:
        return f"FixedResizerFactory({self.resizer.name})"


DEFAULT_RESIZER_FACTORY = DefaultResizerFactory()


def resizer_factory_for(name: str) -> ResizerFactory:
    """Map a config name ("auto" or a strategy name) to a factory."""
    key = name.strip().lower()
    if key == "auto":
        return DEFAULT_RESIZER_FACTORY
    try:
        return FixedResizerFactory(Resizers(key))
    except ValueError as exc:
        choices = ", ".join(["auto"] + [r.value for r in Resizers])
        raise ValueError(f"Unsupported resizer: {name!r} (expected one of {choices})") from exc
