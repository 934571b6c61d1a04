from __future__ import annotations

import pytest

from thumbnailer.models.dimension import Dimension
from thumbnailer.resizers.factories import (
    DEFAULT_RESIZER,
    DEFAULT_RESIZER_FACTORY,
    DefaultResizerFactory,
    FixedResizerFactory,
    resizer_factory_for,
    select_resizer,
)
from thumbnailer.resizers.strategies import Resizers


@pytest.mark.parametrize(
    ("source", "target", "expected"),
    [
        ((100, 100), (100, 100), Resizers.NULL),
        ((100, 100), (200, 200), Resizers.BICUBIC),
        ((100, 100), (60, 60), Resizers.BILINEAR),
        ((100, 100), (50, 50), Resizers.BILINEAR),
        ((100, 100), (49, 49), Resizers.PROGRESSIVE),
        ((100, 100), (40, 60), Resizers.BILINEAR),
        ((100, 100), (200, 50), Resizers.PROGRESSIVE),
        ((100, 100), (100, 50), Resizers.PROGRESSIVE),
        ((100, 100), (150, 100), Resizers.PROGRESSIVE),
    ],
)
def test_select_resizer_decision_table(source, target, expected) -> None:
    assert select_resizer(Dimension(*source), Dimension(*target)) is expected


def test_default_factory_without_sizes_returns_default() -> None:
    factory = DefaultResizerFactory()

    assert factory.get_resizer() is DEFAULT_RESIZER
    assert factory.get_resizer(Dimension(10, 10), None) is DEFAULT_RESIZER
    assert factory.get_resizer(Dimension(400, 400), Dimension(10, 10)) is Resizers.PROGRESSIVE


def test_fixed_factory_ignores_sizes() -> None:
    factory = FixedResizerFactory(Resizers.BICUBIC)

    assert factory.get_resizer() is Resizers.BICUBIC
    assert factory.get_resizer(Dimension(400, 400), Dimension(10, 10)) is Resizers.BICUBIC
    assert factory == FixedResizerFactory(Resizers.BICUBIC)
    assert factory != FixedResizerFactory(Resizers.NULL)
    assert hash(factory) == hash(FixedResizerFactory(Resizers.BICUBIC))


def test_fixed_factory_rejects_none() -> None:
    with pytest.raises(ValueError):
        FixedResizerFactory(None)


def test_resizer_factory_for_names() -> None:
    assert resizer_factory_for("auto") is DEFAULT_RESIZER_FACTORY
    assert resizer_factory_for(" Bilinear ") == FixedResizerFactory(Resizers.BILINEAR)

    with pytest.raises(ValueError, match="Unsupported resizer"):
        resizer_factory_for("lanczos")
