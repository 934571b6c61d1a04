"""Thumbnail creation with resampler selection and Exif orientation correction."""

from thumbnailer.exif.corrector import operations_for
from thumbnailer.exif.orientation import Orientation, read_orientation
from thumbnailer.models.dimension import Dimension
from thumbnailer.models.formats import DETERMINE_FORMAT, ORIGINAL_FORMAT
from thumbnailer.models.parameter import ThumbnailParameter
from thumbnailer.resizers.factories import DefaultResizerFactory, FixedResizerFactory, select_resizer
from thumbnailer.resizers.strategies import Resizers, resize
from thumbnailer.services.thumbnail_service import (
    create_thumbnail,
    thumbnail_file,
    thumbnail_image,
    thumbnail_stream,
)
from thumbnailer.tasks.errors import UnsupportedFormatError
from thumbnailer.tasks.task import SourceSinkThumbnailTask

__all__ = [
    "DETERMINE_FORMAT",
    "ORIGINAL_FORMAT",
    "DefaultResizerFactory",
    "Dimension",
    "FixedResizerFactory",
    "Orientation",
    "Resizers",
    "SourceSinkThumbnailTask",
    "ThumbnailParameter",
    "UnsupportedFormatError",
    "create_thumbnail",
    "operations_for",
    "read_orientation",
    "resize",
    "select_resizer",
    "thumbnail_file",
    "thumbnail_image",
    "thumbnail_stream",
]
