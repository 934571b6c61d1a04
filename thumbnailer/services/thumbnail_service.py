"""
Make thumbnails: read, correct orientation and filter, resize, write.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from PIL import Image

from thumbnailer.filters.pipeline import Pipeline
from thumbnailer.models.dimension import Dimension
from thumbnailer.models.formats import DETERMINE_FORMAT, ORIGINAL_FORMAT
from thumbnailer.models.parameter import ThumbnailParameter
from thumbnailer.resizers.strategies import resize
from thumbnailer.services.sizing import target_size
from thumbnailer.tasks.io import RasterImageSink, RasterImageSource
from thumbnailer.tasks.task import (
    SourceSinkThumbnailTask,
    ThumbnailTask,
    file_thumbnail_task,
    stream_thumbnail_task,
)
from thumbnailer.utils.imaging import working_mode

LOGGER = logging.getLogger(__name__)


def resize_image(param: ThumbnailParameter, image: Image.Image) -> Image.Image:
    """Resize `image` to the size `param` asks for, in a fresh raster."""
    source_size = Dimension.of_image(image)
    size = target_size(param, source_size)
    mode = param.image_mode or working_mode(image.mode)
    thumbnail = Image.new(mode, size)
    resizer = param.resizer_factory.get_resizer(source_size, size)
    LOGGER.debug("Resizing %s -> %s with %s", source_size, size, resizer.name)
    resize(resizer, image, thumbnail)
    return thumbnail


def create_thumbnail(task: ThumbnailTask) -> None:
    """Run `task` end to end."""
    source_image = task.read()
    # The task's filter list is final once read() has queued any orientation fix.
    corrected = Pipeline(task.filters).apply(source_image)
    thumbnail = resize_image(task.param, corrected)
    task.write(thumbnail)


def _fit_within(width: int, height: int, **options) -> ThumbnailParameter:
    return ThumbnailParameter(size=Dimension.of(width, height), **options)


def thumbnail_image(image: Image.Image, width: int, height: int) -> Image.Image:
    """Thumbnail of an in-memory raster, fitted inside width x height."""
    param = _fit_within(width, height)
    if image is None:
        raise ValueError("Image cannot be None.")
    sink = RasterImageSink()
    create_thumbnail(SourceSinkThumbnailTask(param, RasterImageSource(image), sink))
    return sink.sink


def thumbnail_file(source: str | Path, destination: str | Path, width: int, height: int) -> Path:
    """
    Write a thumbnail of `source` to `destination`; returns the path written.
    The destination's extension picks the format, falling back to the source's.
    """
    param = _fit_within(width, height, output_format=DETERMINE_FORMAT)
    if source is None or destination is None:
        raise ValueError("Input and output files cannot be None.")
    if not Path(source).exists():
        raise FileNotFoundError(f"Input file does not exist: {source}")
    task = file_thumbnail_task(param, source, destination)
    create_thumbnail(task)
    return task.destination


def thumbnail_stream(
    input_stream: BinaryIO,
    output_stream: BinaryIO,
    width: int,
    height: int,
    output_format: str = ORIGINAL_FORMAT,
) -> None:
    """Thumbnail the image in `input_stream` into `output_stream`."""
    param = _fit_within(width, height, output_format=output_format)
    if input_stream is None or output_stream is None:
        raise ValueError("Input and output streams cannot be None.")
    create_thumbnail(stream_thumbnail_task(param, input_stream, output_stream))
