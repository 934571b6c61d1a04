"""
Thumbnail tasks: one source, one sink, one read and one write.

Reading captures the source's format and, when enabled, queues the Exif
orientation fix ahead of the configured filters. Writing resolves the output
format (explicit, "original" or "determine") before handing the raster to the
sink. Sources and sinks may wrap streams that cannot be rewound, so each
transition runs at most once.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, BinaryIO, List

from PIL import Image

from thumbnailer.exif.corrector import filter_for_orientation
from thumbnailer.exif.orientation import Orientation
from thumbnailer.filters.pipeline import ImageFilter
from thumbnailer.models.formats import is_determine_format, is_original_format
from thumbnailer.models.parameter import ThumbnailParameter
from thumbnailer.tasks.io import (
    FileImageSink,
    FileImageSource,
    ImageSink,
    ImageSource,
    InputStreamImageSource,
    OutputStreamImageSink,
)

LOGGER = logging.getLogger(__name__)


class TaskState(Enum):
    UNREAD = "unread"
    READ = "read"
    WRITTEN = "written"


class ThumbnailTask(ABC):
    """Base class holding the parameter and the per-task filter list."""

    def __init__(self, param: ThumbnailParameter) -> None:
        if param is None:
            raise ValueError("The parameter is None.")
        self.param = param
        self.input_format_name: str | None = None
        # Copied so the orientation fix never leaks into a shared parameter.
        self.filters: List[ImageFilter] = list(param.filters)
        self.state = TaskState.UNREAD

    @abstractmethod
    def read(self) -> Image.Image:
        ...

    @abstractmethod
    def write(self, image: Image.Image) -> None:
        ...

    @property
    @abstractmethod
    def source(self) -> Any:
        ...

    @property
    @abstractmethod
    def destination(self) -> Any:
        ...

    def _require(self, expected: TaskState, action: str) -> None:
        """The state only moves on once the source or sink call has succeeded."""
        if self.state is not expected:
            raise RuntimeError(f"Cannot {action} a task that is {self.state.value}; expected {expected.value}.")


class SourceSinkThumbnailTask(ThumbnailTask):
    """Task reading from an ImageSource and writing to an ImageSink."""

    def __init__(self, param: ThumbnailParameter, source: ImageSource, sink: ImageSink) -> None:
        super().__init__(param)
        if source is None:
            raise ValueError("ImageSource cannot be None.")
        if sink is None:
            raise ValueError("ImageSink cannot be None.")
        source.set_thumbnail_parameter(param)
        sink.set_thumbnail_parameter(param)
        self._source = source
        self._sink = sink

    def read(self) -> Image.Image:
        self._require(TaskState.UNREAD, "read")
        image = self._source.read()
        self.state = TaskState.READ
        self.input_format_name = self._source.input_format_name

        if self.param.use_exif_orientation:
            orientation = self._source.orientation
            if orientation is not None and orientation is not Orientation.TOP_LEFT:
                LOGGER.debug("Correcting Exif orientation %s", orientation.name)
                self.filters.insert(0, filter_for_orientation(orientation))
        return image

    def resolve_output_format(self) -> str | None:
        """Format name handed to the sink for the configured output format."""
        format_name: str | None = self.param.output_format
        if is_determine_format(format_name):
            format_name = self._sink.preferred_output_format_name()
        if is_original_format(format_name):
            format_name = self.input_format_name
        return format_name

    def write(self, image: Image.Image) -> None:
        self._require(TaskState.READ, "write")
        format_name = self.resolve_output_format()
        self._sink.set_output_format_name(format_name)
        self._sink.write(image)
        self.state = TaskState.WRITTEN

    @property
    def source(self) -> Any:
        return self._source.source

    @property
    def destination(self) -> Any:
        return self._sink.sink


def file_thumbnail_task(
    param: ThumbnailParameter, source_path: str | Path, destination_path: str | Path
) -> SourceSinkThumbnailTask:
    return SourceSinkThumbnailTask(param, FileImageSource(source_path), FileImageSink(destination_path))


def stream_thumbnail_task(
    param: ThumbnailParameter, input_stream: BinaryIO, output_stream: BinaryIO
) -> SourceSinkThumbnailTask:
    return SourceSinkThumbnailTask(param, InputStreamImageSource(input_stream), OutputStreamImageSink(output_stream))
