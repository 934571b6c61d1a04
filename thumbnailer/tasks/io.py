"""
Image sources and sinks.

A source yields one raster (the first frame) plus the name of the format it
was decoded from; a sink takes one raster and the format to encode it in.
Concrete adapters cover files, binary streams, URLs and in-memory rasters.
"""

from __future__ import annotations

import io
import logging
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, BinaryIO

from PIL import Image, UnidentifiedImageError

from thumbnailer.exif.orientation import Orientation, read_orientation
from thumbnailer.models.dimension import Dimension
from thumbnailer.models.formats import ORIGINAL_FORMAT, is_determine_format, is_original_format
from thumbnailer.models.parameter import ThumbnailParameter
from thumbnailer.services.sizing import draft_size
from thumbnailer.tasks.errors import UnsupportedFormatError
from thumbnailer.utils.imaging import (
    drops_alpha,
    extensions_for_format,
    flatten_alpha,
    format_for_extension,
    normalize_format_name,
    pillow_format,
)

LOGGER = logging.getLogger(__name__)

FIRST_IMAGE_INDEX = 0
DEFAULT_URL_TIMEOUT = 30.0


class ImageSource(ABC):
    """Produces the raster a thumbnail is made from."""

    def __init__(self) -> None:
        self.param: ThumbnailParameter | None = None
        self.orientation: Orientation | None = None
        self._input_format_name: str | None = None
        self._has_read_input = False

    @abstractmethod
    def read(self) -> Image.Image:
        ...

    @property
    @abstractmethod
    def source(self) -> Any:
        ...

    @property
    def input_format_name(self) -> str | None:
        """Lower-case format the source was decoded from (None for in-memory rasters)."""
        if not self._has_read_input:
            raise RuntimeError("Input has not been read yet.")
        return self._input_format_name

    def set_thumbnail_parameter(self, param: ThumbnailParameter | None) -> None:
        self.param = param

    def _finished_reading(self, image: Image.Image) -> Image.Image:
        self._has_read_input = True
        return image

    def _cropped_to_region(self, image: Image.Image) -> Image.Image:
        region = self.param.source_region if self.param is not None else None
        if region is None:
            return image
        left, top, right, bottom = region
        box = (left, top, min(right, image.width), min(bottom, image.height))
        if box[0] >= box[2] or box[1] >= box[3]:
            raise ValueError(f"Source region {region} lies outside the {image.width}x{image.height} image.")
        return image.crop(box)

    def _wants_orientation(self) -> bool:
        return self.param is not None and self.param.use_exif_orientation


class ImageSink(ABC):
    """Receives the finished thumbnail."""

    def __init__(self) -> None:
        self.param: ThumbnailParameter | None = None
        self.output_format: str | None = None

    def set_output_format_name(self, format_name: str | None) -> None:
        self.output_format = format_name

    def set_thumbnail_parameter(self, param: ThumbnailParameter | None) -> None:
        self.param = param

    def preferred_output_format_name(self) -> str:
        return ORIGINAL_FORMAT

    def write(self, image: Image.Image) -> None:
        if image is None:
            raise ValueError("Cannot write a None image.")
        if is_determine_format(self.output_format):
            self.output_format = self.preferred_output_format_name()

    @property
    @abstractmethod
    def sink(self) -> Any:
        ...


class InputStreamImageSource(ImageSource):
    """Decodes the first frame of a binary stream. The stream is left open."""

    def __init__(self, stream: BinaryIO) -> None:
        super().__init__()
        if stream is None:
            raise ValueError("Stream cannot be None.")
        self.stream = stream

    def read(self) -> Image.Image:
        try:
            opened = Image.open(self.stream)
        except UnidentifiedImageError as exc:
            raise UnsupportedFormatError(
                UnsupportedFormatError.UNKNOWN, "No suitable image reader found for source data."
            ) from exc

        with opened as image:
            self._input_format_name = normalize_format_name(image.format)
            requested = draft_size(self.param)
            if requested is not None:
                stored = Dimension.of_image(image)
                image.draft(None, requested)
                if image.size != stored:
                    LOGGER.debug(
                        "Decoding %s image at %s instead of %s",
                        self._input_format_name,
                        Dimension.of_image(image),
                        stored,
                    )
            image.load()
            if self._wants_orientation():
                try:
                    self.orientation = read_orientation(image, FIRST_IMAGE_INDEX)
                except (EOFError, OSError) as exc:
                    LOGGER.warning("Skipping Exif orientation for %s image: %s", self._input_format_name, exc)
            raster = self._cropped_to_region(image)
            if raster is image:
                raster = image.copy()
        LOGGER.debug(
            "Read %s image %sx%s (orientation=%s)",
            self._input_format_name,
            raster.width,
            raster.height,
            self.orientation,
        )
        return self._finished_reading(raster)

    @property
    def source(self) -> BinaryIO:
        return self.stream


class FileImageSource(ImageSource):
    """Reads an image file from disk."""

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        if path is None:
            raise ValueError("File cannot be None.")
        self.path = Path(path)

    def read(self) -> Image.Image:
        try:
            fh = self.path.open("rb")
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Could not find file: {self.path.resolve()}") from exc

        with fh:
            delegate = InputStreamImageSource(fh)
            delegate.set_thumbnail_parameter(self.param)
            try:
                raster = delegate.read()
            except UnsupportedFormatError as exc:
                raise UnsupportedFormatError(
                    UnsupportedFormatError.UNKNOWN,
                    f"No suitable image reader found for {self.path.resolve()}.",
                ) from exc

        self._input_format_name = delegate.input_format_name
        self.orientation = delegate.orientation
        return self._finished_reading(raster)

    @property
    def source(self) -> Path:
        return self.path


class UrlImageSource(ImageSource):
    """Downloads an image with urllib and decodes it."""

    def __init__(self, url: str, timeout: float = DEFAULT_URL_TIMEOUT) -> None:
        super().__init__()
        if not url:
            raise ValueError("URL cannot be empty.")
        self.url = url
        self.timeout = timeout

    def read(self) -> Image.Image:
        try:
            with urllib.request.urlopen(self.url, timeout=self.timeout) as response:
                payload = response.read()
        except (urllib.error.URLError, ValueError) as exc:
            raise OSError(f"Could not open connection to URL: {self.url}") from exc

        delegate = InputStreamImageSource(io.BytesIO(payload))
        delegate.set_thumbnail_parameter(self.param)
        raster = delegate.read()
        self._input_format_name = delegate.input_format_name
        self.orientation = delegate.orientation
        return self._finished_reading(raster)

    @property
    def source(self) -> str:
        return self.url


class RasterImageSource(ImageSource):
    """Wraps an in-memory raster; there is no encoded format to report."""

    def __init__(self, image: Image.Image) -> None:
        super().__init__()
        if image is None:
            raise ValueError("Image cannot be None.")
        self.image = image

    def read(self) -> Image.Image:
        self._input_format_name = None
        return self._finished_reading(self._cropped_to_region(self.image))

    @property
    def source(self) -> Image.Image:
        return self.image


class OutputStreamImageSink(ImageSink):
    """Encodes the thumbnail into a binary stream. The stream is left open."""

    def __init__(self, stream: BinaryIO) -> None:
        super().__init__()
        if stream is None:
            raise ValueError("Stream cannot be None.")
        self.stream = stream

    def write(self, image: Image.Image) -> None:
        super().write(image)
        if self.output_format is None or is_original_format(self.output_format):
            raise RuntimeError("Output format has not been set.")

        key = pillow_format(self.output_format)
        if key is None:
            raise UnsupportedFormatError(
                self.output_format, f"No suitable image writer found for {self.output_format}."
            )
        if drops_alpha(key):
            image = flatten_alpha(image)

        image.save(self.stream, format=key, **self._save_options(key))
        LOGGER.debug("Wrote %sx%s image as %s", image.width, image.height, key)

    def _save_options(self, key: str) -> dict[str, Any]:
        quality = self.param.output_quality if self.param is not None else None
        if quality is None:
            return {}
        if key in ("JPEG", "WEBP"):
            return {"quality": max(1, round(quality * 100))}
        if key == "PNG":
            # Higher quality means less effort spent compressing.
            return {"compress_level": round((1.0 - quality) * 9)}
        return {}

    @property
    def sink(self) -> BinaryIO:
        return self.stream


def _extension(path: Path) -> str | None:
    suffix = path.suffix
    return suffix[1:] if len(suffix) > 1 else None


class FileImageSink(ImageSink):
    """
    Writes the thumbnail to a file.

    The file's extension selects the format unless a format is set; when the
    two disagree the format's extension is appended to the file name.
    """

    def __init__(self, path: str | Path, allow_overwrite: bool = True) -> None:
        super().__init__()
        if path is None:
            raise ValueError("File cannot be None.")
        self.path = Path(path)
        self.allow_overwrite = allow_overwrite
        self.output_format = _extension(self.path)

    def preferred_output_format_name(self) -> str:
        fmt = format_for_extension(_extension(self.path))
        if fmt is not None:
            return fmt
        return self.output_format or ORIGINAL_FORMAT

    def write(self, image: Image.Image) -> None:
        super().write(image)
        extension = _extension(self.path)
        format_name = self.output_format
        if is_original_format(format_name):
            format_name = None

        if format_name is not None:
            if pillow_format(format_name) is None:
                raise UnsupportedFormatError(
                    format_name, f"No suitable image writer found for {format_name}."
                )
            if extension is None or extension.lower() not in extensions_for_format(format_name):
                self.path = self.path.with_name(f"{self.path.name}.{format_name}")
        elif extension is not None:
            format_name = format_for_extension(extension)

        if format_name is None:
            raise UnsupportedFormatError(None, f"Could not determine output format for {self.path}.")

        if not self.allow_overwrite and self.path.exists():
            raise FileExistsError(f"The destination file exists: {self.path}")

        delegate = OutputStreamImageSink(io.BytesIO())
        delegate.set_thumbnail_parameter(self.param)
        delegate.set_output_format_name(format_name)
        delegate.write(image)
        self.path.write_bytes(delegate.stream.getvalue())

    @property
    def sink(self) -> Path:
        return self.path


class RasterImageSink(ImageSink):
    """Keeps the thumbnail in memory."""

    def __init__(self) -> None:
        super().__init__()
        self.image: Image.Image | None = None

    def write(self, image: Image.Image) -> None:
        super().write(image)
        self.image = image

    @property
    def sink(self) -> Image.Image | None:
        return self.image
