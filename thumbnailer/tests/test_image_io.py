from __future__ import annotations

from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from thumbnailer.exif.orientation import Orientation
from thumbnailer.models.dimension import Dimension
from thumbnailer.models.parameter import ThumbnailParameter
from thumbnailer.tasks.errors import UnsupportedFormatError
from thumbnailer.tasks.io import (
    FileImageSink,
    FileImageSource,
    InputStreamImageSource,
    OutputStreamImageSink,
    RasterImageSink,
    RasterImageSource,
    UrlImageSource,
)


def _image_bytes(fmt: str, size: tuple[int, int] = (12, 8), orientation: int | None = None) -> bytes:
    image = Image.new("RGB", size, color="blue")
    buffer = BytesIO()
    if orientation is None:
        image.save(buffer, format=fmt)
    else:
        exif = Image.Exif()
        exif[274] = orientation
        image.save(buffer, format=fmt, exif=exif.tobytes())
    return buffer.getvalue()


def _param(**options) -> ThumbnailParameter:
    return ThumbnailParameter(size=Dimension(10, 10), **options)


def test_stream_source_reports_format_and_orientation() -> None:
    source = InputStreamImageSource(BytesIO(_image_bytes("JPEG", orientation=6)))
    source.set_thumbnail_parameter(_param())

    image = source.read()

    assert image.size == (12, 8)
    assert source.input_format_name == "jpeg"
    assert source.orientation is Orientation.RIGHT_TOP


def test_stream_source_skips_orientation_when_disabled() -> None:
    source = InputStreamImageSource(BytesIO(_image_bytes("JPEG", orientation=6)))
    source.set_thumbnail_parameter(_param(use_exif_orientation=False))

    source.read()

    assert source.orientation is None


def test_stream_source_leaves_stream_open() -> None:
    stream = BytesIO(_image_bytes("PNG"))

    InputStreamImageSource(stream).read()

    assert not stream.closed


def test_input_format_unavailable_before_read() -> None:
    source = InputStreamImageSource(BytesIO(_image_bytes("PNG")))

    with pytest.raises(RuntimeError):
        source.input_format_name


def test_stream_source_rejects_unknown_data() -> None:
    source = InputStreamImageSource(BytesIO(b"definitely not an image"))

    with pytest.raises(UnsupportedFormatError) as excinfo:
        source.read()
    assert excinfo.value.format_name == UnsupportedFormatError.UNKNOWN


def test_file_source_reads_and_reports_missing_file(tmp_path: Path) -> None:
    path = tmp_path / "photo.png"
    path.write_bytes(_image_bytes("PNG"))

    source = FileImageSource(path)
    assert source.read().size == (12, 8)
    assert source.input_format_name == "png"
    assert source.source == path

    with pytest.raises(FileNotFoundError, match="Could not find file"):
        FileImageSource(tmp_path / "missing.png").read()


def test_file_source_rejects_unreadable_file(tmp_path: Path) -> None:
    path = tmp_path / "notes.jpg"
    path.write_text("hello", encoding="utf-8")

    with pytest.raises(UnsupportedFormatError):
        FileImageSource(path).read()


def test_url_source_reads_file_uri(tmp_path: Path) -> None:
    path = tmp_path / "remote.gif"
    path.write_bytes(_image_bytes("GIF"))

    source = UrlImageSource(path.as_uri())

    assert source.read().size == (12, 8)
    assert source.input_format_name == "gif"


def test_url_source_wraps_connection_errors(tmp_path: Path) -> None:
    source = UrlImageSource((tmp_path / "missing.png").as_uri())

    with pytest.raises(OSError, match="Could not open connection"):
        source.read()


def test_raster_source_has_no_format() -> None:
    image = Image.new("RGB", (3, 3))
    source = RasterImageSource(image)

    assert source.read() is image
    assert source.input_format_name is None


def test_stream_sink_requires_format() -> None:
    sink = OutputStreamImageSink(BytesIO())

    with pytest.raises(RuntimeError):
        sink.write(Image.new("RGB", (3, 3)))

    sink.set_output_format_name("original")
    with pytest.raises(RuntimeError):
        sink.write(Image.new("RGB", (3, 3)))


def test_stream_sink_rejects_unknown_writer() -> None:
    sink = OutputStreamImageSink(BytesIO())
    sink.set_output_format_name("foo")

    with pytest.raises(UnsupportedFormatError) as excinfo:
        sink.write(Image.new("RGB", (3, 3)))
    assert excinfo.value.format_name == "foo"


def test_stream_sink_flattens_alpha_for_jpeg() -> None:
    stream = BytesIO()
    sink = OutputStreamImageSink(stream)
    sink.set_output_format_name("JPG")

    sink.write(Image.new("RGBA", (5, 5), color=(255, 0, 0, 128)))

    stream.seek(0)
    with Image.open(stream) as written:
        assert written.format == "JPEG"
        assert written.mode == "RGB"


def test_stream_sink_quality_changes_output() -> None:
    image = Image.effect_noise((64, 64), 64).convert("RGB")
    sizes = []
    for quality in (0.1, 0.95):
        stream = BytesIO()
        sink = OutputStreamImageSink(stream)
        sink.set_thumbnail_parameter(_param(output_quality=quality))
        sink.set_output_format_name("jpeg")
        sink.write(image)
        sizes.append(len(stream.getvalue()))

    assert sizes[0] < sizes[1]


def test_file_sink_uses_extension_format(tmp_path: Path) -> None:
    sink = FileImageSink(tmp_path / "thumb.png")

    sink.write(Image.new("RGB", (4, 4)))

    assert sink.sink == tmp_path / "thumb.png"
    with Image.open(sink.sink) as written:
        assert written.format == "PNG"


def test_file_sink_appends_extension_for_other_format(tmp_path: Path) -> None:
    sink = FileImageSink(tmp_path / "thumb.png")
    sink.set_output_format_name("jpeg")

    sink.write(Image.new("RGB", (4, 4)))

    assert sink.sink == tmp_path / "thumb.png.jpeg"
    assert sink.sink.exists()
    assert not (tmp_path / "thumb.png").exists()


def test_file_sink_keeps_matching_extension(tmp_path: Path) -> None:
    sink = FileImageSink(tmp_path / "thumb.JPG")
    sink.set_output_format_name("jpeg")

    sink.write(Image.new("RGB", (4, 4)))

    assert sink.sink == tmp_path / "thumb.JPG"


def test_file_sink_without_extension_or_format(tmp_path: Path) -> None:
    sink = FileImageSink(tmp_path / "thumb")

    with pytest.raises(UnsupportedFormatError):
        sink.write(Image.new("RGB", (4, 4)))


def test_file_sink_unknown_extension(tmp_path: Path) -> None:
    sink = FileImageSink(tmp_path / "thumb.foo")

    with pytest.raises(UnsupportedFormatError):
        sink.write(Image.new("RGB", (4, 4)))


def test_file_sink_refuses_overwrite(tmp_path: Path) -> None:
    path = tmp_path / "thumb.png"
    path.write_bytes(b"existing")
    sink = FileImageSink(path, allow_overwrite=False)

    with pytest.raises(FileExistsError):
        sink.write(Image.new("RGB", (4, 4)))
    assert path.read_bytes() == b"existing"


def test_file_sink_preferred_format(tmp_path: Path) -> None:
    assert FileImageSink(tmp_path / "a.jpg").preferred_output_format_name() == "jpeg"
    assert FileImageSink(tmp_path / "a").preferred_output_format_name() == "original"


def test_raster_sink_keeps_image() -> None:
    sink = RasterImageSink()
    image = Image.new("RGB", (3, 3))

    sink.write(image)

    assert sink.sink is image
    with pytest.raises(ValueError):
        sink.write(None)


def test_stream_source_decodes_large_jpeg_reduced() -> None:
    data = _image_bytes("JPEG", size=(1600, 1200))

    reduced = InputStreamImageSource(BytesIO(data))
    reduced.set_thumbnail_parameter(ThumbnailParameter(size=Dimension(100, 100)))
    full = InputStreamImageSource(BytesIO(data))
    full.set_thumbnail_parameter(ThumbnailParameter(size=Dimension(100, 100), fit_within_dimensions=False))

    assert reduced.read().size == (200, 150)
    assert full.read().size == (1600, 1200)


def test_sources_crop_to_region(tmp_path: Path) -> None:
    image = Image.new("RGB", (40, 20), color="black")
    image.paste((255, 255, 255), (20, 0, 40, 20))
    param = ThumbnailParameter(size=Dimension(10, 10), source_region=(25, 5, 100, 15))
    path = tmp_path / "halves.png"
    image.save(path)

    raster_source = RasterImageSource(image)
    raster_source.set_thumbnail_parameter(param)
    file_source = FileImageSource(path)
    file_source.set_thumbnail_parameter(param)

    for cropped in (raster_source.read(), file_source.read()):
        assert cropped.size == (15, 10)
        assert cropped.getextrema() == ((255, 255), (255, 255), (255, 255))
    assert image.size == (40, 20)


def test_source_region_outside_image() -> None:
    source = RasterImageSource(Image.new("RGB", (40, 20)))
    source.set_thumbnail_parameter(ThumbnailParameter(size=Dimension(10, 10), source_region=(50, 0, 60, 10)))

    with pytest.raises(ValueError, match="outside"):
        source.read()


def test_multi_picture_jpeg_reported_as_jpeg(tmp_path: Path) -> None:
    path = tmp_path / "camera.jpg"
    frames = [Image.new("RGB", (64, 48), color="red"), Image.new("RGB", (64, 48), color="blue")]
    frames[0].save(path, format="MPO", save_all=True, append_images=frames[1:])
    with Image.open(path) as opened:
        assert opened.format == "MPO"

    source = FileImageSource(path)
    raster = source.read()
    sink = FileImageSink(tmp_path / "thumb.jpg")
    sink.set_output_format_name(source.input_format_name)
    sink.write(raster)

    assert source.input_format_name == "jpeg"
    assert sink.sink == tmp_path / "thumb.jpg"
