"""
Codec helpers over Pillow's plugin registry: format names, extensions, modes.

Format names are handled case-insensitively and reported lower-case
("jpeg", "png"); Pillow's own registry keys are upper-case.
"""

from __future__ import annotations

from typing import List

from PIL import Image

from thumbnailer.models.formats import is_determine_format, is_original_format

_ALIASES = {"JPG": "JPEG", "TIF": "TIFF"}

# Multi-picture camera JPEGs open as MPO; their primary image is a JPEG.
_REPORTED_NAMES = {"mpo": "jpeg"}

# Modes that cannot be interpolated, and the mode they are resized in.
_WORKING_MODES = {"1": "L", "P": "RGBA", "PA": "RGBA"}

_NO_ALPHA_FORMATS = {"JPEG", "BMP"}


def _registry() -> None:
    Image.init()


def normalize_format_name(name: str | None) -> str | None:
    if name is None:
        return None
    key = name.strip().lower()
    return _REPORTED_NAMES.get(key, key)


def pillow_format(name: str | None) -> str | None:
    """Pillow writer key for `name` (format name or file suffix), or None."""
    if not name:
        return None
    _registry()
    key = name.strip().lstrip(".").upper()
    key = _ALIASES.get(key, key)
    if key in Image.SAVE:
        return key
    by_extension = Image.registered_extensions().get("." + key.lower())
    if by_extension and by_extension in Image.SAVE:
        return by_extension
    return None


def format_for_extension(extension: str | None) -> str | None:
    """Readable format registered for a file suffix, lower-case."""
    if not extension:
        return None
    _registry()
    suffix = "." + extension.strip().lstrip(".").lower()
    fmt = Image.registered_extensions().get(suffix)
    return normalize_format_name(fmt)


def extensions_for_format(name: str | None) -> List[str]:
    """File suffixes (without dot) Pillow registers for a format."""
    fmt = pillow_format(name)
    if fmt is None:
        return []
    return sorted(ext.lstrip(".") for ext, owner in Image.registered_extensions().items() if owner == fmt)


def supported_output_formats() -> List[str]:
    _registry()
    return sorted(fmt.lower() for fmt in Image.SAVE)


def is_supported_output_format(name: str | None) -> bool:
    """True for a writable format name or one of the format sentinels."""
    if is_original_format(name) or is_determine_format(name):
        return True
    return pillow_format(name) is not None


def working_mode(mode: str) -> str:
    """Mode to allocate the thumbnail in when following the source's mode."""
    return _WORKING_MODES.get(mode, mode)


def drops_alpha(pillow_key: str) -> bool:
    return pillow_key in _NO_ALPHA_FORMATS


def flatten_alpha(image: Image.Image) -> Image.Image:
    """RGB copy of `image` for writers without alpha support."""
    if image.mode in ("RGB", "L"):
        return image
    return image.convert("RGB")
