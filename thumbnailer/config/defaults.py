"""
Default configuration values.
"""

from __future__ import annotations

DEFAULTS: dict[str, object] = {
    "thumbnail": {
        "width": 160,
        "height": 160,
        "keep_aspect_ratio": True,
        "fit_within": True,
        "output_format": "original",
    },
    "resizer": {"strategy": "auto"},
    "exif": {"use_orientation": True},
    "workers": {"max": 2},
    "logging": {"level": "info"},
}
