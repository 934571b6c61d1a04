"""
Output format sentinels; any other string names the format directly.
"""

from __future__ import annotations

# Keep the format the source was decoded from.
ORIGINAL_FORMAT = "original"
# Let the sink choose, e.g. from a file extension.
DETERMINE_FORMAT = "determine"


def is_original_format(name: str | None) -> bool:
    return name is not None and name.strip().lower() == ORIGINAL_FORMAT


def is_determine_format(name: str | None) -> bool:
    return name is not None and name.strip().lower() == DETERMINE_FORMAT
