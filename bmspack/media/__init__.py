"""Media dedup package for bmspack.

- MediaDeduplicator: Decides which media files in a work folder are redundant.
- PRESETS: Built-in extension rule tables (oraja, wav_fill_flac, mpg_fill_wmv).
"""

from .extension_rules import (
    PRESET_MPG_FILL_WMV,
    PRESET_ORAJA,
    PRESET_WAV_FILL_FLAC,
    PRESETS,
    get_preset,
    preset_names,
)
from .media_deduplicator import MediaDeduplicator

__all__ = [
    "MediaDeduplicator",
    "PRESETS",
    "PRESET_ORAJA",
    "PRESET_WAV_FILL_FLAC",
    "PRESET_MPG_FILL_WMV",
    "get_preset",
    "preset_names",
]
