"""Built-in media dedup presets.

Each preset is an ordered table of ExtensionRules. A rule says: when a
non-empty file with one of the superior extensions exists, same-stem files
with the inferior extensions are redundant.

- oraja: Prefer formats beatoraja plays best (mp4 video, flac/wav audio).
- wav_fill_flac: Keep wav, drop flac copies.
- mpg_fill_wmv: Keep mpg, drop wmv copies.
"""

from typing import List, Tuple

from bmspack.models import ExtensionRule, RulePreset

PRESET_ORAJA = RulePreset(
    name="oraja",
    rules=(
        ExtensionRule(superior=("mp4",), inferior=("avi", "wmv", "mpg", "mpeg")),
        ExtensionRule(superior=("avi",), inferior=("wmv", "mpg", "mpeg")),
        ExtensionRule(superior=("flac", "wav"), inferior=("ogg",)),
        ExtensionRule(superior=("flac",), inferior=("wav",)),
        ExtensionRule(superior=("mpg",), inferior=("wmv",)),
    ),
)

PRESET_WAV_FILL_FLAC = RulePreset(
    name="wav_fill_flac",
    rules=(ExtensionRule(superior=("wav",), inferior=("flac",)),),
)

PRESET_MPG_FILL_WMV = RulePreset(
    name="mpg_fill_wmv",
    rules=(ExtensionRule(superior=("mpg",), inferior=("wmv",)),),
)

PRESETS: Tuple[RulePreset, ...] = (
    PRESET_ORAJA,
    PRESET_WAV_FILL_FLAC,
    PRESET_MPG_FILL_WMV,
)


def preset_names() -> List[str]:
    return [preset.name for preset in PRESETS]


def get_preset(name: str) -> RulePreset:
    """Look up a built-in preset by name (case-insensitive).

    Raises:
        ValueError: If no preset has that name.
    """
    for preset in PRESETS:
        if preset.name == name.lower():
            return preset
    raise ValueError(
        f"Unknown preset '{name}'. Available presets: {', '.join(preset_names())}"
    )
