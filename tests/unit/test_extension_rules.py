"""Unit tests for the built-in media dedup presets."""

import pytest

from bmspack.media import PRESET_ORAJA, PRESETS, get_preset, preset_names


@pytest.mark.unit
class TestPresets:

    def test_preset_order(self):
        assert preset_names() == ["oraja", "wav_fill_flac", "mpg_fill_wmv"]

    def test_default_preset_is_oraja(self):
        assert PRESETS[0] is PRESET_ORAJA

    def test_oraja_rule_order(self):
        assert [rule.superior for rule in PRESET_ORAJA.rules] == [
            ("mp4",), ("avi",), ("flac", "wav"), ("flac",), ("mpg",),
        ]

    def test_get_preset_case_insensitive(self):
        assert get_preset("ORAJA") is PRESET_ORAJA

    def test_get_unknown_preset(self):
        with pytest.raises(ValueError, match="Available presets: oraja"):
            get_preset("nope")
