"""Tests for edufy.ui.colors – palette and color helpers."""

from __future__ import annotations

import re

import pytest

from edufy.ui.colors import HomeColors, blend_hex, readable_text_color

_HEX = re.compile(r"^#[0-9a-fA-F]{6}$")


# ===========================================================================
# HomeColors
# ===========================================================================

class TestHomeColors:
    @pytest.mark.parametrize(
        "name",
        [
            "BG_TOP",
            "BG_MIDDLE",
            "BG_BOTTOM",
            "PRIMARY",
            "PRIMARY_LIGHT",
            "PRIMARY_DARK",
            "CORAL",
            "AMBER",
            "MINT",
            "LAVENDER",
            "CORRECT",
            "INCORRECT",
            "CELEBRATE",
            "TEXT_PRIMARY",
            "TEXT_SECONDARY",
            "TEXT_MUTED",
            "PROGRESS_TRACK",
            "PROGRESS_FILL",
        ],
    )
    def test_hex_colors(self, name: str):
        assert _HEX.match(getattr(HomeColors, name))

    @pytest.mark.parametrize("name", ["CARD_BG", "CARD_BG_HOVER", "CARD_BORDER"])
    def test_rgba_colors(self, name: str):
        assert getattr(HomeColors, name).startswith("rgba(")

    def test_feedback_colors_differ(self):
        assert HomeColors.CORRECT != HomeColors.INCORRECT


# ===========================================================================
# blend_hex
# ===========================================================================

class TestBlendHex:
    def test_t_zero(self):
        assert blend_hex("#000000", "#FFFFFF", 0.0) == "#000000"

    def test_t_one(self):
        assert blend_hex("#000000", "#FFFFFF", 1.0) == "#FFFFFF"

    def test_midpoint(self):
        assert blend_hex("#000000", "#FFFFFF", 0.5) == "#7F7F7F"

    def test_channels_independent(self):
        assert blend_hex("#FF0000", "#0000FF", 0.5) == "#7F007F"

    def test_clamped(self):
        assert blend_hex("#000000", "#FFFFFF", 2.0) == "#FFFFFF"
        assert blend_hex("#000000", "#FFFFFF", -1.0) == "#000000"

    def test_whitespace_stripped(self):
        assert blend_hex("  #000000 ", "#FFFFFF", 0.0) == "#000000"

    @pytest.mark.parametrize("bad", ["red", "#FFF", "rgba(0,0,0,1)"])
    def test_invalid_returns_first(self, bad: str):
        assert blend_hex(bad, "#FFFFFF", 0.5) == bad

    def test_non_hex_digits(self):
        assert blend_hex("#GGGGGG", "#FFFFFF", 0.5) == "#GGGGGG"

    def test_none(self):
        assert blend_hex(None, "#FFFFFF", 0.5) is None  # type: ignore[arg-type]


# ===========================================================================
# readable_text_color
# ===========================================================================

class TestReadableTextColor:
    @pytest.mark.parametrize("bg", ["#FFFFFF", "#FFFF00", "#E0F7FA", "#FFB74D"])
    def test_light_backgrounds_get_dark_text(self, bg: str):
        assert readable_text_color(bg) == HomeColors.TEXT_PRIMARY

    @pytest.mark.parametrize("bg", ["#000000", "#0000FF", "#FF0000", "#00838F"])
    def test_dark_backgrounds_get_white_text(self, bg: str):
        assert readable_text_color(bg) == "#FFFFFF"

    @pytest.mark.parametrize("bg", ["", "red", None])
    def test_unparseable_falls_back(self, bg):
        assert readable_text_color(bg) == HomeColors.TEXT_PRIMARY
