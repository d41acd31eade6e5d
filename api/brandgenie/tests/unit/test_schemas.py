"""Unit tests for the wizard's pydantic models."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from brandgenie.models.schemas import (
    BrandProfile,
    Palette,
    SessionView,
    ThemeConfig,
    WizardStep,
)


class TestBrandProfile:

    def test_optional_fields_default_to_blank(self, sample_profile_data):
        profile = BrandProfile(**sample_profile_data)
        assert profile.competitors == ""
        assert profile.avoid == ""

    def test_whitespace_is_stripped(self, sample_profile_data):
        profile = BrandProfile(**{**sample_profile_data, "brand_name": "  Nova  "})
        assert profile.brand_name == "Nova"

    @pytest.mark.parametrize("field,value", [
        ("brand_name", "N"),
        ("industry", "IT"),
        ("keywords", ""),
        ("target_audience", "  "),
        ("core_message", "no"),
    ])
    def test_short_answers_are_rejected(self, sample_profile_data, field, value):
        with pytest.raises(PydanticValidationError):
            BrandProfile(**{**sample_profile_data, field: value})

    def test_profile_is_immutable(self, sample_profile):
        with pytest.raises(PydanticValidationError):
            sample_profile.brand_name = "Other"


class TestPalette:

    def test_requires_exactly_five_colors(self):
        with pytest.raises(PydanticValidationError):
            Palette(palette_name="Short", colors=["#000000", "#111111", "#222222", "#333333"])

    @pytest.mark.parametrize("color", ["#FFF", "123456", "#GG0000", "#1234567"])
    def test_rejects_malformed_hex(self, color):
        with pytest.raises(PydanticValidationError):
            Palette(palette_name="Bad", colors=["#000000", "#111111", "#222222", "#333333", color])


class TestThemeConfig:

    def test_defaults_use_first_second_and_fifth_colors(self, sample_palettes):
        palette = sample_palettes[2]
        theme = ThemeConfig.defaults_for(palette)

        assert theme.primary_color == palette.colors[0]
        assert theme.accent_color == palette.colors[1]
        assert theme.background_color == palette.colors[4]
        assert theme.headline_font == "Inter"
        assert theme.body_font == "Inter"
        assert theme.logo_description is None

    def test_unknown_font_is_rejected(self):
        with pytest.raises(PydanticValidationError):
            ThemeConfig(
                primary_color="#000000",
                accent_color="#111111",
                background_color="#FFFFFF",
                headline_font="Comic Sans",
            )


def test_session_view_bounds_step():
    with pytest.raises(PydanticValidationError):
        SessionView(session_id="abc", state=WizardStep.INTAKE, step=5)


def test_wizard_steps_are_ordered():
    assert [s.value for s in WizardStep] == [
        "intake",
        "palette-selection",
        "asset-configuration",
        "results",
    ]
