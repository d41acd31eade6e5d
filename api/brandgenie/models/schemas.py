"""Pydantic models for the brand kit wizard.

This module defines the brand inputs collected at intake, the palettes and
theme configuration chosen by the user, the request/response models of every
generation flow, and the assembled brand kit.
"""

import re
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..services.data_uri import is_data_uri

HEX_COLOR_RE = re.compile(r'^#[0-9A-Fa-f]{6}$')

PALETTE_SIZE = 5

FONT_CHOICES = [
    "Inter",
    "Roboto",
    "Open Sans",
    "Montserrat",
    "Poppins",
    "Lato",
    "Playfair Display",
    "Merriweather",
    "Lora",
    "Space Grotesk",
]

DEFAULT_FONT = "Inter"


def _check_hex(value: str) -> str:
    if not isinstance(value, str) or not HEX_COLOR_RE.match(value):
        raise ValueError(f'Invalid hex color format: {value}')
    return value


def _check_font(value: str) -> str:
    if value not in FONT_CHOICES:
        raise ValueError(f"Unsupported font '{value}', choose one of: {', '.join(FONT_CHOICES)}")
    return value


def _check_data_uri(value: str) -> str:
    if not is_data_uri(value):
        raise ValueError("Expected a base64 data URI of the form 'data:<mimetype>;base64,<encoded_data>'")
    return value


class WizardStep(str, Enum):
    """Wizard states in forward order."""
    INTAKE = "intake"
    PALETTE_SELECTION = "palette-selection"
    ASSET_CONFIGURATION = "asset-configuration"
    RESULTS = "results"


class BrandProfile(BaseModel):
    """Brand attributes collected at intake. Immutable once submitted."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    brand_name: str = Field(..., min_length=2, max_length=80, description="Name of the brand")
    industry: str = Field(..., min_length=3, max_length=200, description="Industry the brand operates in")
    keywords: str = Field(..., min_length=3, max_length=300, description="Style and personality keywords")
    target_audience: str = Field(..., min_length=3, max_length=300, description="Who the brand wants to reach")
    core_message: str = Field(..., min_length=3, max_length=500, description="Core message or values")
    competitors: str = Field("", max_length=300, description="Competitors to differentiate from")
    avoid: str = Field("", max_length=300, description="Words, colors or styles to avoid")


class BrandNamesRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    industry: str = Field(..., min_length=3, max_length=200)
    keywords: str = Field(..., min_length=3, max_length=300)
    target_audience: str = Field(..., min_length=3, max_length=300)
    core_message: str = Field(..., min_length=3, max_length=500)
    competitors: str = Field("", max_length=300)
    avoid: str = Field("", max_length=300)


class BrandNamesResponse(BaseModel):
    names: List[str] = Field(..., min_length=5, max_length=5)


class Palette(BaseModel):
    """A named set of exactly five hex colors."""

    model_config = ConfigDict(frozen=True)

    palette_name: str = Field(..., min_length=1)
    description: str = ""
    colors: List[str] = Field(..., min_length=PALETTE_SIZE, max_length=PALETTE_SIZE)

    @field_validator('colors')
    @classmethod
    def validate_hex_colors(cls, v):
        for color in v:
            _check_hex(color)
        return v


class PaletteResponse(BaseModel):
    palettes: List[Palette] = Field(..., min_length=1)


class ThemeConfig(BaseModel):
    """Color roles and fonts chosen for the final assets."""

    primary_color: str
    accent_color: str
    background_color: str
    headline_font: str = DEFAULT_FONT
    body_font: str = DEFAULT_FONT
    logo_description: Optional[str] = Field(None, max_length=500)

    @field_validator('primary_color', 'accent_color', 'background_color')
    @classmethod
    def validate_color(cls, v):
        return _check_hex(v)

    @field_validator('headline_font', 'body_font')
    @classmethod
    def validate_font(cls, v):
        return _check_font(v)

    @classmethod
    def defaults_for(cls, palette: Palette) -> "ThemeConfig":
        """First, second and fifth colors become primary, accent and background."""
        return cls(
            primary_color=palette.colors[0],
            accent_color=palette.colors[1],
            background_color=palette.colors[4],
        )


class ThemeConfigUpdate(BaseModel):
    """Partial update of a ThemeConfig; omitted fields are left unchanged."""

    primary_color: Optional[str] = None
    accent_color: Optional[str] = None
    background_color: Optional[str] = None
    headline_font: Optional[str] = None
    body_font: Optional[str] = None
    logo_description: Optional[str] = Field(None, max_length=500)


class ThemeStyle(BaseModel):
    """View configuration consumed by the rendering layer."""

    css_variables: Dict[str, str]
    headline_font: str
    body_font: str


class SelectPaletteRequest(BaseModel):
    index: int = Field(..., ge=0, description="Zero-based index into the generated palettes")


# Flow requests/responses

class LogoRequest(BaseModel):
    brand_name: str = Field(..., min_length=1)
    industry: str = Field(..., min_length=1)
    color_palette: List[str] = Field(..., min_length=1, max_length=12)
    logo_description: Optional[str] = Field(None, max_length=500)

    @field_validator('color_palette')
    @classmethod
    def validate_palette(cls, v):
        for color in v:
            _check_hex(color)
        return v


class LogoResponse(BaseModel):
    logo_data_uri: str

    @field_validator('logo_data_uri')
    @classmethod
    def validate_uri(cls, v):
        return _check_data_uri(v)


class SocialMockupRequest(BaseModel):
    brand_name: str = Field(..., min_length=1)
    logo_data_uri: str
    primary_color: str
    accent_color: str

    @field_validator('logo_data_uri')
    @classmethod
    def validate_uri(cls, v):
        return _check_data_uri(v)

    @field_validator('primary_color', 'accent_color')
    @classmethod
    def validate_color(cls, v):
        return _check_hex(v)


class BusinessCardMockupRequest(BaseModel):
    brand_name: str = Field(..., min_length=1)
    logo_data_uri: str
    primary_color: str
    accent_color: str
    background_color: str
    headline_font: str = DEFAULT_FONT
    body_font: str = DEFAULT_FONT

    @field_validator('logo_data_uri')
    @classmethod
    def validate_uri(cls, v):
        return _check_data_uri(v)

    @field_validator('primary_color', 'accent_color', 'background_color')
    @classmethod
    def validate_color(cls, v):
        return _check_hex(v)


class MockupResponse(BaseModel):
    mockup_data_uri: str

    @field_validator('mockup_data_uri')
    @classmethod
    def validate_uri(cls, v):
        return _check_data_uri(v)


class WebsiteThemeRequest(BaseModel):
    brand_name: str = Field(..., min_length=1)
    primary_color: str
    background_color: str
    accent_color: str
    headline_font: str = DEFAULT_FONT
    body_font: str = DEFAULT_FONT

    @field_validator('primary_color', 'accent_color', 'background_color')
    @classmethod
    def validate_color(cls, v):
        return _check_hex(v)


class WebsiteThemeResponse(BaseModel):
    website_theme_preview: str

    @field_validator('website_theme_preview')
    @classmethod
    def validate_uri(cls, v):
        return _check_data_uri(v)


class GuidelinesRequest(BaseModel):
    profile: BrandProfile
    palette: Palette
    headline_font: str = DEFAULT_FONT
    body_font: str = DEFAULT_FONT


class ContextualTone(BaseModel):
    context: str
    tone: str


class BrandVoice(BaseModel):
    summary: str
    attributes: List[str] = Field(..., min_length=4, max_length=4)
    dos: List[str] = Field(..., min_length=3)
    donts: List[str] = Field(..., min_length=3)
    contextual_tone: List[ContextualTone] = Field(..., min_length=2)


class BrandGuidelines(BaseModel):
    color_usage: str
    logo_usage: str
    typography_usage: str
    brand_voice: BrandVoice


# Wizard aggregates

class BrandKit(BaseModel):
    """Terminal artifact of a wizard session. Built only from a fully successful batch."""

    model_config = ConfigDict(frozen=True)

    brand_name: str
    palette: Palette
    theme: ThemeConfig
    logo_data_uri: str
    social_mockup_data_uri: str
    business_card_mockup_data_uri: str
    website_theme_data_uri: str
    guidelines: BrandGuidelines

    @field_validator('logo_data_uri', 'social_mockup_data_uri', 'business_card_mockup_data_uri', 'website_theme_data_uri')
    @classmethod
    def validate_uri(cls, v):
        return _check_data_uri(v)


class StageError(BaseModel):
    stage: WizardStep
    message: str


class SessionView(BaseModel):
    """Snapshot of a wizard session returned by every wizard endpoint."""

    session_id: str
    state: WizardStep
    step: int = Field(..., ge=1, le=4)
    total_steps: int = 4
    busy: bool = False
    profile: Optional[BrandProfile] = None
    palettes: Optional[List[Palette]] = None
    selected_palette_index: Optional[int] = None
    theme: Optional[ThemeConfig] = None
    theme_style: Optional[ThemeStyle] = None
    theme_preview: Optional[str] = None
    brand_kit: Optional[BrandKit] = None
    error: Optional[StageError] = None
