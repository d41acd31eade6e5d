"""Pytest configuration and fixtures for the Brand Genie API."""

import json
import sys
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Add the api directory to Python path
api_dir = Path(__file__).parent
sys.path.insert(0, str(api_dir))

from brandgenie.main import app
from brandgenie.core.config import settings
from brandgenie.models.schemas import BrandProfile, Palette, PaletteResponse, ThemeConfig
from brandgenie.tests.fakes import PNG_DATA_URI

SAMPLE_PALETTES = [
    {"palette_name": "Midnight Circuit", "description": "Serious and technical", "colors": ["#1E3A8A", "#3B82F6", "#93C5FD", "#0F172A", "#F8FAFC"]},
    {"palette_name": "Solar Pop", "description": "Vibrant and energetic", "colors": ["#F97316", "#FACC15", "#EF4444", "#1F2937", "#FFFBEB"]},
    {"palette_name": "Quiet Grid", "description": "Calm and minimalist", "colors": ["#0EA5E9", "#14B8A6", "#A7F3D0", "#334155", "#F1F5F9"]},
    {"palette_name": "Velvet Core", "description": "Luxurious and elegant", "colors": ["#4C1D95", "#C084FC", "#FDE68A", "#18181B", "#FAF5FF"]},
    {"palette_name": "Forest Logic", "description": "Grounded and natural", "colors": ["#166534", "#84CC16", "#FDE047", "#1C1917", "#F7FEE7"]},
    {"palette_name": "Mono Signal", "description": "Stark and confident", "colors": ["#111827", "#DC2626", "#9CA3AF", "#374151", "#FFFFFF"]},
]

SAMPLE_GUIDELINES = {
    "color_usage": "Use the primary color for calls to action and the accent for highlights.",
    "logo_usage": "Keep clear space around the logo and never stretch it.",
    "typography_usage": "Headlines use the headline font; body copy uses the body font.",
    "brand_voice": {
        "summary": "Confident and clear. Nova speaks to professionals without jargon.",
        "attributes": ["Confident", "Clear", "Modern", "Helpful"],
        "dos": ["Be concise", "Lead with benefits", "Use active voice"],
        "donts": ["Use jargon", "Overpromise", "Sound robotic"],
        "contextual_tone": [
            {"context": "Social Media Post", "tone": "Upbeat and short"},
            {"context": "Customer Support Email", "tone": "Calm and precise"},
        ],
    },
}


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Set up test environment variables and a zero retry backoff."""
    test_env = {
        "TESTING": "true",
        "OPENROUTER_API_KEY": "test-key",
        "SERVICE_BASE_URL": "http://localhost:8000",
        "LOG_LEVEL": "DEBUG",
    }
    for key, value in test_env.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setattr(settings, "generation_backoff_ms", 0)
    monkeypatch.setattr(settings, "generation_max_attempts", 3)
    monkeypatch.setattr(settings, "palette_count", 6)
    monkeypatch.setattr(settings, "min_palette_count", 4)
    yield


@pytest.fixture
def png_data_uri() -> str:
    return PNG_DATA_URI


@pytest.fixture
def sample_profile_data() -> dict:
    """The Nova intake answers."""
    return {
        "brand_name": "Nova",
        "industry": "Tech",
        "keywords": "Modern",
        "target_audience": "Pros",
        "core_message": "Simplicity",
    }


@pytest.fixture
def sample_profile(sample_profile_data) -> BrandProfile:
    return BrandProfile(**sample_profile_data)


@pytest.fixture
def sample_palettes() -> list:
    return [Palette(**p) for p in SAMPLE_PALETTES]


@pytest.fixture
def sample_palette_response(sample_palettes) -> PaletteResponse:
    return PaletteResponse(palettes=sample_palettes)


@pytest.fixture
def sample_theme(sample_palettes) -> ThemeConfig:
    return ThemeConfig.defaults_for(sample_palettes[2])


@pytest.fixture
def sample_guidelines() -> dict:
    return json.loads(json.dumps(SAMPLE_GUIDELINES))


@pytest.fixture
def sample_palettes_payload() -> dict:
    return {"palettes": json.loads(json.dumps(SAMPLE_PALETTES))}
