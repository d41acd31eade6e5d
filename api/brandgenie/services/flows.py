"""Generation flows: one function per prompt template."""

from __future__ import annotations

import re
from typing import Optional

from ..core.config import settings
from ..core.structured_logging import LoggerFactory, log_business_event
from ..models.exceptions import GenerationError
from ..models.schemas import (
    BrandGuidelines,
    BrandNamesRequest,
    BrandNamesResponse,
    BrandProfile,
    BusinessCardMockupRequest,
    GuidelinesRequest,
    LogoRequest,
    LogoResponse,
    MockupResponse,
    PaletteResponse,
    SocialMockupRequest,
    WebsiteThemeRequest,
    WebsiteThemeResponse,
)
from . import prompts
from .generation import run_image_flow, run_text_flow

logger = LoggerFactory.get_logger(__name__)


def _prompt_fields(model) -> dict:
    """Model fields for prompt templates; blank optional answers read as "none"."""
    return {k: (v if not isinstance(v, str) or v.strip() else "none") for k, v in model.model_dump().items()}


async def generate_color_palettes(profile: BrandProfile, count: Optional[int] = None) -> PaletteResponse:
    """Ask for ``count`` palettes and accept the reply if at least the configured minimum came back."""
    count = count or settings.palette_count
    minimum = min(settings.min_palette_count, count)

    def _check(result: PaletteResponse) -> PaletteResponse:
        if len(result.palettes) < minimum:
            raise GenerationError(
                f"AI failed to generate enough color palettes (got {len(result.palettes)}, need {minimum})",
                flow="palettes",
            )
        return PaletteResponse(palettes=result.palettes[:count])

    messages = [
        {"role": "system", "content": prompts.PALETTE_SYSTEM},
        {"role": "user", "content": prompts.PALETTE_USER.format(count=count, **_prompt_fields(profile))},
    ]
    result = await run_text_flow(
        "palettes",
        messages,
        "palettes.json",
        PaletteResponse,
        check=_check,
        operation_name="generate color palettes",
    )
    log_business_event(logger, "palettes_generated", brand_name=profile.brand_name, palette_count=len(result.palettes))
    return result


async def generate_brand_names(request: BrandNamesRequest) -> BrandNamesResponse:
    messages = [
        {"role": "system", "content": prompts.BRAND_NAMES_SYSTEM},
        {"role": "user", "content": prompts.BRAND_NAMES_USER.format(**_prompt_fields(request))},
    ]
    return await run_text_flow(
        "brand_names",
        messages,
        "brand_names.json",
        BrandNamesResponse,
        operation_name="generate brand names",
        temperature=0.9,
    )


async def visualize_logo(request: LogoRequest) -> LogoResponse:
    description_clause = ""
    if request.logo_description and request.logo_description.strip():
        description_clause = prompts.LOGO_DESCRIPTION_CLAUSE.format(logo_description=request.logo_description.strip())
    prompt = prompts.LOGO_PROMPT.format(
        brand_name=request.brand_name,
        industry=request.industry,
        colors=", ".join(request.color_palette),
        description_clause=description_clause,
    )
    result = await run_image_flow(
        "logo",
        prompt,
        lambda uri: LogoResponse(logo_data_uri=uri),
        operation_name="generate logo",
    )
    log_business_event(logger, "logo_generated", brand_name=request.brand_name)
    return result


async def create_social_media_mockup(request: SocialMockupRequest) -> MockupResponse:
    prompt = prompts.SOCIAL_MOCKUP_PROMPT.format(
        brand_name=request.brand_name,
        primary_color=request.primary_color,
        accent_color=request.accent_color,
    )
    return await run_image_flow(
        "social_mockup",
        prompt,
        lambda uri: MockupResponse(mockup_data_uri=uri),
        reference_images=[request.logo_data_uri],
        operation_name="generate social media mockup",
    )


def _domain_for(brand_name: str) -> str:
    return re.sub(r"\s+", "", brand_name.lower())


async def create_business_card_mockup(request: BusinessCardMockupRequest) -> MockupResponse:
    prompt = prompts.BUSINESS_CARD_PROMPT.format(
        brand_name=request.brand_name,
        domain=_domain_for(request.brand_name),
        primary_color=request.primary_color,
        accent_color=request.accent_color,
        background_color=request.background_color,
        headline_font=request.headline_font,
        body_font=request.body_font,
    )
    return await run_image_flow(
        "business_card_mockup",
        prompt,
        lambda uri: MockupResponse(mockup_data_uri=uri),
        reference_images=[request.logo_data_uri],
        operation_name="generate business card mockup",
    )


async def preview_website_theme(request: WebsiteThemeRequest) -> WebsiteThemeResponse:
    prompt = prompts.WEBSITE_THEME_PROMPT.format(**request.model_dump())
    return await run_image_flow(
        "website_theme",
        prompt,
        lambda uri: WebsiteThemeResponse(website_theme_preview=uri),
        operation_name="generate website theme preview",
    )


async def generate_brand_guidelines(request: GuidelinesRequest) -> BrandGuidelines:
    profile = request.profile
    palette = request.palette
    messages = [
        {"role": "system", "content": prompts.GUIDELINES_SYSTEM},
        {
            "role": "user",
            "content": prompts.GUIDELINES_USER.format(
                **_prompt_fields(profile),
                palette_name=palette.palette_name,
                palette_description=palette.description,
                colors=", ".join(palette.colors),
                headline_font=request.headline_font,
                body_font=request.body_font,
            ),
        },
    ]
    return await run_text_flow(
        "guidelines",
        messages,
        "guidelines.json",
        BrandGuidelines,
        operation_name="generate brand guidelines",
    )
