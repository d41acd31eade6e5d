"""Asset stage orchestration.

The logo is generated first because both mockups are drawn around it. Once it
resolves, the mockups, the website theme image and the written guidelines run
concurrently and are joined all-or-nothing: the first failure cancels the
rest of the batch and no brand kit is built.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Dict

from ..core.structured_logging import LoggerFactory, log_business_event
from ..models.schemas import (
    BrandKit,
    BrandProfile,
    BusinessCardMockupRequest,
    GuidelinesRequest,
    LogoRequest,
    Palette,
    SocialMockupRequest,
    ThemeConfig,
    WebsiteThemeRequest,
)
from . import flows

logger = LoggerFactory.get_logger(__name__)


async def join_all(calls: Dict[str, Awaitable[Any]]) -> Dict[str, Any]:
    """Run named awaitables concurrently; fail fast and cancel the rest on the first error."""
    tasks = {name: asyncio.ensure_future(call) for name, call in calls.items()}
    try:
        done, pending = await asyncio.wait(tasks.values(), return_when=asyncio.FIRST_EXCEPTION)
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()
        return {name: task.result() for name, task in tasks.items()}
    finally:
        leftovers = [t for t in tasks.values() if not t.done()]
        for task in leftovers:
            task.cancel()
        if leftovers:
            await asyncio.gather(*leftovers, return_exceptions=True)


def logo_request(profile: BrandProfile, palette: Palette, theme: ThemeConfig) -> LogoRequest:
    return LogoRequest(
        brand_name=profile.brand_name,
        industry=profile.industry,
        color_palette=list(palette.colors),
        logo_description=theme.logo_description,
    )


def website_theme_request(profile: BrandProfile, theme: ThemeConfig) -> WebsiteThemeRequest:
    return WebsiteThemeRequest(
        brand_name=profile.brand_name,
        primary_color=theme.primary_color,
        background_color=theme.background_color,
        accent_color=theme.accent_color,
        headline_font=theme.headline_font,
        body_font=theme.body_font,
    )


async def generate_brand_kit(profile: BrandProfile, palette: Palette, theme: ThemeConfig) -> BrandKit:
    logger.info("Generating brand kit", brand_name=profile.brand_name, palette_name=palette.palette_name)

    logo = await flows.visualize_logo(logo_request(profile, palette, theme))

    results = await join_all({
        "social": flows.create_social_media_mockup(SocialMockupRequest(
            brand_name=profile.brand_name,
            logo_data_uri=logo.logo_data_uri,
            primary_color=theme.primary_color,
            accent_color=theme.accent_color,
        )),
        "business_card": flows.create_business_card_mockup(BusinessCardMockupRequest(
            brand_name=profile.brand_name,
            logo_data_uri=logo.logo_data_uri,
            primary_color=theme.primary_color,
            accent_color=theme.accent_color,
            background_color=theme.background_color,
            headline_font=theme.headline_font,
            body_font=theme.body_font,
        )),
        "website_theme": flows.preview_website_theme(website_theme_request(profile, theme)),
        "guidelines": flows.generate_brand_guidelines(GuidelinesRequest(
            profile=profile,
            palette=palette,
            headline_font=theme.headline_font,
            body_font=theme.body_font,
        )),
    })

    kit = BrandKit(
        brand_name=profile.brand_name,
        palette=palette,
        theme=theme,
        logo_data_uri=logo.logo_data_uri,
        social_mockup_data_uri=results["social"].mockup_data_uri,
        business_card_mockup_data_uri=results["business_card"].mockup_data_uri,
        website_theme_data_uri=results["website_theme"].website_theme_preview,
        guidelines=results["guidelines"],
    )
    log_business_event(logger, "brand_kit_generated", brand_name=profile.brand_name)
    return kit
