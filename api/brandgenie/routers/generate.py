"""Stateless endpoints exposing each generation flow on its own."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query

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
from ..services import flows

router = APIRouter(
    prefix="/generate",
    tags=["Generation"],
    responses={
        422: {"description": "Validation error - request doesn't meet schema requirements"},
        429: {"description": "Upstream rate limit exceeded"},
        502: {"description": "AI service failed to produce a usable result"},
    },
)


@router.post("/palettes", response_model=PaletteResponse)
async def generate_palettes(
    profile: BrandProfile,
    count: Optional[int] = Query(None, ge=1, le=12, description="Number of palettes to request"),
):
    return await flows.generate_color_palettes(profile, count)


@router.post("/brand-names", response_model=BrandNamesResponse)
async def generate_brand_names(request: BrandNamesRequest):
    return await flows.generate_brand_names(request)


@router.post("/logo", response_model=LogoResponse)
async def generate_logo(request: LogoRequest):
    return await flows.visualize_logo(request)


@router.post("/social-mockup", response_model=MockupResponse)
async def generate_social_mockup(request: SocialMockupRequest):
    return await flows.create_social_media_mockup(request)


@router.post("/business-card", response_model=MockupResponse)
async def generate_business_card(request: BusinessCardMockupRequest):
    return await flows.create_business_card_mockup(request)


@router.post("/website-theme", response_model=WebsiteThemeResponse)
async def generate_website_theme(request: WebsiteThemeRequest):
    return await flows.preview_website_theme(request)


@router.post("/guidelines", response_model=BrandGuidelines)
async def generate_guidelines(request: GuidelinesRequest):
    return await flows.generate_brand_guidelines(request)
