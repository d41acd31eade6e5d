from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request, Response

from ..models.exceptions import ValidationError, WizardStateError
from ..models.schemas import (
    FONT_CHOICES,
    BrandProfile,
    SelectPaletteRequest,
    SessionView,
    ThemeConfigUpdate,
)
from ..services.data_uri import extension_for, parse_data_uri
from ..services.session_store import SessionStore
from ..services.wizard import WizardSession, asset_uris

router = APIRouter(
    prefix="/wizard",
    tags=["Wizard"],
    responses={
        404: {"description": "Unknown or expired wizard session"},
        409: {"description": "Operation not allowed in the current wizard state"},
        422: {"description": "Validation error - request doesn't meet schema requirements"},
        429: {"description": "Upstream rate limit exceeded"},
        502: {"description": "AI service failed to produce a usable result"},
    },
)


def get_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_session(session_id: str, store: SessionStore = Depends(get_store)) -> WizardSession:
    return store.get(session_id)


@router.get("/fonts", response_model=List[str])
async def list_fonts():
    return FONT_CHOICES


@router.post("/sessions", response_model=SessionView, status_code=201)
async def create_session(store: SessionStore = Depends(get_store)):
    return store.create().view()


@router.get("/sessions/{session_id}", response_model=SessionView)
async def get_session_view(session: WizardSession = Depends(get_session)):
    return session.view()


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str, store: SessionStore = Depends(get_store)):
    store.delete(session_id)
    return Response(status_code=204)


@router.post("/sessions/{session_id}/profile", response_model=SessionView)
async def submit_profile(profile: BrandProfile, session: WizardSession = Depends(get_session)):
    """Submit the brand questionnaire and generate palettes to choose from."""
    await session.submit_profile(profile)
    return session.view()


@router.post("/sessions/{session_id}/palette", response_model=SessionView)
async def select_palette(body: SelectPaletteRequest, session: WizardSession = Depends(get_session)):
    session.select_palette(body.index)
    return session.view()


@router.patch("/sessions/{session_id}/theme", response_model=SessionView)
async def configure_theme(changes: ThemeConfigUpdate, session: WizardSession = Depends(get_session)):
    session.configure(changes)
    return session.view()


@router.post("/sessions/{session_id}/preview", response_model=SessionView)
async def preview_website_theme(session: WizardSession = Depends(get_session)):
    """Render a disposable website theme preview; it is not part of the brand kit."""
    await session.preview_website_theme()
    return session.view()


@router.post("/sessions/{session_id}/assets", response_model=SessionView)
async def generate_assets(session: WizardSession = Depends(get_session)):
    """Generate the logo, then the mockups, website theme and guidelines."""
    await session.generate_assets()
    return session.view()


@router.get("/sessions/{session_id}/assets/{name}")
async def download_asset(name: str, session: WizardSession = Depends(get_session)):
    """Download one image of the finished kit as a file."""
    if session.brand_kit is None:
        raise WizardStateError("download assets", session.state.value, "No brand kit has been generated yet")

    assets = asset_uris(session.brand_kit)
    if name not in assets:
        raise ValidationError("name", f"must be one of: {', '.join(assets)}", name)

    mime, data = parse_data_uri(assets[name])
    filename = f"{name}.{extension_for(mime)}"
    return Response(
        content=data,
        media_type=mime,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/sessions/{session_id}/back", response_model=SessionView)
async def go_back(session: WizardSession = Depends(get_session)):
    session.go_back()
    return session.view()


@router.post("/sessions/{session_id}/reset", response_model=SessionView)
async def start_over(session: WizardSession = Depends(get_session)):
    session.start_over()
    return session.view()
