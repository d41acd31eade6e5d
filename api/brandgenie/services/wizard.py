"""Brand kit wizard state machine.

A session walks through four stages::

    intake -> palette-selection -> asset-configuration -> results

Every generation call a session starts runs as an asyncio task registered on
the session. Leaving a stage (``go_back``, ``start_over`` or deleting the
session) cancels those tasks and bumps the stage epoch, so a result that
resolves after its stage was left is never applied.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Awaitable, Callable, List, Optional, Set, Tuple, TypeVar

from ..core.structured_logging import LoggerFactory, log_business_event, session_id_var
from ..models.exceptions import (
    StageCancelledError,
    ValidationError,
    WizardBusyError,
    WizardStateError,
)
from ..models.schemas import (
    FONT_CHOICES,
    BrandKit,
    BrandProfile,
    Palette,
    SessionView,
    StageError,
    ThemeConfig,
    ThemeConfigUpdate,
    WizardStep,
)
from . import flows, orchestrator
from .theme_style import build_theme_style

logger = LoggerFactory.get_logger(__name__)

T = TypeVar("T")

STEP_ORDER: List[WizardStep] = list(WizardStep)

STAGE_LABELS = {
    "submit profile": "palette generation",
    "preview website theme": "website theme preview",
    "generate assets": "asset generation",
}

COLOR_FIELDS = ("primary_color", "accent_color", "background_color")
FONT_FIELDS = ("headline_font", "body_font")


class WizardSession:
    """One user's progress through the wizard."""

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id or uuid.uuid4().hex
        self.state = WizardStep.INTAKE
        self.profile: Optional[BrandProfile] = None
        self.palettes: Optional[List[Palette]] = None
        self.selected_palette_index: Optional[int] = None
        self.theme: Optional[ThemeConfig] = None
        self.theme_preview: Optional[str] = None
        self.brand_kit: Optional[BrandKit] = None
        self.error: Optional[StageError] = None

        self._epoch = 0
        self._theme_version = 0
        self._advancing: Optional[str] = None
        self._tasks: Set[asyncio.Task] = set()
        self._preview_tasks: Set[asyncio.Task] = set()

    @property
    def busy(self) -> bool:
        return self._advancing is not None

    @property
    def selected_palette(self) -> Optional[Palette]:
        if self.palettes is None or self.selected_palette_index is None:
            return None
        return self.palettes[self.selected_palette_index]

    # Guards

    def _require_state(self, operation: str, *allowed: WizardStep) -> None:
        if self.state not in allowed:
            raise WizardStateError(operation, self.state.value)

    def _require_idle(self, operation: str) -> None:
        if self.busy:
            raise WizardBusyError(operation, self.state.value)

    # Task registry

    async def _run(
        self,
        operation: str,
        factory: Callable[[], Awaitable[T]],
        advancing: bool = True,
    ) -> T:
        """Run one generation call as a registered task and apply staleness checks."""
        token: Tuple[int, int] = (self._epoch, self._theme_version)
        stage = self.state
        is_stale: Callable[[], bool]
        if advancing:
            is_stale = lambda: self._epoch != token[0]
        else:
            is_stale = lambda: (self._epoch, self._theme_version) != token or self.state != stage

        task = asyncio.ensure_future(factory())
        self._tasks.add(task)
        if advancing:
            self._advancing = operation
            self.error = None
        else:
            self._preview_tasks.add(task)

        try:
            result = await task
        except asyncio.CancelledError:
            if is_stale():
                raise StageCancelledError(operation, self.state.value)
            raise
        except Exception as e:
            if is_stale():
                raise StageCancelledError(operation, self.state.value) from e
            message = getattr(e, "message", None) or str(e) or type(e).__name__
            self.error = StageError(
                stage=stage,
                message=f"Generation failed during {STAGE_LABELS.get(operation, operation)}: {message}",
            )
            logger.error(
                f"Wizard {operation} failed",
                session_id=self.session_id,
                state=stage.value,
                error=message,
            )
            raise
        finally:
            self._tasks.discard(task)
            self._preview_tasks.discard(task)
            if advancing and self._epoch == token[0]:
                self._advancing = None

        if is_stale():
            raise StageCancelledError(operation, self.state.value)
        return result

    def cancel_all(self) -> int:
        """Cancel every in-flight generation and invalidate results still on their way."""
        self._epoch += 1
        self._advancing = None
        pending = [t for t in self._tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            logger.info("Cancelled in-flight generation", session_id=self.session_id, count=len(pending))
        return len(pending)

    def _invalidate_preview(self) -> None:
        self._theme_version += 1
        self.theme_preview = None
        for task in list(self._preview_tasks):
            if not task.done():
                task.cancel()

    # Operations

    async def submit_profile(self, profile: BrandProfile) -> List[Palette]:
        operation = "submit profile"
        self._require_idle(operation)
        self._require_state(operation, WizardStep.INTAKE)
        session_id_var.set(self.session_id)

        self.profile = profile
        result = await self._run(operation, lambda: flows.generate_color_palettes(profile))

        self.palettes = list(result.palettes)
        self.selected_palette_index = None
        self.theme = None
        self.state = WizardStep.PALETTE_SELECTION
        log_business_event(
            logger, "profile_submitted", session_id=self.session_id, palette_count=len(self.palettes)
        )
        return self.palettes

    def select_palette(self, index: int) -> ThemeConfig:
        """Select a palette and reset the theme to that palette's defaults."""
        operation = "select palette"
        self._require_idle(operation)
        self._require_state(operation, WizardStep.PALETTE_SELECTION, WizardStep.ASSET_CONFIGURATION)
        if not self.palettes or not 0 <= index < len(self.palettes):
            count = len(self.palettes or [])
            raise ValidationError("index", f"must be between 0 and {count - 1}", index)

        self.selected_palette_index = index
        self.theme = ThemeConfig.defaults_for(self.palettes[index])
        self._invalidate_preview()
        self.error = None
        self.state = WizardStep.ASSET_CONFIGURATION
        return self.theme

    def configure(self, changes: ThemeConfigUpdate) -> ThemeConfig:
        """Apply a partial theme update; colors must come from the selected palette."""
        operation = "configure theme"
        self._require_idle(operation)
        self._require_state(operation, WizardStep.ASSET_CONFIGURATION)

        update = changes.model_dump(exclude_unset=True)
        palette_colors = {c.upper() for c in self.selected_palette.colors}
        for field in COLOR_FIELDS:
            value = update.get(field)
            if field in update and (value is None or value.upper() not in palette_colors):
                raise ValidationError(field, "must be one of the selected palette's colors", value)
        for field in FONT_FIELDS:
            value = update.get(field)
            if field in update and value not in FONT_CHOICES:
                raise ValidationError(field, f"must be one of: {', '.join(FONT_CHOICES)}", value)
        if "logo_description" in update and update["logo_description"] is not None:
            update["logo_description"] = update["logo_description"].strip() or None

        self.theme = self.theme.model_copy(update=update)
        self._invalidate_preview()
        return self.theme

    async def preview_website_theme(self) -> str:
        """Render a throwaway website theme image for the current configuration."""
        operation = "preview website theme"
        self._require_state(operation, WizardStep.ASSET_CONFIGURATION)
        session_id_var.set(self.session_id)

        request = orchestrator.website_theme_request(self.profile, self.theme)
        result = await self._run(operation, lambda: flows.preview_website_theme(request), advancing=False)
        self.theme_preview = result.website_theme_preview
        return self.theme_preview

    async def generate_assets(self) -> BrandKit:
        operation = "generate assets"
        self._require_idle(operation)
        self._require_state(operation, WizardStep.ASSET_CONFIGURATION)
        session_id_var.set(self.session_id)

        profile, palette, theme = self.profile, self.selected_palette, self.theme
        kit = await self._run(operation, lambda: orchestrator.generate_brand_kit(profile, palette, theme))

        self.brand_kit = kit
        self.state = WizardStep.RESULTS
        return kit

    def go_back(self) -> WizardStep:
        operation = "go back"
        if self.state == WizardStep.INTAKE:
            raise WizardStateError(operation, self.state.value, "Already at the first step")

        self.cancel_all()
        previous = STEP_ORDER[STEP_ORDER.index(self.state) - 1]
        if previous == WizardStep.INTAKE:
            self.palettes = None
            self.selected_palette_index = None
            self.theme = None
        elif previous == WizardStep.PALETTE_SELECTION:
            self._invalidate_preview()
        elif previous == WizardStep.ASSET_CONFIGURATION:
            self.brand_kit = None
        self.error = None
        self.state = previous
        logger.info("Wizard moved back", session_id=self.session_id, state=previous.value)
        return previous

    def start_over(self) -> None:
        self.cancel_all()
        self.state = WizardStep.INTAKE
        self.profile = None
        self.palettes = None
        self.selected_palette_index = None
        self.theme = None
        self.theme_preview = None
        self.brand_kit = None
        self.error = None
        self._theme_version += 1
        logger.info("Wizard restarted", session_id=self.session_id)

    def view(self) -> SessionView:
        return SessionView(
            session_id=self.session_id,
            state=self.state,
            step=STEP_ORDER.index(self.state) + 1,
            total_steps=len(STEP_ORDER),
            busy=self.busy,
            profile=self.profile,
            palettes=self.palettes,
            selected_palette_index=self.selected_palette_index,
            theme=self.theme,
            theme_style=build_theme_style(self.theme) if self.theme else None,
            theme_preview=self.theme_preview,
            brand_kit=self.brand_kit,
            error=self.error,
        )


def asset_uris(kit: BrandKit) -> dict:
    """Downloadable image assets of a kit keyed by their public name."""
    return {
        "logo": kit.logo_data_uri,
        "social-media-mockup": kit.social_mockup_data_uri,
        "business-card-mockup": kit.business_card_mockup_data_uri,
        "website-theme-preview": kit.website_theme_data_uri,
    }
