from __future__ import annotations

import os
from dataclasses import dataclass


def getenv(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name, default)
    return v


@dataclass
class Settings:
    # Service
    service_name: str = getenv("SERVICE_NAME", "brand-genie-api") or "brand-genie-api"
    service_env: str = getenv("SERVICE_ENV", "dev") or "dev"
    log_level: str = getenv("LOG_LEVEL", "INFO") or "INFO"
    service_base_url: str = getenv("SERVICE_BASE_URL", "http://localhost:8000") or "http://localhost:8000"

    # Generative model gateway
    openrouter_api_key: str | None = getenv("OPENROUTER_API_KEY")
    openrouter_base_url: str = getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1") or "https://openrouter.ai/api/v1"
    text_model: str = getenv("TEXT_MODEL", "google/gemini-2.5-flash") or "google/gemini-2.5-flash"
    image_model: str = getenv("IMAGE_MODEL", "google/gemini-2.5-flash-image-preview") or "google/gemini-2.5-flash-image-preview"

    # Timeouts (seconds)
    openrouter_timeout: int = int(getenv("OPENROUTER_TIMEOUT", "30") or "30")
    openrouter_timeout_long: int = int(getenv("OPENROUTER_TIMEOUT_LONG", "120") or "120")  # image tasks
    min_timeout_seconds: int = int(getenv("MIN_TIMEOUT_SECONDS", "3") or "3")

    # Generation policy, applied uniformly to every flow
    generation_max_attempts: int = int(getenv("GENERATION_MAX_ATTEMPTS", "3") or "3")
    generation_backoff_ms: int = int(getenv("GENERATION_BACKOFF_MS", "1000") or "1000")
    palette_count: int = int(getenv("PALETTE_COUNT", "6") or "6")
    min_palette_count: int = int(getenv("MIN_PALETTE_COUNT", "4") or "4")

    # Wizard sessions
    session_ttl_seconds: int = int(getenv("SESSION_TTL_SECONDS", "3600") or "3600")
    max_sessions: int = int(getenv("MAX_SESSIONS", "1000") or "1000")

    # Security & policy
    cors_allow_origins: str | None = getenv("CORS_ALLOW_ORIGINS")

    @property
    def is_production(self) -> bool:
        return self.service_env in ["prod", "production"]


settings = Settings()
