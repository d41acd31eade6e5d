"""Unit tests for exception to HTTP conversion."""

import pytest

from brandgenie.models.exceptions import (
    EXCEPTION_HANDLERS,
    GenerationError,
    OpenRouterException,
    RetryExhausted,
    SessionNotFoundException,
    StageCancelledError,
    ValidationError,
    WizardBusyError,
    WizardStateError,
    generation_to_http_exception,
)


def _status(exc) -> int:
    for exc_type, handler in EXCEPTION_HANDLERS.items():
        if isinstance(exc, exc_type):
            return handler(exc).status_code
    raise AssertionError(f"no handler for {type(exc).__name__}")


@pytest.mark.parametrize("exc,status", [
    (GenerationError("bad output", flow="logo"), 502),
    (OpenRouterException("upstream 500", status_code=500), 502),
    (OpenRouterException("slow down", status_code=429), 429),
    (ValidationError("index", "out of range", 9), 422),
    (SessionNotFoundException("abc"), 404),
    (WizardStateError("generate assets", "intake"), 409),
    (WizardBusyError("generate assets", "asset-configuration"), 409),
    (StageCancelledError("generate assets", "palette-selection"), 409),
])
def test_status_codes(exc, status):
    assert _status(exc) == status


def test_exhausted_rate_limit_stays_429():
    exc = RetryExhausted(
        "Failed to generate logo after 3 attempts. Last error: slow down",
        last_exception=OpenRouterException("slow down", status_code=429),
        flow="logo",
    )
    assert generation_to_http_exception(exc).status_code == 429


def test_error_body_shape():
    detail = generation_to_http_exception(GenerationError("No image was generated", flow="logo")).detail
    assert detail == {"error": "GenerationError", "message": "No image was generated", "flow": "logo"}
