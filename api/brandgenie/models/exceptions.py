"""Custom exception classes for the Brand Genie API.

Errors fall into three groups: validation errors raised before anything is
sent to the model, generation errors raised when a remote call fails or
returns an unusable payload, and wizard errors raised when an operation does
not fit the current state of a session.
"""

from typing import Dict, Any, Optional, List
from fastapi import HTTPException


class BrandGenieException(Exception):
    """Base exception for all Brand Genie API errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BrandGenieException):
    """Raised when user input fails validation."""

    def __init__(self, field: str, message: str, value: Any = None):
        self.field = field
        self.value = value
        validation_message = f"Validation error for field '{field}': {message}"
        details = {"field": field}
        if value is not None:
            details["value"] = value
        super().__init__(validation_message, details)


class GuardrailsValidationException(BrandGenieException):
    """Raised when a model payload does not satisfy its output contract."""

    def __init__(self, contract_name: str, errors: List[str]):
        self.contract_name = contract_name
        self.validation_errors = errors
        message = f"Guardrails validation failed for {contract_name}: {'; '.join(errors[:3])}"
        details = {"contract": contract_name, "validation_errors": errors}
        super().__init__(message, details)


class GenerationError(BrandGenieException):
    """Raised when a generation call fails or yields no usable payload."""

    def __init__(self,
                 message: str,
                 flow: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        self.flow = flow
        generation_details = dict(details or {})
        if flow:
            generation_details["flow"] = flow
        super().__init__(message, generation_details)


class OpenRouterException(GenerationError):
    """Raised when the OpenRouter API call itself fails."""

    def __init__(self,
                 message: str,
                 status_code: Optional[int] = None,
                 model: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.model = model
        or_details = dict(details or {})
        if model:
            or_details["model"] = model
        if status_code:
            or_details["upstream_status"] = status_code
        super().__init__(message, details=or_details)


class RetryExhausted(GenerationError):
    """Raised when every attempt of a generation call has failed."""

    def __init__(self, message: str, last_exception: Optional[Exception] = None, flow: Optional[str] = None):
        self.last_exception = last_exception
        super().__init__(message, flow=flow)


class SessionNotFoundException(BrandGenieException):
    """Raised when a wizard session id is unknown or expired."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Wizard session '{session_id}' not found", {"session_id": session_id})


class WizardStateError(BrandGenieException):
    """Raised when an operation is not allowed in the current wizard state."""

    def __init__(self, operation: str, state: str, message: Optional[str] = None):
        self.operation = operation
        self.state = state
        super().__init__(
            message or f"Cannot {operation} while in state '{state}'",
            {"operation": operation, "state": state},
        )


class WizardBusyError(WizardStateError):
    """Raised when a stage is already advancing."""

    def __init__(self, operation: str, state: str):
        super().__init__(operation, state, f"Cannot {operation}: a generation is already in progress")


class StageCancelledError(WizardStateError):
    """Raised when a stage was left before its generation resolved."""

    def __init__(self, operation: str, state: str):
        super().__init__(operation, state, f"{operation} was cancelled because the wizard left the stage")


# HTTP Exception converters for FastAPI
def to_http_exception(exc: BrandGenieException, status_code: int = 500) -> HTTPException:
    """Convert custom exception to HTTPException for FastAPI."""
    detail = {
        "error": exc.__class__.__name__,
        "message": exc.message,
        **exc.details
    }
    return HTTPException(status_code=status_code, detail=detail)


def generation_to_http_exception(exc: GenerationError) -> HTTPException:
    """Upstream rate limits stay 429, everything else is a bad gateway."""
    status_code = 502
    upstream = exc.last_exception if isinstance(exc, RetryExhausted) else exc
    if isinstance(upstream, OpenRouterException) and upstream.status_code == 429:
        status_code = 429
    return to_http_exception(exc, status_code)


def validation_to_http_exception(exc: BrandGenieException) -> HTTPException:
    return to_http_exception(exc, status_code=422)


def not_found_to_http_exception(exc: SessionNotFoundException) -> HTTPException:
    return to_http_exception(exc, status_code=404)


def wizard_state_to_http_exception(exc: WizardStateError) -> HTTPException:
    return to_http_exception(exc, status_code=409)


# Exception handler registry, most specific first
EXCEPTION_HANDLERS = {
    GenerationError: generation_to_http_exception,
    ValidationError: validation_to_http_exception,
    GuardrailsValidationException: validation_to_http_exception,
    SessionNotFoundException: not_found_to_http_exception,
    WizardStateError: wizard_state_to_http_exception,
}
