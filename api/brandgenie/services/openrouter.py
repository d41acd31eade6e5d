"""OpenRouter chat-completions gateway used by every generation flow."""

import json
import logging
import os
from typing import Any, Dict, Optional

import httpx

from ..core.config import settings
from ..core.structured_logging import LoggerFactory, log_external_call
from ..models.exceptions import OpenRouterException

logger = LoggerFactory.get_logger(__name__)
_plain_logger = logging.getLogger(__name__)


def _api_key() -> str:
    return os.getenv("OPENROUTER_API_KEY") or settings.openrouter_api_key or ""


def _headers() -> Dict[str, str]:
    """Build standard OpenRouter headers."""
    return {
        "Authorization": f"Bearer {_api_key()}",
        "Content-Type": "application/json",
        "HTTP-Referer": os.getenv("SERVICE_BASE_URL", settings.service_base_url),
        "X-Title": "Brand Genie",
    }


def model_for(task_type: str) -> str:
    if task_type == "image":
        return settings.image_model
    return settings.text_model


def timeout_for(task_type: str) -> float:
    timeout = settings.openrouter_timeout
    # Image tasks typically take longer
    if task_type == "image":
        timeout = max(timeout, settings.openrouter_timeout_long)
    return float(max(settings.min_timeout_seconds, timeout))


def _extract_message_text(response: Dict[str, Any]) -> str:
    """Extract text content from an OpenRouter-style response."""
    choices = [c for c in response.get("choices") or [] if isinstance(c, dict)]
    if not choices:
        return ""
    msg = choices[0].get("message")
    if not isinstance(msg, dict):
        return ""
    content = msg.get("content", "")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = [p.get("text", "") for p in content if isinstance(p, dict) and "text" in p]
        return "\n".join([p for p in parts if p])
    return ""


def extract_json_object(text: str) -> Dict[str, Any]:
    """Parse the outermost JSON object in a model reply, tolerating code fences."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise ValueError("Model reply does not contain a JSON object")
    data = json.loads(text[start:end + 1])
    if not isinstance(data, dict):
        raise ValueError("Model reply is not a JSON object")
    return data


def _upstream_error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict):
        return err.get("message")
    if isinstance(err, str):
        return err
    return None


async def health_check() -> bool:
    """Check OpenRouter API reachability."""
    if not _api_key():
        _plain_logger.warning("OpenRouter API key not configured")
        return False
    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(f"{settings.openrouter_base_url}/models", headers=_headers())
            return response.status_code == 200
    except httpx.HTTPError as e:
        _plain_logger.error(f"OpenRouter health check failed: {e}")
        return False


async def async_call_task(task_type: str, messages: list, **kwargs) -> Dict[str, Any]:
    """Send one chat-completions request and return the decoded body.

    ``task_type`` selects the model ("text" or "image"); an explicit ``model``
    keyword wins. Extra keywords are forwarded in the payload (for example
    ``modalities`` or ``response_format``). Raises ``OpenRouterException`` on
    transport failures, non-200 responses and error bodies.
    """
    if not _api_key():
        raise OpenRouterException("OPENROUTER_API_KEY environment variable is required")

    model = kwargs.pop("model", None) or model_for(task_type)
    payload = {
        "model": model,
        "messages": messages,
        "max_tokens": kwargs.pop("max_tokens", 4096),
        "temperature": kwargs.pop("temperature", 0.7),
        **kwargs,
    }
    timeout_seconds = timeout_for(task_type)

    log_external_call(logger, "openrouter", "chat.completions", task=task_type, model=model)
    try:
        async with httpx.AsyncClient(timeout=timeout_seconds) as client:
            response = await client.post(
                f"{settings.openrouter_base_url}/chat/completions",
                headers=_headers(),
                json=payload,
            )
    except httpx.TimeoutException:
        raise OpenRouterException(f"OpenRouter request timed out after {timeout_seconds:.0f}s", model=model)
    except httpx.HTTPError as e:
        raise OpenRouterException(f"OpenRouter request failed: {e}", model=model)

    if response.status_code != 200:
        detail = _upstream_error_message(response)
        message = f"OpenRouter API request failed: {response.status_code}"
        if detail:
            message = f"{message} ({detail})"
        raise OpenRouterException(message, status_code=response.status_code, model=model)

    try:
        result = response.json()
    except ValueError as e:
        raise OpenRouterException(f"Invalid JSON response from OpenRouter: {e}", model=model)

    if not isinstance(result, dict):
        raise OpenRouterException("Invalid response shape from OpenRouter", model=model)

    if result.get("error"):
        err = result["error"]
        msg = err.get("message", "Unknown error") if isinstance(err, dict) else str(err)
        raise OpenRouterException(f"OpenRouter error: {msg}", model=model)

    logger.debug("OpenRouter call succeeded", task=task_type, model=model)
    return result
