"""Generation request wrapper.

A flow is one request/response exchange with the model: a validated request
model goes out, the raw reply is checked against the flow's output contract,
and a validated response model comes back. Anything short of that raises
``GenerationError``. Every flow runs under the same bounded retry policy.
"""

from __future__ import annotations

from typing import Awaitable, Callable, List, Optional, Type, TypeVar

from pydantic import BaseModel

from ..core.retry import RetryConfig, RetryManager
from ..core.structured_logging import LoggerFactory
from ..models.exceptions import GenerationError, GuardrailsValidationException
from .data_uri import parse_data_uri
from .gemini_image import generate_image
from .guardrails import validate_contract
from .openrouter import _extract_message_text, async_call_task, extract_json_object

logger = LoggerFactory.get_logger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

IMAGE_CONTRACT = "image_asset.json"


def _validate_output(flow: str, contract: str, payload: object) -> None:
    try:
        validate_contract(contract, payload)
    except GuardrailsValidationException as e:
        raise GenerationError(e.message, flow=flow, details={"validation_errors": e.validation_errors})


async def run_with_policy(
    flow: str,
    attempt: Callable[[], Awaitable[T]],
    operation_name: Optional[str] = None,
    retry: Optional[RetryConfig] = None,
) -> T:
    manager = RetryManager(retry)
    return await manager.execute_with_retry(attempt, operation_name=operation_name or flow, flow=flow)


async def run_text_flow(
    flow: str,
    messages: List[dict],
    contract: str,
    output_model: Type[M],
    *,
    check: Optional[Callable[[M], M]] = None,
    operation_name: Optional[str] = None,
    temperature: float = 0.7,
    retry: Optional[RetryConfig] = None,
) -> M:
    """Run a JSON-producing text flow.

    ``check`` may enforce extra invariants on the parsed result and either
    return it (possibly trimmed) or raise ``GenerationError``.
    """

    async def _attempt() -> M:
        resp = await async_call_task(
            "text",
            messages,
            temperature=temperature,
            response_format={"type": "json_object"},
        )
        text = _extract_message_text(resp)
        if not text.strip():
            raise GenerationError("Model returned an empty response", flow=flow)
        try:
            payload = extract_json_object(text)
        except ValueError as e:
            raise GenerationError(f"Model returned malformed JSON: {e}", flow=flow)
        _validate_output(flow, contract, payload)
        try:
            result = output_model.model_validate(payload)
        except ValueError as e:
            raise GenerationError(f"Model output failed validation: {e}", flow=flow)
        return check(result) if check else result

    return await run_with_policy(flow, _attempt, operation_name, retry)


async def run_image_flow(
    flow: str,
    prompt: str,
    build: Callable[[str], M],
    *,
    reference_images: Optional[List[str]] = None,
    operation_name: Optional[str] = None,
    retry: Optional[RetryConfig] = None,
) -> M:
    """Run an image flow; ``build`` wraps the resulting data URI in the response model."""

    async def _attempt() -> M:
        uri = await generate_image(prompt, reference_images=reference_images, flow=flow)
        _validate_output(flow, IMAGE_CONTRACT, {"data_uri": uri})
        try:
            parse_data_uri(uri)
        except ValueError as e:
            raise GenerationError(f"Model returned an undecodable image: {e}", flow=flow)
        return build(uri)

    return await run_with_policy(flow, _attempt, operation_name, retry)
