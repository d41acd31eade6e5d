from __future__ import annotations

import os
from typing import List, Optional
from urllib.parse import urlparse

import httpx

from ..models.exceptions import GenerationError
from .data_uri import is_data_uri, mime_for_format, to_data_uri
from .openrouter import async_call_task
import logging

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 10_000_000


def _ssrf_guard(url: str) -> None:
    u = urlparse(url)
    if u.scheme != "https":
        raise ValueError("Blocked non-HTTPS image URL")
    allow = os.getenv("IMAGE_FETCH_ALLOW_HOSTS")
    if allow:
        hosts = {h.strip() for h in allow.split(",") if h.strip()}
        if u.hostname not in hosts:
            raise ValueError("Blocked external host")


def _infer_mime_from_content_type(ct: str | None) -> str:
    if not ct:
        return "image/png"
    ct = ct.split(";")[0].strip().lower()
    return ct if ct.startswith("image/") else "image/png"


async def _fetch_as_data_uri(url: str) -> str:
    _ssrf_guard(url)
    async with httpx.AsyncClient(timeout=10.0, follow_redirects=False) as client:
        async with client.stream("GET", url) as r:
            r.raise_for_status()
            total = 0
            chunks: List[bytes] = []
            async for chunk in r.aiter_bytes():
                total += len(chunk)
                if total > MAX_IMAGE_BYTES:
                    raise ValueError("Image too large")
                chunks.append(chunk)
            return to_data_uri(b"".join(chunks), _infer_mime_from_content_type(r.headers.get("content-type")))


async def extract_image_data_uris(resp: dict) -> List[str]:
    """Collect every image in a chat-completions response as a data URI."""
    images: List[str] = []

    async def _add_url(url: str | None) -> None:
        if not url:
            return
        if url.startswith("data:"):
            if is_data_uri(url):
                images.append(url)
            else:
                logger.warning("Skipping malformed data URI in model response")
            return
        try:
            images.append(await _fetch_as_data_uri(url))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Failed to fetch generated image: {e}")

    for ch in resp.get("choices", []) or []:
        if not isinstance(ch, dict) or not isinstance(ch.get("message"), dict):
            continue
        message = ch["message"]
        # Content parts: image_url or inline base64
        content = message.get("content")
        if isinstance(content, list):
            for part in content:
                if not isinstance(part, dict):
                    continue
                if part.get("type") == "image_url":
                    ref = part.get("image_url") or {}
                    await _add_url(ref.get("url") if isinstance(ref, dict) else part.get("url"))
                elif part.get("type") == "image_base64" and part.get("data"):
                    images.append(to_data_uri_from_b64(part["data"], part.get("format")))
        # Gemini image models: message["images"] = [{"type": "image_url", "image_url": {"url": "data:..."}}]
        for it in message.get("images") or []:
            if not isinstance(it, dict):
                continue
            if it.get("type") == "image_url" and isinstance(it.get("image_url"), dict):
                await _add_url(it["image_url"].get("url"))
            else:
                b64 = it.get("b64") or it.get("data")
                if b64:
                    images.append(to_data_uri_from_b64(b64, it.get("format")))
    return images


def to_data_uri_from_b64(b64: str, fmt: str | None = None) -> str:
    return f"data:{mime_for_format(fmt)};base64,{b64.strip()}"


def image_message(prompt: str, reference_images: Optional[List[str]] = None) -> List[dict]:
    """Build a user message carrying reference images followed by the prompt text."""
    if not reference_images:
        return [{"role": "user", "content": prompt}]
    parts: List[dict] = [{"type": "image_url", "image_url": {"url": uri}} for uri in reference_images]
    parts.append({"type": "text", "text": prompt})
    return [{"role": "user", "content": parts}]


async def generate_image(prompt: str, reference_images: Optional[List[str]] = None, flow: str | None = None) -> str:
    """Generate a single image and return it as a data URI.

    A response without image media is a failure; no placeholder is returned.
    """
    resp = await async_call_task(
        "image",
        messages=image_message(prompt, reference_images),
        modalities=["image", "text"],
    )
    images = await extract_image_data_uris(resp)
    if not images:
        raise GenerationError("No image was generated", flow=flow)
    return images[0]
