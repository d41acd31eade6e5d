"""Helpers for ``data:<mime>;base64,<payload>`` strings.

Data URIs are the only binary interchange format of the service: the model
returns images as data URIs, mockup flows send the logo back as one, and
downloads decode them into files.
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import Tuple

DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>[A-Za-z0-9+/=]+)$")

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/svg+xml": "svg",
}


def is_data_uri(value: object) -> bool:
    return isinstance(value, str) and DATA_URI_RE.match(value) is not None


def parse_data_uri(uri: str) -> Tuple[str, bytes]:
    """Split a data URI into its MIME type and decoded bytes."""
    m = DATA_URI_RE.match(uri or "")
    if not m:
        raise ValueError("Not a base64 data URI")
    try:
        data = base64.b64decode(m.group("data"), validate=False)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 payload: {e}")
    if not data:
        raise ValueError("Data URI has an empty payload")
    return m.group("mime").lower(), data


def to_data_uri(data: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def mime_for_format(fmt: str | None) -> str:
    fmt = (fmt or "png").lower().lstrip(".")
    if fmt in ("jpg", "jpeg"):
        return "image/jpeg"
    if fmt == "svg":
        return "image/svg+xml"
    return f"image/{fmt}"


def extension_for(mime: str) -> str:
    return _EXTENSIONS.get(mime.lower(), "bin")
