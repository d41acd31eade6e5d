"""Unit tests for data URI helpers."""

import pytest

from brandgenie.services.data_uri import (
    extension_for,
    is_data_uri,
    mime_for_format,
    parse_data_uri,
    to_data_uri,
)
from brandgenie.tests.fakes import PNG_DATA_URI


class TestDataUri:

    def test_parse_returns_mime_and_bytes(self):
        mime, data = parse_data_uri(PNG_DATA_URI)
        assert mime == "image/png"
        assert data.startswith(b"\x89PNG")

    def test_encode_then_parse(self):
        uri = to_data_uri(b"hello", "image/webp")
        assert uri == "data:image/webp;base64,aGVsbG8="
        assert parse_data_uri(uri) == ("image/webp", b"hello")

    @pytest.mark.parametrize("value", [
        "",
        "data:image/png,plain",
        "data:image/png;base64,",
        "https://example.com/logo.png",
        "data:image/png;base64,not base64!",
    ])
    def test_rejects_malformed(self, value):
        assert not is_data_uri(value)
        with pytest.raises(ValueError):
            parse_data_uri(value)

    def test_is_data_uri_rejects_non_strings(self):
        assert not is_data_uri(None)
        assert not is_data_uri(b"data:image/png;base64,AAAA")

    @pytest.mark.parametrize("fmt,mime", [
        (None, "image/png"),
        ("jpg", "image/jpeg"),
        ("JPEG", "image/jpeg"),
        ("svg", "image/svg+xml"),
        (".webp", "image/webp"),
    ])
    def test_mime_for_format(self, fmt, mime):
        assert mime_for_format(fmt) == mime

    def test_extension_for(self):
        assert extension_for("image/png") == "png"
        assert extension_for("image/JPEG") == "jpg"
        assert extension_for("application/octet-stream") == "bin"
