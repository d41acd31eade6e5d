"""Canned OpenRouter payloads shared by the test suite."""

import json

# 1x1 transparent PNG
PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
PNG_DATA_URI = f"data:image/png;base64,{PNG_B64}"


def chat_response(content) -> dict:
    """OpenRouter-style chat completion body with a text reply."""
    if not isinstance(content, str):
        content = json.dumps(content)
    return {"choices": [{"message": {"role": "assistant", "content": content}}], "model": "test-model"}


def image_response(data_uri: str = PNG_DATA_URI) -> dict:
    """OpenRouter-style chat completion body carrying one generated image."""
    return {
        "choices": [{
            "message": {
                "role": "assistant",
                "content": "",
                "images": [{"type": "image_url", "image_url": {"url": data_uri}}],
            }
        }],
        "model": "test-image-model",
    }
