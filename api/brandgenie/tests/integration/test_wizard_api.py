"""End-to-end tests of the wizard HTTP API with a faked OpenRouter gateway."""

from unittest.mock import AsyncMock, patch

import pytest

from brandgenie.models.exceptions import OpenRouterException
from brandgenie.services import prompts
from brandgenie.tests.fakes import PNG_DATA_URI, chat_response, image_response

HEX_CHARS = set("0123456789ABCDEFabcdef")


class FakeGateway:
    """Answers chat-completions calls by looking at the system prompt."""

    def __init__(self, palettes_payload, guidelines_payload):
        self.palettes_payload = palettes_payload
        self.guidelines_payload = guidelines_payload
        self.image_calls = []
        self.text_calls = []

    async def __call__(self, task_type, messages, **kwargs):
        if task_type == "image":
            self.image_calls.append(messages[0]["content"])
            return image_response()
        self.text_calls.append(messages)
        system = messages[0]["content"]
        if system == prompts.PALETTE_SYSTEM:
            return chat_response(self.palettes_payload)
        if system == prompts.GUIDELINES_SYSTEM:
            return chat_response(self.guidelines_payload)
        raise AssertionError("unexpected text prompt")


@pytest.fixture
def gateway(sample_palettes_payload, sample_guidelines):
    fake = FakeGateway(sample_palettes_payload, sample_guidelines)
    with patch("brandgenie.services.generation.async_call_task", new=AsyncMock(side_effect=fake.__call__)), \
         patch("brandgenie.services.gemini_image.async_call_task", new=AsyncMock(side_effect=fake.__call__)):
        yield fake


def _prompt_text(content) -> str:
    if isinstance(content, str):
        return content
    return next(p["text"] for p in content if p.get("type") == "text")


def _new_session(client) -> str:
    response = client.post("/wizard/sessions")
    assert response.status_code == 201
    return response.json()["session_id"]


class TestNovaScenario:

    def test_full_wizard_run(self, client, gateway, sample_profile_data):
        session_id = _new_session(client)
        base = f"/wizard/sessions/{session_id}"

        # Step 1: intake
        view = client.get(base).json()
        assert view["state"] == "intake"
        assert view["step"] == 1

        response = client.post(f"{base}/profile", json=sample_profile_data)
        assert response.status_code == 200
        view = response.json()
        assert view["state"] == "palette-selection"
        assert view["step"] == 2
        assert len(view["palettes"]) == 6
        for palette in view["palettes"]:
            assert len(palette["colors"]) == 5
            for color in palette["colors"]:
                assert color[0] == "#" and len(color) == 7 and set(color[1:]) <= HEX_CHARS

        # Step 2: pick palette 2
        chosen = view["palettes"][2]
        view = client.post(f"{base}/palette", json={"index": 2}).json()
        assert view["state"] == "asset-configuration"
        theme = view["theme"]
        assert theme["primary_color"] == chosen["colors"][0]
        assert theme["accent_color"] == chosen["colors"][1]
        assert theme["background_color"] == chosen["colors"][4]
        assert theme["headline_font"] == theme["body_font"] == "Inter"
        assert set(view["theme_style"]["css_variables"]) == {"--primary", "--accent", "--background"}

        # Step 3: generate assets with defaults
        response = client.post(f"{base}/assets")
        assert response.status_code == 200
        view = response.json()
        assert view["state"] == "results"
        assert view["step"] == 4
        kit = view["brand_kit"]
        for key in ("logo_data_uri", "social_mockup_data_uri", "business_card_mockup_data_uri", "website_theme_data_uri"):
            assert kit[key].startswith("data:image/")
            assert len(kit[key]) > len("data:image/png;base64,")
        assert kit["guidelines"]["brand_voice"]["attributes"]

        # Logo first, without reference images; mockups carry the logo
        assert len(gateway.image_calls) == 4
        assert isinstance(gateway.image_calls[0], str)
        mockups = [c for c in gateway.image_calls[1:] if isinstance(c, list)]
        assert len(mockups) == 2
        for content in mockups:
            assert content[0]["image_url"]["url"] == kit["logo_data_uri"]
        for content in gateway.image_calls[1:]:
            assert theme["primary_color"] in _prompt_text(content)

        # Step 4: download
        response = client.get(f"{base}/assets/logo")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["content-disposition"] == 'attachment; filename="logo.png"'
        assert response.content.startswith(b"\x89PNG")

    def test_back_and_reset(self, client, gateway, sample_profile_data):
        session_id = _new_session(client)
        base = f"/wizard/sessions/{session_id}"
        client.post(f"{base}/profile", json=sample_profile_data)
        client.post(f"{base}/palette", json={"index": 0})
        client.post(f"{base}/assets")

        view = client.post(f"{base}/back").json()
        assert view["state"] == "asset-configuration"
        assert view["brand_kit"] is None

        view = client.post(f"{base}/reset").json()
        assert view["state"] == "intake"
        assert view["profile"] is None

        response = client.post(f"{base}/back")
        assert response.status_code == 409


class TestWizardErrors:

    def test_unknown_session_is_404(self, client):
        response = client.get("/wizard/sessions/does-not-exist")
        assert response.status_code == 404
        assert response.json()["error"] == "SessionNotFoundException"

    def test_deleted_session_is_gone(self, client):
        session_id = _new_session(client)

        assert client.delete(f"/wizard/sessions/{session_id}").status_code == 204
        assert client.get(f"/wizard/sessions/{session_id}").status_code == 404

    def test_invalid_profile_is_422(self, client, gateway, sample_profile_data):
        session_id = _new_session(client)
        response = client.post(
            f"/wizard/sessions/{session_id}/profile",
            json={**sample_profile_data, "brand_name": "N"},
        )
        assert response.status_code == 422
        assert gateway.text_calls == []

    def test_wrong_state_is_409(self, client):
        session_id = _new_session(client)
        response = client.post(f"/wizard/sessions/{session_id}/palette", json={"index": 0})

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "WizardStateError"
        assert body["state"] == "intake"

    def test_palette_failure_is_502_and_recorded(self, client, gateway, sample_profile_data):
        gateway.palettes_payload = {"palettes": gateway.palettes_payload["palettes"][:2]}
        session_id = _new_session(client)
        base = f"/wizard/sessions/{session_id}"

        response = client.post(f"{base}/profile", json=sample_profile_data)

        assert response.status_code == 502
        assert response.json()["message"] == (
            "Failed to generate color palettes after 3 attempts. Last error: "
            "AI failed to generate enough color palettes (got 2, need 4)"
        )
        view = client.get(base).json()
        assert view["state"] == "intake"
        assert view["error"]["message"].startswith("Generation failed during palette generation:")
        assert len(gateway.text_calls) == 3

    def test_rate_limit_is_429(self, client, sample_profile_data):
        failing = AsyncMock(side_effect=OpenRouterException("OpenRouter API request failed: 429", status_code=429))
        session_id = _new_session(client)

        with patch("brandgenie.services.generation.async_call_task", new=failing):
            response = client.post(f"/wizard/sessions/{session_id}/profile", json=sample_profile_data)

        assert response.status_code == 429

    def test_configure_rejects_foreign_color(self, client, gateway, sample_profile_data):
        session_id = _new_session(client)
        base = f"/wizard/sessions/{session_id}"
        client.post(f"{base}/profile", json=sample_profile_data)
        client.post(f"{base}/palette", json={"index": 1})

        response = client.patch(f"{base}/theme", json={"primary_color": "#ABCDEF"})
        assert response.status_code == 422
        assert response.json()["field"] == "primary_color"

        response = client.patch(f"{base}/theme", json={"headline_font": "Lora"})
        assert response.status_code == 200
        assert response.json()["theme"]["headline_font"] == "Lora"

    def test_preview_is_disposable(self, client, gateway, sample_profile_data):
        session_id = _new_session(client)
        base = f"/wizard/sessions/{session_id}"
        client.post(f"{base}/profile", json=sample_profile_data)
        client.post(f"{base}/palette", json={"index": 1})

        view = client.post(f"{base}/preview").json()
        assert view["theme_preview"] == PNG_DATA_URI
        assert view["brand_kit"] is None
        assert view["state"] == "asset-configuration"

    def test_download_before_results_is_409(self, client):
        session_id = _new_session(client)
        assert client.get(f"/wizard/sessions/{session_id}/assets/logo").status_code == 409

    def test_unknown_asset_name_is_422(self, client, gateway, sample_profile_data):
        session_id = _new_session(client)
        base = f"/wizard/sessions/{session_id}"
        client.post(f"{base}/profile", json=sample_profile_data)
        client.post(f"{base}/palette", json={"index": 0})
        client.post(f"{base}/assets")

        assert client.get(f"{base}/assets/poster").status_code == 422
        response = client.get(f"{base}/assets/business-card-mockup")
        assert response.headers["content-disposition"] == 'attachment; filename="business-card-mockup.png"'


def test_fonts(client):
    response = client.get("/wizard/fonts")
    assert response.status_code == 200
    assert "Inter" in response.json()


def test_healthz_and_request_id(client):
    response = client.get("/healthz", headers={"X-Request-ID": "req-42"})

    assert response.status_code == 200
    assert response.json()["ok"] is True
    assert response.headers["X-Request-ID"] == "req-42"
    assert "X-Processing-Time-Ms" in response.headers
