"""Unit tests for the TTS diagnostic endpoint."""
from unittest.mock import Mock

import pytest

from app.core.config import Settings
from app.core.dependencies import get_tts_service
from app.main import app
from app.services.speech.tts import TextToSpeechService


class FakeApiError(Exception):
    def __init__(self, status_code: int):
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


@pytest.fixture
def configured_settings(monkeypatch):
    settings = Settings(openai_api_key="", elevenlabs_api_key="el-test-key")
    monkeypatch.setattr("app.api.diagnostics.settings", settings)
    return settings


@pytest.fixture
def elevenlabs_client():
    client = Mock()
    voices = []
    for i in range(7):
        voice = Mock(voice_id=f"v{i}", labels={})
        voice.name = f"Voice {i}"
        voices.append(voice)
    client.voices.get_all.return_value = Mock(voices=voices)
    client.text_to_speech.convert.return_value = iter([b"mp3"])
    return client


@pytest.fixture
def diagnostics_client(test_client, configured_settings, elevenlabs_client):
    service = TextToSpeechService(configured_settings, client=elevenlabs_client)
    app.dependency_overrides[get_tts_service] = lambda: service
    return test_client


class TestTTSDiagnostic:
    """Test GET /test-tts."""

    def test_success(self, diagnostics_client):
        response = diagnostics_client.get("/test-tts")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "ElevenLabs API is working!"
        assert data["voicesAvailable"] == 7
        assert data["audioGenerated"] is True
        assert len(data["voices"]) == 5
        assert data["voices"][0] == {"voice_id": "v0", "name": "Voice 0", "labels": {}}

    def test_invalid_key(self, diagnostics_client, elevenlabs_client):
        elevenlabs_client.voices.get_all.side_effect = FakeApiError(401)

        data = diagnostics_client.get("/test-tts").json()

        assert data["success"] is False
        assert data["error"] == "Invalid API key"
        assert "details" in data

    def test_rate_limited(self, diagnostics_client, elevenlabs_client):
        elevenlabs_client.voices.get_all.side_effect = FakeApiError(429)

        data = diagnostics_client.get("/test-tts").json()

        assert data["error"] == "Rate limit or quota exceeded"

    def test_disabled_client(self, test_client, configured_settings):
        service = TextToSpeechService(Settings(openai_api_key="", elevenlabs_api_key=""))
        app.dependency_overrides[get_tts_service] = lambda: service

        data = test_client.get("/test-tts").json()

        assert data == {
            "success": False,
            "error": "ElevenLabs client not initialized - check your API key",
        }
