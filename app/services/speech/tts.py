"""Text-to-speech service."""
import asyncio
import base64
import io
import logging
import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from app.core.config import Settings, settings as default_settings
from app.services.speech.exceptions import (
    TTSNotConfiguredError,
    TTSServiceError,
    TTSSynthesisError,
)

logger = logging.getLogger(__name__)

# Seconds of speech per character, used to estimate clip length
SYNTHESIZED_SECONDS_PER_CHAR = 0.06
ESTIMATED_SECONDS_PER_CHAR = 0.05


def estimate_duration(text: str, seconds_per_char: float = ESTIMATED_SECONDS_PER_CHAR) -> int:
    return math.floor(len(text) * seconds_per_char)


class SpeechAudio(BaseModel):
    """Synthesized clip: base64 audio (empty when skipped) and its duration."""

    audio: str = ""
    duration: int = 0


class TextToSpeechService:
    """Service for converting text to speech with ElevenLabs."""

    def __init__(self, settings: Optional[Settings] = None, client: Any = None):
        self.settings = settings or default_settings
        self._client = client
        self._disabled = client is None and not self.settings.elevenlabs_configured

    @property
    def configured(self) -> bool:
        return not self._disabled

    def _get_client(self):
        if self._disabled:
            raise TTSNotConfiguredError("ElevenLabs is not configured")
        if self._client is None:
            from elevenlabs import ElevenLabs

            self._client = ElevenLabs(api_key=self.settings.elevenlabs_api_key)
            logger.info("[TTS] ElevenLabs client initialized")
        return self._client

    def _disable(self) -> None:
        self._disabled = True
        self._client = None

    def _convert(self, text: str) -> bytes:
        from elevenlabs import VoiceSettings

        client = self._get_client()
        audio_chunks = client.text_to_speech.convert(
            voice_id=self.settings.elevenlabs_voice_id,
            text=text,
            model_id=self.settings.elevenlabs_model_id,
            voice_settings=VoiceSettings(stability=0.5, similarity_boost=0.5),
        )

        buffer = io.BytesIO()
        for chunk in audio_chunks:
            buffer.write(chunk)
        return buffer.getvalue()

    async def synthesize(self, text: str) -> SpeechAudio:
        """
        Synthesize speech for a reply.

        Never raises: when ElevenLabs is unavailable or fails, the clip is
        empty and its duration is estimated from the text length.
        """
        if not self.configured:
            logger.info("[TTS] ElevenLabs not configured, skipping TTS")
            return SpeechAudio(audio="", duration=estimate_duration(text))

        logger.info(f"[TTS] Generating speech - Text: '{text[:50]}...'")
        try:
            audio_bytes = await asyncio.to_thread(self._convert, text)
        except TTSServiceError as e:
            logger.warning(f"[TTS] Synthesis skipped: {e}")
            return SpeechAudio(audio="", duration=estimate_duration(text))
        except Exception as e:
            self._log_provider_error(e)
            return SpeechAudio(audio="", duration=estimate_duration(text))

        logger.info(f"[TTS] Audio generated successfully, size: {round(len(audio_bytes) / 1024)} KB")
        return SpeechAudio(
            audio=base64.b64encode(audio_bytes).decode("ascii"),
            duration=estimate_duration(text, SYNTHESIZED_SECONDS_PER_CHAR),
        )

    def _log_provider_error(self, error: Exception) -> None:
        status_code = getattr(error, "status_code", None)
        if status_code == 401:
            logger.error("[TTS] Invalid API key, disabling ElevenLabs")
            self._disable()
        elif status_code == 429:
            logger.error("[TTS] Rate limit or quota exceeded")
        elif status_code == 422:
            logger.error("[TTS] Invalid request (text might be too long)")
        else:
            logger.error(f"[TTS] ElevenLabs error: {error}")

    async def list_voices(self) -> List[Dict[str, Any]]:
        """
        Fetch the account's voices, which also validates the API key.

        Raises:
            TTSNotConfiguredError: if the client is disabled
            TTSSynthesisError: if the ElevenLabs request fails
        """
        client = self._get_client()
        try:
            response = await asyncio.to_thread(client.voices.get_all)
        except Exception as e:
            raise TTSSynthesisError(str(e), status_code=getattr(e, "status_code", None)) from e

        return [
            {"voice_id": voice.voice_id, "name": voice.name, "labels": voice.labels}
            for voice in response.voices
        ]
