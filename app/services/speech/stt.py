"""Speech-to-text service."""
import base64
import binascii
import logging
import re

from app.core.exceptions import SpeechDecodeError

logger = logging.getLogger(__name__)

_NON_BASE64 = re.compile(r"[^A-Za-z0-9+/]")


class SpeechToTextService:
    """
    Placeholder transcription.

    The vocal payload is treated as base64-encoded UTF-8 text rather than audio;
    a real ASR provider would replace transcribe().
    """

    async def transcribe(self, audio_base64: str) -> str:
        """
        Turn a vocal payload into text.

        Decoding is lenient: line breaks and other stray characters are
        skipped and missing padding is restored.

        Args:
            audio_base64: Base64 payload from the request

        Returns:
            Transcribed text

        Raises:
            SpeechDecodeError: if the payload is not base64 UTF-8 text
        """
        logger.info("[STT] Converting speech to text...")
        data = _NON_BASE64.sub("", audio_base64)
        if len(data) % 4 in (2, 3):
            data += "=" * (-len(data) % 4)
        try:
            text = base64.b64decode(data).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError, ValueError) as e:
            logger.error(f"[STT] Transcription failed: {e}")
            raise SpeechDecodeError(str(e)) from e

        logger.info(f"[STT] Transcribed: '{text}'")
        return text
