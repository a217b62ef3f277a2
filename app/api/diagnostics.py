"""Speech provider diagnostics."""
import logging

from fastapi import APIRouter, Depends

from app.core.config import settings
from app.core.dependencies import get_tts_service
from app.services.speech.exceptions import TTSNotConfiguredError, TTSSynthesisError
from app.services.speech.tts import TextToSpeechService

router = APIRouter()
logger = logging.getLogger(__name__)

TEST_PHRASE = "Hello, this is a test."


@router.get("/test-tts")
async def test_tts(tts_service: TextToSpeechService = Depends(get_tts_service)):
    """Validate the ElevenLabs key and synthesize one sample phrase."""
    logger.info("[TEST-TTS] Testing ElevenLabs TTS...")

    if not settings.elevenlabs_api_key:
        return {"success": False, "error": "No ELEVENLABS_API_KEY found in .env file"}

    if not tts_service.configured:
        return {
            "success": False,
            "error": "ElevenLabs client not initialized - check your API key",
        }

    try:
        voices = await tts_service.list_voices()
    except TTSNotConfiguredError:
        return {
            "success": False,
            "error": "ElevenLabs client not initialized - check your API key",
        }
    except TTSSynthesisError as e:
        logger.error(f"[TEST-TTS] ElevenLabs test failed: {e}")
        if e.status_code == 401:
            error_message = "Invalid API key"
        elif e.status_code == 429:
            error_message = "Rate limit or quota exceeded"
        else:
            error_message = str(e) or "Unknown error"
        return {"success": False, "error": error_message, "details": repr(e.__cause__ or e)}

    logger.info(f"[TEST-TTS] API key is valid, {len(voices)} voices available")
    sample = await tts_service.synthesize(TEST_PHRASE)

    return {
        "success": True,
        "message": "ElevenLabs API is working!",
        "voicesAvailable": len(voices),
        "audioGenerated": bool(sample.audio),
        "voices": voices[:5],
    }
