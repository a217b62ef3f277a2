"""FastAPI dependencies."""
from functools import lru_cache

from app.core.config import settings
from app.services.agent.completion import CompletionService
from app.services.agent.turn_processor import TurnProcessor
from app.services.call_session.manager import CallSessionManager
from app.services.call_session.store import SessionStore
from app.services.speech.stt import SpeechToTextService
from app.services.speech.tts import TextToSpeechService
from app.services.tools.registry import ToolRegistry, build_default_registry

# Module-level session storage (persists across requests)
session_store = SessionStore(grace_seconds=settings.session_grace_seconds)


def get_session_store() -> SessionStore:
    """Get the process-wide session store."""
    return session_store


@lru_cache(maxsize=1)
def get_tool_registry() -> ToolRegistry:
    return build_default_registry()


@lru_cache(maxsize=1)
def get_completion_service() -> CompletionService:
    return CompletionService(settings)


@lru_cache(maxsize=1)
def get_tts_service() -> TextToSpeechService:
    """Shared so a rejected API key disables synthesis for the whole process."""
    return TextToSpeechService(settings)


def get_call_session_manager() -> CallSessionManager:
    """Get call session manager."""
    store = get_session_store()
    turn_processor = TurnProcessor(
        completion=get_completion_service(),
        tools=get_tool_registry(),
        clock=store.now,
    )
    return CallSessionManager(
        store=store,
        turn_processor=turn_processor,
        stt_service=SpeechToTextService(),
        tts_service=get_tts_service(),
    )
