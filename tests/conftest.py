"""Shared test fixtures and configuration."""
import json
import os
import random
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

# Force mock mode before importing the app
os.environ["OPENAI_API_KEY"] = ""
os.environ["ELEVENLABS_API_KEY"] = ""

from app.main import app
from app.core.config import Settings
from app.core.dependencies import get_call_session_manager, get_session_store
from app.services.agent.completion import CompletionService
from app.services.agent.mock_responder import MockResponder
from app.services.agent.turn_processor import TurnProcessor
from app.services.call_session.manager import CallSessionManager
from app.services.call_session.store import SessionStore
from app.services.speech.stt import SpeechToTextService
from app.services.speech.tts import TextToSpeechService
from app.services.tools.registry import build_default_registry


class FakeClock:
    """Manually advanced clock for store and session timestamps."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def make_completion(payload) -> Mock:
    """Build an object shaped like an OpenAI chat completion."""
    content = payload if isinstance(payload, str) else json.dumps(payload)
    return Mock(choices=[Mock(message=Mock(content=content))])


@pytest.fixture
def completion_factory():
    return make_completion


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def test_settings():
    """Settings with no provider credentials."""
    return Settings(openai_api_key="", elevenlabs_api_key="", session_grace_seconds=60)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    """Empty session store driven by the fake clock."""
    return SessionStore(grace_seconds=60, clock=clock)


@pytest.fixture
def tool_registry():
    """Travel tools with a seeded random source and no latency."""
    return build_default_registry(rng=random.Random(42), latency=(0, 0))


@pytest.fixture
def mock_openai():
    """Mock OpenAI API client; set create.side_effect per test."""
    mock_client = Mock()
    mock_client.chat.completions.create = AsyncMock(
        return_value=make_completion(
            {
                "response": "Test response",
                "tool": None,
                "toolParams": {},
                "collectInfo": {},
                "shouldEndCall": False,
            }
        )
    )
    return mock_client


@pytest.fixture
def llm_processor(test_settings, mock_openai, tool_registry, clock):
    """Turn processor backed by the mocked OpenAI client."""
    completion = CompletionService(test_settings, client=mock_openai)
    return TurnProcessor(completion=completion, tools=tool_registry, clock=clock)


@pytest.fixture
def mock_mode_processor(test_settings, tool_registry, clock):
    """Turn processor with no completion provider configured."""
    return TurnProcessor(
        completion=CompletionService(test_settings),
        tools=tool_registry,
        mock_responder=MockResponder(tool_registry),
        clock=clock,
    )


@pytest.fixture
def session_manager(store, mock_mode_processor, test_settings):
    return CallSessionManager(
        store=store,
        turn_processor=mock_mode_processor,
        stt_service=SpeechToTextService(),
        tts_service=TextToSpeechService(test_settings),
    )


@pytest.fixture
def test_client(session_manager, store):
    """Create FastAPI test client with overrides."""
    app.dependency_overrides[get_call_session_manager] = lambda: session_manager
    app.dependency_overrides[get_session_store] = lambda: store

    client = TestClient(app)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()


# Pytest configuration
def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test"
    )
