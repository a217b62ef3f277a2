"""Application configuration."""
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

DUMMY_OPENAI_KEY = "sk-dummy-key-for-testing"
DUMMY_ELEVENLABS_KEY = "test-key"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OpenAI
    openai_api_key: str = ""
    openai_model: str = "gpt-3.5-turbo"
    openai_temperature: float = 0.7

    # ElevenLabs
    elevenlabs_api_key: str = ""
    elevenlabs_voice_id: str = "21m00Tcm4TlvDq8ikWAM"  # Rachel
    elevenlabs_model_id: str = "eleven_monolingual_v1"

    # Call sessions
    session_grace_seconds: float = 60.0

    # Server
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def openai_configured(self) -> bool:
        return bool(self.openai_api_key) and self.openai_api_key != DUMMY_OPENAI_KEY

    @property
    def elevenlabs_configured(self) -> bool:
        return bool(self.elevenlabs_api_key) and self.elevenlabs_api_key != DUMMY_ELEVENLABS_KEY


settings = Settings()
