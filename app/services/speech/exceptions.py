"""Custom exceptions for TTS services."""
from typing import Optional


class TTSServiceError(Exception):
    """Base exception for TTS service errors."""

    pass


class TTSNotConfiguredError(TTSServiceError):
    """Raised when no usable ElevenLabs client is available."""

    pass


class TTSSynthesisError(TTSServiceError):
    """Raised when synthesis fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
