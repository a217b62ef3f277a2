"""Request-level errors and the HTTP payloads they render to."""
from typing import Any, Dict, Optional


class CallServiceError(Exception):
    """Base class for errors surfaced to the caller as an HTTP status."""

    status_code: int = 500

    def __init__(self, message: str, call_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.call_id = call_id

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.call_id is not None:
            payload["callId"] = self.call_id
        return payload


class BadInputError(CallServiceError):
    """Raised when a request is missing or has invalid fields."""

    status_code = 400


class CallEndedError(CallServiceError):
    """Raised when a turn is submitted against a terminated call."""

    status_code = 400

    def __init__(self, call_id: str):
        super().__init__("Call has already ended", call_id=call_id)


class CallNotFoundError(CallServiceError):
    """Raised when an unknown call id is referenced."""

    status_code = 404

    def __init__(self, call_id: str):
        super().__init__("Call not found", call_id=call_id)


class SpeechDecodeError(CallServiceError):
    """Raised when a vocal payload cannot be turned into text."""

    status_code = 500

    def __init__(self, detail: str = ""):
        super().__init__("Failed to process voice input")
        self.detail = detail
