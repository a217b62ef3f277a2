"""Call session models."""
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class CallStatus(str, Enum):
    """Lifecycle of a call. Only ACTIVE -> ENDED is allowed."""

    ACTIVE = "active"
    ENDED = "ended"

    def __str__(self) -> str:
        return self.value


class Role(str, Enum):
    """Speaker of a conversation turn."""

    CUSTOMER = "customer"
    ASSISTANT = "assistant"


class ConversationTurn(BaseModel):
    """One entry of the call transcript."""

    role: Role
    content: str
    timestamp: datetime


class ToolMemoryEntry(BaseModel):
    """Raw result of a tool run during the call."""

    tool: str
    result: Dict[str, Any]
    timestamp: datetime


class CallSession:
    """Call session model."""

    def __init__(self, call_id: str, created_at: datetime):
        self.call_id = call_id
        self.status = CallStatus.ACTIVE
        self.conversation_history: List[ConversationTurn] = []
        self.tool_memory: List[ToolMemoryEntry] = []
        self.customer_info: Dict[str, Any] = {}
        # Collected but never read by the turn pipeline.
        self.booking_details: Dict[str, Any] = {}
        self.created_at = created_at
        self.last_activity = created_at
        self.ended_at: Optional[datetime] = None
        self.call_duration = 0

    @property
    def is_active(self) -> bool:
        return self.status == CallStatus.ACTIVE

    def add_message(self, role: Role, content: str, now: datetime) -> None:
        """Append a turn to the transcript."""
        self.conversation_history.append(
            ConversationTurn(role=role, content=content, timestamp=now)
        )
        self.last_activity = now

    def add_tool_result(self, tool: str, result: Dict[str, Any], now: datetime) -> None:
        """Remember a tool result for later prompt context."""
        self.tool_memory.append(ToolMemoryEntry(tool=tool, result=result, timestamp=now))

    def recent_tool_results(self, limit: int) -> List[ToolMemoryEntry]:
        return self.tool_memory[-limit:] if limit > 0 else []

    def get_conversation_for_llm(self) -> List[Dict[str, str]]:
        """Transcript in chat-completion message format."""
        return [
            {
                "role": "user" if turn.role == Role.CUSTOMER else turn.role.value,
                "content": turn.content,
            }
            for turn in self.conversation_history
        ]

    def update_customer_info(self, info: Dict[str, Any]) -> None:
        self.customer_info = {**self.customer_info, **info}

    def update_booking_details(self, details: Dict[str, Any]) -> None:
        self.booking_details = {**self.booking_details, **details}

    def end_call(self, now: datetime) -> int:
        """
        Mark the call as ended and compute its duration.

        Ending an already ended call keeps the original end time.

        Returns:
            Call duration in whole seconds
        """
        if self.status == CallStatus.ENDED:
            return self.call_duration

        self.status = CallStatus.ENDED
        self.ended_at = now
        self.call_duration = int((now - self.created_at).total_seconds())
        logger.info(f"[SESSION] Call {self.call_id} lasted {self.call_duration} seconds")
        return self.call_duration

    def elapsed_seconds(self, now: datetime) -> int:
        return int((now - self.created_at).total_seconds())


class CallInput(BaseModel):
    """Inbound turn as posted to /process-call."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: Optional[str] = None
    call_id: Optional[str] = Field(default=None, alias="callId")
    message: Optional[str] = None
    vocal: Optional[str] = None
