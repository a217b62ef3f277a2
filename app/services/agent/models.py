"""Agent reply and turn result models."""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TurnPhase(str, Enum):
    """Where a turn is in the plan / tool / final-reply cycle."""

    AWAITING_PLAN = "awaiting_plan"
    TOOL_EXECUTED = "tool_executed"
    AWAITING_FINAL_REPLY = "awaiting_final_reply"
    COMPLETE = "complete"

    def __str__(self) -> str:
        return self.value


class AgentReply(BaseModel):
    """Structured JSON reply expected from the completion provider."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    response: str
    tool: Optional[str] = None
    tool_params: Dict[str, Any] = Field(default_factory=dict, alias="toolParams")
    collect_info: Dict[str, Any] = Field(default_factory=dict, alias="collectInfo")
    should_end_call: bool = Field(default=False, alias="shouldEndCall")

    @field_validator("tool", mode="before")
    @classmethod
    def _blank_tool_is_none(cls, value: Any) -> Any:
        # Models write "null", "none" or "" when no tool is wanted
        if isinstance(value, str) and value.strip().lower() in ("", "null", "none"):
            return None
        return value

    @field_validator("tool_params", "collect_info", mode="before")
    @classmethod
    def _null_mapping_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("should_end_call", mode="before")
    @classmethod
    def _null_flag_is_false(cls, value: Any) -> Any:
        return False if value is None else value


class TurnResult(BaseModel):
    """Outcome of processing one caller utterance."""

    response: str
    tool_executed: Optional[str] = None
    tool_result: Optional[Dict[str, Any]] = None
    should_end_call: bool = False
    call_id: str
    phase: TurnPhase = TurnPhase.COMPLETE
