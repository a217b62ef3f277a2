"""Backend tool interface."""
from abc import ABC, abstractmethod
from typing import Any, Dict

from pydantic import BaseModel


class ToolResult(BaseModel):
    """Result envelope returned by every tool."""

    success: bool = True
    data: Dict[str, Any] = {}


class Tool(ABC):
    """Abstract base class for backend actions the agent may call."""

    name: str
    # Parameter shape shown to the model, e.g. "{origin, destination, date}".
    params_hint: str = "{}"

    @abstractmethod
    async def invoke(self, params: Dict[str, Any]) -> ToolResult:
        """Run the tool with loosely-typed parameters."""
        pass
