"""Tool registry."""
import logging
import random
from typing import Any, Dict, List, Optional, Tuple

from app.services.tools.base import Tool, ToolResult
from app.services.tools.travel import (
    CheckFlightPrices,
    CheckHotelAvailability,
    EndCall,
    MakeBooking,
)

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Named set of tools the agent can call."""

    def __init__(self, tools: Optional[List[Tool]] = None):
        self._tools: Dict[str, Tool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        self._tools[tool.name] = tool

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def catalog(self) -> str:
        """Tool list formatted for the system prompt."""
        return "\n".join(f"- {tool.name}: params {tool.params_hint}" for tool in self._tools.values())

    async def invoke(self, name: str, params: Dict[str, Any]) -> ToolResult:
        tool = self._tools.get(name)
        if tool is None:
            raise KeyError(f"Unknown tool: {name}")
        logger.info(f"[TOOL] Executing: {name}")
        return await tool.invoke(params)

    def __contains__(self, name: object) -> bool:
        return name in self._tools


def build_default_registry(
    rng: Optional[random.Random] = None,
    latency: Optional[Tuple[float, float]] = None,
) -> ToolRegistry:
    """Registry with the four travel agency tools."""
    return ToolRegistry(
        [
            CheckFlightPrices(rng=rng, latency=latency),
            CheckHotelAvailability(rng=rng, latency=latency),
            MakeBooking(rng=rng, latency=latency),
            EndCall(rng=rng, latency=latency),
        ]
    )
