"""Canned responder used when no completion provider is configured."""
import logging
import random
from typing import Optional

from app.services.agent.constants import (
    END_CALL_INDICATORS,
    FAREWELL_RESPONSE,
    MOCK_FLIGHT_KEYWORD,
    MOCK_FLIGHT_PARAMS,
    MOCK_RESPONSES,
    MOCK_TOOL_PROBABILITY,
)
from app.services.agent.exceptions import ToolExecutionError
from app.services.agent.models import AgentReply
from app.services.tools.base import ToolResult
from app.services.tools.registry import ToolRegistry
from app.services.tools.travel import CheckFlightPrices

logger = logging.getLogger(__name__)


class MockTurn:
    """Reply and optional tool run produced by the mock responder."""

    def __init__(self, reply: AgentReply, tool_result: Optional[ToolResult] = None):
        self.reply = reply
        self.tool_result = tool_result


class MockResponder:
    """
    Keyword-driven stand-in for the language model.

    Picks a canned reply, sometimes runs a flight search when the caller
    mentions flights, and says goodbye when the caller does.
    """

    def __init__(self, tools: ToolRegistry, rng: Optional[random.Random] = None):
        self.tools = tools
        self.rng = rng or random.Random()

    async def respond(self, user_message: str) -> MockTurn:
        text = user_message.lower()
        response = self.rng.choice(MOCK_RESPONSES)
        wants_tool = (
            self.rng.random() > MOCK_TOOL_PROBABILITY
            and MOCK_FLIGHT_KEYWORD in text
            and CheckFlightPrices.name in self.tools
        )
        should_end = any(indicator in text for indicator in END_CALL_INDICATORS)

        tool_result = None
        tool = None
        if wants_tool:
            tool = CheckFlightPrices.name
            try:
                tool_result = await self.tools.invoke(tool, dict(MOCK_FLIGHT_PARAMS))
            except Exception as e:
                raise ToolExecutionError(f"Tool {tool} failed: {e}") from e
            flights = tool_result.data.get("flights") or []
            if flights:
                cheapest = flights[0]
                response = (
                    f"{response} I found {len(flights)} flights available. "
                    f"The cheapest option is {cheapest['airline']} at ${cheapest['price']} "
                    f"departing at {cheapest['time']}."
                )

        if should_end:
            response = FAREWELL_RESPONSE

        logger.info(f"[MOCK] Tool: {tool or 'NONE'}, end call: {should_end}")
        return MockTurn(
            reply=AgentReply(response=response, tool=tool, should_end_call=should_end),
            tool_result=tool_result,
        )
