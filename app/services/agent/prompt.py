"""Agent prompt templates."""
import json
from typing import Any, Dict, List

from app.services.call_session.models import ToolMemoryEntry

REPLY_FORMAT = """{
    "response": "Your spoken response",
    "tool": "toolName or null",
    "toolParams": {},
    "collectInfo": {},
    "shouldEndCall": false
}"""

FOLLOW_UP_REPLY_FORMAT = """{
    "response": "Your brief spoken response with the specific results",
    "tool": null,
    "toolParams": {},
    "collectInfo": {},
    "shouldEndCall": false
}"""


def format_tool_results(entries: List[ToolMemoryEntry]) -> str:
    """Serialize remembered tool results, one per line."""
    return "\n".join(
        f"Tool {entry.tool} returned: {json.dumps(entry.result)}" for entry in entries
    )


def get_system_prompt(
    tool_catalog: str,
    recent_tool_results: List[ToolMemoryEntry],
    customer_info: Dict[str, Any],
) -> str:
    """Generate system prompt for the planning pass."""
    tool_context = ""
    if recent_tool_results:
        tool_context = f"Recent tool results:\n{format_tool_results(recent_tool_results)}\n"

    return f"""You are a helpful travel agency receptionist on a phone call. Keep responses concise and natural for phone conversation.

Available tools:
{tool_catalog}

{tool_context}
Customer info: {json.dumps(customer_info)}

IMPORTANT:
- Keep responses short and conversational (1-2 sentences ideal)
- When you use a tool, incorporate its results naturally
- Put any facts you learn about the customer (name, dates, destination, party size) in collectInfo
- Set shouldEndCall to true when the customer says goodbye or the booking is complete

Respond in JSON:
{REPLY_FORMAT}"""


def get_follow_up_prompt(tool_name: str, tool_result: Dict[str, Any]) -> str:
    """Generate the instruction that folds a tool result into a spoken reply."""
    return f"""The tool {tool_name} returned: {json.dumps(tool_result)}

Now incorporate this information into a SHORT, NATURAL phone response to the customer.

Respond in JSON:
{FOLLOW_UP_REPLY_FORMAT}"""
