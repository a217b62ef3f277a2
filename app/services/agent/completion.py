"""Chat completion provider."""
import json
import logging
from typing import Dict, List, Optional

from openai import AsyncOpenAI
from pydantic import ValidationError

from app.core.config import Settings, settings as default_settings
from app.services.agent.exceptions import MalformedReplyError, ProviderFailure
from app.services.agent.models import AgentReply

logger = logging.getLogger(__name__)


class CompletionService:
    """Wraps OpenAI chat completions in JSON mode."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[AsyncOpenAI] = None):
        self.settings = settings or default_settings
        self.configured = client is not None or self.settings.openai_configured
        self.client = client
        if self.client is None and self.configured:
            self.client = AsyncOpenAI(api_key=self.settings.openai_api_key)

    async def complete(self, system_prompt: str, messages: List[Dict[str, str]]) -> AgentReply:
        """
        Ask the model for the next structured reply.

        Args:
            system_prompt: Instruction placed first in the message list
            messages: Dialogue so far in chat-completion format

        Returns:
            Parsed AgentReply

        Raises:
            ProviderFailure: on API errors or when the reply is not valid JSON
        """
        if self.client is None:
            raise ProviderFailure("Completion provider is not configured")

        logger.debug(
            f"[LLM] Calling {self.settings.openai_model} with {len(messages)} messages, "
            f"temperature {self.settings.openai_temperature}"
        )
        try:
            completion = await self.client.chat.completions.create(
                model=self.settings.openai_model,
                messages=[{"role": "system", "content": system_prompt}, *messages],
                temperature=self.settings.openai_temperature,
                response_format={"type": "json_object"},
            )
            content = completion.choices[0].message.content or ""
        except Exception as e:
            raise ProviderFailure(f"Completion request failed: {e}") from e

        logger.debug(f"[LLM] Raw response: {content}")

        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            raise MalformedReplyError(f"Completion was not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise MalformedReplyError("Completion JSON was not an object")

        try:
            return AgentReply.model_validate(payload)
        except ValidationError as e:
            raise MalformedReplyError(f"Completion JSON did not match reply schema: {e}") from e
