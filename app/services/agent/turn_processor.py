"""Turn processing: plan, optional tool run, final reply."""
import itertools
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from app.core.exceptions import CallEndedError
from app.services.agent.completion import CompletionService
from app.services.agent.constants import APOLOGY_RESPONSE, RECENT_TOOL_RESULTS
from app.services.agent.exceptions import ProviderFailure, ToolExecutionError
from app.services.agent.mock_responder import MockResponder
from app.services.agent.models import AgentReply, TurnPhase, TurnResult
from app.services.agent.prompt import get_follow_up_prompt, get_system_prompt
from app.services.call_session.models import CallSession, Role
from app.services.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

_messages_processed = itertools.count(1)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TurnProcessor:
    """Runs one caller utterance through the model and tools, updating the session."""

    def __init__(
        self,
        completion: CompletionService,
        tools: ToolRegistry,
        mock_responder: Optional[MockResponder] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.completion = completion
        self.tools = tools
        self.mock_responder = mock_responder or MockResponder(tools)
        self.clock = clock or _utc_now

    @property
    def mock_mode(self) -> bool:
        return not self.completion.configured

    async def process_turn(self, session: CallSession, user_message: str) -> TurnResult:
        """
        Process a caller utterance and produce the assistant's reply.

        Raises:
            CallEndedError: if the session has already ended
        """
        if not session.is_active:
            raise CallEndedError(session.call_id)

        logger.info(f"[TURN] Processing message #{next(_messages_processed)} for {session.call_id}")
        session.add_message(Role.CUSTOMER, user_message, self.clock())

        try:
            if self.mock_mode:
                result = await self._process_mock(session, user_message)
            else:
                result = await self._process_with_model(session)
        except Exception as e:
            # The customer turn is already recorded; always answer it
            logger.exception(f"[TURN] {session.call_id} failed unexpectedly: {e}")
            result = self._apology(session, TurnPhase.AWAITING_PLAN)

        session.add_message(Role.ASSISTANT, result.response, self.clock())

        if result.should_end_call:
            session.end_call(self.clock())

        logger.info(
            f"[TURN] {session.call_id} - Response: '{result.response}', "
            f"Tool: {result.tool_executed or 'NONE'}, End call: {result.should_end_call}"
        )
        return result

    async def _process_mock(self, session: CallSession, user_message: str) -> TurnResult:
        logger.warning("[TURN] Running in mock mode - no completion provider configured")
        try:
            turn = await self.mock_responder.respond(user_message)
        except ToolExecutionError as e:
            logger.error(f"[TURN] {session.call_id} failed at {TurnPhase.TOOL_EXECUTED}: {e}")
            return self._apology(session, TurnPhase.TOOL_EXECUTED)

        tool_result = None
        if turn.reply.tool and turn.tool_result is not None:
            tool_result = turn.tool_result.model_dump()
            session.add_tool_result(turn.reply.tool, tool_result, self.clock())

        return TurnResult(
            response=turn.reply.response,
            tool_executed=turn.reply.tool,
            tool_result=tool_result,
            should_end_call=turn.reply.should_end_call,
            call_id=session.call_id,
        )

    async def _process_with_model(self, session: CallSession) -> TurnResult:
        phase = TurnPhase.AWAITING_PLAN
        try:
            plan = await self._plan(session)

            if not plan.tool or plan.tool not in self.tools:
                if plan.tool:
                    logger.warning(f"[TURN] Ignoring unknown tool '{plan.tool}'")
                session.update_customer_info(plan.collect_info)
                return TurnResult(
                    response=plan.response,
                    should_end_call=plan.should_end_call,
                    call_id=session.call_id,
                )

            phase = self._enter(session, TurnPhase.TOOL_EXECUTED)
            tool_result = await self._run_tool(session, plan)
            phase = self._enter(session, TurnPhase.AWAITING_FINAL_REPLY)
            final = await self._final_reply(session, plan, tool_result)

            session.update_customer_info(plan.collect_info)
            return TurnResult(
                response=final.response,
                tool_executed=plan.tool,
                tool_result=tool_result,
                should_end_call=final.should_end_call or plan.should_end_call,
                call_id=session.call_id,
            )

        except (ProviderFailure, ToolExecutionError) as e:
            logger.error(f"[TURN] {session.call_id} failed at {phase}: {e}")
            return self._apology(session, phase)

    def _apology(self, session: CallSession, phase: TurnPhase) -> TurnResult:
        return TurnResult(
            response=APOLOGY_RESPONSE,
            should_end_call=False,
            call_id=session.call_id,
            phase=phase,
        )

    def _enter(self, session: CallSession, phase: TurnPhase) -> TurnPhase:
        logger.debug(f"[TURN] {session.call_id} -> {phase}")
        return phase

    async def _plan(self, session: CallSession) -> AgentReply:
        system_prompt = get_system_prompt(
            self.tools.catalog(),
            session.recent_tool_results(RECENT_TOOL_RESULTS),
            session.customer_info,
        )
        return await self.completion.complete(system_prompt, session.get_conversation_for_llm())

    async def _run_tool(self, session: CallSession, plan: AgentReply) -> dict:
        try:
            result = await self.tools.invoke(plan.tool, plan.tool_params)
        except Exception as e:
            raise ToolExecutionError(f"Tool {plan.tool} failed: {e}") from e

        payload = result.model_dump()
        session.add_tool_result(plan.tool, payload, self.clock())
        return payload

    async def _final_reply(self, session: CallSession, plan: AgentReply, tool_result: dict) -> AgentReply:
        logger.info("[TURN] Re-processing with tool results...")
        messages = session.get_conversation_for_llm()
        messages.append({"role": "assistant", "content": plan.response})
        return await self.completion.complete(get_follow_up_prompt(plan.tool, tool_result), messages)
