"""Call session manager."""
import logging
from typing import Any, Dict

from app.core.exceptions import BadInputError, CallNotFoundError
from app.services.agent.turn_processor import TurnProcessor
from app.services.call_session.models import CallInput
from app.services.call_session.store import SessionStore
from app.services.speech.stt import SpeechToTextService
from app.services.speech.tts import TextToSpeechService

logger = logging.getLogger(__name__)


class CallSessionManager:
    """Normalizes inbound turns, runs them against the session and voices the reply."""

    def __init__(
        self,
        store: SessionStore,
        turn_processor: TurnProcessor,
        stt_service: SpeechToTextService,
        tts_service: TextToSpeechService,
    ):
        self.store = store
        self.turn_processor = turn_processor
        self.stt_service = stt_service
        self.tts_service = tts_service

    async def normalize_input(self, call_input: CallInput) -> str:
        """
        Reduce a text or vocal request to the caller's utterance.

        Raises:
            BadInputError: if the type/payload pair is invalid or callId is missing
            SpeechDecodeError: if the vocal payload cannot be decoded
        """
        logger.info(f"[CALL] Incoming {call_input.type} from {call_input.call_id}")

        if call_input.type == "vocal" and call_input.vocal:
            logger.info("[CALL] Processing audio payload...")
            message = await self.stt_service.transcribe(call_input.vocal)
        elif call_input.type == "text" and call_input.message:
            message = call_input.message
        else:
            raise BadInputError("Invalid input format")

        if not call_input.call_id:
            raise BadInputError("Call ID is required")
        return message

    async def process_call(self, call_input: CallInput) -> Dict[str, Any]:
        """
        Process one caller turn end to end.

        Returns:
            Response payload for /process-call
        """
        message = await self.normalize_input(call_input)
        call_id = call_input.call_id

        async with self.store.mutate(call_id) as session:
            logger.info(f"[CALL] Message from {call_id}: '{message[:50]}...'")
            result = await self.turn_processor.process_turn(session, message)
            conversation_length = len(session.conversation_history)
            call_duration = session.elapsed_seconds(self.store.now())

        if result.should_end_call:
            self.store.schedule_removal(call_id)

        speech = await self.tts_service.synthesize(result.response)

        return {
            "success": True,
            "response": result.response,
            "audio": speech.audio,
            "duration": speech.duration,
            "toolExecuted": result.tool_executed,
            "toolResult": result.tool_result,
            "shouldEndCall": result.should_end_call,
            "callEnded": result.should_end_call,
            "callId": result.call_id,
            "conversationLength": conversation_length,
            "callDuration": call_duration,
        }

    async def end_call(self, call_id: str) -> Dict[str, Any]:
        """
        Hang up a call on request.

        Raises:
            CallNotFoundError: if the call is unknown or already purged
        """
        logger.info(f"[CALL] Hangup request for {call_id}")
        if self.store.get(call_id) is None:
            raise CallNotFoundError(call_id)

        async with self.store.mutate(call_id, create=False) as session:
            if session is None:
                raise CallNotFoundError(call_id)
            duration = session.end_call(self.store.now())
        self.store.schedule_removal(call_id)

        return {
            "success": True,
            "message": "Call ended",
            "callId": call_id,
            "duration": duration,
        }
