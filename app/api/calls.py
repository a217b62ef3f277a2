"""Call processing endpoints."""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.core.dependencies import get_call_session_manager
from app.core.exceptions import CallServiceError
from app.services.call_session.manager import CallSessionManager
from app.services.call_session.models import CallInput

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/process-call")
async def process_call(
    call_input: CallInput,
    request: Request,
    session_manager: CallSessionManager = Depends(get_call_session_manager),
):
    """
    Process one turn of a call.

    Accepts text or a vocal payload, runs it through the agent and returns the
    spoken reply with synthesized audio.
    """
    logger.debug(
        f"[PROCESS CALL] Request received - CallId: {call_input.call_id}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )
    try:
        return await session_manager.process_call(call_input)
    except CallServiceError:
        raise
    except Exception as e:
        logger.error(
            f"[PROCESS CALL] Request failed - CallId: {call_input.call_id}, "
            f"Error: {type(e).__name__}: {str(e)}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to process call", "details": str(e)},
        )


@router.post("/end-call/{call_id}")
async def end_call(
    call_id: str,
    session_manager: CallSessionManager = Depends(get_call_session_manager),
):
    """Force termination of a call."""
    return await session_manager.end_call(call_id)
