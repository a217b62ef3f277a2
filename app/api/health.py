"""Health check endpoint."""
import logging
import sys
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from app.core.config import settings
from app.core.dependencies import get_session_store
from app.services.call_session.store import SessionStore

router = APIRouter()
logger = logging.getLogger(__name__)

_started_at = time.monotonic()


def _memory_usage_mb() -> int:
    """
    Peak resident set size of the process in MB.

    Reported as 0 where the resource module is unavailable (Windows).
    """
    if sys.platform == "win32":
        return 0
    import resource

    max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux reports kilobytes, macOS bytes
    divisor = 1024 * 1024 if sys.platform == "darwin" else 1024
    return int(max_rss // divisor)


@router.get("/health")
async def health_check(
    request: Request,
    store: SessionStore = Depends(get_session_store),
):
    """Health check endpoint."""
    logger.debug(
        f"[HEALTH] Health check requested - Client: {request.client.host if request.client else 'unknown'}"
    )
    return {
        "status": "ok",
        "openAIConfigured": settings.openai_configured,
        "elevenLabsConfigured": settings.elevenlabs_configured,
        "activeCalls": store.active_count(),
        "uptime": time.monotonic() - _started_at,
        "memory": f"{_memory_usage_mb()}MB",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
