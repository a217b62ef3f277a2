"""Main FastAPI application."""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import calls, diagnostics, health
from app.core.config import settings
from app.core.exceptions import CallServiceError, SpeechDecodeError
from app.core.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    logger.info(f"[STARTUP] Environment: {settings.environment}, PID: {os.getpid()}")
    if not settings.openai_configured:
        logger.warning("[STARTUP] OpenAI not configured, using mock mode")
    if not settings.elevenlabs_configured:
        logger.warning("[STARTUP] ElevenLabs not configured, using mock TTS")
    logger.info("[STARTUP] Ready to accept calls")
    yield
    # Shutdown
    pass


app = FastAPI(
    title="Travel Agency Call Orchestrator",
    description="Simulated phone receptionist for a travel agency",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CallServiceError)
async def call_service_error_handler(request: Request, exc: CallServiceError):
    if isinstance(exc, SpeechDecodeError):
        logger.error(f"[CALL] Voice processing failed: {exc.detail}")
    else:
        logger.info(f"[CALL] Rejected {request.url.path} - {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info(f"[CALL] Invalid request body for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid input format"})


app.include_router(health.router, tags=["health"])
app.include_router(calls.router, tags=["calls"])
app.include_router(diagnostics.router, tags=["diagnostics"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
