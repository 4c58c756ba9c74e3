import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, List

import uvicorn
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .agent import run_agent
from .models import ChatReply, ChatRequest, ErrorResponse, Message
from .settings import get_settings

INVALID_REQUEST_ERROR = "Please provide at least one user message."
UNEXPECTED_ERROR = "Unexpected agent error. Please try again."


def setup_server_logging(logs_dir: Path, level: str = "INFO") -> logging.Logger:
    """Configure and return the server logger."""
    logs_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("radius")
    if logger.handlers:
        return logger

    logger.setLevel(level)
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    fh = RotatingFileHandler(logs_dir / "server.log", maxBytes=5_000_000, backupCount=3)
    fh.setFormatter(fmt)
    logger.addHandler(fh)

    return logger


def _cors_origins_list(origins: str) -> list[str]:
    """Parse CORS_ORIGINS into a list."""
    if not origins or origins.strip() == "*":
        return ["*"]
    return [o.strip() for o in origins.split(",") if o.strip()]


settings = get_settings()
LOGGER = setup_server_logging(settings.log_dir, settings.log_level)


app = FastAPI(
    title="Radius Agent",
    version="0.1.0",
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins_list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def parse_messages(payload: Any) -> List[Message] | None:
    """Validate a chat request body; None if it holds no usable message list."""
    try:
        request = ChatRequest.model_validate(payload)
    except ValidationError as e:
        LOGGER.warning("Rejected chat payload: %s", e.errors(include_url=False))
        return None
    return [m.to_message() for m in request.messages]


@app.get("/health")
async def health() -> dict[str, Any]:
    """Health check for load balancers and monitoring.

    Returns:
        dict[str, Any]: JSON response with status field.
    """
    return {"status": "ok"}


@app.post(
    "/api/chat",
    response_model=ChatReply,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(request: Request) -> ChatReply | JSONResponse:
    """Run the agent over the posted conversation and return its reply.

    Expected Input (JSON):
        {
            "messages": [{"role": "user" | "assistant", "content": str}, ...]
        }

    Response Format:
        200: {"role": "assistant", "content": str, "steps": [...], "suggestions": [...]}
        400: {"error": str} - missing, empty or malformed message list
        500: {"error": str} - any unexpected failure while building the reply
    """
    try:
        payload = await request.json()
    except ValueError as e:
        LOGGER.warning("Invalid chat payload (not JSON): %s", e)
        return _error(400, INVALID_REQUEST_ERROR)

    messages = parse_messages(payload)
    if messages is None:
        return _error(400, INVALID_REQUEST_ERROR)

    LOGGER.info("Chat request with %d messages", len(messages))
    try:
        # CPU-bound work runs in a worker thread
        reply = await run_in_threadpool(run_agent, messages)
        return ChatReply.model_validate(reply.to_dict())
    except Exception as e:
        LOGGER.exception("Unexpected agent error: %s", e)
        return _error(500, UNEXPECTED_ERROR)


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    uvicorn.run(
        "radius.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
