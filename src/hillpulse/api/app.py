"""
FastAPI application factory.
"""

import json
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from .. import __version__
from ..config import describe_capabilities, load_config
from ..errors import HillPulseError, ValidationError, ErrorCode
from ..logging import get_logger
from ..models import parse_ingest_payload
from ..pipeline import IngestPipeline, build_pipeline
from .auth import verify_ingest_key

logger = get_logger("api")

LIVENESS_TEXT = "HillPulse service is up."
MAX_BODY_BYTES = 1024 * 1024


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    capabilities = describe_capabilities(app.state.config)
    logger.info(
        "HillPulse starting up (%s)",
        ", ".join(f"{name}: {status}" for name, status in capabilities.items()),
    )
    yield
    logger.info("HillPulse shutting down")


def create_app(
    config: Optional[Dict[str, Any]] = None,
    pipeline: Optional[IngestPipeline] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Loaded configuration (read from the environment if None)
        pipeline: Pre-built pipeline (built from config if None)

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = load_config()

    app = FastAPI(
        title="HillPulse",
        description="Summarizes incoming tweets and relays them to push and email.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.pipeline = pipeline or build_pipeline(config)

    @app.exception_handler(HillPulseError)
    async def hillpulse_error_handler(request: Request, exc: HillPulseError):
        if exc.http_status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.http_status,
            content={"ok": False, "error": exc.message},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception: %s", exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"ok": False, "error": str(exc) or exc.__class__.__name__},
        )

    @app.get("/", response_class=PlainTextResponse, tags=["health"])
    async def liveness() -> str:
        return LIVENESS_TEXT

    @app.post("/ingest", tags=["ingest"])
    async def ingest(request: Request, _auth: str = Depends(verify_ingest_key)):
        """Summarize a tweet payload and fan it out to notifiers."""
        body = await _read_json(request)
        ingest_request = parse_ingest_payload(body)
        logger.info(
            "Ingest tweet=%s author=%s has_text=%s",
            ingest_request.tweet_id or "-",
            ingest_request.author or "-",
            bool(ingest_request.text),
        )

        # Pipeline makes blocking HTTP/SMTP calls
        result = await run_in_threadpool(request.app.state.pipeline.process, ingest_request)
        return JSONResponse(status_code=200, content=result.to_response())

    return app


async def _read_json(request: Request) -> Any:
    """
    Decode the request body; malformed or empty bodies become {}.

    Raises:
        ValidationError: If the body exceeds MAX_BODY_BYTES (413)
    """
    raw = await request.body()
    if len(raw) > MAX_BODY_BYTES:
        raise ValidationError(ErrorCode.INGEST_PAYLOAD_TOO_LARGE)
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        logger.info("Ignoring malformed JSON body (%d bytes)", len(raw))
        return {}
