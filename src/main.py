"""FastAPI application initialization."""

import logging
import os
import sys
from contextlib import asynccontextmanager

import logfire
import sentry_sdk
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
from sentry_sdk.integrations.fastapi import FastApiIntegration

from src.api import health, webhook
from src.api.dependencies import build_event_dispatcher
from src.config import Settings, get_settings
from src.constants import (
    DEFAULT_VERIFY_TOKEN,
    GRACEFUL_SHUTDOWN_TIMEOUT_SECONDS,
    LIVENESS_TEXT,
)
from src.logging_config import redact_tokens, setup_logfire
from src.middleware.correlation_id import CorrelationIDMiddleware

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


def load_settings() -> Settings:
    """Load settings, logging a critical error when mandatory secrets are missing.

    Raises:
        ValidationError: If the configuration is unusable (e.g. no OPENAI_API_KEY)
    """
    try:
        return get_settings()
    except ValidationError as e:
        missing = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        logger.critical(
            "CRITICAL ERROR: invalid configuration, refusing to start (%s)",
            ", ".join(missing),
        )
        raise


def init_sentry(settings: Settings) -> None:
    """Initialize Sentry if a DSN is configured."""
    if not settings.sentry_dsn:
        return
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.env,
        traces_sample_rate=settings.sentry_traces_sample_rate,
        send_default_pii=False,
        integrations=[FastApiIntegration()],
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: configuration, observability and service wiring."""
    settings = load_settings()
    app.state.settings = settings

    setup_logfire(app, settings)
    init_sentry(settings)

    if settings.facebook_verify_token == DEFAULT_VERIFY_TOKEN:
        logfire.warning(
            "FACEBOOK_VERIFY_TOKEN is not set, using the placeholder verify token"
        )
    if not settings.facebook_page_access_token:
        logfire.warning(
            "FACEBOOK_PAGE_ACCESS_TOKEN is not set, replies will be skipped"
        )

    app.state.dispatcher = build_event_dispatcher(settings)

    logfire.info(
        "Application startup complete",
        **redact_tokens(
            {
                "model": settings.completion_model,
                "environment": settings.env,
                "port": settings.port,
                "dispatch_in_background": settings.dispatch_in_background,
                "facebook_page_access_token": settings.facebook_page_access_token,
            }
        ),
    )

    yield

    app.state.dispatcher = None
    logfire.info("Application shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Facebook Group AI Reply Relay",
    description="Relays Facebook group mentions to an LLM and posts the reply back",
    version=APP_VERSION,
    lifespan=lifespan,
)

# Correlation ID middleware (must be first for request tracing)
app.add_middleware(CorrelationIDMiddleware)

# Register routers
app.include_router(health.router, tags=["health"])
app.include_router(webhook.router, prefix="/webhook", tags=["webhook"])


@app.get("/", response_class=PlainTextResponse)
def root():
    """Root endpoint, checked by uptime monitors."""
    return LIVENESS_TEXT


def main() -> None:
    """Run the server, exiting with status 1 when configuration is unusable."""
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    try:
        settings = load_settings()
    except ValidationError:
        sys.exit(1)

    logger.info("Server is listening on port %s", settings.port)
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=os.getenv("ENV") == "local",
        timeout_graceful_shutdown=int(GRACEFUL_SHUTDOWN_TIMEOUT_SECONDS),
    )


if __name__ == "__main__":
    main()
