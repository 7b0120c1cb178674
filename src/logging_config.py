"""Centralized logging configuration with Pydantic Logfire integration."""

import logging
from typing import Any

import logfire
from fastapi import FastAPI

from src.config import Settings

# Key fragments marking a value as a secret
SENSITIVE_KEY_FRAGMENTS = (
    "token",
    "api_key",
    "secret",
    "password",
    "authorization",
    "dsn",
)


def setup_logfire(app: FastAPI, settings: Settings) -> None:
    """
    Initialize and configure Pydantic Logfire for observability.

    Sets up:
    - FastAPI instrumentation (request/response tracing)
    - httpx instrumentation (Graph API calls)
    - PydanticAI instrumentation (completion calls)
    - Environment-aware Python logging format
    """
    logfire_config: dict[str, Any] = {
        "environment": settings.env,
        "send_to_logfire": "if-token-present",
    }
    if settings.logfire_token:
        logfire_config["token"] = settings.logfire_token

    logfire.configure(**logfire_config)

    logfire.instrument_fastapi(app)
    logfire.instrument_httpx()
    logfire.instrument_pydantic_ai()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.env == "local":
        # Local: Console formatting for development
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    else:
        # Logfire handles structured formatting
        logging.basicConfig(level=log_level, format="%(message)s")


def mask_pii(value: str | None, mask_char: str = "*") -> str:
    """
    Mask potentially sensitive data in logs.

    Shows the first and last two characters of values longer than four.
    """
    if not value:
        return ""

    if len(value) <= 4:
        return mask_char * len(value)

    return f"{value[:2]}{mask_char * (len(value) - 4)}{value[-2:]}"


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(fragment in lowered for fragment in SENSITIVE_KEY_FRAGMENTS)


def redact_tokens(data: dict[str, Any]) -> dict[str, Any]:
    """
    Redact authentication tokens and API keys from log data.

    Keys containing a sensitive fragment (e.g. `openai_api_key`,
    `facebook_page_access_token`) are masked; nested dicts are walked.
    """
    redacted = data.copy()
    for key, value in redacted.items():
        if isinstance(value, dict):
            redacted[key] = redact_tokens(value)
        elif _is_sensitive(key) and isinstance(value, str):
            redacted[key] = mask_pii(value)

    return redacted
