"""Facebook group webhook endpoints.

GET answers the subscription handshake. POST receives group change
notifications and always acknowledges with 200 `EVENT_RECEIVED`: any other
answer makes Facebook redeliver the same payload, so every failure below the
acknowledgement is logged and absorbed.
"""

import json
import logging
from typing import Any

import logfire
import sentry_sdk
from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from fastapi.responses import PlainTextResponse

from src.api.dependencies import get_app_settings, get_event_dispatcher
from src.config import Settings
from src.constants import EVENT_RECEIVED, SIGNATURE_HEADER
from src.models.relay_models import DispatchSummary
from src.services.event_dispatcher import EventDispatcher
from src.services.signature import tokens_match, verify_payload_signature

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def verify_webhook(
    request: Request,
    settings: Settings = Depends(get_app_settings),
):
    """Facebook webhook verification endpoint."""
    mode = request.query_params.get("hub.mode")
    token = request.query_params.get("hub.verify_token")
    challenge = request.query_params.get("hub.challenge")

    if mode and tokens_match(token, settings.facebook_verify_token):
        logger.info("Webhook verified successfully")
        return PlainTextResponse(challenge or "")

    logger.warning("Webhook verification failed")
    return Response(status_code=403)


@router.post("")
async def handle_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(get_app_settings),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
):
    """Handle incoming Facebook group webhook events."""
    body = await request.body()

    if settings.facebook_app_secret and not verify_payload_signature(
        body,
        request.headers.get(SIGNATURE_HEADER),
        settings.facebook_app_secret,
    ):
        logger.warning("Ignoring webhook delivery with invalid signature")
        return PlainTextResponse(EVENT_RECEIVED)

    try:
        payload = json.loads(body)
    except (ValueError, RecursionError):
        logfire.warning("Ignoring webhook delivery with invalid JSON", body_length=len(body))
        return PlainTextResponse(EVENT_RECEIVED)

    logfire.info(
        "Received webhook",
        object=payload.get("object") if isinstance(payload, dict) else None,
        body_length=len(body),
    )

    correlation_id = getattr(request.state, "correlation_id", None)
    if settings.dispatch_in_background:
        background_tasks.add_task(process_event, dispatcher, payload, correlation_id)
    else:
        await process_event(dispatcher, payload, correlation_id)

    return PlainTextResponse(EVENT_RECEIVED)


async def process_event(
    dispatcher: EventDispatcher,
    payload: Any,
    correlation_id: str | None = None,
) -> DispatchSummary | None:
    """Dispatch one delivery, absorbing any error.

    Background dispatches run after the request span has closed, so the
    delivery gets its own span tagged with the request's correlation ID.

    Args:
        dispatcher: Dispatcher wired with the completion and reply services
        payload: Decoded JSON body of the delivery
        correlation_id: ID of the request that delivered the payload

    Returns:
        The dispatch summary, or None if dispatching raised
    """
    with logfire.span("Process webhook event", correlation_id=correlation_id):
        try:
            return await dispatcher.dispatch(payload)
        except Exception as e:
            logger.error("Error processing webhook event: %s", e, exc_info=True)
            sentry_sdk.capture_exception(e)
            return None
