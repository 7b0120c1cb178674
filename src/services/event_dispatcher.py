"""Webhook event dispatching.

Turns one group webhook delivery into reply requests and runs each through
the completion and reply steps:

1. Validate the payload shape (non-group or malformed payloads are ignored;
   unreadable entries and changes are skipped individually)
2. Extract (message, target id) pairs from comments/posts changes
3. For each pair, in arrival order: complete, then publish

Nothing here deduplicates: the same payload delivered twice is processed
twice.
"""

from __future__ import annotations

import logging
from typing import Any, NamedTuple

import logfire
from pydantic import ValidationError

from src.models.graph_events import InboundEvent, ReplyRequest
from src.models.relay_models import DispatchSummary
from src.services.messaging_protocol import CompletionService, ReplyPublisher

logger = logging.getLogger(__name__)


class ReplyTarget(NamedTuple):
    """A message worth answering and the Graph object to answer on."""

    message: str
    target_id: str


def parse_event(payload: Any) -> InboundEvent | None:
    """Validate a decoded JSON body as an InboundEvent.

    Returns None when the body does not fit the expected shape.
    """
    if not isinstance(payload, dict):
        return None
    try:
        return InboundEvent.model_validate(payload)
    except ValidationError as e:
        logfire.warning(
            "Ignoring malformed webhook payload",
            error_count=e.error_count(),
        )
        return None


def extract_reply_targets(event: InboundEvent) -> list[ReplyTarget]:
    """Collect reply targets from a group event, preserving arrival order."""
    if not event.is_group_event:
        return []

    targets: list[ReplyTarget] = []
    for entry in event.entry:
        for change in entry.changes:
            if not change.is_replyable:
                continue
            message = change.value.message
            target_id = change.value.target_id
            if message and target_id:
                targets.append(ReplyTarget(message=message, target_id=target_id))
    return targets


class EventDispatcher:
    """Run completion and reply for every qualifying change of a delivery.

    Example:
        >>> dispatcher = EventDispatcher(completion_client, publisher)
        >>> summary = await dispatcher.dispatch(payload)
        >>> summary.sent_count
        1
    """

    def __init__(
        self,
        completion_service: CompletionService,
        reply_publisher: ReplyPublisher,
    ):
        self._completion_service = completion_service
        self._reply_publisher = reply_publisher

    async def dispatch(self, payload: Any) -> DispatchSummary:
        """Process one decoded webhook body.

        Args:
            payload: Decoded JSON body of the delivery

        Returns:
            DispatchSummary describing the requests made and their outcomes
        """
        event = parse_event(payload)
        if event is None:
            return DispatchSummary(ignored=True, reason="malformed payload")

        if not event.is_group_event:
            logger.info("Ignoring webhook for object %r", event.object)
            return DispatchSummary(ignored=True, reason=f"object={event.object}")

        summary = DispatchSummary()
        for target in extract_reply_targets(event):
            logfire.info(
                "Received group message",
                target_id=target.target_id,
                message_length=len(target.message),
            )

            completion = await self._completion_service.complete(target.message)
            request = ReplyRequest(target_id=target.target_id, text=completion.text)
            summary.requests.append(request)

            reply = await self._reply_publisher.publish(request.target_id, request.text)
            summary.replies.append(reply)

        logfire.info(
            "Webhook delivery processed",
            request_count=len(summary.requests),
            sent_count=summary.sent_count,
        )
        return summary
