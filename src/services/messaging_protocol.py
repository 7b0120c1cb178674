"""Protocols for the two outbound steps of the relay.

The dispatcher depends on these protocols rather than on the concrete
OpenAI and Graph API services, so either side can be swapped or recorded in
tests without HTTP mocking.
"""

from typing import Protocol

from src.models.relay_models import CompletionResult, ReplyResult


class CompletionService(Protocol):
    """Protocol for turning a user message into reply text."""

    async def complete(self, prompt: str) -> CompletionResult:
        """Generate reply text.

        Implementations must not raise on provider failures; they return a
        result carrying fallback text instead.
        """
        ...


class ReplyPublisher(Protocol):
    """Protocol for posting reply text on a Graph object."""

    async def publish(self, target_id: str, text: str) -> ReplyResult:
        """Post `text` on `target_id` and report the outcome."""
        ...


class RecordingReplyPublisher:
    """In-memory ReplyPublisher that records calls instead of posting.

    Example:
        >>> publisher = RecordingReplyPublisher()
        >>> result = await publisher.publish("123", "hello")
        >>> publisher.published
        [('123', 'hello')]
    """

    def __init__(self, should_fail: bool = False):
        self._should_fail = should_fail
        self.published: list[tuple[str, str]] = []

    async def publish(self, target_id: str, text: str) -> ReplyResult:
        """Record the reply and return the configured result."""
        self.published.append((target_id, text))
        if self._should_fail:
            return ReplyResult(
                target_id=target_id, status="failed", error="simulated failure"
            )
        return ReplyResult(target_id=target_id, status="sent", status_code=200)
