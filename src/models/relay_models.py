"""Result models for the completion and reply steps.

Downstream failures never escape the relay; these models carry what happened
back to the dispatcher (and to tests) instead.
"""

from typing import Literal

from pydantic import BaseModel, Field

from src.models.graph_events import ReplyRequest


class CompletionResult(BaseModel):
    """Outcome of one completion call.

    `text` is always usable: it is either the model output or the
    configured fallback reply when the call failed.
    """

    text: str
    succeeded: bool = True
    error: str | None = Field(
        default=None, description="Error description when the fallback was used"
    )

    @property
    def used_fallback(self) -> bool:
        return not self.succeeded


ReplyStatus = Literal["sent", "skipped", "failed"]


class ReplyResult(BaseModel):
    """Outcome of posting one comment to the Graph API."""

    target_id: str
    status: ReplyStatus
    status_code: int | None = None
    comment_id: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "sent"


class DispatchSummary(BaseModel):
    """What one webhook delivery produced."""

    ignored: bool = False
    reason: str | None = None
    requests: list[ReplyRequest] = Field(default_factory=list)
    replies: list[ReplyResult] = Field(default_factory=list)

    @property
    def sent_count(self) -> int:
        return sum(1 for reply in self.replies if reply.ok)
