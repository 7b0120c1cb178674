"""Post replies to Facebook objects via the Graph API."""

import time
from typing import Any

import httpx
import logfire

from src.config import Settings
from src.constants import ERROR_BODY_LOG_CHARS, GRAPH_API_BASE_URL
from src.logging_config import mask_pii
from src.models.relay_models import ReplyResult


def _graph_error_message(response: httpx.Response) -> str:
    """Extract `error.message` from a Graph API error body, else the raw text."""
    try:
        data: Any = response.json()
    except ValueError:
        return response.text[:ERROR_BODY_LOG_CHARS]
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return response.text[:ERROR_BODY_LOG_CHARS]


class GraphReplyPublisher:
    """Publish a text comment on a post or comment through the Graph API."""

    def __init__(self, settings: Settings):
        self._token = settings.facebook_page_access_token
        self._api_version = settings.graph_api_version
        self._timeout = settings.facebook_api_timeout_seconds

    def comments_url(self, target_id: str) -> str:
        return f"{GRAPH_API_BASE_URL}/{self._api_version}/{target_id}/comments"

    async def publish(self, target_id: str, text: str) -> ReplyResult:
        """
        Post `text` as a comment on `target_id`.

        Errors are logged and returned in the result, never raised. Without a
        page access token the call is skipped entirely.

        Args:
            target_id: Graph object id of the post or comment
            text: Comment text

        Returns:
            ReplyResult with status sent, skipped or failed
        """
        if not self._token:
            logfire.error(
                "FACEBOOK_PAGE_ACCESS_TOKEN is not configured, skipping reply",
                target_id=target_id,
            )
            return ReplyResult(
                target_id=target_id,
                status="skipped",
                error="FACEBOOK_PAGE_ACCESS_TOKEN is not configured",
            )

        start_time = time.time()
        url = self.comments_url(target_id)
        payload = {"message": text, "access_token": self._token}

        logfire.info(
            "Sending Facebook comment",
            target_id=target_id,
            message_length=len(text),
            api_version=self._api_version,
            access_token=mask_pii(self._token),
        )

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(url, json=payload)
        except httpx.RequestError as e:
            elapsed = time.time() - start_time
            logfire.error(
                "Facebook API request error",
                target_id=target_id,
                error=str(e),
                error_type=type(e).__name__,
                response_time_ms=elapsed * 1000,
            )
            return ReplyResult(
                target_id=target_id,
                status="failed",
                error=f"{type(e).__name__}: {e}",
            )

        elapsed = time.time() - start_time
        if response.is_success:
            comment_id = None
            try:
                data = response.json()
                if isinstance(data, dict):
                    comment_id = data.get("id")
            except ValueError:
                pass
            logfire.info(
                "Facebook comment posted successfully",
                target_id=target_id,
                status_code=response.status_code,
                comment_id=comment_id,
                response_time_ms=elapsed * 1000,
            )
            return ReplyResult(
                target_id=target_id,
                status="sent",
                status_code=response.status_code,
                comment_id=str(comment_id) if comment_id is not None else None,
            )

        error_message = _graph_error_message(response)
        logfire.error(
            "Facebook comment send failed",
            target_id=target_id,
            status_code=response.status_code,
            error=error_message,
            response_time_ms=elapsed * 1000,
        )
        return ReplyResult(
            target_id=target_id,
            status="failed",
            status_code=response.status_code,
            error=error_message,
        )
