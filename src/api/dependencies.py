"""FastAPI dependency providers for the relay services.

Services are built once during application startup and kept on
`app.state`; these providers hand them to the route handlers and fall back
to building them from settings when the lifespan has not run.
"""

from fastapi import Depends, Request

from src.config import Settings, get_settings
from src.services.completion_service import CompletionClient
from src.services.event_dispatcher import EventDispatcher
from src.services.facebook_service import GraphReplyPublisher


def get_app_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    return settings or get_settings()


def build_event_dispatcher(settings: Settings) -> EventDispatcher:
    """Wire the completion client and Graph publisher into a dispatcher."""
    return EventDispatcher(
        completion_service=CompletionClient(settings),
        reply_publisher=GraphReplyPublisher(settings),
    )


def get_event_dispatcher(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> EventDispatcher:
    dispatcher = getattr(request.app.state, "dispatcher", None)
    return dispatcher or build_event_dispatcher(settings)
