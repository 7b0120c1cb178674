"""Shared pytest fixtures and configuration.

Fixture Categories:
1. Settings: settings_factory, test_settings, settings_without_page_token
2. Completion: completion_client_hello, failing_completion_client
3. Publishing: recording_publisher, dispatcher_hello
4. Payloads: payload_factory, group_comment_payload, group_post_payload
5. Infrastructure: respx_mock, test_client, logfire_capture
"""

import os
from unittest.mock import patch

import logfire
import pytest
import respx
from pydantic_ai.messages import ModelMessage, ModelResponse
from pydantic_ai.models.function import AgentInfo, FunctionModel
from pydantic_ai.models.test import TestModel

from src.config import Settings, get_settings
from src.services.completion_service import CompletionClient
from src.services.event_dispatcher import EventDispatcher
from src.services.messaging_protocol import RecordingReplyPublisher

# Suppress warnings when logfire isn't configured during tests
os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")


def make_settings(**overrides) -> Settings:
    """Build Settings without reading .env files."""
    values = {
        "openai_api_key": "sk-test-key",
        "facebook_page_access_token": "page-token-123",
        "facebook_verify_token": "test-verify-token-123",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def clear_settings_cache():
    """Keep cached settings from leaking between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def respx_mock():
    """Respx mock fixture for HTTP mocking."""
    with respx.mock(assert_all_called=False) as router:
        yield router


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture
def settings_factory():
    """Factory building Settings with overrides."""
    return make_settings


@pytest.fixture
def test_settings():
    """Settings with every secret present."""
    return make_settings()


@pytest.fixture
def settings_without_page_token():
    """Settings where FACEBOOK_PAGE_ACCESS_TOKEN is unset."""
    return make_settings(facebook_page_access_token=None)


# =============================================================================
# Completion
# =============================================================================


def _raise_transport_error(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
    raise ConnectionError("simulated transport error")


@pytest.fixture
def completion_client_hello(test_settings):
    """Completion client whose model deterministically answers "hello"."""
    return CompletionClient(test_settings, model=TestModel(custom_output_text="hello"))


@pytest.fixture
def failing_completion_client(test_settings):
    """Completion client whose model raises a transport error."""
    return CompletionClient(test_settings, model=FunctionModel(_raise_transport_error))


# =============================================================================
# Publishing
# =============================================================================


@pytest.fixture
def recording_publisher():
    """Reply publisher that records (target_id, text) instead of posting."""
    return RecordingReplyPublisher()


@pytest.fixture
def dispatcher_hello(completion_client_hello, recording_publisher):
    """Dispatcher wired with the "hello" completion and a recording publisher."""
    return EventDispatcher(completion_client_hello, recording_publisher)


# =============================================================================
# Payloads
# =============================================================================


def make_group_payload(*changes: dict, object_type: str = "group") -> dict:
    return {
        "object": object_type,
        "entry": [{"id": "group-1", "time": 1700000000, "changes": list(changes)}],
    }


@pytest.fixture
def payload_factory():
    """Factory building group payloads from change dicts."""
    return make_group_payload


@pytest.fixture
def group_comment_payload():
    return make_group_payload(
        {"field": "comments", "value": {"message": "hi", "comment_id": "123"}}
    )


@pytest.fixture
def group_post_payload():
    return make_group_payload(
        {
            "field": "posts",
            "value": {"message": "What's the weather?", "post_id": "P1"},
        }
    )


# =============================================================================
# Infrastructure
# =============================================================================


@pytest.fixture
def test_client(test_settings):
    """FastAPI TestClient for E2E tests, using test_settings."""
    from fastapi.testclient import TestClient

    from src.api.dependencies import get_app_settings
    from src.main import app

    app.dependency_overrides[get_app_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def logfire_capture():
    """
    Capture Logfire logs for testing.

    This fixture patches Logfire to capture log calls for assertion.
    """
    captured_logs = []

    def capture(level):
        def _capture(*args, **kwargs):
            captured_logs.append((level, args, kwargs))

        return _capture

    with patch.object(logfire, "info", capture("info")), patch.object(
        logfire, "warning", capture("warning")
    ), patch.object(logfire, "error", capture("error")):
        yield captured_logs
