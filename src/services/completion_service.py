"""PydanticAI completion client for group replies."""

import logging
import time

import logfire
from openai import AsyncOpenAI
from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider

from src.config import Settings
from src.models.relay_models import CompletionResult

logger = logging.getLogger(__name__)


def build_openai_model(settings: Settings) -> OpenAIChatModel:
    """Build the chat-completion model from settings.

    The OpenAI client is created with retries disabled: one prompt maps to
    exactly one request.
    """
    client = AsyncOpenAI(api_key=settings.openai_api_key, max_retries=0)
    return OpenAIChatModel(
        settings.completion_model,
        provider=OpenAIProvider(openai_client=client),
    )


class CompletionClient:
    """Service for generating reply text with a single chat completion."""

    def __init__(self, settings: Settings, model: Model | str | None = None):
        """
        Initialize the completion client.

        Args:
            settings: Application settings (API key, model name, prompts)
            model: Optional model override (e.g. a pydantic-ai TestModel);
                   defaults to the OpenAI chat model from settings
        """
        self._fallback_reply = settings.fallback_reply
        self._model_name = settings.completion_model
        self.agent = Agent(
            model or build_openai_model(settings),
            system_prompt=settings.system_prompt,
        )

        logger.info(f"CompletionClient initialized with model: {self._model_name}")

    async def complete(self, prompt: str) -> CompletionResult:
        """
        Generate a reply for a user message.

        Args:
            prompt: The user's message text (may be empty)

        Returns:
            CompletionResult; on any failure the text is the fallback reply
        """
        start_time = time.time()
        try:
            result = await self.agent.run(prompt)
        except Exception as e:
            elapsed = time.time() - start_time
            logfire.error(
                "Completion request failed, using fallback reply",
                model=self._model_name,
                error=str(e),
                error_type=type(e).__name__,
                response_time_ms=elapsed * 1000,
            )
            return CompletionResult(
                text=self._fallback_reply,
                succeeded=False,
                error=f"{type(e).__name__}: {e}",
            )

        elapsed = time.time() - start_time
        text = result.output
        logfire.info(
            "Completion generated",
            model=self._model_name,
            prompt_length=len(prompt),
            response_length=len(text),
            response_time_ms=elapsed * 1000,
        )
        return CompletionResult(text=text)


def get_completion_client(settings: Settings) -> CompletionClient:
    """Get completion client instance."""
    return CompletionClient(settings)
