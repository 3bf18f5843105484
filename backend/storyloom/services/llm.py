"""
Completion transport.

Sends one structured-output chat request to an OpenAI-compatible router.
Racing, parsing and logging live in the agent runner; this is the transport layer.
"""

from typing import Protocol

from openai import AsyncOpenAI

from storyloom.config import Settings
from storyloom.errors import CompletionError
from storyloom.logging import get_logger
from storyloom.models import ChatPayload

logger = get_logger('services.llm')


class CompletionClient(Protocol):
    """Anything that answers a chat payload with the raw message content."""

    async def chat(self, payload: ChatPayload) -> str:
        ...


class CompletionService:
    """OpenRouter chat completions through the OpenAI SDK. No retries."""

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None):
        self._api_key = settings.OPENROUTER_API_KEY
        self._base_url = settings.OPENROUTER_BASE_URL
        self._client = client

    @property
    def is_available(self) -> bool:
        return self._client is not None or bool(self._api_key)

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._api_key:
                raise CompletionError("OPENROUTER_API_KEY not set")
            self._client = AsyncOpenAI(api_key=self._api_key, base_url=self._base_url)
        return self._client

    async def chat(self, payload: ChatPayload) -> str:
        """
        Send one completion request.

        :param payload: Model, messages, sampling parameters and response format
        :type payload: ChatPayload
        :return: Message content of the first choice
        :rtype: str
        :raises CompletionError: If the transport is not configured or the body has no content
        """
        kwargs = {
            "model": payload.model,
            "messages": [m.model_dump() for m in payload.messages],
            "response_format": payload.response_format.model_dump(by_alias=True),
            "stream": False,
            "extra_body": {"reasoning": {"exclude": True}},
        }
        if payload.temperature is not None:
            kwargs["temperature"] = payload.temperature
        if payload.top_p is not None:
            kwargs["top_p"] = payload.top_p
        if payload.max_tokens is not None:
            kwargs["max_tokens"] = payload.max_tokens

        response = await self.client.chat.completions.create(**kwargs)

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content:
            logger.error(f"Completion for {payload.model} returned no message content")
            raise CompletionError(f"Completion response for {payload.model} had no message content")
        return content
