"""LLM client implementations for recipe parsing.

Provides an interface for sending chat messages to an OpenAI-compatible
chat completions endpoint and returning the reply text.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import requests

from ..config import RecipeParsingConfig
from .messages import ChatMessage

logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
    """Raised when an LLM call is misconfigured or returns an unusable reply."""


class LLMClient(ABC):
    """Abstract interface for chat completion clients.

    Implementations must provide a call_chat() method that takes an ordered
    message list and a model name and returns the reply text.
    """

    @abstractmethod
    def call_chat(self, messages: list[ChatMessage], model: str) -> str:
        """Send messages and return the reply content.

        Args:
            messages: Ordered chat messages
            model: Model name to request

        Returns:
            Reply text exactly as returned (not trimmed)

        Raises:
            LLMError: On configuration problems, non-200 status or bad reply shape
        """
        pass

    @property
    @abstractmethod
    def engine_name(self) -> str:
        """Return engine identifier (e.g., 'fake', 'openai')."""
        pass


class FakeLLMClient(LLMClient):
    """Deterministic fake LLM client for testing.

    Replays canned responses in order and records every call. An exception
    instance in the response list is raised instead of returned.
    """

    def __init__(self, responses: list[Any] | None = None, default: str = ""):
        self.responses = list(responses or [])
        self.default = default
        self.calls: list[tuple[list[ChatMessage], str]] = []

    @property
    def engine_name(self) -> str:
        return "fake"

    def call_chat(self, messages: list[ChatMessage], model: str) -> str:
        self.calls.append((messages, model))
        response = self.responses.pop(0) if self.responses else self.default
        if isinstance(response, Exception):
            raise response
        return response


class ChatCompletionsClient(LLMClient):
    """Client for OpenAI-compatible chat completions endpoints.

    Makes a single POST per call; there is no retry.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str = "",
        temperature: float = 0.2,
        timeout_seconds: int = 60,
    ):
        """Initialize chat completions client.

        Args:
            endpoint: Full chat completions URL
            api_key: Bearer token; blank means no Authorization header
            temperature: Sampling temperature sent with every request
            timeout_seconds: HTTP timeout for each request
        """
        self.endpoint = endpoint
        self.api_key = api_key
        self.temperature = temperature
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_config(cls, config: RecipeParsingConfig) -> "ChatCompletionsClient":
        return cls(
            endpoint=config.llm_endpoint,
            api_key=config.api_key,
            temperature=config.temperature,
            timeout_seconds=config.timeout_seconds,
        )

    @property
    def engine_name(self) -> str:
        return "openai"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        api_key = self.api_key.strip()
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    def call_chat(self, messages: list[ChatMessage], model: str) -> str:
        """Call the configured endpoint."""
        if not self.endpoint.strip():
            raise LLMError("LLM endpoint is empty")

        trimmed_model = model.strip()
        if not trimmed_model:
            raise LLMError("Model is empty")

        data = {
            "model": trimmed_model,
            "messages": [message.to_payload() for message in messages],
            "temperature": self.temperature,
        }
        body = json.dumps(data)
        logger.debug(f"POST {self.endpoint} model={trimmed_model} messages={len(messages)} bytes={len(body)}")

        response = requests.post(
            self.endpoint,
            headers=self._headers(),
            data=body,
            timeout=self.timeout_seconds,
        )

        if response.status_code != 200:
            raise LLMError(f"LLM request failed ({response.status_code})")

        return self._parse_response(response)

    def _parse_response(self, response: requests.Response) -> str:
        """Pull choices[0].message.content out of the reply."""
        try:
            payload = response.json()
        except ValueError:
            raise LLMError("Unexpected LLM response shape") from None

        try:
            content = payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise LLMError("Unexpected LLM response shape") from None

        if not isinstance(content, str):
            raise LLMError("Unexpected LLM response shape")
        return content


def get_llm_client(config: RecipeParsingConfig, engine: str = "openai") -> LLMClient:
    """Get an LLM client for the given engine setting.

    Args:
        config: Loaded configuration
        engine: 'openai' for the configured endpoint, 'fake' for the offline client

    Returns:
        LLMClient implementation
    """
    if engine == "fake":
        return FakeLLMClient()
    if engine == "openai":
        return ChatCompletionsClient.from_config(config)
    raise ValueError(f"Unsupported engine: {engine}")
