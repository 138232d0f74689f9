"""
LLM Provider Base Classes for LLM Exec.

Defines abstract interfaces for LLM providers.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Message:
    """Chat message structure."""

    role: str  # "system", "user", "assistant"
    content: str

    @property
    def is_human(self) -> bool:
        return self.role == "user"


@dataclass
class LLMResponse:
    """LLM response structure."""

    content: str
    model: str
    usage: Dict[str, int]  # Token usage
    finish_reason: str
    raw_response: Any = None


def token_usage(prompt_tokens: Optional[int], completion_tokens: Optional[int]) -> Dict[str, int]:
    """Usage dict in the OpenAI shape; missing counts are 0."""
    prompt_tokens = prompt_tokens or 0
    completion_tokens = completion_tokens or 0
    return {
        "prompt_tokens": prompt_tokens,
        "completion_tokens": completion_tokens,
        "total_tokens": prompt_tokens + completion_tokens,
    }


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Subclasses implement connections to OpenAI, Azure OpenAI, Anthropic, Ollama.
    """

    name: str = "base"

    def __init__(
        self,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        request_timeout: Optional[float] = None,
    ):
        """
        Initialize the provider.

        Args:
            model: Model identifier
            temperature: Sampling temperature
            max_tokens: Maximum tokens in response
            request_timeout: HTTP timeout in seconds for the underlying
                client; None leaves the request unbounded
        """
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.request_timeout = request_timeout

    def client_options(self) -> Dict[str, Any]:
        """Keyword arguments shared by the SDK client constructors."""
        if self.request_timeout is None:
            return {}
        return {"timeout": self.request_timeout}

    @abstractmethod
    async def complete(
        self,
        messages: Sequence[Message],
        **kwargs,
    ) -> LLMResponse:
        """
        Send messages and get a response.

        Args:
            messages: Ordered chat messages
            **kwargs: Provider-specific arguments

        Returns:
            LLMResponse
        """
        pass

    async def complete_with_timeout(
        self,
        messages: Sequence[Message],
        timeout: Optional[float] = None,
        **kwargs,
    ) -> LLMResponse:
        """
        Complete, giving up after ``timeout`` seconds.

        Args:
            messages: Ordered chat messages
            timeout: Seconds to wait; None waits indefinitely
            **kwargs: Provider-specific arguments

        Returns:
            LLMResponse

        Raises:
            asyncio.TimeoutError: If the provider did not answer in time
        """
        if timeout is None:
            return await self.complete(messages, **kwargs)
        return await asyncio.wait_for(self.complete(messages, **kwargs), timeout)

    @staticmethod
    def to_chat_messages(messages: Sequence[Message]) -> List[Dict[str, str]]:
        """Convert messages to the OpenAI-style wire format."""
        return [{"role": m.role, "content": m.content} for m in messages]

    @classmethod
    def split_system(
        cls, messages: Sequence[Message]
    ) -> Tuple[Optional[str], List[Dict[str, str]]]:
        """
        Separate system messages for APIs that take them out of band.

        System contents are joined with blank lines; None when there are none.
        """
        system = [m.content for m in messages if m.role == "system"]
        conversation = cls.to_chat_messages([m for m in messages if m.role != "system"])
        return ("\n\n".join(system) if system else None), conversation


def get_provider(
    provider_name: str,
    model: str,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    **kwargs,
) -> LLMProvider:
    """
    Factory function to create LLM provider.

    Args:
        provider_name: Provider name ("openai", "azure", "anthropic", "ollama")
        model: Model identifier
        api_key: API key (if required)
        base_url: Base URL (Ollama, Azure endpoint or OpenAI-compatible server)
        **kwargs: Additional provider-specific arguments

    Returns:
        LLMProvider instance

    Raises:
        ValueError: If provider is not supported
    """
    if provider_name == "openai":
        from llmexec.agent.providers.openai import OpenAIProvider
        return OpenAIProvider(model=model, api_key=api_key, base_url=base_url, **kwargs)

    elif provider_name == "azure":
        from llmexec.agent.providers.azure import AzureOpenAIProvider
        return AzureOpenAIProvider(model=model, api_key=api_key, endpoint=base_url, **kwargs)

    elif provider_name == "anthropic":
        from llmexec.agent.providers.anthropic import AnthropicProvider
        return AnthropicProvider(model=model, api_key=api_key, **kwargs)

    elif provider_name == "ollama":
        from llmexec.agent.providers.ollama import DEFAULT_BASE_URL, OllamaProvider
        return OllamaProvider(
            model=model,
            base_url=base_url or DEFAULT_BASE_URL,
            **kwargs,
        )

    else:
        raise ValueError(f"Unknown provider: {provider_name}")
