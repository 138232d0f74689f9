"""
OpenAI Provider for LLM Exec.

Implements connection to OpenAI chat models, and to any server that
speaks the OpenAI chat-completions API via ``base_url``.
"""

import os
from typing import Optional, Sequence

from llmexec.agent.providers.base import LLMProvider, LLMResponse, Message, token_usage


class OpenAIProvider(LLMProvider):
    """
    OpenAI provider.

    Example:
        provider = OpenAIProvider(model="gpt-4o")
        response = await provider.complete([
            Message(role="user", content="Hello!")
        ])
    """

    name = "openai"

    def __init__(
        self,
        model: str = "gpt-4o",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        **kwargs,
    ):
        """
        Initialize OpenAI provider.

        Args:
            model: OpenAI model identifier
            api_key: API key (defaults to OPENAI_API_KEY env var)
            base_url: API base URL for OpenAI-compatible servers
            **kwargs: Additional arguments passed to base class
        """
        super().__init__(model, **kwargs)

        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError(
                "OpenAI API key required. Set OPENAI_API_KEY environment variable "
                "or pass api_key parameter."
            )

        self.base_url = base_url

        try:
            import openai
        except ImportError:
            raise ImportError(
                "openai package required. Install with: pip install openai"
            )

        self.client = openai.AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            **self.client_options(),
        )

    async def complete(
        self,
        messages: Sequence[Message],
        **kwargs,
    ) -> LLMResponse:
        """
        Send messages to the chat-completions endpoint and get response.
        """
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=self.to_chat_messages(messages),
            temperature=kwargs.get("temperature", self.temperature),
            max_tokens=kwargs.get("max_tokens", self.max_tokens),
        )

        choice = response.choices[0]

        return LLMResponse(
            content=choice.message.content or "",
            model=response.model,
            usage=token_usage(response.usage.prompt_tokens, response.usage.completion_tokens),
            finish_reason=choice.finish_reason or "unknown",
            raw_response=response,
        )
