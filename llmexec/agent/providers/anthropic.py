"""
Anthropic Provider for LLM Exec.

Claude's messages API takes the system prompt as a separate parameter
and wants the conversation to open with a user turn.
"""

import os
from typing import Any, Dict, Optional, Sequence

import anthropic

from llmexec.agent.providers.base import LLMProvider, LLMResponse, Message, token_usage


class AnthropicProvider(LLMProvider):
    """
    Anthropic Claude provider.

    Example:
        provider = AnthropicProvider(model="claude-3-5-sonnet-latest", request_timeout=60)
        response = await provider.complete([Message(role="user", content="Add 5 and 3")])
    """

    name = "anthropic"

    def __init__(
        self,
        model: str = "claude-3-5-sonnet-latest",
        api_key: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(model, **kwargs)

        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not self.api_key:
            raise ValueError(
                "Anthropic API key required. Set ANTHROPIC_API_KEY or pass api_key."
            )

        self.client = anthropic.AsyncAnthropic(api_key=self.api_key, **self.client_options())

    def build_request(self, messages: Sequence[Message], **kwargs) -> Dict[str, Any]:
        """
        Map chat messages onto messages.create arguments.

        Raises:
            ValueError: If nothing but system messages were given, or the
                first remaining turn is not from the user
        """
        system, conversation = self.split_system(messages)
        if not conversation:
            raise ValueError("Anthropic needs at least one user message")
        if conversation[0]["role"] != "user":
            raise ValueError(
                f"Anthropic conversations must start with a user turn, got {conversation[0]['role']!r}"
            )

        request = {
            "model": self.model,
            "messages": conversation,
            "max_tokens": kwargs.get("max_tokens", self.max_tokens),
            "temperature": kwargs.get("temperature", self.temperature),
        }
        if system is not None:
            request["system"] = system
        return request

    async def complete(self, messages: Sequence[Message], **kwargs) -> LLMResponse:
        response = await self.client.messages.create(**self.build_request(messages, **kwargs))

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )

        return LLMResponse(
            content=text,
            model=response.model,
            usage=token_usage(response.usage.input_tokens, response.usage.output_tokens),
            finish_reason=response.stop_reason or "unknown",
            raw_response=response,
        )
