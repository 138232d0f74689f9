"""
Ollama Provider for LLM Exec.

Talks to a local Ollama server's /api/chat endpoint without streaming.
"""

from typing import Sequence

import httpx

from llmexec.agent.providers.base import LLMProvider, LLMResponse, Message, token_usage

DEFAULT_BASE_URL = "http://localhost:11434"


class OllamaProvider(LLMProvider):
    """
    Ollama local model provider. No API key is needed.

    ``request_timeout`` of None lets a slow local model take as long as it
    needs, matching the unbounded completion default.

    Example:
        provider = OllamaProvider(model="qwen2.5-coder:7b")
        response = await provider.complete([Message(role="user", content="Add 5 and 3")])
    """

    name = "ollama"

    def __init__(
        self,
        model: str = "qwen2.5-coder:7b",
        base_url: str = DEFAULT_BASE_URL,
        **kwargs,
    ):
        super().__init__(model, **kwargs)
        self.base_url = base_url.rstrip("/")

    def build_payload(self, messages: Sequence[Message], **kwargs) -> dict:
        return {
            "model": self.model,
            "messages": self.to_chat_messages(messages),
            "stream": False,
            "options": {
                "temperature": kwargs.get("temperature", self.temperature),
                "num_predict": kwargs.get("max_tokens", self.max_tokens),
            },
        }

    async def complete(self, messages: Sequence[Message], **kwargs) -> LLMResponse:
        """
        Send one chat request.

        Raises:
            httpx.HTTPStatusError: On a non-2xx reply
            RuntimeError: If Ollama answers with an error body
        """
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.request_timeout) as client:
            response = await client.post("/api/chat", json=self.build_payload(messages, **kwargs))
            response.raise_for_status()
            data = response.json()

        if "error" in data:
            raise RuntimeError(f"Ollama error: {data['error']}")

        return LLMResponse(
            content=(data.get("message") or {}).get("content", ""),
            model=data.get("model", self.model),
            usage=token_usage(data.get("prompt_eval_count"), data.get("eval_count")),
            finish_reason=data.get("done_reason") or "stop",
            raw_response=data,
        )
