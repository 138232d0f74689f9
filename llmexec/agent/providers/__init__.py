"""
LLM Providers for LLM Exec.

Supports multiple LLM backends: OpenAI, Azure OpenAI, Anthropic, Ollama.
"""

from llmexec.agent.providers.base import (
    LLMProvider,
    LLMResponse,
    Message,
    get_provider,
)

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "Message",
    "get_provider",
]
