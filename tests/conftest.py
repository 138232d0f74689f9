"""
Shared fixtures for the test suite.
"""

from typing import List, Optional, Sequence

import pytest

from llmexec.agent.providers.base import LLMProvider, LLMResponse, Message


class ScriptedProvider(LLMProvider):
    """Provider that replies with fixed text, or raises, and records calls."""

    name = "scripted"

    def __init__(self, reply: str = "", error: Optional[Exception] = None):
        super().__init__(model="scripted-model")
        self.reply = reply
        self.error = error
        self.calls: List[List[Message]] = []

    async def complete(self, messages: Sequence[Message], **kwargs) -> LLMResponse:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return LLMResponse(
            content=self.reply,
            model=self.model,
            usage={"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0},
            finish_reason="stop",
        )


@pytest.fixture
def scripted_llm():
    """Factory for providers with a canned reply or error."""
    def _make(reply: str = "", error: Optional[Exception] = None) -> ScriptedProvider:
        return ScriptedProvider(reply=reply, error=error)
    return _make


@pytest.fixture
def add_reply():
    """Model reply defining execute() that adds 5 and 3."""
    return (
        "Here is the function:\n"
        "```python\n"
        "def execute():\n"
        "    return 5 + 3\n"
        "```\n"
    )
