"""
Conversation State for LLM Exec.

The state passed between workflow stages. It is never mutated: a stage
returns a ``StateUpdate`` and the workflow builds the next state with
``ConversationState.apply``.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from llmexec.agent.providers.base import Message

NO_REQUEST = "No user request provided"


def human(content: str) -> Message:
    return Message(role="user", content=content)


def assistant(content: str) -> Message:
    return Message(role="assistant", content=content)


@dataclass(frozen=True)
class StateUpdate:
    """Partial update returned by a stage."""

    messages: Tuple[Message, ...] = ()
    generated_code: Optional[str] = None
    evaluation_result: Optional[str] = None


@dataclass(frozen=True)
class ConversationState:
    """
    Append-only conversation transcript plus the last stage outputs.

    ``generated_code`` is written only by the code generator and
    ``evaluation_result`` only by the evaluator; both are overwritten,
    never accumulated.
    """

    messages: Tuple[Message, ...] = field(default_factory=tuple)
    generated_code: Optional[str] = None
    evaluation_result: Optional[str] = None

    @classmethod
    def from_request(cls, request: str) -> "ConversationState":
        """Fresh state seeded with a single human message."""
        return cls(messages=(human(request),))

    @property
    def last_message(self) -> Optional[Message]:
        return self.messages[-1] if self.messages else None

    def last_human_content(self, default: str = NO_REQUEST) -> str:
        """Content of the last message if a human sent it, else ``default``."""
        last = self.last_message
        if last is None or not last.is_human:
            return default
        return last.content

    def apply(self, update: StateUpdate) -> "ConversationState":
        """
        Merge a stage update into a new state.

        Messages are concatenated; optional fields take the update's value
        when it is set and keep the current one otherwise.
        """
        return replace(
            self,
            messages=self.messages + tuple(update.messages),
            generated_code=(
                update.generated_code
                if update.generated_code is not None
                else self.generated_code
            ),
            evaluation_result=(
                update.evaluation_result
                if update.evaluation_result is not None
                else self.evaluation_result
            ),
        )

    def transcript(self) -> str:
        return "\n".join(m.content for m in self.messages)
