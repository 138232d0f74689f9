"""
Core components for LLM Exec Agent.

Contains the conversation state and the workflow controller.
"""

from llmexec.agent.core.state import (
    ConversationState,
    StateUpdate,
    NO_REQUEST,
    human,
    assistant,
)
from llmexec.agent.core.workflow import (
    CodeWorkflow,
    WorkflowRun,
)

__all__ = [
    "ConversationState",
    "StateUpdate",
    "NO_REQUEST",
    "human",
    "assistant",
    "CodeWorkflow",
    "WorkflowRun",
]
