"""
LLM Exec - Generate-and-Run Code Agent

A small two-stage agent workflow: a language model writes a
self-contained ``execute`` function and a time-boxed sandbox runs it.
"""

__version__ = "0.1.0"

from llmexec.config import Settings, get_settings

# Lazy imports for heavy modules
def get_agent():
    """Get the CodeAgent class."""
    from llmexec.agent import CodeAgent
    return CodeAgent

def create_agent(**kwargs):
    """Create a CodeAgent instance."""
    from llmexec.agent import create_agent as _create
    return _create(**kwargs)

__all__ = [
    "Settings",
    "get_settings",
    "get_agent",
    "create_agent",
    "__version__",
]
