"""
Sandbox for safe code execution.
"""

from llmexec.agent.sandbox.executor import (
    CodeValidator,
    ExecutionResult,
    SafeExecutor,
    wrap_code,
)
from llmexec.agent.sandbox.evaluator import (
    SandboxedEvaluator,
    describe_execution,
)

__all__ = [
    "CodeValidator",
    "ExecutionResult",
    "SafeExecutor",
    "wrap_code",
    "SandboxedEvaluator",
    "describe_execution",
]
