"""
Sandboxed Evaluator for LLM Exec.

Second workflow stage: runs ``generated_code`` through the sandbox and
records a human-readable outcome. Failures are values here, never
exceptions.
"""

import asyncio
import logging

from llmexec.agent.core.state import ConversationState, StateUpdate, assistant
from llmexec.agent.prompts.templates import (
    EVALUATION_MESSAGE,
    EXECUTION_FAILURE,
    EXECUTION_SUCCESS,
    NO_CODE_MESSAGE,
)
from llmexec.agent.sandbox.executor import ExecutionResult, SafeExecutor

logger = logging.getLogger(__name__)


def describe_execution(result: ExecutionResult) -> str:
    """Display string for an execution outcome."""
    if result.success:
        return EXECUTION_SUCCESS.format(value=result.display)
    return EXECUTION_FAILURE.format(error=result.error)


class SandboxedEvaluator:
    """
    Runs previously generated code in a fresh sandbox per call.

    Example:
        evaluator = SandboxedEvaluator(SafeExecutor(timeout_ms=1000))
        update = await evaluator(state)
    """

    def __init__(self, executor: SafeExecutor):
        self.executor = executor

    async def evaluate(self, code: str) -> str:
        """Execute ``code`` off the event loop and describe the outcome."""
        result = await asyncio.to_thread(self.executor.execute, code)

        if result.success:
            logger.info("Execution succeeded in %.3fs: %s", result.execution_time, result.display)
        else:
            logger.warning("Execution failed (%s): %s", result.error_type, result.error)

        return describe_execution(result)

    async def __call__(self, state: ConversationState) -> StateUpdate:
        """Run the evaluation stage on ``state``."""
        code = state.generated_code
        if not code:
            return StateUpdate(messages=(assistant(NO_CODE_MESSAGE),))

        outcome = await self.evaluate(code)
        return StateUpdate(
            messages=(assistant(EVALUATION_MESSAGE.format(result=outcome)),),
            evaluation_result=outcome,
        )
