"""
Workflow Controller for LLM Exec.

Runs the fixed stage sequence: START -> generate_code -> evaluate_code -> END.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from llmexec.agent.core.state import ConversationState, StateUpdate, assistant
from llmexec.agent.prompts.templates import INTERNAL_ERROR_MESSAGE

logger = logging.getLogger(__name__)

Stage = Callable[[ConversationState], Awaitable[StateUpdate]]


@dataclass
class WorkflowRun:
    """Result of one workflow invocation."""

    request: str
    state: ConversationState
    node_seconds: Dict[str, float] = field(default_factory=dict)
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        """Get duration in seconds."""
        if self.started_at and self.ended_at:
            return (self.ended_at - self.started_at).total_seconds()
        return 0.0

    @property
    def succeeded(self) -> bool:
        """True when the generated code ran and produced a result."""
        result = self.state.evaluation_result
        return bool(result) and result.startswith("Execution successful")

    def summary(self) -> str:
        """Generate summary string."""
        lines = [
            "=" * 60,
            "Workflow Summary",
            "=" * 60,
            f"Request: {self.request}",
            f"Messages: {len(self.state.messages)}",
            f"Code Generated: {'yes' if self.state.generated_code else 'no'}",
            f"Result: {self.state.evaluation_result or 'None'}",
        ]
        for name, seconds in self.node_seconds.items():
            lines.append(f"  {name}: {seconds:.2f}s")
        lines.append(f"Duration: {self.duration_seconds:.1f}s")
        lines.append("=" * 60)
        return "\n".join(lines)


class CodeWorkflow:
    """
    Linear two-stage workflow.

    Stages run strictly one after another. An unexpected exception inside a
    stage is turned into one appended assistant message and the next stage
    still runs, so every invocation reaches the end.

    Example:
        workflow = CodeWorkflow(generator=CodeGenerator(llm), evaluator=SandboxedEvaluator(executor))
        state = await workflow.invoke("Add 5 and 3")
        print(state.evaluation_result)
    """

    def __init__(self, generator: Stage, evaluator: Stage):
        """
        Initialize workflow.

        Args:
            generator: Code generation stage
            evaluator: Sandboxed evaluation stage
        """
        self.nodes: List[Tuple[str, str, Stage]] = [
            ("generate_code", "generation", generator),
            ("evaluate_code", "evaluation", evaluator),
        ]

    async def _run_node(
        self,
        name: str,
        phase: str,
        stage: Stage,
        state: ConversationState,
    ) -> ConversationState:
        try:
            update = await stage(state)
        except Exception as e:
            logger.exception("Unhandled error in %s", name)
            update = StateUpdate(
                messages=(assistant(INTERNAL_ERROR_MESSAGE.format(phase=phase, error=e)),)
            )
        return state.apply(update)

    async def run_state(self, state: ConversationState, request: str = "") -> WorkflowRun:
        """
        Run every stage starting from ``state``.

        Args:
            state: Initial conversation state
            request: Original request text, for reporting

        Returns:
            WorkflowRun with the final state
        """
        run = WorkflowRun(request=request, state=state, started_at=datetime.now())

        try:
            for name, phase, stage in self.nodes:
                node_start = time.perf_counter()
                run.state = await self._run_node(name, phase, stage, run.state)
                run.node_seconds[name] = time.perf_counter() - node_start
        except Exception as e:
            logger.exception("Workflow failed")
            run.state = run.state.apply(
                StateUpdate(messages=(assistant(f"Workflow failed: {e}"),))
            )

        run.ended_at = datetime.now()
        return run

    async def run(self, request: str) -> WorkflowRun:
        """Run the workflow on a fresh state seeded with ``request``."""
        logger.info("Running workflow for request: %r", request)
        return await self.run_state(ConversationState.from_request(request), request=request)

    async def invoke(self, request: str) -> ConversationState:
        """Run the workflow and return only the final state."""
        run = await self.run(request)
        return run.state

    async def invoke_state(self, state: ConversationState) -> ConversationState:
        run = await self.run_state(state, request=state.last_human_content())
        return run.state
