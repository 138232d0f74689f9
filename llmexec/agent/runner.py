"""
Code Agent - Main Agent Class for LLM Exec.

The CodeAgent is the primary interface for turning a free-text request
into generated and executed code.
"""

from typing import Iterable, List, Optional

from llmexec.agent.config import AgentConfig, LLMConfig, SandboxConfig
from llmexec.agent.core.state import ConversationState
from llmexec.agent.core.workflow import CodeWorkflow, WorkflowRun
from llmexec.agent.generator import CodeGenerator
from llmexec.agent.providers import LLMProvider, get_provider
from llmexec.agent.sandbox import SafeExecutor, SandboxedEvaluator


class CodeAgent:
    """
    Main Agent for generate-and-run requests.

    Builds its collaborators from configuration on first use:
    1. LLM provider for code generation
    2. Sandbox executor for evaluation
    3. The two-stage workflow wiring them together

    Example:
        agent = CodeAgent(config)
        state = await agent.run("Add 5 and 3")
        print(state.evaluation_result)
    """

    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        llm: Optional[LLMProvider] = None,
        executor: Optional[SafeExecutor] = None,
    ):
        """
        Initialize the agent.

        Args:
            config: Agent configuration (uses defaults if not provided)
            llm: Pre-built provider (overrides config.llm)
            executor: Pre-built sandbox executor (overrides config.sandbox)
        """
        self.config = config or AgentConfig()

        self._llm = llm
        self._executor = executor
        self._workflow: Optional[CodeWorkflow] = None

    def _ensure_initialized(self):
        """Lazy initialization of components."""
        if self._llm is None:
            llm_config = self.config.llm
            extra = {}
            if llm_config.provider == "azure":
                extra = {
                    "deployment": llm_config.deployment,
                    "api_version": llm_config.api_version,
                }
            self._llm = get_provider(
                provider_name=llm_config.provider,
                model=llm_config.model,
                api_key=llm_config.api_key,
                base_url=llm_config.base_url,
                temperature=llm_config.temperature,
                max_tokens=llm_config.max_tokens,
                request_timeout=llm_config.completion_timeout,
                **extra,
            )

        if self._executor is None:
            self._executor = SafeExecutor(
                timeout_ms=self.config.sandbox.timeout_ms,
                max_lines=self.config.sandbox.max_code_lines,
                entrypoint=self.config.sandbox.entrypoint,
            )

        if self._workflow is None:
            generator = CodeGenerator(
                llm=self._llm,
                languages=self.config.sandbox.languages,
                entrypoint=self.config.sandbox.entrypoint,
                completion_timeout=self.config.llm.completion_timeout,
            )
            self._workflow = CodeWorkflow(
                generator=generator,
                evaluator=SandboxedEvaluator(self._executor),
            )

    @property
    def workflow(self) -> CodeWorkflow:
        self._ensure_initialized()
        return self._workflow

    async def run(self, request: str) -> ConversationState:
        """
        Run one request through the workflow.

        Args:
            request: Free-text request

        Returns:
            Final ConversationState
        """
        return await self.workflow.invoke(request)

    async def run_detailed(self, request: str) -> WorkflowRun:
        """Run one request and keep timings alongside the final state."""
        return await self.workflow.run(request)

    async def run_many(self, requests: Iterable[str]) -> List[WorkflowRun]:
        """
        Run several requests one after another, each from a fresh state.

        Args:
            requests: Free-text requests

        Returns:
            One WorkflowRun per request, in order
        """
        return [await self.run_detailed(request) for request in requests]


def create_agent(
    provider: str = "openai",
    model: str = "gpt-4o",
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout_ms: int = 1000,
    **kwargs,
) -> CodeAgent:
    """
    Factory function to create an agent with common settings.

    Args:
        provider: LLM provider (openai, azure, anthropic, ollama)
        model: Model name
        api_key: API key (or use environment variable)
        base_url: Custom API base URL
        timeout_ms: Sandbox execution budget in milliseconds
        **kwargs: Additional LLMConfig options (temperature, deployment, ...)

    Returns:
        Configured CodeAgent
    """
    config = AgentConfig(
        llm=LLMConfig(
            provider=provider,
            model=model,
            api_key=api_key,
            base_url=base_url,
            **kwargs,
        ),
        sandbox=SandboxConfig(timeout_ms=timeout_ms),
    )
    return CodeAgent(config=config)
