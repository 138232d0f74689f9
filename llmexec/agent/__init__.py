"""
LLM Exec Agent Module.

Generates a small Python function with an LLM and runs it in a
time-boxed sandbox.

Usage:
    from llmexec.agent import CodeAgent, create_agent

    # Quick start
    agent = create_agent(provider="openai", model="gpt-4o")
    state = await agent.run("Add 5 and 3")

    # With full config
    from llmexec.agent import AgentConfig, LLMConfig, SandboxConfig, CodeAgent

    config = AgentConfig(
        llm=LLMConfig(provider="anthropic", model="claude-3-5-sonnet-latest"),
        sandbox=SandboxConfig(timeout_ms=2000),
    )
    agent = CodeAgent(config)
    state = await agent.run("Compute the factorial of 5")
"""

from llmexec.agent.config import (
    AgentConfig,
    LLMConfig,
    SandboxConfig,
)
from llmexec.agent.core import (
    ConversationState,
    StateUpdate,
    CodeWorkflow,
    WorkflowRun,
)
from llmexec.agent.providers import (
    LLMProvider,
    Message,
    LLMResponse,
    get_provider,
)
from llmexec.agent.generator import (
    CodeGenerator,
    GenerationResult,
    extract_code_block,
)
from llmexec.agent.sandbox import (
    SafeExecutor,
    CodeValidator,
    ExecutionResult,
    SandboxedEvaluator,
)
from llmexec.agent.runner import (
    CodeAgent,
    create_agent,
)

__all__ = [
    # Main classes
    "CodeAgent",
    "create_agent",
    # Config
    "AgentConfig",
    "LLMConfig",
    "SandboxConfig",
    # Core
    "ConversationState",
    "StateUpdate",
    "CodeWorkflow",
    "WorkflowRun",
    # Providers
    "LLMProvider",
    "Message",
    "LLMResponse",
    "get_provider",
    # Generation
    "CodeGenerator",
    "GenerationResult",
    "extract_code_block",
    # Sandbox
    "SafeExecutor",
    "CodeValidator",
    "ExecutionResult",
    "SandboxedEvaluator",
]
