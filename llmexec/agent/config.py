"""
Agent Configuration for LLM Exec.

Defines configuration classes for the generate-and-run agent.
"""

from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from llmexec.config import AGENT_SECTION, read_config


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: Literal["openai", "azure", "anthropic", "ollama"] = "openai"
    model: str = "gpt-4o"
    temperature: float = 0.7
    max_tokens: int = 4096

    # API credentials (can be overridden by environment variables)
    api_key: Optional[str] = None
    base_url: Optional[str] = None  # For Ollama or custom endpoints

    # Azure OpenAI only
    api_version: Optional[str] = None
    deployment: Optional[str] = None

    # Seconds; None waits for the provider indefinitely
    completion_timeout: Optional[float] = None


class SandboxConfig(BaseModel):
    """Sandbox execution settings."""

    timeout_ms: int = Field(default=1000, gt=0)
    max_code_lines: int = Field(default=200, gt=0)
    entrypoint: str = "execute"
    # Fence tags accepted when extracting code from the model reply
    languages: List[str] = Field(default_factory=lambda: ["python", "py"])


class AgentConfig(BaseModel):
    """
    Main Agent configuration.

    Example:
        config = AgentConfig(
            llm=LLMConfig(provider="anthropic", model="claude-3-5-sonnet-latest"),
            sandbox=SandboxConfig(timeout_ms=2000),
        )
    """

    llm: LLMConfig = Field(default_factory=LLMConfig)
    sandbox: SandboxConfig = Field(default_factory=SandboxConfig)

    @classmethod
    def from_yaml(cls, path: Union[Path, str, None]) -> "AgentConfig":
        """
        Load AgentConfig from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            AgentConfig instance with values from YAML, or defaults if file doesn't exist
        """
        return cls(**(read_config(path).get(AGENT_SECTION) or {}))
