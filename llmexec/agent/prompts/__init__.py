"""
Prompt templates for LLM code generation.
"""

from llmexec.agent.prompts.templates import (
    CODE_GENERATION_PROMPT,
    GENERATED_CODE_MESSAGE,
    GENERATION_FAILED_MESSAGE,
    NO_CODE_MESSAGE,
    EVALUATION_MESSAGE,
    EXECUTION_SUCCESS,
    EXECUTION_FAILURE,
    INTERNAL_ERROR_MESSAGE,
    format_generation_prompt,
)

__all__ = [
    "CODE_GENERATION_PROMPT",
    "GENERATED_CODE_MESSAGE",
    "GENERATION_FAILED_MESSAGE",
    "NO_CODE_MESSAGE",
    "EVALUATION_MESSAGE",
    "EXECUTION_SUCCESS",
    "EXECUTION_FAILURE",
    "INTERNAL_ERROR_MESSAGE",
    "format_generation_prompt",
]
