"""
Code generation for LLM Exec.
"""

from llmexec.agent.generator.code_gen import CodeGenerator, GenerationResult
from llmexec.agent.generator.extraction import (
    DEFAULT_LANGUAGES,
    extract_all_code_blocks,
    extract_code_block,
)

__all__ = [
    "CodeGenerator",
    "GenerationResult",
    "DEFAULT_LANGUAGES",
    "extract_all_code_blocks",
    "extract_code_block",
]
