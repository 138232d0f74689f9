"""
Code Generator for LLM Exec.

Turns the latest human request into a zero-argument ``execute``
function by asking the LLM and pulling the first fenced block out of
its reply.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from llmexec.agent.core.state import ConversationState, StateUpdate, assistant
from llmexec.agent.generator.extraction import DEFAULT_LANGUAGES, extract_code_block
from llmexec.agent.prompts.templates import (
    GENERATED_CODE_MESSAGE,
    GENERATION_FAILED_MESSAGE,
    format_generation_prompt,
)
from llmexec.agent.providers.base import LLMProvider, Message

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Result of code generation."""

    success: bool
    code: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None  # "LLMError" or "ExtractionError"
    llm_response: Optional[str] = None


class CodeGenerator:
    """
    First workflow stage: request in, ``generated_code`` out.

    Example:
        generator = CodeGenerator(llm=OpenAIProvider(model="gpt-4o"))
        update = await generator(ConversationState.from_request("Add 5 and 3"))
    """

    def __init__(
        self,
        llm: LLMProvider,
        languages: Iterable[str] = DEFAULT_LANGUAGES,
        entrypoint: str = "execute",
        completion_timeout: Optional[float] = None,
    ):
        """
        Initialize generator.

        Args:
            llm: LLM provider for code generation
            languages: Fence tags accepted when extracting code
            entrypoint: Name of the function the model must define
            completion_timeout: Seconds to wait for the LLM (None waits indefinitely)
        """
        self.llm = llm
        self.languages = tuple(languages)
        self.entrypoint = entrypoint
        self.completion_timeout = completion_timeout

    def build_prompt(self, request: str) -> str:
        return format_generation_prompt(request, entrypoint=self.entrypoint)

    async def generate(self, request: str) -> GenerationResult:
        """
        Ask the LLM for code and extract it.

        Provider failures are returned as a failed result, never raised.

        Args:
            request: Natural-language request

        Returns:
            GenerationResult
        """
        messages = [Message(role="user", content=self.build_prompt(request))]

        try:
            response = await self.llm.complete_with_timeout(
                messages, timeout=self.completion_timeout
            )
        except asyncio.TimeoutError:
            return GenerationResult(
                success=False,
                error=f"LLM request timed out after {self.completion_timeout} seconds",
                error_type="LLMError",
            )
        except Exception as e:
            return GenerationResult(
                success=False,
                error=f"LLM request failed: {e}",
                error_type="LLMError",
            )

        code = extract_code_block(response.content, self.languages)
        if not code:
            return GenerationResult(
                success=False,
                error="Failed to extract code from LLM response",
                error_type="ExtractionError",
                llm_response=response.content,
            )

        return GenerationResult(
            success=True,
            code=code,
            llm_response=response.content,
        )

    async def __call__(self, state: ConversationState) -> StateUpdate:
        """Run the generation stage on ``state``."""
        request = state.last_human_content()
        result = await self.generate(request)

        if not result.success:
            logger.error("Code generation failed (%s): %s", result.error_type, result.error)
            return StateUpdate(messages=(assistant(GENERATION_FAILED_MESSAGE),))

        logger.info("Generated code:\n%s", result.code)
        return StateUpdate(
            messages=(assistant(GENERATED_CODE_MESSAGE.format(code=result.code)),),
            generated_code=result.code,
        )
