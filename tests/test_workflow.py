"""
Tests for conversation state, code generation and the workflow.
"""

import asyncio

import pytest

from llmexec.agent.core.state import (
    NO_REQUEST,
    ConversationState,
    StateUpdate,
    assistant,
    human,
)
from llmexec.agent.core.workflow import CodeWorkflow
from llmexec.agent.generator.code_gen import CodeGenerator
from llmexec.agent.generator.extraction import extract_all_code_blocks, extract_code_block
from llmexec.agent.sandbox.evaluator import SandboxedEvaluator
from llmexec.agent.sandbox.executor import SafeExecutor


class TestConversationState:
    """Test immutable state handling."""

    def test_from_request(self):
        """Test a fresh state holds one human message."""
        state = ConversationState.from_request("Add 5 and 3")

        assert state.messages == (human("Add 5 and 3"),)
        assert state.generated_code is None
        assert state.evaluation_result is None

    def test_apply_appends_without_mutating(self):
        """Test apply returns a new state and keeps the old one intact."""
        state = ConversationState.from_request("hi")

        new_state = state.apply(StateUpdate(messages=(assistant("hello"),), generated_code="x"))

        assert len(state.messages) == 1
        assert state.generated_code is None
        assert [m.content for m in new_state.messages] == ["hi", "hello"]
        assert new_state.generated_code == "x"

    def test_apply_keeps_fields_when_unset(self):
        """Test optional fields survive updates that do not set them."""
        state = ConversationState(generated_code="code", evaluation_result="old")

        new_state = state.apply(StateUpdate(evaluation_result="new"))

        assert new_state.generated_code == "code"
        assert new_state.evaluation_result == "new"

    def test_last_human_content_defaults(self):
        """Test the fallback when the last message is missing or not human."""
        assert ConversationState().last_human_content() == NO_REQUEST

        state = ConversationState(messages=(human("a"), assistant("b")))
        assert state.last_human_content() == NO_REQUEST

    def test_transcript(self):
        state = ConversationState(messages=(human("a"), assistant("b")))
        assert state.transcript() == "a\nb"


class TestExtraction:
    """Test fenced block extraction."""

    def test_extract_python_block(self):
        """Test a python-tagged block is extracted and stripped."""
        text = "Sure!\n```python\n\ndef execute():\n    return 1\n\n```\nDone."

        assert extract_code_block(text) == "def execute():\n    return 1"

    def test_first_match_wins(self):
        """Test only the first matching block is returned."""
        text = "```python\nfirst = 1\n```\n```python\nsecond = 2\n```"

        assert extract_code_block(text) == "first = 1"
        assert extract_all_code_blocks(text) == ["first = 1", "second = 2"]

    def test_other_tags_skipped(self):
        """Test blocks in other languages are ignored."""
        text = "```typescript\nconst x = 1;\n```\n```py\nx = 1\n```"

        assert extract_code_block(text) == "x = 1"

    def test_untagged_block_not_accepted(self):
        """Test untagged fences are ignored by default."""
        assert extract_code_block("```\nx = 1\n```") is None

    def test_custom_languages(self):
        """Test accepted tags are configurable and case-insensitive."""
        text = "```Python3\nx = 1\n```"

        assert extract_code_block(text) is None
        assert extract_code_block(text, languages=["python3"]) == "x = 1"

    def test_no_block(self):
        """Test plain text yields None."""
        assert extract_code_block("I cannot help with that.") is None
        assert extract_code_block("") is None

    def test_unterminated_block(self):
        """Test a missing closing fence yields None."""
        assert extract_code_block("```python\ndef execute():\n    return 1\n") is None


class TestCodeGenerator:
    """Test the generation stage."""

    @pytest.mark.asyncio
    async def test_generate_success(self, scripted_llm, add_reply):
        """Test code is extracted from the reply."""
        llm = scripted_llm(add_reply)
        generator = CodeGenerator(llm=llm)

        result = await generator.generate("Add 5 and 3")

        assert result.success is True
        assert result.code == "def execute():\n    return 5 + 3"
        assert result.llm_response == add_reply

    @pytest.mark.asyncio
    async def test_prompt_contains_request_and_example(self, scripted_llm, add_reply):
        """Test one message carrying the instructions, example and request."""
        llm = scripted_llm(add_reply)
        generator = CodeGenerator(llm=llm)

        await generator.generate("Compute 2 to the power of 10")

        assert len(llm.calls) == 1
        (message,) = llm.calls[0]
        assert message.role == "user"
        assert "named 'execute'" in message.content
        assert 'User Request: "Add 5 and 3"' in message.content
        assert 'User Request: "Compute 2 to the power of 10"' in message.content

    @pytest.mark.asyncio
    async def test_extraction_failure(self, scripted_llm):
        """Test a reply without a fenced block."""
        generator = CodeGenerator(llm=scripted_llm("The answer is 8."))

        result = await generator.generate("Add 5 and 3")

        assert result.success is False
        assert result.error_type == "ExtractionError"
        assert result.code is None

    @pytest.mark.asyncio
    async def test_llm_failure(self, scripted_llm):
        """Test provider errors are returned, not raised."""
        generator = CodeGenerator(llm=scripted_llm(error=ConnectionError("rate limited")))

        result = await generator.generate("Add 5 and 3")

        assert result.success is False
        assert result.error_type == "LLMError"
        assert "rate limited" in result.error

    @pytest.mark.asyncio
    async def test_completion_timeout(self, scripted_llm, add_reply):
        """Test a slow provider is abandoned when a timeout is configured."""
        llm = scripted_llm(add_reply)

        async def slow_complete(messages, **kwargs):
            await asyncio.sleep(5)

        llm.complete = slow_complete
        generator = CodeGenerator(llm=llm, completion_timeout=0.05)

        result = await generator.generate("Add 5 and 3")

        assert result.success is False
        assert result.error_type == "LLMError"
        assert "timed out" in result.error

    @pytest.mark.asyncio
    async def test_stage_success_update(self, scripted_llm, add_reply):
        """Test the stage appends a summary and sets generated_code."""
        generator = CodeGenerator(llm=scripted_llm(add_reply))

        update = await generator(ConversationState.from_request("Add 5 and 3"))

        assert update.generated_code == "def execute():\n    return 5 + 3"
        assert len(update.messages) == 1
        assert update.messages[0].role == "assistant"
        assert update.messages[0].content.startswith("I've generated the following Python code:")
        assert update.evaluation_result is None

    @pytest.mark.asyncio
    async def test_stage_failure_update(self, scripted_llm):
        """Test the stage reports failure without setting code."""
        generator = CodeGenerator(llm=scripted_llm("no code here"))

        update = await generator(ConversationState.from_request("Add 5 and 3"))

        assert update.generated_code is None
        assert update.messages[0].content == (
            "I couldn't generate valid Python code from your request."
        )

    @pytest.mark.asyncio
    async def test_stage_without_human_request(self, scripted_llm, add_reply):
        """Test the default request is used when the last message is not human."""
        llm = scripted_llm(add_reply)
        generator = CodeGenerator(llm=llm)
        state = ConversationState(messages=(human("hi"), assistant("hello")))

        await generator(state)

        assert f'User Request: "{NO_REQUEST}"' in llm.calls[0][0].content


class TestCodeWorkflow:
    """Test the two-stage workflow."""

    def make_workflow(self, llm, timeout_ms=1000):
        return CodeWorkflow(
            generator=CodeGenerator(llm=llm),
            evaluator=SandboxedEvaluator(SafeExecutor(timeout_ms=timeout_ms)),
        )

    @pytest.mark.asyncio
    async def test_end_to_end(self, scripted_llm, add_reply):
        """Test "Add 5 and 3" runs through both stages."""
        workflow = self.make_workflow(scripted_llm(add_reply))

        state = await workflow.invoke("Add 5 and 3")

        assert [m.role for m in state.messages] == ["user", "assistant", "assistant"]
        assert state.messages[0].content == "Add 5 and 3"
        assert "8" in state.messages[-1].content
        assert state.evaluation_result == "Execution successful. Result: 8"
        assert state.generated_code == "def execute():\n    return 5 + 3"

    @pytest.mark.asyncio
    async def test_generation_failure_skips_execution(self, scripted_llm):
        """Test the missing-code path after a failed generation."""
        workflow = self.make_workflow(scripted_llm(error=RuntimeError("auth failed")))

        state = await workflow.invoke("Add 5 and 3")

        assert len(state.messages) == 3
        assert state.generated_code is None
        assert state.evaluation_result is None
        assert state.messages[-1].content == "No code was generated to evaluate."

    @pytest.mark.asyncio
    async def test_timeout_is_recorded(self, scripted_llm):
        """Test an infinite loop ends the run with a failure result."""
        reply = "```python\ndef execute():\n    while True:\n        pass\n```"
        workflow = self.make_workflow(scripted_llm(reply))

        state = await workflow.invoke("Loop forever")

        assert state.evaluation_result.startswith("Code execution failed. Error: ")
        assert "timed out" in state.evaluation_result

    @pytest.mark.asyncio
    async def test_stage_exception_is_contained(self, scripted_llm, add_reply):
        """Test an exception inside a stage becomes a message."""
        async def broken_generator(state):
            raise RuntimeError("boom")

        workflow = CodeWorkflow(
            generator=broken_generator,
            evaluator=SandboxedEvaluator(SafeExecutor(timeout_ms=1000)),
        )

        state = await workflow.invoke("Add 5 and 3")

        assert state.messages[1].content == (
            "An internal error occurred during code generation: boom"
        )
        assert state.messages[2].content == "No code was generated to evaluate."

    @pytest.mark.asyncio
    async def test_invoke_state_grows_messages(self, scripted_llm):
        """Test the workflow always appends to the given state."""
        workflow = self.make_workflow(scripted_llm("nothing useful"))
        initial = ConversationState(messages=(human("a"), assistant("b"), human("c")))

        final = await workflow.invoke_state(initial)

        assert len(final.messages) > len(initial.messages)
        assert final.messages[: len(initial.messages)] == initial.messages

    @pytest.mark.asyncio
    async def test_run_records_timings(self, scripted_llm, add_reply):
        """Test WorkflowRun bookkeeping."""
        workflow = self.make_workflow(scripted_llm(add_reply))

        run = await workflow.run("Add 5 and 3")

        assert run.succeeded is True
        assert set(run.node_seconds) == {"generate_code", "evaluate_code"}
        assert run.duration_seconds >= 0
        assert "Workflow Summary" in run.summary()
        assert "Add 5 and 3" in run.summary()

    @pytest.mark.asyncio
    async def test_bad_stage_update_ends_workflow(self, scripted_llm):
        """Test an update the state cannot merge stops the run with one message."""
        async def malformed_generator(state):
            return "not an update"

        workflow = CodeWorkflow(
            generator=malformed_generator,
            evaluator=SandboxedEvaluator(SafeExecutor(timeout_ms=1000)),
        )

        run = await workflow.run("Add 5 and 3")

        assert len(run.state.messages) == 2
        assert run.state.messages[-1].role == "assistant"
        assert run.state.messages[-1].content.startswith("Workflow failed: ")
        assert run.state.generated_code is None
        assert run.succeeded is False
        assert "evaluate_code" not in run.node_seconds
        assert run.ended_at is not None
