"""
Prompt Templates for LLM Exec.

Contains the code generation prompt and the transcript messages the
workflow stages append.
"""

# ============================================================================
# Code Generation Prompt
# ============================================================================

CODE_GENERATION_PROMPT = '''You are a helpful AI assistant that writes simple Python code.
The user wants to perform a calculation or a simple task.
Generate Python code that fulfills the user's request.
The code should be a self-contained function named '{entrypoint}' that takes no arguments and returns a string or number.
Do NOT include imports, just the function.

Example:
User Request: "Add 5 and 3"
```python
def {entrypoint}():
    return 5 + 3
```

User Request: "{request}"
```python
'''


# ============================================================================
# Transcript Messages
# ============================================================================

GENERATED_CODE_MESSAGE = "I've generated the following Python code:\n```python\n{code}\n```"

GENERATION_FAILED_MESSAGE = "I couldn't generate valid Python code from your request."

NO_CODE_MESSAGE = "No code was generated to evaluate."

EVALUATION_MESSAGE = "Code Evaluation Result:\n{result}"

EXECUTION_SUCCESS = "Execution successful. Result: {value}"

EXECUTION_FAILURE = "Code execution failed. Error: {error}"

INTERNAL_ERROR_MESSAGE = "An internal error occurred during code {phase}: {error}"


def format_generation_prompt(request: str, entrypoint: str = "execute") -> str:
    """Fill the generation prompt with the user's request."""
    return CODE_GENERATION_PROMPT.format(request=request, entrypoint=entrypoint)
