"""
Safe Code Execution Sandbox for LLM Exec.

Provides isolated execution of LLM-generated code with:
- AST-based code validation
- Import and forbidden function detection
- Hard wall-clock timeout (the child process is terminated)
- Restricted builtins and an otherwise empty global namespace
"""

import ast
import builtins
import json
import multiprocessing
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Set, Tuple

# Global the wrapped code assigns the entrypoint's return value to
RESULT_SLOT = "__sandbox_result__"

SAFE_BUILTIN_NAMES = (
    # Functions
    "abs", "all", "any", "ascii", "bin", "callable", "chr", "divmod",
    "enumerate", "filter", "format", "hash", "hex", "isinstance",
    "issubclass", "iter", "len", "map", "max", "min", "next", "oct",
    "ord", "pow", "range", "repr", "reversed", "round",
    "sorted", "sum", "zip",
    # Type constructors
    "bool", "bytearray", "bytes", "complex", "dict", "float", "frozenset",
    "int", "list", "object", "set", "slice", "str", "tuple",
    "property", "staticmethod", "classmethod", "super",
    # Exceptions (for error handling in generated code)
    "ArithmeticError", "AssertionError", "AttributeError", "Exception",
    "IndexError", "KeyError", "LookupError", "NotImplementedError",
    "OverflowError", "RecursionError", "RuntimeError", "StopIteration",
    "TypeError", "ValueError", "ZeroDivisionError",
    # Constants
    "True", "False", "None", "NotImplemented", "Ellipsis",
    # Class statements
    "__build_class__",
)

SAFE_BUILTINS: Dict[str, Any] = {
    name: getattr(builtins, name) for name in SAFE_BUILTIN_NAMES
}

# Structural pattern matching exists from Python 3.10
_MATCH_CLASS = getattr(ast, "MatchClass", None)


@dataclass
class ExecutionResult:
    """Result of code execution."""

    success: bool
    result: Any = None
    display: Optional[str] = None  # JSON text of the result
    error: Optional[str] = None
    error_type: Optional[str] = None
    execution_time: float = 0.0


class CodeValidator:
    """
    Validates code safety using AST analysis.

    Rejects every import, plus calls and attributes that reach outside
    the sandbox.
    """

    # Dangerous function calls
    FORBIDDEN_CALLS: Set[str] = {
        "eval", "exec", "compile",
        "open", "input",
        "__import__",
        "globals", "locals", "vars", "dir",
        "getattr", "setattr", "delattr", "hasattr",
        "exit", "quit",
        "breakpoint", "help", "memoryview",
    }

    # String-driven attribute lookups and class hierarchy walks
    FORBIDDEN_ATTRIBUTES: Set[str] = {
        "mro", "format", "format_map",
    }

    # Frame (f_), code (co_), traceback (tb_), generator (gi_),
    # async generator (ag_) and coroutine (cr_) internals
    FORBIDDEN_ATTRIBUTE_PREFIXES: Tuple[str, ...] = (
        "_", "f_", "co_", "tb_", "gi_", "ag_", "cr_",
    )

    def is_forbidden_attribute(self, name: str) -> bool:
        """Private, dunder and interpreter-internal attributes are off limits."""
        return name in self.FORBIDDEN_ATTRIBUTES or name.startswith(
            self.FORBIDDEN_ATTRIBUTE_PREFIXES
        )

    def validate(self, code: str) -> Tuple[bool, Optional[str]]:
        """
        Validate code safety.

        Args:
            code: Python code string

        Returns:
            (is_safe, error_message)
        """
        try:
            tree = ast.parse(code)
        except SyntaxError as e:
            return False, f"Syntax error: {e}"

        for node in ast.walk(tree):
            # Nothing may be imported
            if isinstance(node, ast.Import):
                names = ", ".join(alias.name for alias in node.names)
                return False, f"Forbidden import: {names}"

            if isinstance(node, ast.ImportFrom):
                return False, f"Forbidden import: {node.module or '.'}"

            # Check function calls
            if isinstance(node, ast.Call):
                if isinstance(node.func, ast.Name):
                    if node.func.id in self.FORBIDDEN_CALLS:
                        return False, f"Forbidden function: {node.func.id}"

            # Check attribute access
            if isinstance(node, ast.Attribute):
                if self.is_forbidden_attribute(node.attr):
                    return False, f"Forbidden attribute: {node.attr}"

            # Class patterns look attributes up too: case C(__class__=x)
            if _MATCH_CLASS is not None and isinstance(node, _MATCH_CLASS):
                for attr in node.kwd_attrs:
                    if self.is_forbidden_attribute(attr):
                        return False, f"Forbidden attribute: {attr}"

            # Dunder names such as __builtins__ or __loader__
            if isinstance(node, ast.Name):
                if node.id.startswith("__") and node.id.endswith("__"):
                    return False, f"Forbidden name: {node.id}"

        return True, None

    def count_lines(self, code: str) -> int:
        """Count non-empty, non-comment lines."""
        lines = code.split("\n")
        count = 0
        for line in lines:
            stripped = line.strip()
            if stripped and not stripped.startswith("#"):
                count += 1
        return count


def wrap_code(code: str, entrypoint: str = "execute") -> str:
    """Append the call whose return value becomes the sandbox's only output."""
    return f"{code}\n\n{RESULT_SLOT} = {entrypoint}()\n"


def _run_sandboxed(
    wrapped_code: str,
    exposed_globals: Dict[str, Any],
    conn,
) -> None:
    """
    Child process entry point.

    Sends ("ready", None) once started, then exactly one of
    ("ok", json_text) or ("error", (error_type, message)).
    """
    conn.send(("ready", None))

    namespace: Dict[str, Any] = {
        "__builtins__": dict(SAFE_BUILTINS),
        "__name__": "__sandbox__",
    }
    namespace.update(exposed_globals)

    try:
        exec(compile(wrapped_code, "<sandbox>", "exec"), namespace)
        value = namespace.get(RESULT_SLOT)
    except Exception as e:
        conn.send(("error", (type(e).__name__, f"{type(e).__name__}: {e}")))
        conn.close()
        return

    try:
        payload = json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        conn.send(("error", ("SerializationError", f"Result is not serializable: {e}")))
    else:
        conn.send(("ok", payload))
    conn.close()


class SafeExecutor:
    """
    Executes code in a fresh, time-limited child process.

    Example:
        executor = SafeExecutor(timeout_ms=1000)
        result = executor.execute("def execute():\\n    return 5 + 3")

        if result.success:
            print(result.display)  # "8"
    """

    def __init__(
        self,
        timeout_ms: int = 1000,
        exposed_globals: Optional[Dict[str, Any]] = None,
        max_lines: int = 200,
        entrypoint: str = "execute",
        start_method: str = "spawn",
        startup_timeout: float = 30.0,
    ):
        """
        Initialize executor.

        Args:
            timeout_ms: Maximum execution time of the user code in milliseconds
            exposed_globals: Picklable bindings visible to the code (none by default)
            max_lines: Maximum allowed code lines
            entrypoint: Zero-argument function whose return value is the result
            start_method: multiprocessing start method for the child process
            startup_timeout: Seconds allowed for the child process to start
        """
        self.timeout_ms = timeout_ms
        self.exposed_globals = dict(exposed_globals or {})
        self.max_lines = max_lines
        self.entrypoint = entrypoint
        self.start_method = start_method
        self.startup_timeout = startup_timeout
        self.validator = CodeValidator()

    def execute(
        self,
        code: str,
        additional_namespace: Optional[Dict[str, Any]] = None,
        timeout_ms: Optional[int] = None,
    ) -> ExecutionResult:
        """
        Safely execute code and return the entrypoint's result.

        The budget starts once the child process is ready, so interpreter
        start-up does not count against it. Never raises.

        Args:
            code: Python code defining the entrypoint function
            additional_namespace: Extra picklable bindings for this call
            timeout_ms: Override default timeout

        Returns:
            ExecutionResult
        """
        effective_timeout = timeout_ms if timeout_ms is not None else self.timeout_ms

        # Validate code safety
        is_safe, error = self.validator.validate(code)
        if not is_safe:
            return ExecutionResult(
                success=False,
                error=error,
                error_type="SecurityError",
            )

        # Check code length
        line_count = self.validator.count_lines(code)
        if line_count > self.max_lines:
            return ExecutionResult(
                success=False,
                error=f"Code too long: {line_count} lines (max {self.max_lines})",
                error_type="ValidationError",
            )

        exposed = dict(self.exposed_globals)
        if additional_namespace:
            exposed.update(additional_namespace)

        ctx = multiprocessing.get_context(self.start_method)
        receiver, sender = ctx.Pipe(duplex=False)
        process = ctx.Process(
            target=_run_sandboxed,
            args=(wrap_code(code, self.entrypoint), exposed, sender),
            daemon=True,
        )

        start_time = time.perf_counter()
        try:
            process.start()
            sender.close()

            if not receiver.poll(self.startup_timeout):
                return ExecutionResult(
                    success=False,
                    error=f"Sandbox did not start within {self.startup_timeout} seconds",
                    error_type="SandboxError",
                )
            receiver.recv()

            start_time = time.perf_counter()
            if not receiver.poll(effective_timeout / 1000):
                return ExecutionResult(
                    success=False,
                    error=f"Execution timed out after {effective_timeout} ms",
                    error_type="TimeoutError",
                    execution_time=time.perf_counter() - start_time,
                )
            status, payload = receiver.recv()
            execution_time = time.perf_counter() - start_time

        except EOFError:
            process.join(timeout=1)
            return ExecutionResult(
                success=False,
                error=f"Sandbox process exited unexpectedly (exit code {process.exitcode})",
                error_type="SandboxError",
                execution_time=time.perf_counter() - start_time,
            )
        except Exception as e:
            return ExecutionResult(
                success=False,
                error=f"{type(e).__name__}: {str(e)}",
                error_type="SandboxError",
            )
        finally:
            sender.close()
            receiver.close()
            self._release(process)

        if status == "ok":
            return ExecutionResult(
                success=True,
                result=json.loads(payload),
                display=payload,
                execution_time=execution_time,
            )

        error_type, message = payload
        return ExecutionResult(
            success=False,
            error=message,
            error_type=error_type,
            execution_time=execution_time,
        )

    @staticmethod
    def _release(process) -> None:
        """Terminate and reap the child process."""
        if process.pid is None:
            return
        if process.is_alive():
            process.terminate()
        process.join(timeout=1)
        if process.is_alive():
            process.kill()
            process.join()
