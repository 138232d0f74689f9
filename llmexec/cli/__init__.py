"""
CLI layer for LLM Exec.

Provides Click-based command line interface for:
- run: Generate and execute code for free-text requests
- exec: Run a local file through the sandbox
- config: Show the effective configuration
"""

from llmexec.cli.main import cli

__all__ = ["cli"]
