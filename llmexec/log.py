"""
Logging setup for LLM Exec.

Modules log through ``logging.getLogger(__name__)``; entry points call
``setup_logging`` once to attach a rich console handler (and optionally
a file handler) to the ``llmexec`` logger.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from llmexec.config import LoggingConfig, get_settings

ROOT_LOGGER = "llmexec"


def setup_logging(
    config: Optional[LoggingConfig] = None,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Configure the ``llmexec`` logger.

    Calling it again replaces the previously installed handlers.

    Args:
        config: Logging configuration (defaults to settings)
        console: Rich console to log to (defaults to stderr)

    Returns:
        The configured package logger
    """
    config = config or get_settings().logging
    logger = logging.getLogger(ROOT_LOGGER)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(config.level.upper())
    logger.propagate = False

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=config.rich_tracebacks,
        show_path=False,
    )
    console_handler.setFormatter(logging.Formatter(config.format, datefmt="[%X]"))
    logger.addHandler(console_handler)

    if config.file:
        path = Path(config.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

    return logger
