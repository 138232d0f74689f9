"""
CLI Main Entry Point for LLM Exec.

Provides command-line interface using Click.
"""

import asyncio
import os
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from llmexec import __version__

console = Console()


def load_dotenv():
    """Load .env file from the working directory if it exists."""
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, value = line.split("=", 1)
                os.environ.setdefault(key.strip(), value.strip().strip("'\""))


def render_state(state, show_code: bool = True):
    """Print a final conversation state."""
    for message in state.messages:
        style = "cyan" if message.is_human else "green"
        title = "You" if message.is_human else "Assistant"
        console.print(Panel(message.content, title=title, border_style=style))

    if show_code and state.generated_code:
        console.print(Syntax(state.generated_code, "python", line_numbers=True))


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ...)")
def cli(log_level):
    """LLM Exec - generate Python with an LLM and run it in a sandbox."""
    from llmexec.config import get_settings
    from llmexec.log import setup_logging

    load_dotenv()

    logging_config = get_settings().logging
    if log_level:
        logging_config = logging_config.model_copy(update={"level": log_level})
    setup_logging(logging_config)


@cli.command("run")
@click.argument("requests", nargs=-1, required=True)
@click.option("--provider", "-p", default=None, help="LLM provider (openai, azure, anthropic, ollama)")
@click.option("--model", "-m", default=None, help="Model name")
@click.option("--base-url", default=None, help="Custom API base URL or Azure endpoint")
@click.option("--api-key", default=None, help="API key (or use the provider's env var)")
@click.option("--timeout-ms", "-t", default=None, type=int, help="Sandbox time budget in milliseconds")
@click.option("--config", "-c", "config_path", default=None, type=click.Path(), help="YAML config file")
@click.option("--show-code/--no-show-code", default=True, help="Print the generated code")
def run_requests(requests, provider, model, base_url, api_key, timeout_ms, config_path, show_code):
    """Generate and run code for each REQUEST."""
    from llmexec.agent import AgentConfig, CodeAgent
    from llmexec.config import find_config_file

    path = find_config_file(config_path)
    config = AgentConfig.from_yaml(path)

    llm_overrides = {
        key: value
        for key, value in {
            "provider": provider,
            "model": model,
            "base_url": base_url,
            "api_key": api_key,
        }.items()
        if value is not None
    }
    if llm_overrides:
        config = config.model_copy(
            update={"llm": config.llm.model_copy(update=llm_overrides)}
        )
    if timeout_ms is not None:
        config = config.model_copy(
            update={"sandbox": config.sandbox.model_copy(update={"timeout_ms": timeout_ms})}
        )

    try:
        agent = CodeAgent(config)
        runs = asyncio.run(agent.run_many(requests))
    except Exception as e:
        click.echo(f"\nRun failed: {e}")
        raise click.Abort()

    for index, run in enumerate(runs):
        if index:
            console.rule("Next request")
        render_state(run.state, show_code=show_code)
        click.echo(run.summary())


@cli.command("exec")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--timeout-ms", "-t", default=1000, help="Sandbox time budget in milliseconds")
def exec_file(file, timeout_ms):
    """Run a FILE defining execute() through the sandbox."""
    from llmexec.agent.sandbox import SafeExecutor, describe_execution

    code = Path(file).read_text(encoding="utf-8")
    result = SafeExecutor(timeout_ms=timeout_ms).execute(code)
    click.echo(describe_execution(result))

    if not result.success:
        raise SystemExit(1)


@cli.command("config")
@click.option("--config", "-c", "config_path", default=None, type=click.Path(), help="YAML config file")
def show_config(config_path):
    """Show the effective configuration."""
    from llmexec.agent import AgentConfig
    from llmexec.config import find_config_file, get_settings

    path = find_config_file(config_path)
    agent_config = AgentConfig.from_yaml(path)

    click.echo(f"Config file: {path or 'None (defaults)'}")
    data = agent_config.model_dump()
    if data["llm"].get("api_key"):
        data["llm"]["api_key"] = "***"
    console.print_json(data={"agent": data, "logging": get_settings().logging.model_dump()})


if __name__ == "__main__":
    cli()
