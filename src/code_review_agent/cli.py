"""Command-line interface for Code Review Agent."""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from code_review_agent import __version__
from code_review_agent.config import Config, ConfigError, load_config, validate_config
from code_review_agent.directory import DirectoryError, resolve_directory
from code_review_agent.formatter import (
    ReportRenderer,
    format_review_as_json,
    format_review_as_markdown,
)
from code_review_agent.review import run_code_review

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def _load_valid_config(config_path: Path | None) -> Config:
    """Load and validate configuration, exiting with the problems on failure."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Config error:[/red] {escape(str(e))}")
        sys.exit(1)

    errors = validate_config(config)
    if errors:
        for error in errors:
            console.print(f"[red]Config error:[/red] {escape(error)}")
        sys.exit(1)
    return config


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def cli(verbose: bool) -> None:
    """Code Review Agent - agent-driven codebase review."""
    setup_logging(verbose)


@cli.command("review")
@click.argument("directory", default=".", required=False)
@click.option(
    "--output", type=click.Choice(["text", "json", "markdown"]), default="text", help="Report format"
)
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file path")
@click.option("--model", help="Model for the main review agent (e.g. opus, sonnet)")
@click.option("--max-turns", type=int, help="Maximum number of agent turns")
def review(
    directory: str,
    output: str,
    config_path: str | None,
    model: str | None,
    max_turns: int | None,
) -> None:
    """Review the code in DIRECTORY (default: current directory).

    The agent reads and searches the code, may delegate security analysis
    to a sub-agent, and reports issues grouped by severity.
    """
    asyncio.run(
        review_async(
            directory=directory,
            output=output,
            config_path=Path(config_path) if config_path else None,
            model=model,
            max_turns=max_turns,
        )
    )


async def review_async(
    directory: str,
    output: str = "text",
    config_path: Path | None = None,
    model: str | None = None,
    max_turns: int | None = None,
) -> None:
    """Async implementation of a directory review."""
    try:
        resolved = resolve_directory(directory)
    except DirectoryError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    config = _load_valid_config(config_path)
    if model:
        config.review.model = model
    if max_turns is not None:
        if max_turns < 1:
            console.print("[red]Error:[/red] --max-turns must be a positive integer")
            sys.exit(1)
        config.review.max_turns = max_turns

    # Keep stdout clean for machine-readable reports
    progress = console if output == "text" else Console(stderr=True)

    try:
        result = await run_code_review(resolved, progress, config=config)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    if result is None:
        return

    if output == "json":
        click.echo(json.dumps(format_review_as_json(result), indent=2))
    elif output == "markdown":
        click.echo(format_review_as_markdown(result), nl=False)
    else:
        ReportRenderer(console).render(result)


@cli.group("config")
def config_group() -> None:
    """Configuration commands."""
    pass


@config_group.command("validate")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file path")
def config_validate(config_path: str | None) -> None:
    """Validate configuration file."""
    try:
        config = load_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        console.print(f"[red]Error loading config:[/red] {escape(str(e))}")
        sys.exit(1)

    errors = validate_config(config)
    if errors:
        console.print("[red]Configuration is invalid:[/red]")
        for error in errors:
            console.print(f"  • {escape(error)}")
        sys.exit(1)
    else:
        console.print("[green]✓ Configuration is valid[/green]")


@config_group.command("show")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file path")
def config_show(config_path: str | None) -> None:
    """Show current configuration."""
    try:
        config = load_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        console.print(f"[red]Error loading config:[/red] {escape(str(e))}")
        sys.exit(1)

    console.print("\n[bold]Current Configuration[/bold]\n")

    console.print(f"[bold]Model:[/bold] {escape(config.review.model)}")
    console.print(f"[bold]Max turns:[/bold] {config.review.max_turns}")
    console.print(f"[bold]Permission mode:[/bold] {escape(config.review.permission_mode)}")
    console.print(f"[bold]Allowed tools:[/bold] {escape(', '.join(config.review.allowed_tools))}")
    console.print(f"[bold]Strict validation:[/bold] {config.review.strict_validation}\n")

    table = Table(title="Sub-agents")
    table.add_column("Name")
    table.add_column("Model")
    table.add_column("Tools")
    table.add_column("Description")

    for agent in config.agents:
        table.add_row(
            escape(agent.name),
            escape(agent.model or "inherit"),
            escape(", ".join(agent.tools)),
            escape(agent.description),
        )

    console.print(table)


if __name__ == "__main__":
    cli()
