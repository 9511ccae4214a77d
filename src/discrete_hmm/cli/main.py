"""
Main CLI application for discrete-hmm.

Provides command-line access to scoring, decoding, training and sampling.
"""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import load_config_file
from ..logger import configure_logging, enable_file_logging, set_log_level
from .errors import (
    ConfigurationError,
    EXIT_CODES,
    display_system_info,
    display_usage_examples,
    handle_cli_error
)
from .inference import decode_command, evaluate_command, generate_command
from .train import learn_command

console = Console()

app = typer.Typer(
    name="discrete-hmm",
    help="Discrete Hidden Markov Models: scoring, decoding, training and sampling",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True
)

app.command("evaluate")(evaluate_command)
app.command("decode")(decode_command)
app.command("learn")(learn_command)
app.command("generate")(generate_command)


@app.command("info")
def system_info():
    """Display system information and requirements status."""
    display_system_info()


@app.command("examples")
def show_examples(
    command: Optional[str] = typer.Argument(
        None,
        help="Show examples for a specific command (evaluate/decode/learn/generate)"
    )
):
    """Show usage examples for discrete-hmm commands."""
    display_usage_examples(command)


@app.command("version")
def show_version():
    """Show version information."""
    from .. import __version__

    console.print(Panel.fit(
        f"[bold]discrete-hmm Version {__version__}[/bold]\n"
        f"Discrete Hidden Markov Models\n"
        f"Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        border_style="blue"
    ))


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all log output except errors"
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode with detailed error traces"
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a JSON configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write log output to this file",
        dir_okay=False
    )
):
    """
    discrete-hmm: Discrete Hidden Markov Models

    \b
    Quick Start:
    1. Score a sequence:   discrete-hmm evaluate <model.json> 0,1,1
    2. Decode states:      discrete-hmm decode <model.json> 0,1,1
    3. Train:              discrete-hmm learn <model.json> 0,0,1,0 --max-iter 20
    4. Sample:             discrete-hmm generate <model.json> 10 --seed 42
    """
    ctx.meta["verbose"] = verbose
    ctx.meta["quiet"] = quiet
    ctx.meta["debug"] = debug

    try:
        if config_file:
            load_config_file(str(config_file))
        configure_logging()
    except (ValueError, OSError) as e:
        handle_cli_error(
            ConfigurationError(str(e), suggestions=[
                "Configuration files must be JSON objects",
                "logging.level must be DEBUG, INFO, WARNING, ERROR or CRITICAL"
            ]),
            "configuration",
            debug
        )

    # Command-line flags win over the configured level
    if quiet:
        set_log_level('ERROR')
    elif verbose or debug:
        set_log_level('DEBUG')

    if log_file:
        try:
            enable_file_logging(str(log_file))
        except OSError as e:
            handle_cli_error(
                ConfigurationError(f"Cannot open log file {log_file}: {e}"),
                "configuration",
                debug
            )


def cli_main():
    """Main entry point for CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(EXIT_CODES["general_error"])


if __name__ == "__main__":
    cli_main()
