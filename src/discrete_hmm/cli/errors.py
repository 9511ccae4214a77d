"""
Error handling for CLI commands.

Defines CLI exceptions, input validation with suggestions, and the help
screens shared by the commands.
"""

import sys
import traceback
from pathlib import Path
from typing import Optional, Dict, Any

import typer
from rich.console import Console
from rich.panel import Panel

from ..exceptions import DiscreteHMMError, ModelTrainingError, ObservationError
from ..logger import get_logger

console = Console()
logger = get_logger(__name__)


# Exit codes for different error types
EXIT_CODES = {
    "success": 0,
    "general_error": 1,
    "invalid_usage": 2,
    "model_error": 10,
    "observation_error": 11,
    "training_error": 12,
    "config_error": 13
}


class DiscreteHMMCLIError(Exception):
    """Base exception for CLI-specific errors."""

    def __init__(self, message: str, exit_code: int = 1, suggestions: Optional[list] = None):
        self.message = message
        self.exit_code = exit_code
        self.suggestions = suggestions or []
        super().__init__(message)


class ModelFileError(DiscreteHMMCLIError):
    """Missing or malformed model definition files."""

    def __init__(self, message: str, suggestions: Optional[list] = None):
        super().__init__(message, EXIT_CODES["model_error"], suggestions)


class ObservationParseError(DiscreteHMMCLIError):
    """Observation arguments that cannot be parsed."""

    def __init__(self, message: str, suggestions: Optional[list] = None):
        super().__init__(message, EXIT_CODES["observation_error"], suggestions)


class ConfigurationError(DiscreteHMMCLIError):
    """Configuration errors."""

    def __init__(self, message: str, suggestions: Optional[list] = None):
        super().__init__(message, EXIT_CODES["config_error"], suggestions)


def exit_code_for(error: Exception) -> int:
    """Map an exception to the CLI exit code."""
    if isinstance(error, DiscreteHMMCLIError):
        return error.exit_code
    if isinstance(error, ObservationError):
        return EXIT_CODES["observation_error"]
    if isinstance(error, ModelTrainingError):
        return EXIT_CODES["training_error"]
    if isinstance(error, DiscreteHMMError):
        return EXIT_CODES["model_error"]
    return EXIT_CODES["general_error"]


def format_error_message(error: Exception, operation: str, debug: bool = False) -> str:
    """Format error message with context and suggestions."""
    error_type = type(error).__name__

    message_parts = [
        f"[red]Error during {operation}:[/red]",
        f"[red]{error_type}: {error}[/red]"
    ]

    if getattr(error, 'suggestions', None):
        message_parts.append("")
        message_parts.append("[yellow]Suggestions:[/yellow]")
        for suggestion in error.suggestions:
            message_parts.append(f"  • {suggestion}")

    if debug:
        message_parts.append("")
        message_parts.append("[dim]Debug information:[/dim]")
        message_parts.append(f"[dim]{traceback.format_exc()}[/dim]")

    return "\n".join(message_parts)


def handle_cli_error(error: Exception, operation: str, debug: bool = False) -> None:
    """Display an error with rich formatting and exit with the mapped code."""
    console.print(format_error_message(error, operation, debug))
    console.print(f"\n[dim]For more help, run: discrete-hmm {operation.split()[0]} --help[/dim]")

    logger.error(f"CLI error in {operation}: {error}", exc_info=debug)

    raise typer.Exit(exit_code_for(error))


def validate_file_exists(path: Path, file_type: str = "file") -> Path:
    """Validate that a file exists with helpful error messages."""
    if not path.exists():
        suggestions = []

        if not path.parent.exists():
            suggestions.append(f"Check the directory exists: {path.parent}")
        else:
            similar_files = [
                file.name for file in path.parent.iterdir()
                if file.name.lower().startswith(path.stem.lower()[:3])
            ]
            if similar_files:
                suggestions.append(f"Did you mean one of: {', '.join(similar_files[:3])}")

        raise ModelFileError(
            f"{file_type.capitalize()} not found: {path}",
            suggestions=suggestions
        )

    if path.is_dir():
        raise ModelFileError(
            f"Expected a file but got a directory: {path}",
            suggestions=["Pass the path of a JSON model definition"]
        )

    return path


def check_system_requirements() -> Dict[str, Any]:
    """Check system requirements and return status."""
    requirements = {
        "python_version": {
            "required": "3.8+",
            "current": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
            "satisfied": sys.version_info >= (3, 8)
        }
    }

    for package in ["numpy", "typer", "rich"]:
        try:
            __import__(package)
            requirements[package] = {"installed": True}
        except ImportError:
            requirements[package] = {
                "installed": False,
                "install_command": f"pip install {package}"
            }

    return requirements


def display_system_info() -> None:
    """Display system information and requirements status."""
    requirements = check_system_requirements()

    console.print(Panel.fit(
        "[bold]System Information[/bold]",
        border_style="blue"
    ))

    python_req = requirements["python_version"]
    status = "[green]✓[/green]" if python_req["satisfied"] else "[red]✗[/red]"
    console.print(f"Python: {status} {python_req['current']} (required: {python_req['required']})")

    console.print("\n[bold]Package Status:[/bold]")
    for package, info in requirements.items():
        if package == "python_version":
            continue

        if info["installed"]:
            console.print(f"  [green]✓[/green] {package}")
        else:
            console.print(f"  [red]✗[/red] {package} - Install with: {info['install_command']}")


def create_usage_examples() -> Dict[str, list]:
    """Create usage examples for different commands."""
    return {
        "evaluate": [
            "# Probability of a sequence",
            "discrete-hmm evaluate model.json 0,1,1,0"
        ],
        "decode": [
            "# Most probable state path",
            "discrete-hmm decode model.json \"0 1 1 0\""
        ],
        "learn": [
            "# Reestimate transitions and emissions",
            "discrete-hmm learn model.json 0,0,0,1,0,0,1 --max-iter 20"
        ],
        "generate": [
            "# Sample 10 symbols reproducibly",
            "discrete-hmm generate model.json 10 --seed 42"
        ]
    }


def display_usage_examples(command: Optional[str] = None) -> None:
    """Display usage examples for commands."""
    examples = create_usage_examples()

    if command and command in examples:
        console.print(Panel.fit(
            f"[bold]{command.title()} Command Examples[/bold]\n\n" +
            "\n".join(examples[command]),
            border_style="green"
        ))
        return

    console.print(Panel.fit(
        "[bold]discrete-hmm Usage Examples[/bold]",
        border_style="green"
    ))

    for cmd, cmd_examples in examples.items():
        console.print(f"\n[bold cyan]{cmd.title()}:[/bold cyan]")
        for example in cmd_examples:
            if example.startswith("#"):
                console.print(f"[dim]{example}[/dim]")
            else:
                console.print(f"  {example}")
