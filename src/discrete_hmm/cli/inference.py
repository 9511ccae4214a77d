"""
Inference CLI commands.

Commands for scoring, decoding and sampling with a model definition.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..exceptions import DiscreteHMMError
from ..logger import get_logger
from .errors import DiscreteHMMCLIError, handle_cli_error
from .utils import load_model_file, parse_observations

console = Console()
logger = get_logger(__name__)


def _debug(ctx: typer.Context) -> bool:
    return bool(ctx.meta.get("debug", False))


def evaluate_command(
    ctx: typer.Context,
    model_file: Path = typer.Argument(..., help="JSON model definition"),
    observations: str = typer.Argument(..., help="Observed symbols, e.g. 0,1,1,0")
):
    """
    Compute the probability of an observation sequence.

    Prints both the forward probability and the scaled log-likelihood.
    """
    try:
        model = load_model_file(model_file)
        obs = parse_observations(observations)

        probability = model.evaluate(obs)
        log_likelihood = model.score(obs)
    except (DiscreteHMMCLIError, DiscreteHMMError) as e:
        handle_cli_error(e, "evaluate", _debug(ctx))

    console.print(Panel.fit(
        f"[bold]Sequence Likelihood[/bold]\n"
        f"Length: {len(obs)}\n"
        f"Probability: {probability:.6e}\n"
        f"Log-likelihood: {log_likelihood:.6f}",
        border_style="blue"
    ))


def decode_command(
    ctx: typer.Context,
    model_file: Path = typer.Argument(..., help="JSON model definition"),
    observations: str = typer.Argument(..., help="Observed symbols, e.g. 0,1,1,0")
):
    """
    Find the most probable hidden-state path with the Viterbi algorithm.
    """
    try:
        model = load_model_file(model_file)
        obs = parse_observations(observations)

        probability, path = model.viterbi(obs)
    except (DiscreteHMMCLIError, DiscreteHMMError) as e:
        handle_cli_error(e, "decode", _debug(ctx))

    table = Table(title="Viterbi Path")
    table.add_column("Time", style="cyan")
    table.add_column("Observation", style="magenta")
    table.add_column("State", style="green")

    for t, (symbol, state) in enumerate(zip(obs, path)):
        table.add_row(str(t), str(symbol), str(state))

    console.print(table)
    console.print(f"Path: {' '.join(str(state) for state in path)}")
    console.print(f"Path probability: {probability:.6e}")


def generate_command(
    ctx: typer.Context,
    model_file: Path = typer.Argument(..., help="JSON model definition"),
    length: int = typer.Argument(..., help="Number of symbols to generate", min=0),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        "-s",
        help="Random seed (default: sampling.random_seed)"
    ),
    sample_initial: bool = typer.Option(
        False,
        "--sample-initial",
        help="Draw the starting state from the initial distribution instead of state 0"
    )
):
    """
    Sample a synthetic observation sequence from the model.
    """
    try:
        model = load_model_file(model_file)
        sequence = model.generate(
            length,
            rng=seed,
            sample_initial_state=sample_initial or None
        )
    except (DiscreteHMMCLIError, DiscreteHMMError) as e:
        handle_cli_error(e, "generate", _debug(ctx))

    logger.debug(f"Generated sequence of length {len(sequence)}")
    console.print(f"Generated: {','.join(str(symbol) for symbol in sequence)}")
