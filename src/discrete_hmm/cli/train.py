"""
Training CLI commands.

Runs Baum-Welch on an observation sequence and reports the reestimated
parameters. Nothing is written to disk.
"""

from pathlib import Path
from typing import Optional
import time

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from ..exceptions import DiscreteHMMError
from ..logger import get_logger
from .errors import DiscreteHMMCLIError, handle_cli_error
from .utils import load_model_file, matrix_table, parse_observations

console = Console()
logger = get_logger(__name__)


def learn_command(
    ctx: typer.Context,
    model_file: Path = typer.Argument(..., help="JSON model definition"),
    observations: str = typer.Argument(..., help="Training symbols, e.g. 0,0,1,0"),
    max_iterations: Optional[int] = typer.Option(
        None,
        "--max-iter",
        "-i",
        help="Maximum Baum-Welch iterations (default: hmm.max_iterations)",
        min=0
    ),
    tolerance: Optional[float] = typer.Option(
        None,
        "--tolerance",
        "-t",
        help="Absolute tolerance on the raw likelihood change; use 0 with --max-iter for long sequences (default: hmm.convergence_tolerance)"
    )
):
    """
    Reestimate transition and emission probabilities with Baum-Welch.

    Examples:
    ```
    discrete-hmm learn model.json 0,0,0,1,0,0,1 --max-iter 20
    ```
    """
    debug = bool(ctx.meta.get("debug", False))

    try:
        model = load_model_file(model_file)
        obs = parse_observations(observations)

        start_time = time.time()
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            transient=True
        ) as progress:
            progress.add_task("Running Baum-Welch...", total=None)
            stats = model.learn(obs, max_iterations=max_iterations, tolerance=tolerance,
                                verbose=bool(ctx.meta.get("verbose", False)))
        training_time = time.time() - start_time
    except (DiscreteHMMCLIError, DiscreteHMMError) as e:
        handle_cli_error(e, "learn", debug)

    status = "[green]converged[/green]" if stats['converged'] else "[yellow]budget exhausted[/yellow]"
    console.print(Panel.fit(
        f"[bold]Training Results[/bold]\n"
        f"Status: {status}\n"
        f"Iterations: {stats['iterations']}\n"
        f"Initial likelihood: {stats['initial_likelihood']:.6e}\n"
        f"Final likelihood: {stats['final_likelihood']:.6e}\n"
        f"Time: {training_time:.2f}s",
        border_style="blue"
    ))

    console.print(matrix_table("Transition Matrix", model.A))
    console.print(matrix_table("Emission Matrix", model.B))

    logger.debug(f"learn finished: {stats['iterations']} iterations")
