"""
CLI utility functions.

Model definition loading, observation parsing and table rendering shared by
the commands.
"""

import json
import re
from pathlib import Path
from typing import List

from rich.table import Table

from ..exceptions import ModelConstructionError
from ..hmm import DiscreteHMM, FloatMatrix
from .errors import ModelFileError, ObservationParseError, validate_file_exists

MODEL_KEYS = ('initial', 'transition', 'emission')


def parse_observations(text: str) -> List[int]:
    """Parse a comma- or whitespace-separated list of symbols."""
    tokens = [token for token in re.split(r"[,\s]+", text.strip()) if token]

    if not tokens:
        raise ObservationParseError(
            "No observation symbols given",
            suggestions=["Pass symbols like 0,1,1,0 or \"0 1 1 0\""]
        )

    try:
        return [int(token) for token in tokens]
    except ValueError:
        raise ObservationParseError(
            f"Observation symbols must be integers: {text!r}",
            suggestions=["Symbols are output indices starting at 0"]
        )


def load_model_file(path: Path) -> DiscreteHMM:
    """
    Build a model from a JSON definition.

    The file holds ``initial``, ``transition`` and ``emission``; the state
    count and alphabet size are taken from their dimensions.
    """
    validate_file_exists(path, "model file")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            definition = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ModelFileError(
            f"Model file is not valid UTF-8 JSON: {e}",
            suggestions=["Check the file with a JSON validator"]
        )

    if not isinstance(definition, dict):
        raise ModelFileError("Model file must contain a JSON object")

    missing = [key for key in MODEL_KEYS if key not in definition]
    if missing:
        raise ModelFileError(
            f"Model file is missing: {', '.join(missing)}",
            suggestions=[f"Required keys: {', '.join(MODEL_KEYS)}"]
        )

    emission = definition['emission']

    try:
        n_states = len(definition['initial'])
        n_observations = len(emission[0]) if emission and isinstance(emission[0], list) else 0

        return DiscreteHMM(
            n_states, n_observations,
            initial=definition['initial'],
            transition=definition['transition'],
            emission=emission
        )
    except (ModelConstructionError, TypeError) as e:
        raise ModelFileError(
            f"Invalid model definition: {e}",
            suggestions=[
                "transition must be states x states",
                "emission must be states x outputs"
            ]
        )


def matrix_table(title: str, matrix: FloatMatrix) -> Table:
    """Render a matrix as a Rich table with one row per state."""
    table = Table(title=title)
    table.add_column("State", style="cyan")

    for x in range(matrix.cols):
        table.add_column(str(x), style="green", justify="right")

    for y, row in enumerate(matrix.iter_rows()):
        table.add_row(str(y), *(f"{value:.4f}" for value in row))

    return table
