"""
Synthetic sequence generation from a trained model.
"""

from typing import Iterable, List, Optional

import numpy as np

from ..config import get_config
from ..logger import get_logger

logger = get_logger(__name__)


def sample_index(probabilities: Iterable[float], rng) -> int:
    """
    Draw an index by inverting the cumulative distribution.

    A uniform draw in [0, 1) is compared against the running sum of
    ``probabilities``; the first index with non-zero probability whose
    cumulative sum reaches the draw wins. If rounding keeps the total below
    the draw, the last index with non-zero probability is used. Indices with
    zero probability are never returned.

    Raises:
        ValueError: If no entry has positive probability
    """
    draw = rng.random()
    cumulative = 0.0
    last_possible = -1

    for index, probability in enumerate(probabilities):
        if probability <= 0.0:
            continue
        last_possible = index
        cumulative += probability
        if cumulative >= draw:
            return index

    if last_possible < 0:
        raise ValueError("Cannot sample from a distribution without positive probability")
    return last_possible


def make_rng(seed=None) -> np.random.Generator:
    """Create a generator from ``seed``, falling back to sampling.random_seed."""
    if seed is None:
        seed = get_config('sampling', 'random_seed')
    return np.random.default_rng(seed)


def generate(model, length: int, rng=None,
             sample_initial_state: Optional[bool] = None) -> List[int]:
    """
    Walk the model to emit a synthetic observation sequence.

    Args:
        model: DiscreteHMM supplying pi, A and B
        length: Number of symbols to emit (>= 0)
        rng: numpy Generator (or any object with ``random()``), or an int seed.
            A fresh generator seeded from configuration is used when omitted.
        sample_initial_state: Draw the starting state from pi instead of
            starting in state 0 (default: sampling.sample_initial_state)

    Returns:
        List of observation indices in [0, n_observations)
    """
    if length < 0:
        raise ValueError(f"Sequence length must be non-negative, got {length}")

    if rng is None or isinstance(rng, (int, np.integer)):
        rng = make_rng(rng)
    if sample_initial_state is None:
        sample_initial_state = bool(get_config('sampling', 'sample_initial_state'))

    state = sample_index(model.pi, rng) if sample_initial_state else 0
    output = []

    for _ in range(length):
        output.append(sample_index(model.B.row(state), rng))
        state = sample_index(model.A.row(state), rng)

    logger.debug(f"Generated {length} symbols starting from state "
                 f"{'sampled from pi' if sample_initial_state else 0}")
    return output
