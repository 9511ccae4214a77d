"""
Viterbi decoding of the most probable hidden-state path.
"""

from collections import namedtuple

import numpy as np

from ..logger import get_logger
from .matrix import FloatMatrix

logger = get_logger(__name__)

ViterbiResult = namedtuple('ViterbiResult', ['probability', 'path'])


def viterbi(model, observations) -> ViterbiResult:
    """
    Find the single most probable state sequence for the observations.

    Ties are always broken towards the lowest state index, both for the
    backpointers and for the final state.

    Args:
        model: DiscreteHMM supplying pi, A and B
        observations: Sequence of observation indices [T]

    Returns:
        ViterbiResult(probability, path) where path has length T
    """
    obs = model.check_observations(observations)
    pi, A, B = model.pi, model.A, model.B
    T = len(obs)

    delta = FloatMatrix(T, model.n_states)
    psi = FloatMatrix(T, model.n_states)

    def recurrence(t, j, _):
        if t == 0:
            return pi[j] * B.get(j, obs[0])
        candidates = delta.row_view(t - 1) * A.col_view(j)
        # argmax returns the first occurrence on ties
        best = int(np.argmax(candidates))
        psi.set(t, j, best)
        return float(candidates[best]) * B.get(j, obs[t])

    delta.foreach_update(recurrence)

    probability = delta.row(T - 1).max()
    path = [0] * T
    path[T - 1] = delta.row(T - 1).index_of(probability)

    for t in range(T - 2, -1, -1):
        path[t] = int(psi.get(t + 1, path[t + 1]))

    logger.debug(f"Viterbi completed: T={T}, probability={probability:.6e}")
    return ViterbiResult(probability, path)
