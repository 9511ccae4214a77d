"""
Forward algorithm.

Computes the alpha table, the total probability of an observation sequence,
and a per-timestep scaled variant whose scaling coefficients give the
log-likelihood without underflow.
"""

from typing import Tuple

import numpy as np

from ..logger import get_logger
from .matrix import FloatMatrix

logger = get_logger(__name__)


def forward(model, observations) -> FloatMatrix:
    """
    Compute the forward table.

    alpha[t][j] is the joint probability of observing the prefix up to t and
    being in state j at time t.

    Args:
        model: DiscreteHMM supplying pi, A and B
        observations: Sequence of observation indices [T]

    Returns:
        alpha: Forward probabilities [T, n_states]
    """
    obs = model.check_observations(observations)
    pi, A, B = model.pi, model.A, model.B

    alpha = FloatMatrix(len(obs), model.n_states)

    def recurrence(t, j, _):
        if t == 0:
            return pi[j] * B.get(j, obs[0])
        # Row t-1 is complete: the traversal is row-major
        return float(np.dot(A.col_view(j), alpha.row_view(t - 1))) * B.get(j, obs[t])

    alpha.foreach_update(recurrence)
    return alpha


def evaluate(model, observations) -> float:
    """Total probability P(O | model) of an observation sequence."""
    alpha = forward(model, observations)
    probability = alpha.row(alpha.rows - 1).sum()

    logger.debug(f"Forward pass completed: T={alpha.rows}, probability={probability:.6e}")
    return probability


def forward_scaled(model, observations) -> Tuple[FloatMatrix, np.ndarray]:
    """
    Forward pass with per-timestep normalization to prevent underflow.

    Returns:
        Tuple of:
        - alpha: Scaled forward probabilities [T, n_states], each row sums to 1
        - c_scale: Scaling coefficients [T]; a zero marks the first timestep
          at which the sequence became impossible, later rows stay zero
    """
    obs = model.check_observations(observations)
    pi, A, B = model.pi, model.A, model.B
    T = len(obs)

    alpha = FloatMatrix(T, model.n_states)
    c_scale = np.zeros(T)

    def recurrence(t, j, _):
        if t == 0:
            return pi[j] * B.get(j, obs[0])
        return float(np.dot(A.col_view(j), alpha.row_view(t - 1))) * B.get(j, obs[t])

    for t in range(T):
        alpha.foreach_update(recurrence, rows=range(t, t + 1))
        c_scale[t] = alpha.row(t).sum()

        if c_scale[t] == 0:
            logger.debug(f"Forward probabilities sum to zero at time {t}")
            break

        scale = c_scale[t]
        alpha.foreach_update(lambda _t, _j, value: value / scale, rows=range(t, t + 1))

    return alpha, c_scale


def score(model, observations) -> float:
    """
    Log-likelihood of an observation sequence.

    Returns -inf when the sequence has zero probability under the model.
    """
    _, c_scale = forward_scaled(model, observations)

    if np.any(c_scale == 0):
        return float('-inf')

    # log P(O) = sum(log(c_t)) since every row was divided by c_t
    log_likelihood = float(np.sum(np.log(c_scale)))

    logger.debug(f"Scaled forward pass completed: T={len(c_scale)}, log_likelihood={log_likelihood:.6f}")
    return log_likelihood
