"""
Backward algorithm, used by Baum-Welch reestimation.
"""

import numpy as np

from .matrix import FloatMatrix


def backward(model, observations) -> FloatMatrix:
    """
    Compute the backward table.

    beta[t][i] is the probability of the observation suffix after t given
    state i at time t; beta[T-1][i] = 1.

    Args:
        model: DiscreteHMM supplying A and B
        observations: Sequence of observation indices [T]

    Returns:
        beta: Backward probabilities [T, n_states]
    """
    obs = model.check_observations(observations)
    A, B = model.A, model.B
    T = len(obs)

    beta = FloatMatrix(T, model.n_states, 1.0)

    for t in range(T - 2, -1, -1):
        # B[j][obs[t+1]] * beta[t+1][j] for every j
        weighted = B.col_view(obs[t + 1]) * beta.row_view(t + 1)
        beta.foreach_update(
            lambda _t, i, _: float(np.dot(A.row_view(i), weighted)),
            rows=range(t, t + 1)
        )

    return beta


def backward_likelihood(model, observations) -> float:
    """P(O | model) recovered from the backward table: sum_i pi[i] B[i][o_0] beta[0][i]."""
    obs = model.check_observations(observations)
    beta = backward(model, obs)
    return float(np.sum(model.pi * model.B.col_view(obs[0]) * beta.row_view(0)))
