"""
Baum-Welch (EM) reestimation of transition and emission probabilities.

Each iteration runs a forward and a backward pass, derives the expected
transition counts (eta) and state occupancies (gamma), and rewrites the
model's A and B matrices in place. Training stops when the sequence
likelihood changes by less than the convergence tolerance or the iteration
budget runs out.

Boundary conventions:
- eta exists for t in [0, T-1); gamma[t] = sum_j eta[t][i][j] there, and the
  final gamma row is alpha[T-1] * beta[T-1] / P(O).
- Transition sums run over t in [0, T-1); emission sums run over all T rows.
- A state whose occupancy denominator is zero keeps its previous row.
"""

from collections import namedtuple
from typing import Any, Dict, List, Optional

from ..config import get_config
from ..exceptions import ModelTrainingError
from ..logger import get_logger
from .backward import backward
from .forward import evaluate, forward
from .matrix import FloatMatrix

logger = get_logger(__name__)

Expectations = namedtuple('Expectations', ['eta', 'gamma', 'likelihood'])


def compute_expectations(model, observations) -> Expectations:
    """
    E-step: expected transitions and state occupancies under the current model.

    Args:
        model: DiscreteHMM supplying pi, A and B (left untouched)
        observations: Sequence of observation indices [T]

    Returns:
        Expectations with
        - eta: list of T-1 matrices [n_states, n_states]
        - gamma: State posteriors [T, n_states]
        - likelihood: P(O | model) used as the normalization term

    Raises:
        ModelTrainingError: If the sequence has zero probability under the model
    """
    obs = model.check_observations(observations)
    A, B = model.A, model.B
    T = len(obs)
    n_states = model.n_states

    alpha = forward(model, obs)
    beta = backward(model, obs)

    likelihood = alpha.row(T - 1).sum()
    if likelihood == 0.0:
        raise ModelTrainingError(
            "Observation sequence has zero probability under the current model"
        )

    eta: List[FloatMatrix] = []
    for t in range(T - 1):
        weighted = B.col_view(obs[t + 1]) * beta.row_view(t + 1)
        alpha_t = alpha.row_view(t)
        eta.append(FloatMatrix(
            n_states, n_states,
            lambda i, j: alpha_t[i] * A.get(i, j) * weighted[j] / likelihood
        ))

    def occupancy(t, i, _):
        if t < T - 1:
            return eta[t].row(i).sum()
        return alpha.get(t, i) * beta.get(t, i) / likelihood

    gamma = FloatMatrix(T, n_states)
    gamma.foreach_update(occupancy)

    return Expectations(eta, gamma, likelihood)


def reestimate(model, observations) -> float:
    """
    Run a single Baum-Welch iteration, updating model.A and model.B in place.

    Returns:
        Likelihood of the observations before the update
    """
    obs = model.check_observations(observations)
    T = len(obs)
    n_states = model.n_states

    expectations = compute_expectations(model, obs)
    gamma = expectations.gamma

    transition_counts = FloatMatrix(n_states, n_states)
    for eta_t in expectations.eta:
        transition_counts.foreach_update(lambda i, j, value: value + eta_t.get(i, j))

    emission_counts = FloatMatrix(n_states, model.n_observations)
    for t in range(T):
        symbol = obs[t]
        emission_counts.foreach_update(
            lambda i, _k, value: value + gamma.get(t, i),
            cols=range(symbol, symbol + 1)
        )

    transition_occupancy = [
        sum(gamma.get(t, i) for t in range(T - 1)) for i in range(n_states)
    ]
    emission_occupancy = [gamma.col(i).sum() for i in range(n_states)]

    for i in range(n_states):
        if transition_occupancy[i] == 0.0:
            logger.debug(f"State {i} has zero transition occupancy; keeping its transition row")
        if emission_occupancy[i] == 0.0:
            logger.debug(f"State {i} has zero emission occupancy; keeping its emission row")

    model.A.foreach_update(
        lambda i, j, value: value if transition_occupancy[i] == 0.0
        else transition_counts.get(i, j) / transition_occupancy[i]
    )
    model.B.foreach_update(
        lambda i, k, value: value if emission_occupancy[i] == 0.0
        else emission_counts.get(i, k) / emission_occupancy[i]
    )

    return expectations.likelihood


def learn(model, observations, max_iterations: Optional[int] = None,
          tolerance: Optional[float] = None, verbose: bool = False) -> Dict[str, Any]:
    """
    Train the model on one observation sequence with Baum-Welch.

    Args:
        model: DiscreteHMM whose A and B are reestimated in place
        observations: Sequence of observation indices [T]
        max_iterations: Iteration budget (default: hmm.max_iterations)
        tolerance: Stop when |likelihood change| < tolerance
            (default: hmm.convergence_tolerance)
        verbose: Log progress at INFO level

    Returns:
        Dictionary with training statistics:
        - 'converged': Whether training converged
        - 'iterations': Number of iterations performed
        - 'initial_likelihood': Likelihood before training
        - 'final_likelihood': Likelihood after training
        - 'likelihood_history': Likelihoods, starting with the initial one
        - 'improvement_history': Likelihood change per iteration

    Raises:
        ValueError: If max_iterations is negative
        ObservationError: If the observations are invalid
        ModelTrainingError: If the sequence has zero probability under the model
    """
    if max_iterations is None:
        max_iterations = get_config('hmm', 'max_iterations')
    if tolerance is None:
        tolerance = get_config('hmm', 'convergence_tolerance')
    if max_iterations < 0:
        raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")

    decrease_threshold = get_config('hmm', 'decrease_warning_threshold') or 0.0
    obs = model.check_observations(observations)
    log = logger.info if verbose else logger.debug

    previous_likelihood = evaluate(model, obs)
    likelihood_history = [previous_likelihood]
    improvement_history = []
    converged = False

    log(f"Starting Baum-Welch on {len(obs)} observations, "
        f"initial likelihood={previous_likelihood:.6e}")

    for iteration in range(max_iterations):
        reestimate(model, obs)
        current_likelihood = evaluate(model, obs)

        improvement = current_likelihood - previous_likelihood
        likelihood_history.append(current_likelihood)
        improvement_history.append(improvement)

        log(f"Iteration {iteration + 1}: likelihood={current_likelihood:.6e}, "
            f"improvement={improvement:.6e}")

        if abs(improvement) < tolerance:
            converged = True
            log(f"Converged after {iteration + 1} iterations "
                f"(|improvement| {abs(improvement):.3e} < tolerance {tolerance})")
            break

        if improvement < -decrease_threshold:
            logger.warning(f"Likelihood decreased by {-improvement:.6e} at iteration {iteration + 1}")

        previous_likelihood = current_likelihood

    if not converged:
        log(f"Training stopped after {len(improvement_history)} iterations without convergence")

    return {
        'converged': converged,
        'iterations': len(improvement_history),
        'initial_likelihood': likelihood_history[0],
        'final_likelihood': likelihood_history[-1],
        'likelihood_history': likelihood_history,
        'improvement_history': improvement_history
    }
