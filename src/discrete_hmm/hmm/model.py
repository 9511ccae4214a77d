"""
Discrete Hidden Markov Model.

The model bundles the state count, output alphabet size, initial-state
distribution, transition matrix and emission matrix. The inference and
training algorithms live in their own modules and are reached through the
methods below.
"""

from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..config import get_config
from ..exceptions import MatrixShapeError, ModelConstructionError, ObservationError
from ..logger import get_logger
from . import baum_welch, forward, sampler, viterbi
from .viterbi import ViterbiResult
from .matrix import FloatMatrix

logger = get_logger(__name__)


class DiscreteHMM:
    """
    Discrete Hidden Markov Model with integer states and output symbols.

    Parameters left out at construction are initialised the usual way:
    uniform initial probabilities and random row-stochastic transition and
    emission matrices.

    Args:
        n_states: Number of hidden states (> 0)
        n_observations: Size of the output alphabet (> 0)
        initial: Initial state probabilities [n_states]
        transition: Transition matrix [n_states, n_states] where
            A[i][j] = P(q_t+1=j | q_t=i)
        emission: Emission matrix [n_states, n_observations] where
            B[i][k] = P(o_t=k | q_t=i)
        random_state: Seed for the random initialisation of A and B

    Raises:
        ModelConstructionError: If a dimension is not positive or a parameter
            has the wrong shape
    """

    def __init__(self, n_states: int, n_observations: int,
                 initial=None, transition=None, emission=None,
                 random_state: Optional[int] = None):
        if n_states <= 0:
            raise ModelConstructionError("The state space needs to have at least 1 state")
        if n_observations <= 0:
            raise ModelConstructionError("There needs to be at least one possible output symbol")

        self.n_states = int(n_states)
        self.n_observations = int(n_observations)

        rng = np.random.default_rng(random_state)

        if initial is None:
            self.pi = self._init_initial_probabilities()
        else:
            self.pi = self._as_vector(initial, 'initial')

        if transition is None:
            self.A = self._init_stochastic_matrix(rng, self.n_states, self.n_states)
        else:
            self.A = self._as_matrix(transition, self.n_states, self.n_states, 'transition')

        if emission is None:
            self.B = self._init_stochastic_matrix(rng, self.n_states, self.n_observations)
        else:
            self.B = self._as_matrix(emission, self.n_states, self.n_observations, 'emission')

        logger.debug(f"Initialized DiscreteHMM with {n_states} states and {n_observations} observations")

    def _init_initial_probabilities(self) -> np.ndarray:
        return np.ones(self.n_states) / self.n_states

    @staticmethod
    def _init_stochastic_matrix(rng: np.random.Generator, rows: int, cols: int) -> FloatMatrix:
        values = rng.random((rows, cols))

        # Normalize rows to make stochastic
        values = values / values.sum(axis=1, keepdims=True)

        return FloatMatrix.from_rows(values)

    def _as_vector(self, values, name: str) -> np.ndarray:
        try:
            vector = np.array(values, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ModelConstructionError(f"Invalid {name} vector: {e}")

        if vector.shape != (self.n_states,):
            raise ModelConstructionError(
                f"{name} shape {vector.shape} doesn't match expected ({self.n_states},)"
            )
        return vector

    @staticmethod
    def _as_matrix(values, rows: int, cols: int, name: str) -> FloatMatrix:
        try:
            matrix = FloatMatrix.from_rows(values)
        except MatrixShapeError as e:
            raise ModelConstructionError(f"Invalid {name} matrix: {e}")

        if matrix.shape != (rows, cols):
            raise ModelConstructionError(
                f"{name} shape {matrix.shape} doesn't match expected ({rows}, {cols})"
            )
        return matrix

    def check_observations(self, observations) -> np.ndarray:
        """
        Validate an observation sequence and return it as an integer array.

        Raises:
            ObservationError: If the sequence is empty, not 1-D, not integral
                or contains symbols outside [0, n_observations)
        """
        obs = np.asarray(observations)

        if obs.ndim != 1:
            raise ObservationError(f"Observations must be a 1-D sequence, got shape {obs.shape}")
        if obs.size == 0:
            raise ObservationError("Observation sequence must contain at least one symbol")
        if not np.issubdtype(obs.dtype, np.integer):
            raise ObservationError(f"Observation symbols must be integers, got dtype {obs.dtype}")
        if np.any(obs < 0) or np.any(obs >= self.n_observations):
            raise ObservationError(f"Observations must be in range [0, {self.n_observations - 1}]")

        return obs.astype(np.int64)

    def validate_stochastic_matrices(self) -> bool:
        """
        Validate that all probability matrices satisfy stochastic properties.

        Returns:
            bool: True if all matrices are valid stochastic matrices

        Raises:
            ValueError: If any matrix violates stochastic properties
        """
        tolerance = get_config('hmm', 'stochastic_tolerance') or 1e-10
        A = self.A.to_numpy()
        B = self.B.to_numpy()

        if not np.allclose(self.pi.sum(), 1.0, atol=tolerance):
            raise ValueError(f"Initial probabilities sum to {self.pi.sum()}, expected 1.0")

        if np.any(self.pi < 0):
            raise ValueError("Initial probabilities contain negative values")

        row_sums_A = A.sum(axis=1)
        if not np.allclose(row_sums_A, 1.0, atol=tolerance):
            raise ValueError(f"Transition matrix rows don't sum to 1.0: {row_sums_A}")

        if np.any(A < 0):
            raise ValueError("Transition matrix contains negative values")

        row_sums_B = B.sum(axis=1)
        if not np.allclose(row_sums_B, 1.0, atol=tolerance):
            raise ValueError(f"Emission matrix rows don't sum to 1.0: {row_sums_B}")

        if np.any(B < 0):
            raise ValueError("Emission matrix contains negative values")

        logger.debug("All stochastic matrix properties validated successfully")
        return True

    def get_parameters(self) -> Tuple[np.ndarray, FloatMatrix, FloatMatrix]:
        """Copies of (pi, A, B)."""
        return self.pi.copy(), self.A.copy(), self.B.copy()

    def set_parameters(self, pi, A, B) -> None:
        """
        Replace all parameters after checking shapes and stochastic properties.

        Raises:
            ModelConstructionError: If a parameter has the wrong shape
            ValueError: If the new parameters are not stochastic
        """
        new_pi = self._as_vector(pi, 'pi')
        new_A = self._as_matrix(A, self.n_states, self.n_states, 'A')
        new_B = self._as_matrix(B, self.n_states, self.n_observations, 'B')

        self.pi, self.A, self.B = new_pi, new_A, new_B

        self.validate_stochastic_matrices()

        logger.debug("Model parameters updated and validated")

    def evaluate(self, observations) -> float:
        """Probability of the observation sequence under the model."""
        return forward.evaluate(self, observations)

    def score(self, observations) -> float:
        """Log-likelihood of the observation sequence, computed with scaling."""
        return forward.score(self, observations)

    def viterbi(self, observations) -> ViterbiResult:
        """Most probable state path: ``(probability, path)``."""
        return viterbi.viterbi(self, observations)

    def learn(self, observations, max_iterations: Optional[int] = None,
              tolerance: Optional[float] = None, verbose: bool = False) -> Dict[str, Any]:
        """
        Reestimate A and B in place from an observation sequence.

        See ``baum_welch.learn`` for the returned training statistics.
        """
        return baum_welch.learn(self, observations, max_iterations=max_iterations,
                                tolerance=tolerance, verbose=verbose)

    def generate(self, length: int, rng=None,
                 sample_initial_state: Optional[bool] = None) -> List[int]:
        """Sample a synthetic observation sequence of the given length."""
        return sampler.generate(self, length, rng=rng, sample_initial_state=sample_initial_state)

    def __repr__(self) -> str:
        return f"DiscreteHMM(n_states={self.n_states}, n_observations={self.n_observations})"
