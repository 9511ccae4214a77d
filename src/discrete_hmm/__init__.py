"""
discrete-hmm: Discrete Hidden Markov Models

Likelihood scoring, Viterbi decoding, Baum-Welch reestimation and
sequence sampling for HMMs with a finite output alphabet.
"""

__version__ = "0.1.0"
__author__ = "discrete-hmm Development Team"

from .config import get_config, set_config
from .logger import get_logger
from .hmm import DiscreteHMM, FloatMatrix

__all__ = [
    "DiscreteHMM",
    "FloatMatrix",
    "get_config",
    "set_config",
    "get_logger",
    "__version__"
]
