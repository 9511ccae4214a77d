"""
Hidden Markov Model module.

Discrete HMM with forward/backward scoring, Viterbi decoding, Baum-Welch
training and sequence sampling on top of a dense float matrix.
"""

from .matrix import FloatMatrix, FloatIterator
from .model import DiscreteHMM
from .viterbi import ViterbiResult
from .baum_welch import Expectations

__all__ = [
    "DiscreteHMM",
    "FloatMatrix",
    "FloatIterator",
    "ViterbiResult",
    "Expectations"
]
