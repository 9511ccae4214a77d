"""
Exception hierarchy for the discrete HMM engine.
"""


class DiscreteHMMError(Exception):
    """Base exception for the discrete HMM engine."""
    pass


class MatrixIndexError(DiscreteHMMError, IndexError):
    """Matrix coordinates outside the declared rows/cols."""
    pass


class MatrixShapeError(DiscreteHMMError, ValueError):
    """Invalid matrix dimensions or mismatched buffer shapes."""
    pass


class ModelConstructionError(DiscreteHMMError, ValueError):
    """Invalid state/output counts or parameter shapes."""
    pass


class ObservationError(DiscreteHMMError, ValueError):
    """Empty, malformed or out-of-alphabet observation sequences."""
    pass


class ModelTrainingError(DiscreteHMMError):
    """Baum-Welch reestimation failures."""
    pass
