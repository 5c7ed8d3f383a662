"""
Domain models.

Contains the finite probability space and its error taxonomy.
"""

from src.core.domain.errors import (
    InvalidDistribution,
    ProbabilitySpaceError,
    UnknownOutcome,
    ZeroProbabilityCondition,
)
from src.core.domain.probability_space import ProbabilitySpace

__all__ = [
    # Probability space
    "ProbabilitySpace",
    # Errors
    "ProbabilitySpaceError",
    "InvalidDistribution",
    "UnknownOutcome",
    "ZeroProbabilityCondition",
]
