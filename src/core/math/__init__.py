"""
Core math modules

Численные примитивы для работы с вероятностями.
"""

from src.core.math.numerical_safeguards import (
    # Epsilon constants
    EPS_PROBABILITY_COMPARE,
    EPS_PROBABILITY_SUM,
    # NaN/Inf checks
    is_valid_float,
    # Epsilon comparisons
    abs_error,
    is_close_abs,
    # Validation
    validate_tolerance,
)

__all__ = [
    # Numerical Safeguards — Epsilon constants
    "EPS_PROBABILITY_COMPARE",
    "EPS_PROBABILITY_SUM",
    # Numerical Safeguards — NaN/Inf checks
    "is_valid_float",
    # Numerical Safeguards — Epsilon comparisons
    "abs_error",
    "is_close_abs",
    # Numerical Safeguards — Validation
    "validate_tolerance",
]
