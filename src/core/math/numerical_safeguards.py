"""
Numerical Safeguards — Float Primitives для вероятностных пространств

Модуль обеспечивает численную корректность операций над вероятностями:
- Epsilon-параметры для проверки суммы вероятностей и сравнения результатов
- Проверка NaN/Inf для предотвращения распространения невалидных значений
- Абсолютные epsilon-сравнения float
- Валидация толерантностей

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. NaN/Inf никогда не принимаются как вероятность
2. Сравнения с допуском всегда абсолютные (|a - b| <= tol)
3. Все операции детерминированы и воспроизводимы
"""

import math
from typing import Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Допуск для проверки, что сумма вероятностей равна 1
# Используется при построении ProbabilitySpace
EPS_PROBABILITY_SUM: Final[float] = 1e-9

# Допуск для сравнения вычисленной вероятности с ожидаемой
# Используется в check harness
EPS_PROBABILITY_COMPARE: Final[float] = 1e-9


# =============================================================================
# NaN/Inf ПРОВЕРКИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение валидное (finite), False если NaN или Inf
    """
    return math.isfinite(value)


# =============================================================================
# EPSILON-СРАВНЕНИЯ FLOAT
# =============================================================================


def abs_error(actual: float, expected: float) -> float:
    """Абсолютная ошибка |actual - expected|."""
    return abs(actual - expected)


def is_close_abs(a: float, b: float, tol: float = EPS_PROBABILITY_SUM) -> bool:
    """
    Абсолютное сравнение float с допуском.

    В отличие от math.isclose, относительная толерантность не используется:
    вероятности лежат в [0, 1], поэтому достаточно абсолютного допуска.

    Алгоритм:
        abs(a - b) <= tol

    Args:
        a: Первое значение
        b: Второе значение
        tol: Абсолютная толерантность (default: EPS_PROBABILITY_SUM)

    Returns:
        True если значения близки с учётом толерантности

    Examples:
        >>> is_close_abs(1.0, 1.0 + 1e-10)
        True
        >>> is_close_abs(1.0, 1.0 + 1e-8)
        False
        >>> is_close_abs(float('nan'), 1.0)
        False
    """
    return abs_error(a, b) <= tol


# =============================================================================
# ВАЛИДАЦИЯ И ПРОВЕРКИ
# =============================================================================


def validate_tolerance(tol: float, name: str = "tolerance") -> None:
    """
    Валидация допуска сравнения.

    Raises:
        ValueError: Если tol <= 0 или NaN/Inf
    """
    if not is_valid_float(tol):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {tol}")

    if tol <= 0:
        raise ValueError(f"{name} must be positive, got {tol}")
