"""
Errors — таксономия ошибок вероятностного пространства

Единый канал ошибок: каждая публичная операция либо возвращает
валидную вероятность, либо выбрасывает одно из исключений ниже.
Частичных результатов нет.
"""

from typing import Any, FrozenSet

__all__ = [
    "ProbabilitySpaceError",
    "InvalidDistribution",
    "UnknownOutcome",
    "ZeroProbabilityCondition",
]


class ProbabilitySpaceError(ValueError):
    """Базовое исключение для всех ошибок ProbabilitySpace."""

    pass


class InvalidDistribution(ProbabilitySpaceError):
    """
    Невалидное распределение при построении пространства.

    Возникает только в конструкторе:
    - вероятность отрицательная или NaN/Inf
    - сумма вероятностей отличается от 1 больше чем на EPS_PROBABILITY_SUM
    """

    pass


class UnknownOutcome(ProbabilitySpaceError):
    """
    Событие содержит исход, отсутствующий в domain (strict mode).

    Attributes:
        outcomes: Исходы события, которых нет в domain
    """

    def __init__(self, outcomes: FrozenSet[Any]):
        self.outcomes = frozenset(outcomes)
        shown = ", ".join(sorted(repr(o) for o in self.outcomes))
        super().__init__(f"Event contains outcome not in sample space: {{{shown}}}")


class ZeroProbabilityCondition(ProbabilitySpaceError):
    """
    Условная вероятность P(A|B) при P(B) == 0.

    Attributes:
        probability: Вычисленная P(B) (точно 0.0)
    """

    def __init__(self, probability: float = 0.0):
        self.probability = probability
        super().__init__(
            "Tried to calculate conditional probability P(A|B) with B s.t. P(B)=0"
        )
