"""ProbabilitySpace — конечное дискретное вероятностное пространство.

Отображение P: W -> [0, 1] из множества элементарных исходов W в их
вероятности, плюс алгебра событий над подмножествами W:
- P(E), P(E^c)
- P(A ∪ B), P(A ∩ B)
- P(A | B)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все вероятности finite и >= 0
2. |sum(P) - 1| <= EPS_PROBABILITY_SUM
3. domain == множество ключей space
4. space и domain не изменяются после построения; изменяем только mode
"""

import math
from types import MappingProxyType
from typing import FrozenSet, Generic, Hashable, Iterable, Mapping, TypeVar

from src.core.domain.errors import (
    InvalidDistribution,
    UnknownOutcome,
    ZeroProbabilityCondition,
)
from src.core.math.numerical_safeguards import (
    EPS_PROBABILITY_SUM,
    is_close_abs,
    is_valid_float,
)
from src.infrastructure.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=Hashable)


class ProbabilitySpace(Generic[T]):
    """Конечное вероятностное пространство над исходами типа T.

    Modes:
    - strict (ignore_unknown=False, default): событие с исходом вне domain
      вызывает UnknownOutcome
    - lenient (ignore_unknown=True): неизвестные исходы дают вклад 0

    Событие — любая коллекция исходов (кроме str/bytes); для каждого
    запроса приводится к frozenset и не сохраняется.

    Thread-safety: space и domain immutable, конкурентное чтение безопасно.
    Флаг mode — обычный атрибут без синхронизации.
    """

    def __init__(self, mapping: Mapping[T, float]):
        """
        Args:
            mapping: Отображение исход -> вероятность. Копируется.

        Raises:
            InvalidDistribution: вероятность отрицательная или NaN/Inf,
                либо сумма отличается от 1 больше чем на EPS_PROBABILITY_SUM
        """
        self._validate_distribution(mapping)

        self._space: Mapping[T, float] = MappingProxyType(dict(mapping))
        self._domain: FrozenSet[T] = frozenset(self._space)
        self._ignore_unknown = False

        logger.debug("ProbabilitySpace created: %d outcomes", len(self._domain))

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate_distribution(mapping: Mapping[T, float]) -> None:
        # Один проход: нарушение неотрицательности приоритетнее проверки суммы
        values = []
        for outcome, probability in mapping.items():
            if not is_valid_float(probability):
                raise InvalidDistribution(
                    f"Probabilities must be finite, got {probability} for {outcome!r}"
                )
            if probability < 0.0:
                raise InvalidDistribution(
                    f"Probabilities must be nonnegative, got {probability} for {outcome!r}"
                )
            values.append(probability)

        total = math.fsum(values)
        if not is_close_abs(total, 1.0, EPS_PROBABILITY_SUM):
            raise InvalidDistribution(f"Probabilities must sum to 1, got {total!r}")

    @staticmethod
    def _as_event(event: Iterable[T]) -> FrozenSet[T]:
        # str/bytes итерируются посимвольно: "heads" не является событием {"heads"}
        if isinstance(event, (str, bytes)):
            raise TypeError(
                f"event must be a collection of outcomes, not {type(event).__name__}: {event!r}"
            )
        return frozenset(event)

    def _check_event(self, event: FrozenSet[T]) -> None:
        """Политика членства: в strict mode событие обязано быть ⊆ domain."""
        if self._ignore_unknown:
            return

        unknown = event - self._domain
        if unknown:
            raise UnknownOutcome(unknown)

    # -------------------------------------------------------------------------
    # Internal calculators
    # -------------------------------------------------------------------------

    def _probability(self, event: FrozenSet[T]) -> float:
        # _check_event обязан оставаться здесь: union, intersection и
        # conditional полагаются на то, что итоговое множество проверено
        self._check_event(event)

        contributions = []
        for outcome in event:
            probability = self._space.get(outcome)
            if probability is None:
                if not self._ignore_unknown:
                    raise UnknownOutcome(frozenset([outcome]))
                continue
            contributions.append(probability)

        return math.fsum(contributions)

    # -------------------------------------------------------------------------
    # Public queries
    # -------------------------------------------------------------------------

    def probability_of_set(self, event: Iterable[T]) -> float:
        """
        P(E) = Σ P({w}) по w ∈ E.

        Args:
            event: Событие (iterable исходов)

        Returns:
            Вероятность события; 0.0 для пустого события

        Raises:
            UnknownOutcome: strict mode и событие содержит исход вне domain
            TypeError: событие передано как str/bytes

        Examples:
            >>> coin = ProbabilitySpace({"heads": 0.5, "tails": 0.5})
            >>> coin.probability_of_set({"heads"})
            0.5
            >>> coin.probability_of_set(set())
            0.0
        """
        return self._probability(self._as_event(event))

    def complement_of_event(self, event: Iterable[T]) -> float:
        """P(E^c) = 1 - P(E)."""
        return 1.0 - self._probability(self._as_event(event))

    def union_of_events(self, event_a: Iterable[T], event_b: Iterable[T]) -> float:
        """
        P(A ∪ B).

        Объединение берётся на уровне множеств; в lenient mode неизвестные
        исходы попадают в объединение и отбрасываются при суммировании.

        Raises:
            UnknownOutcome: strict mode и A или B содержит исход вне domain
        """
        a = self._as_event(event_a)
        b = self._as_event(event_b)
        self._check_event(a)
        self._check_event(b)

        return self._probability(a | b)

    def intersection_of_events(self, event_a: Iterable[T], event_b: Iterable[T]) -> float:
        """
        P(A ∩ B).

        Raises:
            UnknownOutcome: strict mode и A или B содержит исход вне domain
        """
        a = self._as_event(event_a)
        b = self._as_event(event_b)
        self._check_event(a)
        self._check_event(b)

        return self._probability(a & b)

    def conditional_probability(self, event_a: Iterable[T], event_b: Iterable[T]) -> float:
        """
        P(A | B) = P(A ∩ B) / P(B).

        Проверка P(B) == 0 точная (без epsilon): деление определено
        для любого ненулевого P(B).

        Args:
            event_a: Событие A
            event_b: Условие B

        Returns:
            Условная вероятность A при B

        Raises:
            UnknownOutcome: strict mode и A или B содержит исход вне domain
            ZeroProbabilityCondition: P(B) == 0

        Examples:
            >>> die = ProbabilitySpace({k: 1 / 6 for k in range(1, 7)})
            >>> round(die.conditional_probability({4, 5}, {4, 5, 6}), 12)
            0.666666666667
        """
        a = self._as_event(event_a)
        b = self._as_event(event_b)
        self._check_event(a)
        self._check_event(b)

        probability_b = self._probability(b)
        if probability_b == 0.0:
            raise ZeroProbabilityCondition(probability_b)

        probability_ab = self.intersection_of_events(a, b)
        return probability_ab / probability_b

    # -------------------------------------------------------------------------
    # Mode
    # -------------------------------------------------------------------------

    def get_mode(self) -> bool:
        """Текущий mode: True если неизвестные исходы игнорируются."""
        return self._ignore_unknown

    def set_mode(self, ignore_unknown: bool) -> None:
        """
        Установка mode для последующих запросов.

        Args:
            ignore_unknown: True — lenient mode, False — strict mode

        Raises:
            TypeError: Если ignore_unknown не bool
        """
        if not isinstance(ignore_unknown, bool):
            raise TypeError(f"ignore_unknown must be bool, got {type(ignore_unknown).__name__}")

        if ignore_unknown != self._ignore_unknown:
            logger.debug("ProbabilitySpace mode changed: ignore_unknown=%s", ignore_unknown)
        self._ignore_unknown = ignore_unknown

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def space(self) -> Mapping[T, float]:
        """Read-only отображение исход -> вероятность."""
        return self._space

    @property
    def domain(self) -> FrozenSet[T]:
        """Множество всех исходов (sample space)."""
        return self._domain

    def __len__(self) -> int:
        return len(self._domain)

    def __repr__(self) -> str:
        return (
            f"ProbabilitySpace({dict(self._space)!r}, "
            f"ignore_unknown={self._ignore_unknown})"
        )
