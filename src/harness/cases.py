"""Cases — модели проверок для check harness.

Immutable Pydantic модели, описывающие:
- ConstructorCase: построение ProbabilitySpace из литерального распределения
- QueryCase: запрос к пространству с ожидаемым значением
- CheckSuite: набор пространств и проверок
- CaseResult / HarnessReport: результаты с четырёхсторонней классификацией
"""

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


Outcome = Union[int, str]


class Expectation(str, Enum):
    """Ожидаемое поведение проверки."""

    SHOULD_WORK = "SHOULD_WORK"
    SHOULD_FAIL = "SHOULD_FAIL"


class QueryMethod(str, Enum):
    """Запрос к ProbabilitySpace."""

    NORMAL = "NORMAL"
    COMPLEMENT = "COMPLEMENT"
    UNION = "UNION"
    INTERSECTION = "INTERSECTION"
    CONDITIONAL = "CONDITIONAL"

    @property
    def is_binary(self) -> bool:
        """True если запрос принимает два события."""
        return self in (QueryMethod.UNION, QueryMethod.INTERSECTION, QueryMethod.CONDITIONAL)


class CaseOutcome(str, Enum):
    """Четырёхсторонняя классификация результата проверки.

    - EXPECTED_SUCCESS: ожидался успех, получен успех
    - UNEXPECTED_FAILURE: ожидался успех, получена ошибка
    - UNEXPECTED_SUCCESS: ожидалась ошибка, получен успех
    - EXPECTED_FAILURE: ожидалась ошибка, получена ошибка
    """

    EXPECTED_SUCCESS = "EXPECTED_SUCCESS"
    UNEXPECTED_FAILURE = "UNEXPECTED_FAILURE"
    UNEXPECTED_SUCCESS = "UNEXPECTED_SUCCESS"
    EXPECTED_FAILURE = "EXPECTED_FAILURE"

    @classmethod
    def classify(cls, expectation: Expectation, succeeded: bool) -> "CaseOutcome":
        if expectation is Expectation.SHOULD_WORK:
            return cls.EXPECTED_SUCCESS if succeeded else cls.UNEXPECTED_FAILURE
        return cls.UNEXPECTED_SUCCESS if succeeded else cls.EXPECTED_FAILURE


# =============================================================================
# CASE MODELS
# =============================================================================


class OutcomeWeight(BaseModel):
    """Элементарный исход и его вероятность."""

    outcome: Outcome = Field(..., description="Элементарный исход")
    probability: float = Field(..., description="P({outcome}), не валидируется здесь")

    model_config = {"frozen": True}


def check_unique_outcomes(weights: List[OutcomeWeight], where: str) -> None:
    """
    Каждый исход может встречаться в распределении только один раз.

    Raises:
        ValueError: Если исход повторяется
    """
    seen = set()
    duplicates = set()
    for w in weights:
        if w.outcome in seen:
            duplicates.add(w.outcome)
        seen.add(w.outcome)

    if duplicates:
        shown = sorted(repr(o) for o in duplicates)
        raise ValueError(f"{where}: duplicate outcomes {shown}")


def weights_to_mapping(weights: List[OutcomeWeight]) -> Dict[Outcome, float]:
    """Список OutcomeWeight -> dict для конструктора ProbabilitySpace."""
    check_unique_outcomes(weights, "outcomes")
    return {w.outcome: w.probability for w in weights}


class ConstructorCase(BaseModel):
    """Проверка построения ProbabilitySpace."""

    name: str = Field(..., min_length=1)
    outcomes: List[OutcomeWeight] = Field(default_factory=list)
    expectation: Expectation

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_outcomes(self) -> "ConstructorCase":
        check_unique_outcomes(self.outcomes, self.name)
        return self


class QueryCase(BaseModel):
    """Проверка одного запроса к именованному пространству.

    event_b обязателен для UNION, INTERSECTION и CONDITIONAL.
    """

    name: str = Field(..., min_length=1)
    space: str = Field(..., min_length=1, description="Имя пространства в CheckSuite.spaces")
    method: QueryMethod
    event_a: List[Outcome] = Field(default_factory=list)
    event_b: Optional[List[Outcome]] = None
    target: float
    expectation: Expectation
    ignore_unknown: bool = False

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_event_b(self) -> "QueryCase":
        if self.method.is_binary and self.event_b is None:
            raise ValueError(f"{self.method.value} requires event_b")
        return self


class CheckSuite(BaseModel):
    """Набор проверок: именованные пространства и проверки над ними."""

    spaces: Dict[str, List[OutcomeWeight]] = Field(default_factory=dict)
    constructor_cases: List[ConstructorCase] = Field(default_factory=list)
    query_cases: List[QueryCase] = Field(default_factory=list)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_space_refs(self) -> "CheckSuite":
        for name, weights in self.spaces.items():
            check_unique_outcomes(weights, f"space '{name}'")

        missing = sorted({c.space for c in self.query_cases} - set(self.spaces))
        if missing:
            raise ValueError(f"query_cases reference undefined spaces: {missing}")
        return self


# =============================================================================
# RESULTS
# =============================================================================


class CaseResult(BaseModel):
    """Результат одной проверки."""

    name: str
    outcome: CaseOutcome
    actual: Optional[float] = Field(None, description="Значение запроса (None при ошибке)")
    error: Optional[str] = Field(None, description="Сообщение пойманной ошибки")
    within_tolerance: bool = Field(
        True, description="|actual - target| < tolerance (True для проверок без target)"
    )

    model_config = {"frozen": True}

    @property
    def passed(self) -> bool:
        if self.outcome is CaseOutcome.EXPECTED_SUCCESS:
            return self.within_tolerance
        return self.outcome is CaseOutcome.EXPECTED_FAILURE


class HarnessReport(BaseModel):
    """Итог прогона CheckSuite."""

    results: List[CaseResult] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed_count(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> List[CaseResult]:
        return [r for r in self.results if not r.passed]

    @property
    def all_passed(self) -> bool:
        return not self.failed

    def count(self, outcome: CaseOutcome) -> int:
        return sum(1 for r in self.results if r.outcome is outcome)
