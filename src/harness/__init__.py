"""Check harness — прогон проверок ProbabilitySpace с четырёхсторонней классификацией.

Harness — потребитель публичного API ProbabilitySpace:
- Строит пространства из литеральных распределений
- Выполняет запросы с ожидаемым значением и допуском
- Классифицирует результат: EXPECTED_SUCCESS / UNEXPECTED_FAILURE /
  UNEXPECTED_SUCCESS / EXPECTED_FAILURE
"""

from .cases import (
    CaseOutcome,
    CaseResult,
    CheckSuite,
    ConstructorCase,
    Expectation,
    HarnessReport,
    OutcomeWeight,
    QueryCase,
    QueryMethod,
)
from .runner import HarnessConfig, HarnessRunner
from .suites import load_suite, reference_suite

__all__ = [
    # Models
    "CaseOutcome",
    "CaseResult",
    "CheckSuite",
    "ConstructorCase",
    "Expectation",
    "HarnessReport",
    "OutcomeWeight",
    "QueryCase",
    "QueryMethod",
    # Runner
    "HarnessConfig",
    "HarnessRunner",
    # Suites
    "load_suite",
    "reference_suite",
]
