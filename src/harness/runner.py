"""Check harness runner.

Прогоняет ConstructorCase/QueryCase против публичного API ProbabilitySpace
и классифицирует каждый результат в одну из четырёх категорий CaseOutcome.

Ошибкой проверки считается только ProbabilitySpaceError; любые другие
исключения пробрасываются.
"""

from dataclasses import dataclass
from typing import Dict, Hashable, List, Optional

from src.core.domain import ProbabilitySpace, ProbabilitySpaceError
from src.core.math.numerical_safeguards import (
    EPS_PROBABILITY_COMPARE,
    abs_error,
    validate_tolerance,
)
from src.harness.cases import (
    CaseOutcome,
    CaseResult,
    CheckSuite,
    ConstructorCase,
    Expectation,
    HarnessReport,
    QueryCase,
    QueryMethod,
    weights_to_mapping,
)
from src.infrastructure.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class HarnessConfig:
    """Конфигурация check harness.

    tolerance: допуск |actual - target| (строго меньше)
    stop_on_failure: остановить прогон на первой непрошедшей проверке
    """
    tolerance: float = EPS_PROBABILITY_COMPARE
    stop_on_failure: bool = False

    def __post_init__(self):
        validate_tolerance(self.tolerance)


class HarnessRunner:
    """Runner проверок ProbabilitySpace."""

    def __init__(self, config: Optional[HarnessConfig] = None):
        self.config = config or HarnessConfig()

    # -------------------------------------------------------------------------
    # Single cases
    # -------------------------------------------------------------------------

    def run_constructor_case(self, case: ConstructorCase) -> CaseResult:
        try:
            ProbabilitySpace(weights_to_mapping(case.outcomes))
        except ProbabilitySpaceError as e:
            result = CaseResult(
                name=case.name,
                outcome=CaseOutcome.classify(case.expectation, succeeded=False),
                error=str(e),
            )
        else:
            result = CaseResult(
                name=case.name,
                outcome=CaseOutcome.classify(case.expectation, succeeded=True),
            )

        self._log_result(result)
        return result

    def run_query_case(self, space: ProbabilitySpace, case: QueryCase) -> CaseResult:
        """
        Прогон одной QueryCase.

        Mode пространства устанавливается из case.ignore_unknown на время
        запроса и затем восстанавливается.
        """
        previous_mode = space.get_mode()
        space.set_mode(case.ignore_unknown)
        try:
            actual = self._query(space, case)
        except ProbabilitySpaceError as e:
            result = CaseResult(
                name=case.name,
                outcome=CaseOutcome.classify(case.expectation, succeeded=False),
                error=str(e),
            )
        else:
            result = CaseResult(
                name=case.name,
                outcome=CaseOutcome.classify(case.expectation, succeeded=True),
                actual=actual,
                within_tolerance=abs_error(actual, case.target) < self.config.tolerance,
            )
        finally:
            space.set_mode(previous_mode)

        if case.expectation is Expectation.SHOULD_WORK and not result.within_tolerance:
            logger.error(
                "[FAILED ][%s]: P(event) should have been %r, got %r",
                case.name, case.target, result.actual,
            )
        else:
            self._log_result(result)
        return result

    @staticmethod
    def _query(space: ProbabilitySpace, case: QueryCase) -> float:
        event_a = frozenset(case.event_a)
        event_b = frozenset(case.event_b or ())

        if case.method is QueryMethod.NORMAL:
            return space.probability_of_set(event_a)
        if case.method is QueryMethod.COMPLEMENT:
            return space.complement_of_event(event_a)
        if case.method is QueryMethod.UNION:
            return space.union_of_events(event_a, event_b)
        if case.method is QueryMethod.INTERSECTION:
            return space.intersection_of_events(event_a, event_b)
        if case.method is QueryMethod.CONDITIONAL:
            return space.conditional_probability(event_a, event_b)

        raise ValueError(f"Unsupported query method: {case.method}")

    # -------------------------------------------------------------------------
    # Suite
    # -------------------------------------------------------------------------

    def run_suite(self, suite: CheckSuite) -> HarnessReport:
        """
        Прогон всего CheckSuite: сначала constructor cases, затем query cases.

        Raises:
            ProbabilitySpaceError: Если пространство из suite.spaces невалидно
        """
        spaces: Dict[str, ProbabilitySpace[Hashable]] = {
            name: ProbabilitySpace(weights_to_mapping(weights))
            for name, weights in suite.spaces.items()
        }

        results: List[CaseResult] = []

        logger.info("----------<Constructor tests>----------")
        for constructor_case in suite.constructor_cases:
            results.append(self.run_constructor_case(constructor_case))
            if self._should_stop(results):
                return self._finish(results, stopped=True)

        logger.info("----------<Probability tests>----------")
        for query_case in suite.query_cases:
            results.append(self.run_query_case(spaces[query_case.space], query_case))
            if self._should_stop(results):
                return self._finish(results, stopped=True)

        return self._finish(results, stopped=False)

    @staticmethod
    def _finish(results: List[CaseResult], stopped: bool) -> HarnessReport:
        report = HarnessReport(results=results)
        if stopped:
            logger.warning("Stopped after first failure: %s", results[-1].name)
        logger.info("%d/%d checks passed", report.passed_count, report.total)
        return report

    def _should_stop(self, results: List[CaseResult]) -> bool:
        return self.config.stop_on_failure and not results[-1].passed

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    @staticmethod
    def _log_result(result: CaseResult) -> None:
        if result.outcome is CaseOutcome.EXPECTED_SUCCESS:
            logger.info("[SUCCESS][%s]: Expected behavior", result.name)
        elif result.outcome is CaseOutcome.EXPECTED_FAILURE:
            logger.info("[SUCCESS][%s]: Expected behavior, caught: %s", result.name, result.error)
        elif result.outcome is CaseOutcome.UNEXPECTED_FAILURE:
            logger.error("[FAILED ][%s]: should be working, caught: %s", result.name, result.error)
        else:
            logger.error(
                "[FAILED ][%s]: should be raising exception, got %r", result.name, result.actual
            )
