"""
Tests for Check Harness

Покрывает:
- Четырёхстороннюю классификацию CaseOutcome
- Валидацию Pydantic моделей проверок (frozen, event_b, ссылки на пространства)
- HarnessRunner: constructor/query cases, допуск, восстановление mode
- reference_suite: все проверки проходят
- load_suite: JSON → contract → CheckSuite
- CLI exit code, включая ошибки загрузки suite
"""

import json
import logging

import pytest
from jsonschema import ValidationError as SchemaValidationError
from pydantic import ValidationError

from src.core.domain import ProbabilitySpace
from src.harness import (
    CaseOutcome,
    CaseResult,
    CheckSuite,
    ConstructorCase,
    Expectation,
    HarnessConfig,
    HarnessReport,
    HarnessRunner,
    OutcomeWeight,
    QueryCase,
    QueryMethod,
    load_suite,
    reference_suite,
)
from src.harness.__main__ import main
from src.harness.cases import weights_to_mapping


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def runner():
    return HarnessRunner()


@pytest.fixture
def coin():
    return ProbabilitySpace({"heads": 0.5, "tails": 0.5})


@pytest.fixture
def suite_data():
    """Валидный check_suite в JSON-форме."""
    return {
        "spaces": {
            "coin": [
                {"outcome": "heads", "probability": 0.5},
                {"outcome": "tails", "probability": 0.5},
            ],
        },
        "constructor_cases": [
            {
                "name": "negative_probability",
                "outcomes": [
                    {"outcome": "heads", "probability": -0.1},
                    {"outcome": "tails", "probability": 1.1},
                ],
                "expectation": "SHOULD_FAIL",
            },
        ],
        "query_cases": [
            {
                "name": "P(heads)=0.5",
                "space": "coin",
                "method": "NORMAL",
                "event_a": ["heads"],
                "target": 0.5,
                "expectation": "SHOULD_WORK",
            },
            {
                "name": "P(all n moose)_with_mode",
                "space": "coin",
                "method": "INTERSECTION",
                "event_a": ["heads", "tails"],
                "event_b": ["moose"],
                "target": 0.0,
                "expectation": "SHOULD_WORK",
                "ignore_unknown": True,
            },
        ],
    }


def _query(**overrides) -> QueryCase:
    fields = dict(
        name="case",
        space="coin",
        method=QueryMethod.NORMAL,
        event_a=["heads"],
        target=0.5,
        expectation=Expectation.SHOULD_WORK,
    )
    fields.update(overrides)
    return QueryCase(**fields)


# =============================================================================
# ТЕСТЫ: Classification
# =============================================================================


class TestCaseOutcome:
    """Тесты четырёхсторонней классификации."""

    @pytest.mark.parametrize(
        "expectation, succeeded, expected",
        [
            (Expectation.SHOULD_WORK, True, CaseOutcome.EXPECTED_SUCCESS),
            (Expectation.SHOULD_WORK, False, CaseOutcome.UNEXPECTED_FAILURE),
            (Expectation.SHOULD_FAIL, True, CaseOutcome.UNEXPECTED_SUCCESS),
            (Expectation.SHOULD_FAIL, False, CaseOutcome.EXPECTED_FAILURE),
        ],
    )
    def test_classify(self, expectation, succeeded, expected) -> None:
        assert CaseOutcome.classify(expectation, succeeded) is expected

    def test_passed(self) -> None:
        assert CaseResult(name="a", outcome=CaseOutcome.EXPECTED_SUCCESS).passed
        assert CaseResult(name="b", outcome=CaseOutcome.EXPECTED_FAILURE).passed
        assert not CaseResult(name="c", outcome=CaseOutcome.UNEXPECTED_FAILURE).passed
        assert not CaseResult(name="d", outcome=CaseOutcome.UNEXPECTED_SUCCESS).passed

    def test_value_mismatch_does_not_pass(self) -> None:
        result = CaseResult(
            name="wrong_value",
            outcome=CaseOutcome.EXPECTED_SUCCESS,
            actual=0.4,
            within_tolerance=False,
        )
        assert not result.passed


# =============================================================================
# ТЕСТЫ: Models
# =============================================================================


class TestModels:
    """Тесты Pydantic моделей проверок."""

    def test_binary_method_requires_event_b(self) -> None:
        with pytest.raises(ValidationError, match="requires event_b"):
            _query(method=QueryMethod.UNION)

    def test_unary_method_without_event_b(self) -> None:
        assert _query().event_b is None

    def test_frozen(self) -> None:
        case = _query()
        with pytest.raises(ValidationError):
            case.target = 1.0

    def test_outcome_types_preserved(self) -> None:
        assert OutcomeWeight(outcome=1, probability=0.5).outcome == 1
        assert OutcomeWeight(outcome="1", probability=0.5).outcome == "1"

    def test_undefined_space_reference(self) -> None:
        with pytest.raises(ValidationError, match="undefined spaces"):
            CheckSuite(spaces={}, query_cases=[_query()])

    def test_constructor_case_duplicate_outcomes(self) -> None:
        """Повтор исхода не схлопывается молча в одну запись dict."""
        with pytest.raises(ValidationError, match="duplicate outcomes"):
            ConstructorCase(
                name="double_heads",
                outcomes=[
                    OutcomeWeight(outcome="heads", probability=0.5),
                    OutcomeWeight(outcome="heads", probability=0.5),
                ],
                expectation=Expectation.SHOULD_FAIL,
            )

    def test_space_duplicate_outcomes(self) -> None:
        with pytest.raises(ValidationError, match="space 'coin': duplicate outcomes"):
            CheckSuite(
                spaces={"coin": [
                    OutcomeWeight(outcome="heads", probability=0.6),
                    OutcomeWeight(outcome="heads", probability=0.4),
                ]},
            )

    def test_int_and_str_outcomes_are_distinct(self) -> None:
        case = ConstructorCase(
            name="mixed",
            outcomes=[
                OutcomeWeight(outcome=1, probability=0.5),
                OutcomeWeight(outcome="1", probability=0.5),
            ],
            expectation=Expectation.SHOULD_WORK,
        )
        assert weights_to_mapping(case.outcomes) == {1: 0.5, "1": 0.5}

    def test_weights_to_mapping_duplicates(self) -> None:
        weights = [
            OutcomeWeight(outcome=3, probability=0.5),
            OutcomeWeight(outcome=3, probability=0.5),
        ]
        with pytest.raises(ValueError, match=r"duplicate outcomes \['3'\]"):
            weights_to_mapping(weights)

    def test_report_counts(self) -> None:
        report = HarnessReport(
            results=[
                CaseResult(name="a", outcome=CaseOutcome.EXPECTED_SUCCESS),
                CaseResult(name="b", outcome=CaseOutcome.UNEXPECTED_SUCCESS),
                CaseResult(name="c", outcome=CaseOutcome.EXPECTED_FAILURE),
            ]
        )
        assert report.total == 3
        assert report.passed_count == 2
        assert [r.name for r in report.failed] == ["b"]
        assert not report.all_passed
        assert report.count(CaseOutcome.EXPECTED_FAILURE) == 1


# =============================================================================
# ТЕСТЫ: Runner
# =============================================================================


class TestHarnessRunner:
    """Тесты HarnessRunner."""

    def test_constructor_expected_success(self, runner) -> None:
        case = ConstructorCase(
            name="fair_coin",
            outcomes=[
                OutcomeWeight(outcome="heads", probability=0.5),
                OutcomeWeight(outcome="tails", probability=0.5),
            ],
            expectation=Expectation.SHOULD_WORK,
        )
        result = runner.run_constructor_case(case)
        assert result.outcome is CaseOutcome.EXPECTED_SUCCESS
        assert result.passed

    def test_constructor_unexpected_failure(self, runner) -> None:
        case = ConstructorCase(name="empty", outcomes=[], expectation=Expectation.SHOULD_WORK)
        result = runner.run_constructor_case(case)
        assert result.outcome is CaseOutcome.UNEXPECTED_FAILURE
        assert "sum to 1" in result.error

    def test_query_expected_success(self, runner, coin) -> None:
        result = runner.run_query_case(coin, _query())
        assert result.outcome is CaseOutcome.EXPECTED_SUCCESS
        assert result.actual == pytest.approx(0.5)
        assert result.passed

    def test_query_wrong_target(self, runner, coin) -> None:
        result = runner.run_query_case(coin, _query(target=0.4))
        assert result.outcome is CaseOutcome.EXPECTED_SUCCESS
        assert not result.within_tolerance
        assert not result.passed

    def test_query_unexpected_success(self, runner, coin) -> None:
        result = runner.run_query_case(coin, _query(expectation=Expectation.SHOULD_FAIL))
        assert result.outcome is CaseOutcome.UNEXPECTED_SUCCESS
        assert not result.passed

    def test_query_expected_failure(self, runner, coin) -> None:
        case = _query(event_a=["heads", "moose"], expectation=Expectation.SHOULD_FAIL)
        result = runner.run_query_case(coin, case)
        assert result.outcome is CaseOutcome.EXPECTED_FAILURE
        assert "moose" in result.error

    def test_query_unexpected_failure(self, runner, coin) -> None:
        result = runner.run_query_case(coin, _query(event_a=["moose"]))
        assert result.outcome is CaseOutcome.UNEXPECTED_FAILURE

    def test_mode_applied_and_restored(self, runner, coin) -> None:
        case = _query(event_a=["heads", "moose"], ignore_unknown=True)
        result = runner.run_query_case(coin, case)

        assert result.passed
        assert coin.get_mode() is False

    def test_mode_restored_after_failure(self, runner, coin) -> None:
        coin.set_mode(True)
        case = _query(
            method=QueryMethod.CONDITIONAL,
            event_a=["heads"],
            event_b=[],
            expectation=Expectation.SHOULD_FAIL,
        )
        result = runner.run_query_case(coin, case)

        assert result.outcome is CaseOutcome.EXPECTED_FAILURE
        assert coin.get_mode() is True

    def test_custom_tolerance(self, coin) -> None:
        runner = HarnessRunner(HarnessConfig(tolerance=0.2))
        assert runner.run_query_case(coin, _query(target=0.4)).passed

    def test_invalid_tolerance(self) -> None:
        with pytest.raises(ValueError, match="tolerance must be positive"):
            HarnessConfig(tolerance=0.0)

    def test_results_logged(self, runner, coin, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="src.harness.runner"):
            runner.run_query_case(coin, _query(name="ok"))
            runner.run_query_case(coin, _query(name="bad", target=0.1))

        assert "[SUCCESS][ok]" in caplog.text
        assert "[FAILED ][bad]" in caplog.text


# =============================================================================
# ТЕСТЫ: Suites
# =============================================================================


class TestSuites:
    """Тесты reference_suite и load_suite."""

    def test_reference_suite_passes(self, runner) -> None:
        report = runner.run_suite(reference_suite())

        assert report.all_passed, [r.name for r in report.failed]
        assert report.count(CaseOutcome.EXPECTED_FAILURE) > 0
        assert report.count(CaseOutcome.EXPECTED_SUCCESS) > 0

    def test_stop_on_failure(self, coin) -> None:
        suite = CheckSuite(
            spaces={"coin": [
                OutcomeWeight(outcome="heads", probability=0.5),
                OutcomeWeight(outcome="tails", probability=0.5),
            ]},
            query_cases=[_query(name="bad", target=0.1), _query(name="ok")],
        )
        report = HarnessRunner(HarnessConfig(stop_on_failure=True)).run_suite(suite)

        assert [r.name for r in report.results] == ["bad"]

    def test_stop_on_failure_logs_summary(self, caplog) -> None:
        """Итоговая строка пишется и при досрочной остановке."""
        caplog.set_level(logging.INFO, logger="src.harness.runner")
        suite = CheckSuite(
            spaces={"coin": [
                OutcomeWeight(outcome="heads", probability=0.5),
                OutcomeWeight(outcome="tails", probability=0.5),
            ]},
            query_cases=[_query(name="bad", target=0.1), _query(name="ok")],
        )
        HarnessRunner(HarnessConfig(stop_on_failure=True)).run_suite(suite)

        messages = [r.getMessage() for r in caplog.records]
        assert "Stopped after first failure: bad" in messages
        assert messages[-1] == "0/1 checks passed"

    def test_load_suite(self, tmp_path, suite_data, runner) -> None:
        path = tmp_path / "suite.json"
        path.write_text(json.dumps(suite_data), encoding="utf-8")

        suite = load_suite(path)
        report = runner.run_suite(suite)

        assert len(suite.query_cases) == 2
        assert suite.query_cases[1].ignore_unknown is True
        assert report.all_passed

    def test_load_suite_schema_violation(self, tmp_path, suite_data) -> None:
        suite_data["query_cases"][0]["method"] = "MEDIAN"
        path = tmp_path / "suite.json"
        path.write_text(json.dumps(suite_data), encoding="utf-8")

        with pytest.raises(SchemaValidationError):
            load_suite(path)

    def test_load_suite_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_suite(tmp_path / "missing.json")


class TestCli:
    """Тесты CLI."""

    def test_reference_suite_exit_code(self) -> None:
        assert main(["--log-level", "WARNING"]) == 0

    def test_failing_suite_exit_code(self, tmp_path, suite_data) -> None:
        suite_data["query_cases"][0]["target"] = 0.9
        path = tmp_path / "suite.json"
        path.write_text(json.dumps(suite_data), encoding="utf-8")

        assert main(["--suite", str(path), "--log-level", "WARNING"]) == 1

    def test_invalid_space_exit_code(self, tmp_path, suite_data) -> None:
        """Невалидное пространство в suite: код 1 вместо traceback."""
        suite_data["spaces"]["coin"][1]["probability"] = -0.1
        path = tmp_path / "suite.json"
        path.write_text(json.dumps(suite_data), encoding="utf-8")

        assert main(["--suite", str(path), "--log-level", "WARNING"]) == 1

    def test_missing_suite_exit_code(self, tmp_path) -> None:
        path = tmp_path / "missing.json"
        assert main(["--suite", str(path), "--log-level", "WARNING"]) == 1

    def test_malformed_json_exit_code(self, tmp_path) -> None:
        path = tmp_path / "suite.json"
        path.write_text("{not json", encoding="utf-8")

        assert main(["--suite", str(path), "--log-level", "WARNING"]) == 1

    def test_schema_violation_exit_code(self, tmp_path, suite_data) -> None:
        suite_data["query_cases"][0]["method"] = "MEDIAN"
        path = tmp_path / "suite.json"
        path.write_text(json.dumps(suite_data), encoding="utf-8")

        assert main(["--suite", str(path), "--log-level", "WARNING"]) == 1

    def test_duplicate_outcomes_exit_code(self, tmp_path, suite_data) -> None:
        suite_data["spaces"]["coin"][1]["outcome"] = "heads"
        path = tmp_path / "suite.json"
        path.write_text(json.dumps(suite_data), encoding="utf-8")

        assert main(["--suite", str(path), "--log-level", "WARNING"]) == 1
