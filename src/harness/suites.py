"""Suites — наборы проверок для check harness.

- reference_suite(): встроенный набор (монета, игральная кость)
- load_suite(path): загрузка набора из JSON с валидацией по контракту check_suite
"""

import json
from pathlib import Path
from typing import Dict, List, Union

from src.core.contracts import validate_check_suite
from src.harness.cases import (
    CheckSuite,
    ConstructorCase,
    Expectation,
    Outcome,
    OutcomeWeight,
    QueryCase,
    QueryMethod,
)

WORK = Expectation.SHOULD_WORK
FAIL = Expectation.SHOULD_FAIL


def _weights(mapping: Dict[Outcome, float]) -> List[OutcomeWeight]:
    return [OutcomeWeight(outcome=k, probability=v) for k, v in mapping.items()]


def _q(
    name: str,
    space: str,
    method: QueryMethod,
    event_a: List[Outcome],
    target: float,
    expectation: Expectation,
    event_b: Union[List[Outcome], None] = None,
    ignore_unknown: bool = False,
) -> QueryCase:
    if event_b is None and method.is_binary:
        event_b = []
    return QueryCase(
        name=name,
        space=space,
        method=method,
        event_a=event_a,
        event_b=event_b,
        target=target,
        expectation=expectation,
        ignore_unknown=ignore_unknown,
    )


def reference_suite() -> CheckSuite:
    """Встроенный набор проверок над честной монетой и честной костью."""
    coin = {"heads": 0.5, "tails": 0.5}
    die = {k: 1.0 / 6.0 for k in range(1, 7)}

    constructor_cases = [
        ConstructorCase(name="fair_coin", outcomes=_weights(coin), expectation=WORK),
        ConstructorCase(name="fair_die", outcomes=_weights(die), expectation=WORK),
        ConstructorCase(
            name="negative_probability",
            outcomes=_weights({"heads": -0.1, "tails": 1.1}),
            expectation=FAIL,
        ),
        ConstructorCase(
            name="invalid_distribution",
            outcomes=_weights({1: 1.0 / 6, 2: 1.0 / 6, 3: 1.1 / 6, 4: 1.0 / 6, 5: 1.0 / 6, 6: 1.1 / 6}),
            expectation=FAIL,
        ),
        ConstructorCase(name="empty_distribution", outcomes=[], expectation=FAIL),
    ]

    N, C, U, I, P = (
        QueryMethod.NORMAL,
        QueryMethod.COMPLEMENT,
        QueryMethod.UNION,
        QueryMethod.INTERSECTION,
        QueryMethod.CONDITIONAL,
    )
    heads, tails, everything = ["heads"], ["tails"], ["heads", "tails"]
    wrong, moose = ["heads", "moose"], ["moose"]

    query_cases = [
        _q("P(heads)=0.5", "coin", N, heads, 0.5, WORK),
        _q("P({})=0.0", "coin", N, [], 0.0, WORK),
        _q("P(ALL)=1.0", "coin", N, everything, 1.0, WORK),
        _q("non-defined_event", "coin", N, wrong, 0.5, FAIL),
        _q("P({}^c)=1.0", "coin", C, [], 1.0, WORK),
        _q("P({heads}^c)=0.5", "coin", C, heads, 0.5, WORK),
        _q("P({ALL}^c)=0", "coin", C, everything, 0.0, WORK),
        _q("non-defined_event_complement", "coin", C, wrong, 0.5, FAIL),
        _q("P(heads U tails)=1.0", "coin", U, heads, 1.0, WORK, tails),
        _q("P({} U tails)=0.5", "coin", U, [], 0.5, WORK, tails),
        _q("non-defined_event_union", "coin", U, [], 0.5, FAIL, wrong),
        _q("P(tails n ALL)=0.5", "coin", I, tails, 0.5, WORK, everything),
        _q("P(all n {})=0.0", "coin", I, everything, 0.0, WORK, []),
        _q("P(all n wrong)_should_fail", "coin", I, everything, 0.5, FAIL, wrong),
        _q("non-defined_event_with_mode_1", "coin", C, wrong, 0.5, WORK, ignore_unknown=True),
        _q("non-defined_event_with_mode_2", "coin", U, [], 0.5, WORK, wrong, ignore_unknown=True),
        _q("P(all n wrong)_should_work_with_mode", "coin", I, everything, 0.5, WORK, wrong,
           ignore_unknown=True),
        _q("P(all n moose)_should_work_with_mode", "coin", I, everything, 0.0, WORK, moose,
           ignore_unknown=True),
        _q("P({1,2})=1/3", "die", N, [1, 2], 2.0 / 6.0, WORK),
        _q("P({1,2}|ALL)=1/3", "die", P, [1, 2], 1.0 / 3.0, WORK, [1, 2, 3, 4, 5, 6]),
        _q("P({4,5}|{4,5,6})=2/3", "die", P, [4, 5], 2.0 / 3.0, WORK, [4, 5, 6]),
        _q("P({}|{3})=0", "die", P, [], 0.0, WORK, [3]),
        _q("P({3}|{4,5,6})=0", "die", P, [3], 0.0, WORK, [4, 5, 6]),
        _q("P({7}|{3})_should_fail", "die", P, [7], 0.0, FAIL, [3]),
        _q("P({3}|{})_should_fail", "die", P, [3], 0.0, FAIL, []),
        _q("P({7}|{3})_should_work_with_mode", "die", P, [7], 0.0, WORK, [3], ignore_unknown=True),
        _q("P({4,5}|{4,5,6,7})_should_work_with_mode", "die", P, [4, 5], 2.0 / 3.0, WORK,
           [4, 5, 6, 7], ignore_unknown=True),
        _q("P({4,5}|{4,5,6,7})_should_fail", "die", P, [4, 5], 2.0 / 3.0, FAIL, [4, 5, 6, 7]),
        _q("P({1..6} n {4,5,6,7})=0.5_with_mode", "die", I, [1, 2, 3, 4, 5, 6], 0.5, WORK,
           [4, 5, 6, 7], ignore_unknown=True),
    ]

    return CheckSuite(
        spaces={"coin": _weights(coin), "die": _weights(die)},
        constructor_cases=constructor_cases,
        query_cases=query_cases,
    )


def load_suite(path: Union[str, Path]) -> CheckSuite:
    """
    Загрузка CheckSuite из JSON файла.

    Args:
        path: Путь к JSON файлу набора

    Returns:
        Валидированный CheckSuite

    Raises:
        FileNotFoundError: Если файл не найден
        json.JSONDecodeError: Если файл не является валидным JSON
        jsonschema.ValidationError: Если данные не соответствуют check_suite контракту
        pydantic.ValidationError: Если данные семантически невалидны
            (например, ссылка на неопределённое пространство)
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    validate_check_suite(data)
    return CheckSuite.model_validate(data)
