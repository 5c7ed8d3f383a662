"""
JSON Schema Contract Validators

Валидация JSON данных check harness по формальным JSON Schema контрактам.
Схемы поставляются вместе с пакетом (src/core/contracts/schema/) и
загружаются через importlib.resources, поэтому валидаторы работают и из
checkout репозитория, и из установленного дистрибутива.

Схемы:
- check_suite.json (набор проверок ProbabilitySpace)
"""

import json
from importlib import resources
from typing import Any, Dict, Optional

import jsonschema
from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema из ресурсов пакета.

    Каждая схема проходит meta-validation один раз и кэшируется вместе
    с готовым Draft202012Validator.
    """

    def __init__(self, package: str = __package__):
        self._schema_dir = resources.files(package) / "schema"
        self._validators: Dict[str, Draft202012Validator] = {}

    def validator_for(self, schema_name: str) -> Draft202012Validator:
        """
        Validator для схемы по имени (без расширения, например 'check_suite').

        Raises:
            FileNotFoundError: Если схема отсутствует в пакете
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name not in self._validators:
            schema = self._read(schema_name)
            self._validators[schema_name] = Draft202012Validator(schema)
        return self._validators[schema_name]

    def _read(self, schema_name: str) -> Dict[str, Any]:
        schema_file = self._schema_dir / f"{schema_name}.json"
        if not schema_file.is_file():
            raise FileNotFoundError(f"Schema not found: {schema_name}.json")

        schema = json.loads(schema_file.read_text(encoding="utf-8"))

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        return schema


# Создаётся при первом обращении: импорт модуля не читает ресурсы
_SCHEMA_LOADER: Optional[SchemaLoader] = None


def get_schema_loader() -> SchemaLoader:
    """Общий SchemaLoader процесса."""
    global _SCHEMA_LOADER
    if _SCHEMA_LOADER is None:
        _SCHEMA_LOADER = SchemaLoader()
    return _SCHEMA_LOADER


# =============================================================================
# CONTRACT VALIDATION
# =============================================================================


def validate_contract(schema_name: str, data: Dict[str, Any]) -> None:
    """
    Валидация данных против схемы.

    Из всех нарушений выбрасывается наиболее релевантное (best_match),
    а не первое найденное.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    validator = get_schema_loader().validator_for(schema_name)
    error = best_match(validator.iter_errors(data))
    if error is not None:
        raise error


def validate_check_suite(data: Dict[str, Any]) -> None:
    """
    Валидация check_suite данных.

    Args:
        data: Данные для валидации

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    validate_contract("check_suite", data)
