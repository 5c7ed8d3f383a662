"""
Contract Validation Module

Модуль для валидации JSON контрактов (наборы проверок check harness).
"""

from .validators import (
    SchemaLoader,
    get_schema_loader,
    validate_check_suite,
    validate_contract,
)

__all__ = [
    # Classes
    "SchemaLoader",
    # Functions
    "get_schema_loader",
    "validate_contract",
    "validate_check_suite",
]
