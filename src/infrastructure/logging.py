"""
Logging setup.

Единая настройка logging для core и check harness.
"""

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None
) -> None:
    """
    Настройка root logger.

    Args:
        level: Уровень logging (DEBUG, INFO, WARNING, ERROR)
        format_string: Формат сообщений (DEFAULT_FORMAT если None)

    Raises:
        ValueError: Если level не является известным уровнем logging
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown logging level: {level}")

    logging.basicConfig(
        level=numeric_level,
        format=format_string or DEFAULT_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """
    Logger для модуля.

    Args:
        name: Имя logger (обычно __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
