"""CLI: python -m src.harness [--suite PATH] [--log-level LEVEL] [--tolerance X]"""

import argparse
import sys
from typing import List, Optional

import jsonschema

from src.core.math.numerical_safeguards import EPS_PROBABILITY_COMPARE
from src.harness.runner import HarnessConfig, HarnessRunner
from src.harness.suites import load_suite, reference_suite
from src.infrastructure.logging import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m src.harness",
        description="Run probability space checks and report each result.",
    )
    parser.add_argument(
        "--suite",
        help="Path to a check suite JSON file (default: built-in reference suite)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=EPS_PROBABILITY_COMPARE,
        help=f"Absolute tolerance for expected values (default: {EPS_PROBABILITY_COMPARE})",
    )
    parser.add_argument(
        "--stop-on-failure",
        action="store_true",
        help="Stop at the first failed check",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        suite = load_suite(args.suite) if args.suite else reference_suite()
        runner = HarnessRunner(
            HarnessConfig(tolerance=args.tolerance, stop_on_failure=args.stop_on_failure)
        )
        report = runner.run_suite(suite)
    except (OSError, ValueError, jsonschema.ValidationError) as e:
        # ValueError покрывает JSONDecodeError, pydantic ValidationError
        # и ProbabilitySpaceError невалидного пространства
        logger.error("Check suite failed to run: %s", e)
        return 1

    return 0 if report.all_passed else 1


if __name__ == "__main__":
    sys.exit(main())
