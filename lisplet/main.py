"""
Command-line entry point.

Runs a program file, evaluates a string given with -e, or starts the REPL.
The standard primitives (add, eq, if) are registered before evaluation.
"""

import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError

from lisplet.config.logging_config import get_logger, setup_logging
from lisplet.config.settings import LOG_LEVELS, InterpreterSettings
from lisplet.repl.repl import Repl
from lisplet.sexp_evaluator.sexp_evaluator import LispEvaluator
from lisplet.sexp_evaluator.sexp_primitives import standard_environment
from lisplet.system.errors import LispEvaluationError, LispSyntaxError

logger = get_logger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lisplet", description="Evaluate programs in the lisplet expression language")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("file", nargs="?", help="Program file to run; starts the REPL when omitted")
    source.add_argument("-e", "--eval", dest="expression", help="Evaluate this source text instead of a file")
    parser.add_argument("--log-level", choices=LOG_LEVELS, type=str.upper, help="Logging level (overrides LISPLET_LOG_LEVEL)")
    parser.add_argument("--log-file", help="Write logs to this file (overrides LISPLET_LOG_FILE)")
    parser.add_argument("--verbose", action="store_true", default=None, help="Print the value of every top-level form")
    return parser


def run_source(source: str, settings: InterpreterSettings, output=None) -> int:
    """Evaluates `source` with the standard primitives and prints the result.

    Returns:
        Process exit code: 0 on success, 1 on a syntax or evaluation error.
    """
    output = output or sys.stdout
    evaluator = LispEvaluator()
    try:
        results = evaluator.evaluate_program(source, standard_environment())
    except LispSyntaxError as e:
        print(f"Syntax error: {e}", file=sys.stderr)
        return 1
    except LispEvaluationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for value in (results if settings.verbose else results[-1:]):
        print(value, file=output)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        settings = InterpreterSettings.from_env().with_overrides(
            log_level=args.log_level,
            log_file=args.log_file,
            verbose=args.verbose,
        )
    except ValidationError as e:
        print(f"Error: invalid settings in environment: {e}", file=sys.stderr)
        return 1
    setup_logging(settings.log_level, settings.log_file)
    sys.setrecursionlimit(max(sys.getrecursionlimit(), settings.recursion_limit))
    logger.debug(f"Settings: {settings}")

    if args.expression is not None:
        return run_source(args.expression, settings)

    if args.file:
        try:
            with open(args.file, encoding="utf-8") as f:
                source = f.read()
        except OSError as e:
            logger.error(f"Cannot read program file {args.file}: {e}")
            print(f"Error: cannot read {args.file}: {e.strerror}", file=sys.stderr)
            return 1
        return run_source(source, settings)

    Repl(verbose=settings.verbose).start()
    return 0


if __name__ == "__main__":
    sys.exit(main())
