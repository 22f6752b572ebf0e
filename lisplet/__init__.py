"""lisplet: a small interpreter for a Lisp-like expression language."""

from .sexp_evaluator.sexp_environment import Environment
from .sexp_evaluator.sexp_evaluator import LispEvaluator, evaluate
from .sexp_evaluator.sexp_primitives import standard_environment
from .sexp_parser.sexp_parser import LispParser
from .system.errors import (
    LispEvaluationError,
    LispSyntaxError,
    NotCallableError,
    PrimitiveArgumentError,
    UnboundVariableError,
)

__all__ = [
    "Environment",
    "LispEvaluator",
    "evaluate",
    "standard_environment",
    "LispParser",
    "LispEvaluationError",
    "LispSyntaxError",
    "NotCallableError",
    "PrimitiveArgumentError",
    "UnboundVariableError",
]
