"""
Tree-walking evaluator.

`evaluate` is the core: it walks one Ast against an Environment that it
mutates in place. `LispEvaluator` wraps it for hosts, parsing source text
and running every top-level form against one shared environment.
"""

import logging
from typing import List, Optional, Sequence

from lisplet.sexp_evaluator.sexp_environment import Environment
from lisplet.sexp_parser.sexp_parser import LispParser
from lisplet.system.errors import LispEvaluationError, LispSyntaxError, NotCallableError
from lisplet.system.models import (
    VOID, Ast, Call, Define, FunctionValue, InbuiltFunc, Literal, Value, Variable,
)

logger = logging.getLogger(__name__)


def evaluate(ast: Ast, env: Environment) -> Value:
    """
    Evaluates `ast` against `env` and returns the resulting Value.

    Top-level definitions are written into `env`, so callers can inspect it
    afterwards or reuse it for the next form.

    Raises:
        UnboundVariableError: A variable has no binding in scope.
        NotCallableError: The callee of a call is not a function.
        LispEvaluationError: A primitive failed.
    """
    if isinstance(ast, Literal):
        return ast.value

    if isinstance(ast, Variable):
        return env.lookup(ast.name)

    if isinstance(ast, Define):
        value = evaluate(ast.value, env)
        env.define(ast.name, value)
        return VOID

    if isinstance(ast, Call):
        callee = evaluate(ast.callee, env)
        if isinstance(callee, FunctionValue):
            return _apply_function(callee, ast.arguments, env)
        if isinstance(callee, InbuiltFunc):
            return _apply_inbuilt(callee, ast.arguments, env)
        logger.error(f"Attempted to call a non-function: {callee}")
        raise NotCallableError(callee)

    raise TypeError(f"Cannot evaluate object of type {type(ast).__name__}")


def _apply_function(function: FunctionValue, arguments: Sequence[Ast], calling_env: Environment) -> Value:
    # The call scope is a full copy of the caller's environment taken before
    # any argument runs; arguments themselves are evaluated in the caller's scope.
    call_env = calling_env.snapshot()

    if len(arguments) != len(function.params):
        logger.warning(
            f"Called function with incorrect number of arguments "
            f"(expected {len(function.params)}, got {len(arguments)})"
        )

    # zip stops at the shorter side: surplus argument expressions are never evaluated.
    for name, arg_node in zip(function.params, arguments):
        call_env.define(name, evaluate(arg_node, calling_env))

    result: Value = VOID
    for statement in function.body:
        result = evaluate(statement, call_env)

    logger.debug(f"{function} returned {result}")
    return result


def _apply_inbuilt(inbuilt: InbuiltFunc, arguments: Sequence[Ast], calling_env: Environment) -> Value:
    values = [evaluate(arg_node, calling_env) for arg_node in arguments]
    logger.debug(f"Invoking {inbuilt} with {len(values)} arguments")
    try:
        result = inbuilt.func(values)
    except LispEvaluationError:
        raise
    except Exception as e:
        logger.exception(f"Error invoking {inbuilt}: {e}")
        raise LispEvaluationError(f"Error invoking inbuilt '{inbuilt.name}': {e}", error_details=str(e)) from e

    if not isinstance(result, Value):
        raise LispEvaluationError(
            f"Inbuilt '{inbuilt.name}' returned a non-Value result",
            error_details=f"Got {type(result).__name__}: {result!r}",
        )
    return result


class LispEvaluator:
    """
    Parses and evaluates source text for a host application.

    Every top-level form is evaluated in order against the same environment,
    so definitions made by one form are visible to the next.
    """

    def __init__(self, parser: Optional[LispParser] = None):
        self.parser = parser if parser is not None else LispParser()
        logger.debug("LispEvaluator initialized.")

    def evaluate(self, ast: Ast, env: Environment) -> Value:
        """Evaluates a single, already parsed tree."""
        try:
            return evaluate(ast, env)
        except RecursionError as e:
            logger.error("Maximum recursion depth exceeded")
            raise LispEvaluationError("Maximum recursion depth exceeded", error_details=str(e)) from e

    def evaluate_program(self, source: str, env: Optional[Environment] = None) -> List[Value]:
        """
        Parses `source` as one or more top-level forms and evaluates them in order.

        Args:
            source: Program text.
            env: Environment shared by all forms. A fresh, empty one is used
                 when omitted; it holds no primitives.

        Returns:
            The value of every form, in source order.

        Raises:
            LispSyntaxError: If the program does not parse. Nothing is evaluated.
            LispEvaluationError: If a form fails. Evaluation stops at that form.
        """
        logger.info(f"Evaluating program: {source[:100]}...")
        try:
            forms = self.parser.parse_program(source)
        except LispSyntaxError as e:
            logger.error(f"Syntax error: {e}")
            raise

        env = env if env is not None else Environment()
        results: List[Value] = []
        for index, form in enumerate(forms):
            try:
                results.append(evaluate(form, env))
            except LispEvaluationError as e:
                if not e.expression:
                    e.expression = source
                logger.error(f"Evaluation error in top-level form {index + 1}: {e}")
                raise
            except RecursionError as e:
                logger.error(f"Maximum recursion depth exceeded in top-level form {index + 1}")
                raise LispEvaluationError(
                    "Maximum recursion depth exceeded", expression=source, error_details=str(e)
                ) from e
        logger.info(f"Finished evaluating {len(forms)} forms.")
        return results

    def evaluate_string(self, source: str, env: Optional[Environment] = None) -> Value:
        """Evaluates every form in `source` and returns the value of the last one."""
        return self.evaluate_program(source, env)[-1]
