"""
Host primitives registered into the environment as InbuiltFunc values.

The evaluator itself defines no built-ins; hosts pick these up through
`standard_environment` or register their own.
"""
import logging
from typing import Dict, List, Optional

from lisplet.sexp_evaluator.sexp_environment import Environment
from lisplet.system.errors import PrimitiveArgumentError
from lisplet.system.models import FALSE, U64_MAX, VOID, InbuiltFunc, IntValue, Value, is_truthy

logger = logging.getLogger(__name__)


def add(args: List[Value]) -> Value:
    """Sums the integer arguments. Non-integers are reported and skipped."""
    total = 0
    for arg in args:
        if isinstance(arg, IntValue):
            total = (total + arg.value) & U64_MAX
        else:
            logger.warning(f"Tried to add a non-int: {arg}")
    return IntValue(value=total)


def eq(args: List[Value]) -> Value:
    """
    Returns VOID (true) when every argument equals the last one, FALSE otherwise.

    With no arguments the answer is VOID.
    """
    if not args:
        return VOID
    last = args[-1]
    for arg in args[:-1]:
        if arg != last:
            return FALSE
    return VOID


def if_(args: List[Value]) -> Value:
    """
    (if condition then [else]): picks `else` (VOID when omitted) if the
    condition is FALSE and `then` otherwise.

    Both branches are already evaluated by the time this runs. To delay work,
    make the branches functions and call the chosen one.
    """
    if not args:
        raise PrimitiveArgumentError("No condition for if")
    if len(args) < 2:
        raise PrimitiveArgumentError("No body for if")
    if len(args) > 3:
        raise PrimitiveArgumentError(
            "Too many arguments supplied to `if`", error_details=f"Got {len(args)} arguments, at most 3 allowed"
        )
    condition, then_value = args[0], args[1]
    else_value = args[2] if len(args) == 3 else VOID
    return then_value if is_truthy(condition) else else_value


PRIMITIVES: Dict[str, InbuiltFunc] = {
    "add": InbuiltFunc(func=add, name="add"),
    "eq": InbuiltFunc(func=eq, name="eq"),
    "if": InbuiltFunc(func=if_, name="if"),
}


def standard_environment(extra: Optional[Dict[str, Value]] = None) -> Environment:
    """
    Builds a fresh top-level environment holding the standard primitives.

    Args:
        extra: Additional bindings layered on top; they win over primitives
               of the same name.
    """
    env = Environment(PRIMITIVES)
    for name, value in (extra or {}).items():
        env.define(name, value)
    logger.debug(f"Standard environment created with bindings: {list(env.keys())}")
    return env
