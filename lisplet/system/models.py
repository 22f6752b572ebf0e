"""
Core data models for the interpreter.

Both the syntax tree (Ast) and the runtime values (Value) are closed sets of
frozen Pydantic models. A tree can be evaluated any number of times and shared
freely, since nothing ever mutates it after construction.
"""

import logging
from typing import Callable, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, conint

logger = logging.getLogger(__name__)

U64_MAX = 2 ** 64 - 1


# --- Runtime values ---

class Value(BaseModel):
    """
    Base class for every runtime value.

    Equality only holds between values of the same variant carrying the same
    payload. Functions and primitives never compare equal, not even to
    themselves.
    """
    model_config = ConfigDict(frozen=True)

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return False
        return self._same_payload(other)

    def _same_payload(self, other: "Value") -> bool:
        return False


class VoidValue(Value):
    """'No useful value'. Truthy, like every value except FALSE."""

    def _same_payload(self, other: Value) -> bool:
        return True

    def __str__(self) -> str:
        return "#void"


class FalseValue(Value):
    """The sole falsy value, written `#f`."""

    def _same_payload(self, other: Value) -> bool:
        return True

    def __str__(self) -> str:
        return "#f"


class IntValue(Value):
    """Unsigned 64-bit integer, the only numeric type."""
    value: conint(strict=True, ge=0, le=U64_MAX)

    def _same_payload(self, other: Value) -> bool:
        return self.value == other.value

    def __str__(self) -> str:
        return str(self.value)


class FunctionValue(Value):
    """
    A user-defined function: parameter names plus body statements.

    No environment is captured. Free variables in the body resolve against
    whatever environment is live when the function is called.
    """
    params: Tuple[str, ...] = ()
    body: Tuple["Ast", ...] = ()

    def __str__(self) -> str:
        return f"<function ({' '.join(self.params)})>"


class InbuiltFunc(Value):
    """A host-provided primitive taking the evaluated argument list."""
    func: Callable[[List[Value]], Value]
    name: str = Field(default="<inbuilt>", description="Display name used in messages and the REPL.")

    def __str__(self) -> str:
        return f"<inbuilt {self.name}>"


VOID = VoidValue()
FALSE = FalseValue()


def is_truthy(value: Value) -> bool:
    """Scheme-style truthiness: everything except FALSE is true."""
    return not isinstance(value, FalseValue)


# --- Syntax tree ---

class Ast(BaseModel):
    """Base class for every syntax tree node."""
    model_config = ConfigDict(frozen=True)


class Literal(Ast):
    """An already-resolved value embedded in the tree (numbers, #f, function literals)."""
    value: Value


class Variable(Ast):
    """A reference to a binding, looked up at evaluation time."""
    name: str


class Call(Ast):
    """Function application. The callee is itself an expression."""
    callee: Ast
    arguments: Tuple[Ast, ...] = ()


class Define(Ast):
    """Binds `name` to the evaluated `value` in the current scope."""
    name: str
    value: Ast


FunctionValue.model_rebuild()
