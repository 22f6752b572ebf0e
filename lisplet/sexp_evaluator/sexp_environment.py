"""
Scope environment for evaluation.

An Environment is one flat snapshot of every binding visible in a scope.
Function calls do not chain to a parent scope: they take a full copy of the
caller's environment, so definitions made inside a call are never observed
by the caller or by sibling calls.
"""

import logging
from collections.abc import MutableMapping
from typing import Dict, Iterator, Optional

from lisplet.system.errors import UnboundVariableError
from lisplet.system.models import Value

logger = logging.getLogger(__name__)


class Environment(MutableMapping):
    """
    Mapping from variable name to Value for a single scope.

    Besides the mapping protocol it offers the lookup/define/snapshot
    operations used by the evaluator.
    """

    def __init__(self, bindings: Optional[Dict[str, Value]] = None):
        """
        Initializes a new Environment.

        Args:
            bindings: Optional initial bindings. The dictionary is copied, so
                      later changes to it do not leak into the environment.
        """
        self._bindings: Dict[str, Value] = dict(bindings) if bindings is not None else {}
        logger.debug(f"Initialized Environment id={id(self)} with {len(self._bindings)} bindings")

    def lookup(self, name: str) -> Value:
        """
        Looks up a variable name in this scope.

        Raises:
            UnboundVariableError: If the name has no binding.
        """
        try:
            return self._bindings[name]
        except KeyError:
            logger.debug(f"'{name}' not found in env id={id(self)}")
            raise UnboundVariableError(name) from None

    def define(self, name: str, value: Value) -> None:
        """Defines or silently redefines `name` in this scope."""
        logger.debug(f"Defining '{name}' = {value} in env {id(self)}")
        self._bindings[name] = value

    def snapshot(self) -> "Environment":
        """
        Returns an independent copy of this scope.

        Copying costs O(number of bindings) per call; mutations on either side
        are never visible to the other.
        """
        child = Environment.__new__(Environment)
        child._bindings = self._bindings.copy()
        logger.debug(f"Snapshot of env {id(self)} -> env {id(child)} ({len(child._bindings)} bindings)")
        return child

    def get_local_bindings(self) -> Dict[str, Value]:
        """Returns a copy of the bindings defined in this scope."""
        return self._bindings.copy()

    # --- Mapping protocol ---

    def __getitem__(self, name: str) -> Value:
        return self._bindings[name]

    def __setitem__(self, name: str, value: Value) -> None:
        self.define(name, value)

    def __delitem__(self, name: str) -> None:
        del self._bindings[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"<Environment id={id(self)} bindings={list(self._bindings.keys())}>"
