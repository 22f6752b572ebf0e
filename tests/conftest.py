import pytest

from lisplet.sexp_evaluator.sexp_environment import Environment
from lisplet.sexp_evaluator.sexp_evaluator import LispEvaluator
from lisplet.sexp_evaluator.sexp_primitives import standard_environment
from lisplet.sexp_parser.sexp_parser import LispParser
from lisplet.system.models import VOID, InbuiltFunc


# --- Fixtures ---

@pytest.fixture
def parser():
    """Provides a LispParser instance for tests."""
    return LispParser()


@pytest.fixture
def evaluator():
    """Provides a LispEvaluator instance for tests."""
    return LispEvaluator()


@pytest.fixture
def empty_env():
    """Provides an environment with no bindings at all."""
    return Environment()


@pytest.fixture
def std_env():
    """Provides an environment holding the standard primitives (add, eq, if)."""
    return standard_environment()


@pytest.fixture
def ignore_func():
    """A primitive that accepts anything and returns VOID."""
    return InbuiltFunc(func=lambda args: VOID, name="ignore")


@pytest.fixture
def self_returning_func():
    """A primitive that returns itself, so `((f))` keeps producing something callable."""
    holder = {}

    def call_self(args):
        return holder["self"]

    holder["self"] = InbuiltFunc(func=call_self, name="test")
    return holder["self"]
