"""
Parser for the expression language, built on the 'lark' library.
Turns source text into Ast trees (see lisplet.system.models).
"""

import logging
import sys
import unicodedata
from typing import List, Tuple

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from lisplet.system.errors import LispSyntaxError
from lisplet.system.models import (
    FALSE, U64_MAX, Ast, Call, Define, FunctionValue, IntValue, Literal, Variable,
)

logger = logging.getLogger(__name__)

# `\w` minus digits and '_' still admits other numeric characters such as
# superscripts and vulgar fractions. Identifiers are letters only.
_OTHER_NUMERALS = "".join(
    chr(code) for code in range(sys.maxunicode + 1) if unicodedata.category(chr(code)) == "No"
)
IDENT_PATTERN = r"[^\W\d_" + _OTHER_NUMERALS + "]+"

# Inside parentheses the leading token picks the form: '\' starts a function
# literal, '=' a definition, anything else a call.
GRAMMAR = r"""
    ?expression: expr
    program: expr+

    ?expr: FALSE                -> false_literal
         | NUMBER               -> number
         | IDENT                -> variable
         | "(" form ")"

    ?form: function
         | define
         | call

    function: "\\" params expr*
    params: "(" IDENT* ")"
    define: "=" IDENT expr
    call: expr expr*

    FALSE: "#f"
    NUMBER: /[0-9]+/
    IDENT: /""" + IDENT_PATTERN + r"""/

    %ignore /\s+/
"""


class IntegerLiteralTooLarge(Exception):
    """Raised while building the tree when a number does not fit in 64 unsigned bits."""
    def __init__(self, token: Token):
        super().__init__(f"Integer literal out of range: {token}")
        self.token = token


@v_args(inline=True)
class AstBuilder(Transformer):
    """Builds Ast nodes directly from LALR reductions."""

    def false_literal(self, token):
        return Literal(value=FALSE)

    def number(self, token):
        value = int(token)
        if value > U64_MAX:
            raise IntegerLiteralTooLarge(token)
        return Literal(value=IntValue(value=value))

    def variable(self, token):
        return Variable(name=str(token))

    def params(self, *names):
        return tuple(str(name) for name in names)

    def function(self, params, *body):
        return Literal(value=FunctionValue(params=params, body=body))

    def define(self, name, value):
        return Define(name=str(name), value=value)

    def call(self, callee, *arguments):
        return Call(callee=callee, arguments=arguments)

    def program(self, *exprs):
        return list(exprs)


# Callbacks run during the parse itself, so nesting depth costs no Python stack.
_lark_parser = Lark(
    GRAMMAR,
    parser="lalr",
    lexer="basic",
    start=["expression", "program"],
    transformer=AstBuilder(),
)


class LispParser:
    """
    Parses source text into Ast trees.

    parse_expression reads a single expression from the front of the input and
    hands back whatever follows it; parse_string insists the input holds exactly
    one expression; parse_program reads one or more top-level expressions.
    """

    def parse_expression(self, source: str) -> Tuple[Ast, str]:
        """
        Parses one expression from the start of `source`.

        Returns:
            The Ast and the unconsumed remainder of the input. Whitespace
            following the expression is consumed.

        Raises:
            LispSyntaxError: If no expression can be read from the input.
            TypeError: If the input is not a string.
        """
        self._check_input(source)
        logger.debug(f"Attempting to parse expression: '{source}'")

        interactive = _lark_parser.parse_interactive(source, start="expression")
        depth = 0
        complete = False
        last_token = None
        remainder = ""
        try:
            try:
                # iter_parse yields each token just before feeding it, so the
                # token after a complete expression is never fed.
                for token in interactive.iter_parse():
                    if complete:
                        remainder = source[token.start_pos:]
                        break
                    if token.value == "(":
                        depth += 1
                    elif token.value == ")":
                        depth -= 1
                    last_token = token
                    complete = depth == 0
            except UnexpectedCharacters as e:
                if not complete:
                    raise
                remainder = source[e.pos_in_stream:]
            ast = interactive.feed_eof(last_token)
        except UnexpectedInput as e:
            raise self._syntax_error(source, e) from e
        except IntegerLiteralTooLarge as e:
            raise self._literal_error(source, e) from e

        logger.debug(f"Successfully parsed {type(ast).__name__} node (remainder: {len(remainder)} characters)")
        return ast, remainder

    def parse_string(self, source: str) -> Ast:
        """
        Parses a string that must contain exactly one expression.

        Raises:
            LispSyntaxError: On a syntax error, on empty input, or when content
                             follows the expression.
            TypeError: If the input is not a string.
        """
        ast, remainder = self.parse_expression(source)
        if remainder.strip():
            logger.error(f"Unexpected content after main expression: '{remainder}'")
            raise LispSyntaxError(
                "Unexpected content after the main expression.",
                source,
                error_details=f"Trailing content: '{remainder}'",
            )
        return ast

    def parse_program(self, source: str) -> List[Ast]:
        """
        Parses one or more top-level expressions.

        Returns:
            The expressions in source order, to be evaluated sequentially
            against a shared environment.
        """
        self._check_input(source)
        logger.debug(f"Attempting to parse program of {len(source)} characters")
        try:
            program = _lark_parser.parse(source, start="program")
        except UnexpectedInput as e:
            raise self._syntax_error(source, e) from e
        except IntegerLiteralTooLarge as e:
            raise self._literal_error(source, e) from e
        logger.debug(f"Parsed {len(program)} top-level expressions")
        return program

    def _check_input(self, source: str) -> None:
        if not isinstance(source, str):
            raise TypeError("Input must be a string.")
        if not source.strip():
            logger.error("Parsing failed: Input string is empty or contains only whitespace.")
            raise LispSyntaxError("Input string is empty or contains only whitespace.", source)

    def _syntax_error(self, source: str, error: UnexpectedInput) -> LispSyntaxError:
        """Converts a lark failure into a LispSyntaxError with position information."""
        if isinstance(error, UnexpectedToken):
            if error.token.type == "$END":
                message = "Unexpected end of input"
                details = f"Expected one of: {', '.join(sorted(error.expected))}"
            else:
                message = f"Unexpected token '{error.token}'"
                details = f"Expected one of: {', '.join(sorted(error.expected))}\n{error.get_context(source)}"
        elif isinstance(error, UnexpectedCharacters):
            message = f"Unexpected character '{error.char}'"
            details = error.get_context(source)
        else:
            message = "Syntax error"
            details = str(error)
        logger.error(f"Syntax error: {message} at line {error.line}, column {error.column}")
        return LispSyntaxError(message, source, error_details=details, line=error.line, column=error.column)

    def _literal_error(self, source: str, error: IntegerLiteralTooLarge) -> LispSyntaxError:
        token = error.token
        logger.error(f"Integer literal out of range: {token}")
        return LispSyntaxError(
            "Integer literal does not fit in 64 unsigned bits.",
            source,
            error_details=f"Literal: {token}",
            line=token.line,
            column=token.column,
        )
