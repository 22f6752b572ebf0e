"""
System-wide custom error types.
"""
from typing import Any, Optional


class LispSyntaxError(ValueError):
    """
    Custom exception raised when parsing fails due to syntax errors.
    Inherits from ValueError for general compatibility but provides specific context.
    """
    def __init__(
        self,
        message: str,
        source: str,
        error_details: str = "",
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        """
        Initializes the LispSyntaxError.

        Args:
            message: A high-level error message.
            source: The original source text that caused the error.
            error_details: Specific details from the underlying parser, if available.
            line: 1-based line of the failure, when known.
            column: 1-based column of the failure, when known.
        """
        full_message = message
        if line is not None and column is not None:
            full_message += f" (line {line}, column {column})"
        full_message += f"\nInput: '{source}'"
        if error_details:
            full_message += f"\nDetails: {error_details}"
        super().__init__(full_message)
        self.message = message
        self.source = source
        self.error_details = error_details
        self.line = line
        self.column = column


class LispEvaluationError(Exception):
    """
    Custom exception raised during the evaluation phase.
    Evaluation does not continue past one of these; the host decides
    whether to abort or recover.
    """
    def __init__(self, message: str, expression: str = "", error_details: str = ""):
        """
        Initializes the LispEvaluationError.

        Args:
            message: A high-level error message describing the evaluation failure.
            expression: The source text or node being evaluated when the error occurred.
            error_details: Specific details about the error (e.g., from underlying exceptions).
        """
        super().__init__(message)
        self.message = message
        self.expression = expression
        self.error_details = error_details

    def __str__(self) -> str:
        # Built on demand: hosts attach the source text after the error is raised.
        full_message = f"{self.message}"
        if self.expression:
            full_message += f"\nExpression: '{self.expression}'"
        if self.error_details:
            full_message += f"\nDetails: {self.error_details}"
        return full_message


class UnboundVariableError(LispEvaluationError):
    """Raised when a variable is looked up but has no binding in scope."""
    def __init__(self, name: str, expression: str = ""):
        super().__init__(f"Variable does not exist: {name}", expression=expression)
        self.name = name


class NotCallableError(LispEvaluationError):
    """Raised when the callee of a call evaluates to something other than a function."""
    def __init__(self, value: Any, expression: str = ""):
        super().__init__(
            "Attempted to call a non-function",
            expression=expression,
            error_details=f"Callee evaluated to: {value}",
        )
        self.value = value


class PrimitiveArgumentError(LispEvaluationError):
    """Raised by host primitives when they receive arguments they cannot work with."""
