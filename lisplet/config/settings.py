"""Interpreter settings, read from the environment and overridable by CLI flags."""
import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, PositiveInt, field_validator

logger = logging.getLogger(__name__)

ENV_PREFIX = "LISPLET_"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class InterpreterSettings(BaseModel):
    """Runtime configuration for the CLI and REPL hosts."""
    log_level: str = Field("WARNING", description="Root logging level.")
    log_file: Optional[str] = Field(None, description="Log to this file instead of stderr.")
    recursion_limit: PositiveInt = Field(
        10000, description="Python recursion limit applied before evaluating; deep call chains need a high value."
    )
    verbose: bool = Field(False, description="REPL prints the value of every form, not just the last.")

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got '{value}'")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "InterpreterSettings":
        """
        Builds settings from LISPLET_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for field_name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + field_name.upper())
            if raw is not None and raw != "":
                values[field_name] = raw
        logger.debug(f"Settings read from environment: {sorted(values)}")
        return cls(**values)

    def with_overrides(self, **overrides) -> "InterpreterSettings":
        """Returns a copy with every non-None override applied and validated."""
        data = self.model_dump()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return type(self)(**data)
