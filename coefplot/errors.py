"""Exception taxonomy.

Every error raised by the aggregation pipeline for a caller mistake is a
``CoefplotError``. The concrete classes also derive from the closest builtin
so that ``except ValueError`` style handlers keep working.
"""
from __future__ import annotations

__all__ = [
    "CoefplotError",
    "InvalidAxisConfig",
    "NameCoverageError",
    "UnsupportedModel",
]


class CoefplotError(Exception):
    """Base class for coefficient-plot pipeline failures."""


class UnsupportedModel(CoefplotError, TypeError):
    """A model cannot report coefficient estimates and standard errors."""

    def __init__(self, model: object, reason: str = "") -> None:
        self.model_type = type(model).__name__
        self.reason = reason
        msg = f"Cannot extract coefficients from object of type '{self.model_type}'"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class NameCoverageError(CoefplotError, ValueError):
    """Explicit model names do not cover every model identifier."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        joined = ", ".join(self.missing)
        super().__init__(f"`names` does not provide a label for model(s): {joined}")


class InvalidAxisConfig(CoefplotError, ValueError):
    """The requested axis mode cannot be honoured (e.g. by='Model' with != 1 variable)."""
