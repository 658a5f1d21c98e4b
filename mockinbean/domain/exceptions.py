"""Custom exceptions for the mockinbean harness.

This module defines the error taxonomy raised while declaring, activating
and restoring field substitutions. Every error derives from
SubstitutionError so a caller can catch the whole family at once.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence, Tuple


class SubstitutionError(Exception):
    """Base class for all substitution errors."""


class ConfigurationError(SubstitutionError):
    """Malformed or conflicting declaration.

    Raised at scan time, before any target object is touched. Also raised
    for unreadable or invalid settings files.

    Example:
        >>> raise ConfigurationError("TestService.api: no target types declared")
    """


class TargetNotFoundError(SubstitutionError):
    """No live instance in the container matches a declared type/name."""

    def __init__(self, target_type: type, name: Optional[str] = None):
        self.target_type = target_type
        self.name = name
        if name is None:
            message = f"No live instance of {_type_name(target_type)} in container"
        else:
            message = (
                f"No live instance of {_type_name(target_type)} "
                f"registered under name '{name}'"
            )
        super().__init__(message)


class FieldNotFoundError(SubstitutionError):
    """No field of the target is compatible with the declared field type."""

    def __init__(
        self, target_type: type, field_type: type, name: Optional[str] = None
    ):
        self.target_type = target_type
        self.field_type = field_type
        self.name = name
        message = (
            f"No field of type {_type_name(field_type)} found in "
            f"{_type_name(target_type)}"
        )
        if name is not None:
            message += f" with name '{name}'"
        super().__init__(message)


class AmbiguousFieldError(SubstitutionError):
    """More than one field of the target matches; a name is required.

    Attributes:
        candidates: Qualified names of every matching field
    """

    def __init__(
        self,
        target_type: type,
        field_type: type,
        candidates: Iterable[str],
        name: Optional[str] = None,
    ):
        self.target_type = target_type
        self.field_type = field_type
        self.candidates = list(candidates)
        self.name = name
        message = (
            f"{len(self.candidates)} fields of type {_type_name(field_type)} "
            f"found in {_type_name(target_type)}: {', '.join(self.candidates)}"
        )
        if name is None:
            message += " (add a name to disambiguate)"
        else:
            message += f" (name '{name}' did not narrow them to one)"
        super().__init__(message)


class RestorationError(SubstitutionError):
    """One or more undo records could not be reapplied.

    Raised once, after every record has been attempted.

    Attributes:
        failures: (undo record, exception) pairs, in the order attempted
    """

    def __init__(self, failures: Sequence[Tuple[Any, BaseException]]):
        self.failures = list(failures)
        details = "; ".join(f"{record}: {err}" for record, err in self.failures)
        super().__init__(
            f"Failed to restore {len(self.failures)} field(s): {details}"
        )


class EngineStateError(SubstitutionError):
    """Engine operation requested in a state that does not allow it."""


def _type_name(value: Any) -> str:
    """Return a readable name for a type (or anything else)."""
    return getattr(value, "__qualname__", None) or repr(value)
