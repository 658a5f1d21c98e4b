"""UndoRecord entity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .matched_field import MatchedField


class _Missing:
    """Sentinel for a field that had no value of its own before mutation."""

    def __repr__(self) -> str:
        return "<MISSING>"


MISSING = _Missing()


@dataclass(frozen=True, eq=False)
class UndoRecord:
    """Original value captured immediately before a field was mutated.

    Attributes:
        target: Object whose field was mutated
        field: The mutated field
        original: Value to put back (MISSING means delete the attribute)
    """

    target: Any
    field: MatchedField
    original: Any

    def restore(self) -> None:
        """Write the original value back into the target."""
        if self.original is MISSING:
            self.field.delete(self.target)
        else:
            self.field.set(self.target, self.original)

    def __str__(self) -> str:
        """String representation."""
        return f"{self.field.qualified_name} on {_describe(self.target)}"


def _describe(target: Any) -> str:
    if isinstance(target, type):
        return target.__qualname__
    return f"{type(target).__qualname__}@{id(target):#x}"
