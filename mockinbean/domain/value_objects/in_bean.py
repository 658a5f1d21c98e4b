"""InBean declaration marker.

A marker is assigned as a class attribute of a test class and tells the
scanner which targets should receive a double for that attribute:

    class TestService:
        api: Api = mock_in_bean(Service)
        helper: Helper = spy_in_bean(Service)

Several markers may be grouped in a tuple to declare independent
substitutions for the same test field.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .double_kind import DoubleKind


@dataclass(frozen=True)
class InBean:
    """Immutable, unvalidated declaration marker.

    Validation happens in the DeclarationScanner so that a malformed marker
    fails the test class at scan time rather than at import time.

    Attributes:
        kind: Double kind to install
        target_types: Classes whose live instances receive the double
        name: Optional instance/field name used to disambiguate
        field_type: Optional explicit field type (overrides the annotation)
    """

    kind: DoubleKind
    target_types: Tuple[Any, ...]
    name: Optional[str] = None
    field_type: Optional[Any] = None

    def __repr__(self) -> str:
        targets = ", ".join(
            getattr(target, "__qualname__", repr(target))
            for target in self.target_types
        )
        prefix = "mock" if self.kind is DoubleKind.STUB else "spy"
        suffix = f", name={self.name!r}" if self.name is not None else ""
        return f"{prefix}_in_bean({targets}{suffix})"


def mock_in_bean(
    *target_types: Any, name: Optional[str] = None, field_type: Optional[Any] = None
) -> InBean:
    """Declare a stub to install into the given target types.

    Example:
        >>> class TestService:
        ...     api: Api = mock_in_bean(Service)
    """
    return InBean(DoubleKind.STUB, tuple(target_types), name, field_type)


def spy_in_bean(
    *target_types: Any, name: Optional[str] = None, field_type: Optional[Any] = None
) -> InBean:
    """Declare a recording wrapper around the current field value of the targets.

    Example:
        >>> class TestService:
        ...     helper: Helper = spy_in_bean(Service)
    """
    return InBean(DoubleKind.RECORDING_WRAPPER, tuple(target_types), name, field_type)
