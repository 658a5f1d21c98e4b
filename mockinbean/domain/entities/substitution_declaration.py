"""SubstitutionDeclaration entity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from ..exceptions import ConfigurationError
from ..value_objects.double_kind import DoubleKind


@dataclass(frozen=True)
class SubstitutionDeclaration:
    """One (test field, target types) substitution declared by a test.

    Attributes:
        test_field: Attribute of the test object that will hold the double
        double_kind: STUB or RECORDING_WRAPPER, fixed for the declaration's life
        target_types: Non-empty ordered tuple of classes to inject into
        field_type: Declared type of the double (matched against target fields)
        target_instance_name: Optional container/field name for disambiguation

    Example:
        >>> SubstitutionDeclaration("api", DoubleKind.STUB, (Service,), Api)
    """

    test_field: str
    double_kind: DoubleKind
    target_types: Tuple[Any, ...]
    field_type: Any
    target_instance_name: Optional[str] = None

    def __post_init__(self):
        """Enforce the at-least-one-target invariant."""
        if not self.target_types:
            raise ConfigurationError(
                f"Declaration for '{self.test_field}' names no target types"
            )

    @property
    def is_stub(self) -> bool:
        """Check if the declaration installs a stub."""
        return self.double_kind is DoubleKind.STUB
