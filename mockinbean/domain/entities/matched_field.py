"""MatchedField entity.

The only place in the code base that reads or writes a field on an
arbitrary object. Everything else goes through get/set/delete.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError, dataclass
from typing import Any


@dataclass(frozen=True)
class MatchedField:
    """A field located inside a target's class (or one of its ancestors).

    Attributes:
        owner: Class that declares the field
        name: Attribute name
        annotation: Resolved type annotation, or None for unannotated fields
    """

    owner: Any
    name: str
    annotation: Any = None

    @property
    def qualified_name(self) -> str:
        """Owner-qualified field name, e.g. 'Service.api'."""
        return f"{getattr(self.owner, '__qualname__', self.owner)}.{self.name}"

    def get(self, instance: Any) -> Any:
        """Read the field's current value from instance."""
        return getattr(instance, self.name)

    def set(self, instance: Any, value: Any) -> None:
        """Write value into the field of instance.

        Frozen dataclasses reject setattr, so they are written with
        object.__setattr__.
        """
        try:
            setattr(instance, self.name, value)
        except FrozenInstanceError:
            object.__setattr__(instance, self.name, value)

    def delete(self, instance: Any) -> None:
        """Remove the field from instance."""
        try:
            delattr(instance, self.name)
        except FrozenInstanceError:
            object.__delattr__(instance, self.name)

    def __str__(self) -> str:
        """String representation."""
        return self.qualified_name
