"""ResolvedTarget entity."""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True, eq=False)
class ResolvedTarget:
    """Live target instance obtained from the container.

    Attributes:
        instance: The live object whose field will be substituted
        target_type: Declared target type that produced this match
        name: Registration name it was found under, if any
    """

    instance: Any
    target_type: Any
    name: Optional[str] = None

    def __str__(self) -> str:
        """String representation."""
        label = f" '{self.name}'" if self.name else ""
        return f"{type(self.instance).__qualname__}{label}"
