"""Registry of live instances.

This module implements IContainer over an explicit list of live objects.
It is the adapter a test suite uses to expose its application's wired
object graph (for example a dataclass DI container) to the engine.

Pattern: Service Locator
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ...domain.interfaces import IContainer

_LOGGER = logging.getLogger(__name__)


class InstanceRegistry(IContainer):
    """Holds live instances, optionally under a name.

    Instances are returned in registration order and never copied. The same
    object registered twice (for example under two names) is reported once
    by find_by_type.

    Example:
        >>> registry = InstanceRegistry()
        >>> registry.register(service, name="service")
        >>> registry.find_by_type(Service)
        [service]
        >>> registry.find_by_type_and_name(Service, "service") is service
        True
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._entries: List[Tuple[Optional[str], Any]] = []
        self._by_name: Dict[str, Any] = {}

    @classmethod
    def from_attributes(cls, wiring: Any) -> InstanceRegistry:
        """Build a registry from the attributes of a wiring object.

        Every non-None public attribute (or dataclass field) is registered
        under its attribute name.

        Args:
            wiring: Object holding the application's live dependencies

        Returns:
            Registry of those dependencies

        Example:
            >>> container = create_container(config)
            >>> registry = InstanceRegistry.from_attributes(container)
        """
        registry = cls()
        if dataclasses.is_dataclass(wiring) and not isinstance(wiring, type):
            names = [f.name for f in dataclasses.fields(wiring)]
        else:
            names = [name for name in vars(wiring) if not name.startswith("_")]

        for name in names:
            value = getattr(wiring, name, None)
            if value is not None:
                registry.register(value, name=name)

        _LOGGER.debug(
            "Registered %d live instances from %s",
            len(registry),
            type(wiring).__qualname__,
        )
        return registry

    def register(self, instance: Any, name: Optional[str] = None) -> Any:
        """Register a live instance.

        Args:
            instance: The object to expose
            name: Optional registration name (must be unique)

        Returns:
            The instance, so registration can be chained inline

        Raises:
            ValueError: If name is already taken by another instance
        """
        if name is not None:
            existing = self._by_name.get(name)
            if existing is not None and existing is not instance:
                raise ValueError(f"Name '{name}' is already registered")
            self._by_name[name] = instance
        self._entries.append((name, instance))
        return instance

    def find_by_type(self, target_type: type) -> List[Any]:
        """Return every registered instance of target_type (identity-unique)."""
        seen = set()
        found = []
        for _, instance in self._entries:
            if id(instance) in seen or not isinstance(instance, target_type):
                continue
            seen.add(id(instance))
            found.append(instance)
        return found

    def find_by_type_and_name(self, target_type: type, name: str) -> Optional[Any]:
        """Return the instance registered under name, if it is a target_type."""
        instance = self._by_name.get(name)
        if instance is None or not isinstance(instance, target_type):
            return None
        return instance

    def names(self) -> List[str]:
        """Get registration names in registration order."""
        return list(self._by_name)

    def __iter__(self) -> Iterator[Any]:
        """Iterate registered instances (identity-unique)."""
        return iter(self.find_by_type(object))

    def __len__(self) -> int:
        """Number of distinct registered instances."""
        return len(self.find_by_type(object))

    def __repr__(self) -> str:
        """Developer representation."""
        return f"InstanceRegistry(instances={len(self)}, names={self.names()!r})"
