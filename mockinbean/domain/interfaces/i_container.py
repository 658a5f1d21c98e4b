"""IContainer interface for dependency container adapters."""

from abc import ABC, abstractmethod
from typing import Any, List, Optional


class IContainer(ABC):
    """Interface for the container that supplies live target instances.

    Implementations must return the *live* singletons held by the
    application's object graph. The engine mutates them in place, so an
    adapter that hands out fresh copies breaks restoration.

    Example:
        >>> container = InstanceRegistry()
        >>> container.register(service, name="service")
        >>> container.find_by_type(Service)
        [service]
    """

    @abstractmethod
    def find_by_type(self, target_type: type) -> List[Any]:
        """Return every live instance assignable to target_type.

        Args:
            target_type: Class to look up

        Returns:
            Matching instances in a stable order (empty list if none)
        """

    @abstractmethod
    def find_by_type_and_name(self, target_type: type, name: str) -> Optional[Any]:
        """Return the instance of target_type registered under name.

        Args:
            target_type: Class to look up
            name: Registration name

        Returns:
            The instance, or None if nothing matches
        """
