"""Service for resolving declared target types to live instances."""

import logging
from typing import Any, List, Optional

from ...domain.entities import ResolvedTarget
from ...domain.exceptions import TargetNotFoundError
from ...domain.interfaces import IContainer

_LOGGER = logging.getLogger(__name__)


class TargetResolver:
    """Service for resolving target types against the container.

    Several matches are not an error here: a declaration that does not
    name an instance is applied to every live instance of the type.

    Example:
        >>> resolver = TargetResolver(registry)
        >>> [str(t) for t in resolver.resolve(Service)]
        ['Service']
    """

    def __init__(self, container: IContainer):
        """Initialize resolver.

        Args:
            container: Container supplying live instances
        """
        self._container = container

    def resolve(
        self, target_type: Any, name: Optional[str] = None
    ) -> List[ResolvedTarget]:
        """Resolve target_type (optionally by name) to live instances.

        When a name is given and an instance is registered under it, only
        that instance is returned. Otherwise the name is left to the field
        matcher, which requires the type to have exactly one live instance.

        Args:
            target_type: Declared target class
            name: Optional registration name

        Returns:
            Resolved targets, in container order, identity-unique

        Raises:
            TargetNotFoundError: If nothing matches, or if a name matches no
                registration while several instances of the type exist
        """
        if name is not None:
            instance = self._container.find_by_type_and_name(target_type, name)
            if instance is not None:
                return [ResolvedTarget(instance, target_type, name)]
            _LOGGER.debug(
                "No %s registered as '%s', resolving by type only",
                target_type.__qualname__,
                name,
            )

        targets = []
        seen = set()
        for instance in self._container.find_by_type(target_type):
            if id(instance) in seen:
                continue
            seen.add(id(instance))
            targets.append(ResolvedTarget(instance, target_type))

        if not targets:
            raise TargetNotFoundError(target_type, name)

        # An unregistered name only narrows fields, never instances
        if name is not None and len(targets) > 1:
            raise TargetNotFoundError(target_type, name)

        if len(targets) > 1:
            _LOGGER.debug(
                "%d live instances of %s, substituting into all of them",
                len(targets),
                target_type.__qualname__,
            )
        return targets
