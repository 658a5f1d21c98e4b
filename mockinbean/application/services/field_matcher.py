"""Service for locating the field of a target that a double replaces.

Candidates come from three places, in this order:
1. Annotated attributes of the target's class, then of each ancestor
2. __slots__ entries
3. Unannotated instance attributes

An annotation decides compatibility when it names a class. Any, object,
unresolvable forward references and the like fall back to checking the
field's current value with isinstance.
"""

from __future__ import annotations

import inspect
import logging
import types
import typing
from typing import Any, ClassVar, Dict, List, Optional, Union

from ...domain.entities import MatchedField
from ...domain.exceptions import AmbiguousFieldError, FieldNotFoundError

_LOGGER = logging.getLogger(__name__)

_UNSET = object()


class FieldMatcher:
    """Service for matching a declared field type to a target field.

    Resolution order: unique by type, then by name, then fail. Never guesses.

    Example:
        >>> class Service:
        ...     def __init__(self, api: Api, helper: Helper):
        ...         self.api = api
        ...         self.helper = helper
        >>> FieldMatcher().match(service, Api).name
        'api'
    """

    def match(
        self, target: Any, field_type: Any, name: Optional[str] = None
    ) -> MatchedField:
        """Find the unique field of target compatible with field_type.

        Args:
            target: Live target instance
            field_type: Declared type of the double
            name: Optional field name used as tiebreaker

        Returns:
            The matched field

        Raises:
            FieldNotFoundError: If no field (or no field with name) matches
            AmbiguousFieldError: If more than one field remains
        """
        target_type = type(target)
        candidates = self.candidates(target, field_type)

        if not candidates:
            raise FieldNotFoundError(target_type, field_type, name)
        if len(candidates) == 1:
            return candidates[0]
        if name is None:
            raise AmbiguousFieldError(
                target_type, field_type, [c.qualified_name for c in candidates]
            )

        named = [c for c in candidates if _name_matches(c.name, name)]
        if not named:
            raise FieldNotFoundError(target_type, field_type, name)
        if len(named) > 1:
            raise AmbiguousFieldError(
                target_type, field_type, [c.qualified_name for c in named], name
            )

        _LOGGER.debug(
            "Name '%s' selected %s among %d candidates",
            name,
            named[0].qualified_name,
            len(candidates),
        )
        return named[0]

    def candidates(self, target: Any, field_type: Any) -> List[MatchedField]:
        """List every field of target whose type accepts field_type."""
        seen = set()
        found: List[MatchedField] = []

        for klass in type(target).__mro__[:-1]:
            for attr, annotation in _own_hints(klass).items():
                if attr in seen or typing.get_origin(annotation) is ClassVar:
                    continue
                seen.add(attr)
                verdict = _annotation_accepts(annotation, field_type)
                if verdict is None:
                    verdict = _value_accepts(target, attr, field_type)
                if verdict:
                    found.append(MatchedField(klass, attr, annotation))

            for attr in _own_slots(klass):
                if attr in seen:
                    continue
                seen.add(attr)
                if _value_accepts(target, attr, field_type):
                    found.append(MatchedField(klass, attr))

        for attr in getattr(target, "__dict__", {}):
            if attr in seen:
                continue
            seen.add(attr)
            if _value_accepts(target, attr, field_type):
                found.append(MatchedField(type(target), attr))

        return found


def _own_hints(klass: type) -> Dict[str, Any]:
    """Annotations declared by klass itself, resolved where possible."""
    raw = inspect.get_annotations(klass)
    if not raw:
        return {}
    try:
        resolved = typing.get_type_hints(klass)
    except (NameError, TypeError, AttributeError) as err:
        _LOGGER.debug(
            "Unresolved annotations on %s, using field values: %s",
            klass.__qualname__,
            err,
        )
        resolved = {}
    return {attr: resolved.get(attr, value) for attr, value in raw.items()}


def _own_slots(klass: type) -> List[str]:
    slots = vars(klass).get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    return [slot for slot in slots if slot not in ("__dict__", "__weakref__")]


def _annotation_accepts(annotation: Any, field_type: Any) -> Optional[bool]:
    """True/False when the annotation decides, None when it cannot."""
    if annotation is Any or annotation is object:
        return None

    origin = typing.get_origin(annotation)
    if origin is typing.Annotated:
        return _annotation_accepts(typing.get_args(annotation)[0], field_type)
    if origin in (Union, types.UnionType):
        verdicts = [
            _annotation_accepts(arg, field_type)
            for arg in typing.get_args(annotation)
            if arg is not type(None)
        ]
        if any(verdicts):
            return True
        if None in verdicts:
            return None
        return False
    if origin is not None:
        annotation = origin

    if not isinstance(annotation, type):
        return None
    try:
        return issubclass(field_type, annotation)
    except TypeError:
        # Non-runtime protocols and similar
        return None


def _value_accepts(target: Any, attr: str, field_type: Any) -> bool:
    try:
        value = getattr(target, attr, _UNSET)
    except Exception as err:  # property raising on access
        _LOGGER.debug("Skipping %s.%s: %s", type(target).__qualname__, attr, err)
        return False
    if value is _UNSET or value is None:
        return False
    try:
        return isinstance(value, field_type)
    except TypeError:
        return False


def _name_matches(field_name: str, name: str) -> bool:
    return field_name == name or field_name.lstrip("_") == name.lstrip("_")
