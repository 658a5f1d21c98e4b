"""Service for collecting substitution declarations from a test object."""

from __future__ import annotations

import inspect
import logging
import types
import typing
from typing import Any, Dict, List, Optional, Tuple, Union

import voluptuous as vol

from ...domain.entities import SubstitutionDeclaration
from ...domain.exceptions import ConfigurationError
from ...domain.value_objects import DoubleKind, InBean

_LOGGER = logging.getLogger(__name__)


def _is_class(value: Any) -> Any:
    """Voluptuous validator accepting only classes."""
    if not isinstance(value, type):
        raise vol.Invalid(f"expected a class, got {value!r}")
    return value


DECLARATION_SCHEMA = vol.Schema(
    {
        vol.Required("test_field"): vol.All(str, vol.Length(min=1)),
        vol.Required("double_kind"): vol.Coerce(DoubleKind),
        vol.Required("target_types"): vol.All(
            [_is_class],
            vol.Length(min=1, msg="at least one target type is required"),
        ),
        vol.Required("field_type"): vol.All(
            vol.NotIn([None], msg="field type unknown, annotate the field"),
            _is_class,
        ),
        vol.Optional("target_instance_name", default=None): vol.Any(
            None, vol.All(str, vol.Length(min=1))
        ),
    }
)


class DeclarationScanner:
    """Service for collecting substitution declarations.

    Looks at the class-level attributes of a test object (or test class)
    and turns every InBean marker into a validated SubstitutionDeclaration.
    Declarations are returned base-class first along the MRO, then in
    class-body order, so activation order is reproducible.

    Example:
        >>> class TestService:
        ...     api: Api = mock_in_bean(Service)
        ...     helper: Helper = spy_in_bean(Service)
        >>> [d.test_field for d in DeclarationScanner().scan(TestService)]
        ['api', 'helper']
    """

    def scan(self, test_object: Any) -> List[SubstitutionDeclaration]:
        """Collect declarations from test_object.

        Args:
            test_object: Test class or test instance

        Returns:
            Ordered declarations (empty if the object declares none)

        Raises:
            ConfigurationError: If a marker is malformed or markers on one
                field conflict
        """
        test_class = _class_of(test_object)
        hints = _type_hints(test_class)
        declarations: List[SubstitutionDeclaration] = []

        for attr, markers in self._markers(test_class).items():
            field_declarations = [
                self._build(test_class, attr, marker, hints.get(attr))
                for marker in markers
            ]
            self._check_conflicts(test_class, attr, field_declarations)
            declarations.extend(field_declarations)

        _LOGGER.debug(
            "Scanned %s: %d declaration(s)",
            test_class.__qualname__,
            len(declarations),
        )
        return declarations

    def has_declarations(self, test_object: Any) -> bool:
        """Check if test_object carries any marker, without validating."""
        return bool(self._markers(_class_of(test_object)))

    def _markers(self, test_class: type) -> Dict[str, Tuple[InBean, ...]]:
        """Map attribute name -> markers, in declaration order."""
        found: Dict[str, Tuple[InBean, ...]] = {}
        names: List[str] = []
        for klass in reversed(test_class.__mro__[:-1]):
            for attr in vars(klass):
                if attr not in names:
                    names.append(attr)

        for attr in names:
            value = _lookup(test_class, attr)
            markers = _as_markers(test_class, attr, value)
            if markers:
                found[attr] = markers
        return found

    def _build(
        self,
        test_class: type,
        attr: str,
        marker: InBean,
        annotation: Optional[Any],
    ) -> SubstitutionDeclaration:
        """Validate one marker and turn it into a declaration."""
        field_type = marker.field_type
        if field_type is None:
            field_type = _unwrap_optional(annotation)

        raw = {
            "test_field": attr,
            "double_kind": marker.kind,
            "target_types": list(marker.target_types),
            "field_type": field_type,
            "target_instance_name": marker.name,
        }
        try:
            data = DECLARATION_SCHEMA(raw)
        except vol.Invalid as err:
            raise ConfigurationError(
                f"{test_class.__qualname__}.{attr}: invalid {marker!r}: {err}"
            ) from err

        return SubstitutionDeclaration(
            test_field=data["test_field"],
            double_kind=data["double_kind"],
            target_types=tuple(data["target_types"]),
            field_type=data["field_type"],
            target_instance_name=data["target_instance_name"],
        )

    @staticmethod
    def _check_conflicts(
        test_class: type, attr: str, declarations: List[SubstitutionDeclaration]
    ) -> None:
        """Reject markers on one field that disagree on kind or type."""
        kinds = {declaration.double_kind for declaration in declarations}
        if len(kinds) > 1:
            raise ConfigurationError(
                f"{test_class.__qualname__}.{attr}: cannot be both a stub "
                "and a recording wrapper"
            )
        field_types = {declaration.field_type for declaration in declarations}
        if len(field_types) > 1:
            names = ", ".join(sorted(t.__qualname__ for t in field_types))
            raise ConfigurationError(
                f"{test_class.__qualname__}.{attr}: conflicting field types ({names})"
            )


def _class_of(test_object: Any) -> type:
    return test_object if isinstance(test_object, type) else type(test_object)


def _lookup(test_class: type, attr: str) -> Any:
    """Find attr along the MRO without triggering descriptors."""
    for klass in test_class.__mro__:
        if attr in vars(klass):
            return vars(klass)[attr]
    return None


def _as_markers(test_class: type, attr: str, value: Any) -> Tuple[InBean, ...]:
    """Normalize a class attribute to a tuple of markers."""
    if isinstance(value, InBean):
        return (value,)
    if isinstance(value, (tuple, list)) and value:
        flags = [isinstance(item, InBean) for item in value]
        if all(flags):
            return tuple(value)
        if any(flags):
            raise ConfigurationError(
                f"{test_class.__qualname__}.{attr}: mixes declarations with "
                "other values"
            )
    return ()


def _type_hints(test_class: type) -> Dict[str, Any]:
    """Resolve class annotations, falling back to the raw ones."""
    try:
        return typing.get_type_hints(test_class)
    except (NameError, TypeError, AttributeError) as err:
        _LOGGER.debug(
            "Could not resolve annotations of %s: %s", test_class.__qualname__, err
        )
    raw: Dict[str, Any] = {}
    for klass in reversed(test_class.__mro__):
        raw.update(inspect.get_annotations(klass))
    return raw


def _unwrap_optional(annotation: Any) -> Any:
    """Turn Optional[X] into X; leave anything else unchanged."""
    if typing.get_origin(annotation) in (Union, types.UnionType):
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation
