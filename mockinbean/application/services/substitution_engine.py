"""Substitution engine.

This module implements the install/restore workflow for test doubles:
- Scans the test object for declarations
- Resolves live targets from the container
- Matches the field to replace inside each target
- Captures the original value, installs the double, exposes it on the test
- Replays the undo list in reverse on teardown

Lifecycle: IDLE -> ACTIVATING -> ACTIVE -> RESTORING -> IDLE
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ...domain.entities import (
    MISSING,
    MatchedField,
    SubstitutionDeclaration,
    UndoRecord,
)
from ...domain.exceptions import (
    ConfigurationError,
    EngineStateError,
    RestorationError,
)
from ...domain.interfaces import IContainer, IDoubleFactory
from ...domain.value_objects import EngineState
from ...infrastructure.decorators import handle_substitution_errors
from ...infrastructure.state_machines import EngineEvent, EngineStateMachine
from .declaration_scanner import DeclarationScanner
from .field_matcher import FieldMatcher
from .target_resolver import TargetResolver

_LOGGER = logging.getLogger(__name__)


class SubstitutionEngine:
    """Installs test doubles into live targets and restores the originals.

    The engine owns the undo list. Records are appended while activating and
    consumed last-in-first-out while restoring, so a field substituted more
    than once ends up with its very first original value.

    Doubles are shared per test field: one stub per field is installed into
    every matched target, and one recording wrapper is created per distinct
    original object. The test object's field receives the first double
    created for it.

    Attributes:
        _double_factory: Collaborator that manufactures doubles
        _scanner: Declaration scanner
        _resolver: Target resolver
        _matcher: Field matcher
        _undo: Undo records in application order
        _doubles: Test field -> double exposed on the test object
        _wrappers: (test field, id(original)) -> recording wrapper

    Example:
        >>> engine = SubstitutionEngine(registry, MockDoubleFactory())
        >>> engine.activate(TestService)
        >>> TestService.api.fetch.return_value = 42
        >>> engine.restore()
    """

    def __init__(
        self,
        container: IContainer,
        double_factory: IDoubleFactory,
        scanner: Optional[DeclarationScanner] = None,
        resolver: Optional[TargetResolver] = None,
        matcher: Optional[FieldMatcher] = None,
    ):
        """Initialize engine.

        Args:
            container: Container supplying live targets
            double_factory: Factory for stubs and recording wrappers
            scanner: Declaration scanner (default: DeclarationScanner())
            resolver: Target resolver (default: TargetResolver(container))
            matcher: Field matcher (default: FieldMatcher())
        """
        self._double_factory = double_factory
        self._scanner = scanner or DeclarationScanner()
        self._resolver = resolver or TargetResolver(container)
        self._matcher = matcher or FieldMatcher()
        self._state_machine = EngineStateMachine()
        self._undo: List[UndoRecord] = []
        self._doubles: Dict[str, Any] = {}
        self._wrappers: Dict[Tuple[str, int], Any] = {}

    @property
    def state(self) -> EngineState:
        """Get current lifecycle state."""
        return self._state_machine.state

    @property
    def doubles(self) -> Mapping[str, Any]:
        """Read-only view of test field -> double."""
        return MappingProxyType(self._doubles)

    @property
    def undo_records(self) -> Tuple[UndoRecord, ...]:
        """Snapshot of pending undo records, in application order."""
        return tuple(self._undo)

    def double_for(self, test_field: str) -> Any:
        """Get the double exposed on test_field.

        Raises:
            KeyError: If no double was installed for test_field
        """
        return self._doubles[test_field]

    @handle_substitution_errors("Activate substitutions")
    def activate(self, test_object: Any) -> None:
        """Install every double declared by test_object.

        On any failure the substitutions applied so far are rolled back
        before the error propagates.

        Args:
            test_object: Test class or test instance carrying declarations

        Raises:
            EngineStateError: If the engine is not IDLE
            SubstitutionError: If scanning, resolution or matching fails
        """
        if not self._state_machine.transition(EngineEvent.ACTIVATE):
            raise EngineStateError(
                f"Cannot activate while {self._state_machine.state.name}"
            )

        try:
            for declaration in self._scanner.scan(test_object):
                self._apply(test_object, declaration)
        except Exception:
            self._rollback()
            raise

        self._state_machine.transition(EngineEvent.ACTIVATION_SUCCEEDED)
        _LOGGER.info(
            "Activated %d double(s), %d undo record(s) for %s",
            len(self._doubles),
            len(self._undo),
            _describe(test_object),
        )

    @handle_substitution_errors("Restore substitutions")
    def restore(self) -> None:
        """Put every original value back, newest substitution first.

        Safe to call repeatedly: in IDLE it does nothing. Every record is
        attempted even if an earlier one fails.

        Raises:
            RestorationError: Once all records were attempted, if any failed
        """
        if self._state_machine.is_idle:
            _LOGGER.debug("Nothing to restore")
            return
        if not self._state_machine.transition(EngineEvent.RESTORE):
            raise EngineStateError(
                f"Cannot restore while {self._state_machine.state.name}"
            )

        attempted = len(self._undo)
        failures = self._replay_undo()
        self._state_machine.transition(EngineEvent.RESTORE_COMPLETE)

        if failures:
            raise RestorationError(failures)
        _LOGGER.info("Restored %d field(s)", attempted)

    def reset_doubles(self) -> None:
        """Forget recorded calls and configured behavior of every double."""
        if not self._state_machine.is_active:
            return
        seen = set()
        for double in list(self._doubles.values()) + list(self._wrappers.values()):
            if id(double) in seen:
                continue
            seen.add(id(double))
            self._double_factory.reset(double)
        _LOGGER.debug("Reset %d double(s)", len(seen))

    @contextmanager
    def substitutions(self, test_object: Any) -> Iterator[SubstitutionEngine]:
        """Context manager installing doubles for the duration of a block.

        Example:
            >>> with engine.substitutions(test_case):
            ...     test_case.api.fetch.return_value = 42
            ...     run_scenario()
        """
        self.activate(test_object)
        try:
            yield self
        finally:
            self.restore()

    def _apply(self, test_object: Any, declaration: SubstitutionDeclaration) -> None:
        """Apply one declaration to every resolved target."""
        name = declaration.target_instance_name
        for target_type in declaration.target_types:
            for target in self._resolver.resolve(target_type, name):
                field = self._matcher.match(
                    target.instance, declaration.field_type, name
                )
                original = _read(field, target.instance)
                self._undo.append(UndoRecord(target.instance, field, original))

                double = self._create_double(declaration, field, original)
                field.set(target.instance, double)
                _LOGGER.debug(
                    "Installed %s for '%s' into %s of %s",
                    declaration.double_kind,
                    declaration.test_field,
                    field.qualified_name,
                    target,
                )

                if declaration.test_field not in self._doubles:
                    self._expose(test_object, declaration.test_field, double)

    def _create_double(
        self,
        declaration: SubstitutionDeclaration,
        field: MatchedField,
        original: Any,
    ) -> Any:
        if declaration.is_stub:
            stub = self._doubles.get(declaration.test_field)
            if stub is None:
                stub = self._double_factory.create_stub(declaration.field_type)
            return stub

        if original is MISSING or original is None:
            raise ConfigurationError(
                f"Cannot wrap {field.qualified_name} for "
                f"'{declaration.test_field}': it has no current value"
            )
        # The field may already hold this test field's wrapper
        for (test_field, _), wrapper in self._wrappers.items():
            if test_field == declaration.test_field and wrapper is original:
                return wrapper

        key = (declaration.test_field, id(original))
        wrapper = self._wrappers.get(key)
        if wrapper is None:
            wrapper = self._double_factory.create_recording_wrapper(original)
            self._wrappers[key] = wrapper
        return wrapper

    def _expose(self, test_object: Any, test_field: str, double: Any) -> None:
        """Assign double to the test object's own field, recording an undo."""
        field = MatchedField(_class_of(test_object), test_field)
        original = getattr(test_object, "__dict__", {}).get(test_field, MISSING)
        self._undo.append(UndoRecord(test_object, field, original))
        field.set(test_object, double)
        self._doubles[test_field] = double

    def _rollback(self) -> None:
        """Undo a partially applied activation; never masks the cause."""
        self._state_machine.transition(EngineEvent.ACTIVATION_FAILED)
        count = len(self._undo)
        failures = self._replay_undo()
        for record, err in failures:
            _LOGGER.error("Rollback could not restore %s: %s", record, err)
        self._state_machine.transition(EngineEvent.RESTORE_COMPLETE)
        _LOGGER.warning(
            "Activation failed, rolled back %d substitution(s)", count - len(failures)
        )

    def _replay_undo(self) -> List[Tuple[UndoRecord, Exception]]:
        """Consume the undo list in reverse, collecting failures."""
        failures: List[Tuple[UndoRecord, Exception]] = []
        while self._undo:
            record = self._undo.pop()
            try:
                record.restore()
            except Exception as err:
                _LOGGER.debug("Failed to restore %s: %s", record, err)
                failures.append((record, err))
            else:
                _LOGGER.debug("Restored %s", record)

        self._doubles.clear()
        self._wrappers.clear()
        return failures

    def __repr__(self) -> str:
        """Developer representation."""
        return (
            f"SubstitutionEngine(state={self.state.name}, "
            f"doubles={sorted(self._doubles)!r}, pending={len(self._undo)})"
        )


def _read(field: MatchedField, instance: Any) -> Any:
    try:
        return field.get(instance)
    except AttributeError:
        return MISSING


def _class_of(test_object: Any) -> type:
    return test_object if isinstance(test_object, type) else type(test_object)


def _describe(test_object: Any) -> str:
    return _class_of(test_object).__qualname__
