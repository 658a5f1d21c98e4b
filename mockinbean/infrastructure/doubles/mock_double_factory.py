"""Double factory backed by unittest.mock."""

from __future__ import annotations

import logging
from typing import Any
from unittest.mock import MagicMock, NonCallableMock, create_autospec

from ...const import (
    DEFAULT_STUB_SPEC,
    STUB_SPEC_AUTOSPEC,
    STUB_SPEC_MODES,
    STUB_SPEC_SPEC,
)
from ...domain.interfaces import IDoubleFactory
from .recording_wrapper import RecordingWrapper

_LOGGER = logging.getLogger(__name__)


class MockDoubleFactory(IDoubleFactory):
    """Creates stubs and recording wrappers with unittest.mock.

    Stub spec modes:
        autospec: create_autospec(type, instance=True), signatures enforced
        spec: MagicMock(spec=type), attribute names enforced
        none: bare MagicMock(), anything goes

    Recording wrappers are RecordingWrapper mocks specced on the original:
    every call is forwarded to the original (awaited for async methods) and
    recorded on the wrapper, and data attributes and protocol methods such
    as len() read through to the original.

    Example:
        >>> factory = MockDoubleFactory()
        >>> api = factory.create_stub(Api)
        >>> api.fetch.return_value = {"ok": True}
        >>> spy = factory.create_recording_wrapper(Helper())
        >>> spy.compute(2)
        4
        >>> spy.compute.assert_called_once_with(2)
    """

    def __init__(self, stub_spec: str = DEFAULT_STUB_SPEC):
        """Initialize factory.

        Args:
            stub_spec: How stubs are specced (autospec, spec or none)

        Raises:
            ValueError: If stub_spec is not a known mode
        """
        if stub_spec not in STUB_SPEC_MODES:
            raise ValueError(
                f"Unknown stub_spec '{stub_spec}', expected one of {STUB_SPEC_MODES}"
            )
        self._stub_spec = stub_spec

    @property
    def stub_spec(self) -> str:
        """Get the stub spec mode."""
        return self._stub_spec

    def create_stub(self, double_type: type) -> Any:
        """Create a behavior-less mock of double_type."""
        if self._stub_spec == STUB_SPEC_AUTOSPEC:
            stub = create_autospec(double_type, instance=True)
        elif self._stub_spec == STUB_SPEC_SPEC:
            stub = MagicMock(spec=double_type)
        else:
            stub = MagicMock()

        _LOGGER.debug(
            "Created %s stub for %s", self._stub_spec, double_type.__qualname__
        )
        return stub

    def create_recording_wrapper(self, original: Any) -> Any:
        """Wrap original in a recording mock that delegates every call."""
        wrapper = RecordingWrapper.around(original)
        _LOGGER.debug("Created recording wrapper for %r", original)
        return wrapper

    def reset(self, double: Any) -> None:
        """Reset recorded calls, return values and side effects of a mock."""
        if isinstance(double, NonCallableMock):
            double.reset_mock(return_value=True, side_effect=True)
