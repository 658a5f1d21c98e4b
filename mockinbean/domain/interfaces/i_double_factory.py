"""IDoubleFactory interface for double-creation adapters."""

from abc import ABC, abstractmethod
from typing import Any


class IDoubleFactory(ABC):
    """Interface for the library that manufactures test doubles.

    Example:
        >>> factory = MockDoubleFactory()
        >>> api = factory.create_stub(Api)
        >>> helper = factory.create_recording_wrapper(real_helper)
    """

    @abstractmethod
    def create_stub(self, double_type: type) -> Any:
        """Create a behavior-less double usable where double_type is expected.

        Args:
            double_type: Declared type of the field being replaced

        Returns:
            A fresh stub
        """

    @abstractmethod
    def create_recording_wrapper(self, original: Any) -> Any:
        """Wrap original so calls delegate to it and are recorded.

        Args:
            original: Current value of the field being replaced

        Returns:
            A wrapper whose invocations can be asserted on
        """

    def reset(self, double: Any) -> None:
        """Forget recorded calls and configured behavior of double.

        Default implementation does nothing, for doubles without state.
        """
