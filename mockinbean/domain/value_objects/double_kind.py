"""DoubleKind value object."""

from enum import Enum


class DoubleKind(Enum):
    """Kind of test double installed in place of a field.

    STUB: fresh double of the declared type with no behavior.
    RECORDING_WRAPPER: wraps the current value of the replaced field, so the
        original behavior is preserved while calls become observable.
    """

    STUB = "stub"
    RECORDING_WRAPPER = "recording_wrapper"

    def __str__(self) -> str:
        return self.value
