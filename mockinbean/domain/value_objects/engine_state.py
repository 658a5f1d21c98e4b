"""EngineState value object."""

from enum import Enum, auto


class EngineState(Enum):
    """Lifecycle states of the substitution engine."""

    IDLE = auto()
    ACTIVATING = auto()
    ACTIVE = auto()
    RESTORING = auto()
