"""Engine state machine for explicit lifecycle management."""

import logging
from enum import Enum, auto

from ...domain.value_objects.engine_state import EngineState

_LOGGER = logging.getLogger(__name__)


class EngineEvent(Enum):
    """Engine events that trigger state transitions."""

    ACTIVATE = auto()
    ACTIVATION_SUCCEEDED = auto()
    ACTIVATION_FAILED = auto()
    RESTORE = auto()
    RESTORE_COMPLETE = auto()


# Valid transitions: (current_state, event) -> new_state
_TRANSITIONS = {
    (EngineState.IDLE, EngineEvent.ACTIVATE): EngineState.ACTIVATING,
    (EngineState.ACTIVATING, EngineEvent.ACTIVATION_SUCCEEDED): EngineState.ACTIVE,
    (EngineState.ACTIVATING, EngineEvent.ACTIVATION_FAILED): EngineState.RESTORING,
    (EngineState.ACTIVE, EngineEvent.RESTORE): EngineState.RESTORING,
    (EngineState.RESTORING, EngineEvent.RESTORE_COMPLETE): EngineState.IDLE,
}


class EngineStateMachine:
    """State machine for the substitution engine lifecycle.

    Valid transitions:
        IDLE -> ACTIVATING (on ACTIVATE)
        ACTIVATING -> ACTIVE (on ACTIVATION_SUCCEEDED)
        ACTIVATING -> RESTORING (on ACTIVATION_FAILED, rollback)
        ACTIVE -> RESTORING (on RESTORE)
        RESTORING -> IDLE (on RESTORE_COMPLETE)

    Example:
        >>> sm = EngineStateMachine()
        >>> sm.transition(EngineEvent.ACTIVATE)
        True
        >>> sm.transition(EngineEvent.ACTIVATION_SUCCEEDED)
        True
        >>> sm.is_active
        True
    """

    def __init__(self):
        """Initialize state machine in IDLE state."""
        self._state = EngineState.IDLE

    @property
    def state(self) -> EngineState:
        """Get current state."""
        return self._state

    @property
    def is_idle(self) -> bool:
        """Check if no substitution is installed."""
        return self._state == EngineState.IDLE

    @property
    def is_active(self) -> bool:
        """Check if doubles are installed."""
        return self._state == EngineState.ACTIVE

    def transition(self, event: EngineEvent) -> bool:
        """Attempt state transition.

        Args:
            event: Event triggering transition

        Returns:
            True if the transition was valid and executed, False otherwise
        """
        new_state = _TRANSITIONS.get((self._state, event))
        if new_state is None:
            _LOGGER.debug("Rejected %s in state %s", event.name, self._state.name)
            return False

        _LOGGER.debug(
            "Engine state: %s -> %s (event: %s)",
            self._state.name,
            new_state.name,
            event.name,
        )
        self._state = new_state
        return True

    def __str__(self) -> str:
        """String representation."""
        return f"EngineStateMachine(state={self._state.name})"
