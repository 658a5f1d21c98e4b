"""State machines for managing engine lifecycle transitions."""

from .engine_state_machine import (
    EngineStateMachine,
    EngineEvent,
)

__all__ = [
    "EngineStateMachine",
    "EngineEvent",
]
