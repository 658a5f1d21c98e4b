"""Value objects for the mockinbean domain layer."""

from .double_kind import DoubleKind
from .engine_state import EngineState
from .in_bean import InBean, mock_in_bean, spy_in_bean

__all__ = [
    "DoubleKind",
    "EngineState",
    "InBean",
    "mock_in_bean",
    "spy_in_bean",
]
