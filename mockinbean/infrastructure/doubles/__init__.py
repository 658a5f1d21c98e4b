"""Double factories backed by real double libraries."""

from .mock_double_factory import MockDoubleFactory
from .recording_wrapper import RecordingWrapper

__all__ = [
    "MockDoubleFactory",
    "RecordingWrapper",
]
