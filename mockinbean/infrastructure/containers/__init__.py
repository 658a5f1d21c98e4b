"""Container adapters exposing live instances to the engine."""

from .instance_registry import InstanceRegistry

__all__ = [
    "InstanceRegistry",
]
