"""Collaborator interfaces for the mockinbean harness.

The substitution engine depends only on these contracts. Using them enables:
- Any dependency-injection container to supply live targets
- Any double library to manufacture stubs and recording wrappers
- Lightweight fakes in the engine's own tests
"""

from .i_container import IContainer
from .i_double_factory import IDoubleFactory

__all__ = [
    "IContainer",
    "IDoubleFactory",
]
