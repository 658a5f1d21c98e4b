"""Test doubles for unit testing.

Test doubles are fake implementations of the engine's collaborator
interfaces. They're faster and more transparent than mocking, and they
implement the actual interface contracts.

Types of test doubles:
- FakeContainer: In-memory container that records every lookup
- FakeDoubleFactory: Produces plain FakeStub/FakeWrapper objects and can
  be told to fail

Example:
    >>> from tests.doubles import FakeContainer
    >>> container = FakeContainer()
    >>> container.add(service, name="service")
    >>> container.find_by_type(Service)
    [service]
"""

from .fake_container import FakeContainer
from .fake_double_factory import FakeDoubleFactory, FakeStub, FakeWrapper

__all__ = [
    "FakeContainer",
    "FakeDoubleFactory",
    "FakeStub",
    "FakeWrapper",
]
