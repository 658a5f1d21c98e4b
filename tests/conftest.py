"""Pytest configuration and fixtures for mockinbean tests."""

from __future__ import annotations

import sys
from pathlib import Path

# Add parent directory to Python path so we can import mockinbean and tests
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from mockinbean import InstanceRegistry
from tests.doubles import FakeContainer, FakeDoubleFactory
from tests.sample_app import build_graph

pytest_plugins = ["pytester"]


@pytest.fixture
def graph():
    """Freshly wired sample object graph."""
    return build_graph()


@pytest.fixture
def registry(graph) -> InstanceRegistry:
    """Registry exposing every live instance of the sample graph."""
    return InstanceRegistry.from_attributes(graph)


@pytest.fixture
def fake_container() -> FakeContainer:
    """Empty fake container that records lookups."""
    return FakeContainer()


@pytest.fixture
def fake_factory() -> FakeDoubleFactory:
    """Fake double factory producing plain stub/wrapper objects."""
    return FakeDoubleFactory()
