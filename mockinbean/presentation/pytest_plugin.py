"""pytest integration for the substitution engine.

Registered through the ``pytest11`` entry point. For every test class that
declares substitutions, the engine is activated once before its first test
and restored once after its last test, whatever the outcome of the tests.

Projects expose their live object graph by overriding the
``mockinbean_container`` fixture (session or class scope) in conftest.py:

    @pytest.fixture(scope="session")
    def mockinbean_container(app):
        return InstanceRegistry.from_attributes(app.container)
"""

from __future__ import annotations

import logging

import pytest

from ..application.services import DeclarationScanner, SubstitutionEngine
from ..config_loader import Settings, load_settings
from ..const import (
    CONFIG_FILENAME,
    CONFIG_INI_OPTION,
    CONTAINER_FIXTURE,
    DOUBLE_FACTORY_FIXTURE,
    LOGGER_NAME,
)
from ..domain.exceptions import ConfigurationError
from ..domain.interfaces import IContainer, IDoubleFactory
from ..infrastructure.doubles import MockDoubleFactory

_LOGGER = logging.getLogger(__name__)

_SCANNER = DeclarationScanner()


def pytest_addoption(parser):
    """Register ini options."""
    parser.addini(
        CONFIG_INI_OPTION,
        help=f"Path of the mockinbean settings file (default: {CONFIG_FILENAME})",
        default="",
    )


@pytest.fixture(scope="session")
def mockinbean_settings(pytestconfig) -> Settings:
    """Harness settings loaded once per session."""
    configured = pytestconfig.getini(CONFIG_INI_OPTION)
    if configured:
        settings = load_settings(pytestconfig.rootpath / configured, required=True)
    else:
        settings = load_settings(pytestconfig.rootpath / CONFIG_FILENAME)

    logging.getLogger(LOGGER_NAME).setLevel(settings.log_level)
    return settings


@pytest.fixture(scope="session")
def mockinbean_double_factory(mockinbean_settings) -> IDoubleFactory:
    """Double factory used by every engine in the session."""
    return MockDoubleFactory(stub_spec=mockinbean_settings.stub_spec)


@pytest.fixture(scope="session")
def mockinbean_container() -> IContainer:
    """Container of live targets; projects must override this fixture."""
    raise ConfigurationError(
        f"Test class declares substitutions but no container is available: "
        f"override the '{CONTAINER_FIXTURE}' fixture in conftest.py"
    )


@pytest.fixture(scope="class", autouse=True)
def mockinbean_engine(request):
    """Activate declared substitutions around a test class.

    Yields the engine, or None for classes (and module-level tests)
    without declarations. Such tests never touch the container fixture.
    """
    test_class = request.cls
    if test_class is None or not _SCANNER.has_declarations(test_class):
        yield None
        return

    container = request.getfixturevalue(CONTAINER_FIXTURE)
    double_factory = request.getfixturevalue(DOUBLE_FACTORY_FIXTURE)
    engine = SubstitutionEngine(container, double_factory, scanner=_SCANNER)

    _LOGGER.debug("Activating substitutions for %s", test_class.__qualname__)
    try:
        engine.activate(test_class)
        yield engine
    finally:
        engine.restore()


@pytest.fixture(autouse=True)
def _mockinbean_reset_doubles(mockinbean_engine, mockinbean_settings):
    """Reset every double after each test, when enabled."""
    yield
    if mockinbean_engine is not None and mockinbean_settings.reset_after_each_test:
        mockinbean_engine.reset_doubles()
