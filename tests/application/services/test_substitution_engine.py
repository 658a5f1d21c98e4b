"""Tests for SubstitutionEngine service."""

import logging

import pytest

from mockinbean.application.services import SubstitutionEngine
from mockinbean.domain.exceptions import (
    AmbiguousFieldError,
    ConfigurationError,
    EngineStateError,
    RestorationError,
    TargetNotFoundError,
)
from mockinbean.domain.value_objects import EngineState, InBean, mock_in_bean, spy_in_bean
from mockinbean.infrastructure.containers import InstanceRegistry
from mockinbean.infrastructure.doubles import MockDoubleFactory
from tests.doubles import FakeStub, FakeWrapper
from tests.sample_app import (
    Api,
    BaseWorker,
    FrozenClient,
    Gateway,
    Helper,
    Lockable,
    Reporter,
    Service,
    SlottedClient,
    Standby,
    Worker,
)


@pytest.fixture
def engine(registry, fake_factory):
    """Create engine over the sample graph with the fake factory."""
    return SubstitutionEngine(registry, fake_factory)


@pytest.fixture
def mock_engine(registry):
    """Create engine over the sample graph with unittest.mock doubles."""
    return SubstitutionEngine(registry, MockDoubleFactory())


class TestActivation:
    """Test installing doubles."""

    def test_stub_installed_and_exposed(self, engine, graph):
        """Test the stub replaces the field and is exposed on the test."""

        class TestCase:
            api: Api = mock_in_bean(Service)

        engine.activate(TestCase)

        assert isinstance(graph.service.api, FakeStub)
        assert graph.service.api.double_type is Api
        assert TestCase.api is graph.service.api
        assert engine.double_for("api") is TestCase.api
        assert engine.state is EngineState.ACTIVE

    def test_wrapper_delegates_to_original(self, engine, graph):
        """Test the recording wrapper keeps original behavior."""
        original = graph.helper

        class TestCase:
            helper: Helper = spy_in_bean(Service)

        engine.activate(TestCase)

        wrapper = graph.service.helper
        assert isinstance(wrapper, FakeWrapper)
        assert wrapper.original is original
        assert wrapper.compute(4) == 8
        assert wrapper.calls == [("compute", (4,), {})]
        assert TestCase.helper is wrapper

    def test_activate_test_instance(self, engine, graph):
        """Test doubles are exposed on a test instance."""

        class TestCase:
            api: Api = mock_in_bean(Service)

        test = TestCase()
        engine.activate(test)

        assert test.api is graph.service.api
        assert isinstance(TestCase.__dict__["api"], InBean)

    def test_fan_out_to_several_target_types(self, engine, graph):
        """Test one declaration installs the same stub into each target."""

        class TestCase:
            api: Api = mock_in_bean(Service, Reporter)

        engine.activate(TestCase)

        assert isinstance(graph.service.api, FakeStub)
        assert graph.reporter.api is graph.service.api
        assert TestCase.api is graph.service.api

    def test_every_instance_of_type_substituted(self, fake_factory):
        """Test several live instances of one type all receive the double."""
        registry = InstanceRegistry()
        first = registry.register(Service(Helper(), Api()))
        second = registry.register(Service(Helper(), Api()))
        engine = SubstitutionEngine(registry, fake_factory)

        class TestCase:
            api: Api = mock_in_bean(Service)

        engine.activate(TestCase)

        assert first.api is second.api is TestCase.api

    def test_shared_original_gets_one_wrapper(self, engine, graph):
        """Test a singleton held by two targets is wrapped once."""

        class TestCase:
            helper: Helper = spy_in_bean(Service, Worker)

        engine.activate(TestCase)

        assert graph.service.helper is graph.worker._helper
        assert TestCase.helper is graph.service.helper

    def test_isolation_of_unrelated_target(self, engine, graph):
        """Test a target not named by the declaration is left alone."""
        reporter_api = graph.reporter.api

        class TestCase:
            api: Api = mock_in_bean(Service)

        engine.activate(TestCase)

        assert graph.reporter.api is reporter_api
        assert graph.frozen_client.api is reporter_api

    def test_name_disambiguates_field(self, engine, graph):
        """Test the name selects one of two same-typed fields."""
        primary = graph.gateway.primary

        class TestCase:
            api: Api = mock_in_bean(Gateway, name="fallback")

        engine.activate(TestCase)

        assert graph.gateway.primary is primary
        assert graph.gateway.fallback is TestCase.api

    def test_frozen_and_slotted_targets(self, engine, graph):
        """Test frozen dataclasses and slotted classes can be substituted."""

        class TestCase:
            api: Api = mock_in_bean(FrozenClient, SlottedClient)

        engine.activate(TestCase)

        assert graph.frozen_client.api is TestCase.api
        assert graph.slotted_client.api is TestCase.api

    def test_doubles_mapping_is_read_only(self, engine):
        """Test the exposed mapping cannot be mutated."""

        class TestCase:
            api: Api = mock_in_bean(Service)

        engine.activate(TestCase)

        assert list(engine.doubles) == ["api"]
        with pytest.raises(TypeError):
            engine.doubles["api"] = None

    def test_activate_twice_raises(self, engine):
        """Test activation only runs from IDLE."""

        class TestCase:
            api: Api = mock_in_bean(Service)

        engine.activate(TestCase)

        with pytest.raises(EngineStateError):
            engine.activate(TestCase)


class TestRestoration:
    """Test putting originals back."""

    def test_round_trip(self, engine, graph):
        """Test every field returns to its pre-test value by identity."""
        api, helper = graph.service.api, graph.service.helper
        marker = TestCaseWithBoth.__dict__["api"]

        engine.activate(TestCaseWithBoth)
        engine.restore()

        assert graph.service.api is api
        assert graph.service.helper is helper
        assert TestCaseWithBoth.__dict__["api"] is marker
        assert engine.state is EngineState.IDLE
        assert engine.doubles == {}
        assert engine.undo_records == ()

    def test_restore_test_instance_removes_attribute(self, engine):
        """Test instance-level exposure is removed on restore."""
        test = TestCaseWithBoth()
        engine.activate(test)
        engine.restore()

        assert "api" not in vars(test)
        assert isinstance(test.api, InBean)

    def test_repeated_substitution_restores_first_original(self, mock_engine, graph):
        """Test LIFO replay leaves the very first original in place."""
        api = graph.service.api

        class TestCase:
            api: Api = (mock_in_bean(Service), mock_in_bean(Service, Reporter))

        mock_engine.activate(TestCase)
        assert graph.service.api is TestCase.api
        mock_engine.restore()

        assert graph.service.api is api
        assert graph.reporter.api is api

    def test_repeated_wrapper_restores_first_original(
        self, engine, graph, fake_factory
    ):
        """Test a repeated wrapper declaration keeps the first wrapper."""
        helper = graph.helper

        class TestCase:
            helper: Helper = (spy_in_bean(Worker), spy_in_bean(Worker))

        engine.activate(TestCase)
        assert graph.worker._helper is TestCase.helper
        assert graph.worker._helper.original is helper
        assert len(fake_factory.created) == 1
        assert graph.worker._helper.compute(2) == 4
        engine.restore()

        assert graph.worker._helper is helper

    def test_restore_twice_is_noop(self, engine, graph):
        """Test idempotent teardown."""
        api = graph.service.api
        engine.activate(TestCaseWithBoth)
        engine.restore()
        engine.restore()

        assert graph.service.api is api
        assert engine.state is EngineState.IDLE

    def test_restore_without_activation(self, engine):
        """Test restore on a fresh engine does nothing."""
        engine.restore()
        assert engine.state is EngineState.IDLE

    def test_failed_record_does_not_block_others(self, fake_factory):
        """Test restoration attempts every record and reports failures once."""
        api = Api()
        lockable = Lockable(api)
        service = Service(Helper(), api)
        registry = InstanceRegistry()
        registry.register(lockable)
        registry.register(service)
        engine = SubstitutionEngine(registry, fake_factory)

        class TestCase:
            api: Api = mock_in_bean(Lockable, Service)

        engine.activate(TestCase)
        object.__setattr__(lockable, "locked", True)

        with pytest.raises(RestorationError) as exc_info:
            engine.restore()

        assert [record.target for record, _ in exc_info.value.failures] == [lockable]
        assert service.api is api
        assert isinstance(TestCase.__dict__["api"], InBean)
        assert engine.state is EngineState.IDLE

        engine.restore()

    def test_engine_can_be_reactivated(self, engine, graph):
        """Test a full cycle leaves the engine ready for another run."""
        engine.activate(TestCaseWithBoth)
        engine.restore()
        engine.activate(TestCaseWithBoth)

        assert TestCaseWithBoth.api is graph.service.api
        engine.restore()


class TestActivationRollback:
    """Test failures during activation leave the graph pristine."""

    def test_ambiguous_field_rolls_back(self, engine, graph, caplog):
        """Test earlier substitutions are undone before the error surfaces."""
        helper = graph.service.helper

        class TestCase:
            helper: Helper = spy_in_bean(Service)
            api: Api = mock_in_bean(Gateway)

        with caplog.at_level(logging.WARNING):
            with pytest.raises(AmbiguousFieldError):
                engine.activate(TestCase)

        assert graph.service.helper is helper
        assert isinstance(TestCase.__dict__["helper"], InBean)
        assert engine.state is EngineState.IDLE
        assert "rolled back 2 substitution(s)" in caplog.text
        assert "Activate substitutions failed" in caplog.text

    def test_target_not_found_rolls_back(self, engine, graph):
        """Test a missing target undoes earlier substitutions."""
        api = graph.service.api

        class Unregistered:
            pass

        class TestCase:
            api: Api = (mock_in_bean(Service), mock_in_bean(Unregistered))

        with pytest.raises(TargetNotFoundError):
            engine.activate(TestCase)

        assert graph.service.api is api

    def test_double_creation_failure_rolls_back(self, engine, graph, fake_factory):
        """Test a failing double factory undoes earlier substitutions."""
        helper = graph.service.helper
        fake_factory.fail_stub_for(Api)

        class TestCase:
            helper: Helper = spy_in_bean(Service)
            api: Api = mock_in_bean(Service)

        with pytest.raises(RuntimeError, match="Cannot stub Api"):
            engine.activate(TestCase)

        assert graph.service.helper is helper
        assert graph.service.api is graph.api

    def test_configuration_error_touches_nothing(self, engine, graph):
        """Test malformed declarations fail before any target is touched."""
        helper = graph.service.helper

        class TestCase:
            helper: Helper = spy_in_bean(Service)
            api: Api = mock_in_bean()

        with pytest.raises(ConfigurationError):
            engine.activate(TestCase)

        assert graph.service.helper is helper
        assert engine.undo_records == ()

    def test_wrapping_unset_field_is_configuration_error(self, engine, graph):
        """Test a recording wrapper needs a current value to wrap."""

        class TestCase:
            api: Api = spy_in_bean(Standby)

        with pytest.raises(ConfigurationError, match="no current value"):
            engine.activate(TestCase)

        assert graph.standby.backup is None

    def test_restore_after_failed_activation_is_noop(self, engine):
        """Test the runner may always call restore."""

        class TestCase:
            api: Api = mock_in_bean(Gateway)

        with pytest.raises(AmbiguousFieldError):
            engine.activate(TestCase)

        engine.restore()
        assert engine.state is EngineState.IDLE


class TestResetAndContextManager:
    """Test per-test reset and the context manager."""

    def test_reset_doubles(self, engine, fake_factory):
        """Test every distinct double is reset once."""

        class TestCase:
            api: Api = mock_in_bean(Service, Reporter)
            helper: Helper = spy_in_bean(Service)

        engine.activate(TestCase)
        TestCase.helper.compute(1)
        engine.reset_doubles()

        assert fake_factory.resets == [TestCase.api, TestCase.helper]
        assert TestCase.helper.calls == []

    def test_reset_when_idle_does_nothing(self, engine, fake_factory):
        """Test reset outside ACTIVE."""
        engine.reset_doubles()
        assert fake_factory.resets == []

    def test_substitutions_context(self, engine, graph):
        """Test the context manager activates and restores."""
        api = graph.service.api

        with engine.substitutions(TestCaseWithBoth) as active:
            assert active is engine
            assert graph.service.api is TestCaseWithBoth.api

        assert graph.service.api is api
        assert engine.state is EngineState.IDLE

    def test_substitutions_context_restores_on_error(self, engine, graph):
        """Test the context manager restores when the block raises."""
        api = graph.service.api

        with pytest.raises(ValueError):
            with engine.substitutions(TestCaseWithBoth):
                raise ValueError("test failed")

        assert graph.service.api is api


class TestCaseWithBoth:
    """Module-level declaring class shared by several tests."""

    __test__ = False

    api: Api = mock_in_bean(Service)
    helper: Helper = spy_in_bean(Service)


class TestNamedTargets:
    """Test declarations naming a registered instance."""

    def test_unregistered_name_leaves_instances_untouched(self, fake_factory):
        """Test a misspelled name fails instead of stubbing every instance."""
        first = Reporter(Api())
        second = Reporter(Api())
        registry = InstanceRegistry()
        registry.register(first, name="a")
        registry.register(second, name="b")
        engine = SubstitutionEngine(registry, fake_factory)

        class TestCase:
            api: Api = mock_in_bean(Reporter, name="typo")

        with pytest.raises(TargetNotFoundError):
            engine.activate(TestCase)

        assert not isinstance(first.api, FakeStub)
        assert not isinstance(second.api, FakeStub)
        assert engine.state is EngineState.IDLE

    def test_registered_name_selects_one_instance(self, fake_factory):
        """Test a registration name picks that instance only."""
        first = Reporter(Api())
        second = Reporter(Api())
        registry = InstanceRegistry()
        registry.register(first, name="a")
        registry.register(second, name="b")
        engine = SubstitutionEngine(registry, fake_factory)

        class TestCase:
            api: Api = mock_in_bean(Reporter, name="b")

        with engine.substitutions(TestCase):
            assert isinstance(second.api, FakeStub)
            assert not isinstance(first.api, FakeStub)


class TestSharedWrappers:
    """Test wrapper reuse within one test field."""

    def test_same_instance_through_two_target_types(self, engine, graph, fake_factory):
        """Test one instance reached twice gets a single wrapper, not a nested one."""
        helper = graph.helper

        class TestCase:
            helper: Helper = spy_in_bean(Worker, BaseWorker)

        with engine.substitutions(TestCase):
            assert graph.worker._helper is TestCase.helper
            assert graph.worker._helper.original is helper
            assert fake_factory.created == [TestCase.helper]

        assert graph.worker._helper is helper


class TestWrapperInsideTarget:
    """Test recording wrappers as seen by the target."""

    def test_wrapper_behaves_like_original_inside_target(self, mock_engine, graph):
        """Test the target sees the original's data and protocols through the wrapper."""
        graph.helper.factor = 3

        class TestCase:
            helper: Helper = spy_in_bean(Service)

        with mock_engine.substitutions(TestCase):
            assert graph.service.helper is TestCase.helper
            assert graph.service.size() == 2
            assert graph.service.helper_factor() == 3
            assert graph.service.run(2) == "real:6"
            TestCase.helper.__len__.assert_called_once_with()
            TestCase.helper.compute.assert_called_once_with(2)

        assert graph.service.helper is graph.helper
