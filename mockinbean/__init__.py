"""Surgical test-double injection into live dependency containers.

Declare on a test class which dependency of which live object should be
replaced, and the harness swaps that one field for the duration of the
class, then puts the original back:

    class TestCheckout:
        gateway: PaymentGateway = mock_in_bean(CheckoutService)
        audit: AuditLog = spy_in_bean(CheckoutService, OrderService)

Only the named targets are touched; the rest of the object graph, and the
container itself, stay as wired.
"""

from .application.services import (
    DeclarationScanner,
    FieldMatcher,
    SubstitutionEngine,
    TargetResolver,
)
from .config_loader import Settings, load_settings
from .domain.entities import (
    MatchedField,
    ResolvedTarget,
    SubstitutionDeclaration,
    UndoRecord,
)
from .domain.exceptions import (
    AmbiguousFieldError,
    ConfigurationError,
    EngineStateError,
    FieldNotFoundError,
    RestorationError,
    SubstitutionError,
    TargetNotFoundError,
)
from .domain.interfaces import IContainer, IDoubleFactory
from .domain.value_objects import (
    DoubleKind,
    EngineState,
    InBean,
    mock_in_bean,
    spy_in_bean,
)
from .infrastructure.containers import InstanceRegistry
from .infrastructure.doubles import MockDoubleFactory

__version__ = "1.0.0"

__all__ = [
    "AmbiguousFieldError",
    "ConfigurationError",
    "DeclarationScanner",
    "DoubleKind",
    "EngineState",
    "EngineStateError",
    "FieldMatcher",
    "FieldNotFoundError",
    "IContainer",
    "IDoubleFactory",
    "InBean",
    "InstanceRegistry",
    "MatchedField",
    "MockDoubleFactory",
    "ResolvedTarget",
    "RestorationError",
    "Settings",
    "SubstitutionDeclaration",
    "SubstitutionEngine",
    "SubstitutionError",
    "TargetNotFoundError",
    "TargetResolver",
    "UndoRecord",
    "load_settings",
    "mock_in_bean",
    "spy_in_bean",
]
