"""
Property Wizard - Sessions

Wizard session state machine, the persistence contract it talks to, and
the in-memory reference repository.
"""

from property_wizard.session.controller import (
    WizardController,
    WizardState,
    NavigationResult,
    SubmitSucceeded,
    SubmitRejected,
    SubmitFailed,
    SubmitResult,
    DraftSaved,
    DraftFailed,
    DraftResult,
    OperationInFlightError,
    SessionClosedError,
)
from property_wizard.session.persistence import (
    PropertyPersistence,
    PersistenceResult,
    ExternalOperationError,
)
from property_wizard.session.repository import (
    PropertyRepository,
    get_property_repository,
    reset_property_repository,
)

__all__ = [
    # Controller
    "WizardController",
    "WizardState",
    "NavigationResult",
    "SubmitSucceeded",
    "SubmitRejected",
    "SubmitFailed",
    "SubmitResult",
    "DraftSaved",
    "DraftFailed",
    "DraftResult",
    "OperationInFlightError",
    "SessionClosedError",
    # Persistence
    "PropertyPersistence",
    "PersistenceResult",
    "ExternalOperationError",
    # Repository
    "PropertyRepository",
    "get_property_repository",
    "reset_property_repository",
]
