"""
Property Wizard - Validation & Sensitive-Field Engine

Guided multi-step data entry for rental property records: per-step
validation, completion tracking per checklist category, and role-based
handling of internal-only fields.
"""

from property_wizard.catalog import (
    FieldKind,
    FieldSpec,
    Schema,
    StepDefinition,
    CategoryDefinition,
    StepSchemaRegistry,
    get_default_registry,
    SchemaDefinitionError,
    UnknownStepError,
    UnknownFieldError,
)
from property_wizard.validation import (
    ValidationEngine,
    EntityValidationResult,
)
from property_wizard.completion import (
    CompletionResult,
    CompletionTracker,
    compute_completion,
)
from property_wizard.security import (
    Role,
    SensitiveFieldPolicy,
    PolicyViolation,
    SENSITIVE_FIELDS,
    PRIVILEGED_ROLES,
)
from property_wizard.session import (
    WizardController,
    WizardState,
    NavigationResult,
    SubmitSucceeded,
    SubmitRejected,
    SubmitFailed,
    DraftSaved,
    DraftFailed,
    OperationInFlightError,
    SessionClosedError,
    PropertyPersistence,
    PersistenceResult,
    ExternalOperationError,
    PropertyRepository,
    get_property_repository,
    reset_property_repository,
)

__version__ = "1.0.0"

__all__ = [
    # Catalog
    "FieldKind",
    "FieldSpec",
    "Schema",
    "StepDefinition",
    "CategoryDefinition",
    "StepSchemaRegistry",
    "get_default_registry",
    # Validation
    "ValidationEngine",
    "EntityValidationResult",
    # Completion
    "CompletionResult",
    "CompletionTracker",
    "compute_completion",
    # Security
    "Role",
    "SensitiveFieldPolicy",
    "SENSITIVE_FIELDS",
    "PRIVILEGED_ROLES",
    # Session
    "WizardController",
    "WizardState",
    "NavigationResult",
    "SubmitSucceeded",
    "SubmitRejected",
    "SubmitFailed",
    "DraftSaved",
    "DraftFailed",
    "PropertyPersistence",
    "PersistenceResult",
    "PropertyRepository",
    "get_property_repository",
    "reset_property_repository",
    # Errors
    "SchemaDefinitionError",
    "UnknownStepError",
    "UnknownFieldError",
    "PolicyViolation",
    "ExternalOperationError",
    "OperationInFlightError",
    "SessionClosedError",
]
