"""
Property Wizard - Step Catalog

Ordered categories and steps of the property wizard, their declarative
schemas, and the registry that resolves a step id to its schema.
"""

from property_wizard.catalog.schema import (
    FieldKind,
    FieldSpec,
    FieldOrder,
    RequiredIf,
    AtLeastOneOf,
    Schema,
    StepDefinition,
    CategoryDefinition,
    SchemaDefinitionError,
    UnknownStepError,
    UnknownFieldError,
    is_filled,
)
from property_wizard.catalog.steps import (
    PROPERTY_CATEGORIES,
    ENTITY_METADATA_FIELDS,
    ENTITY_CONSTRAINTS,
)
from property_wizard.catalog.registry import (
    StepSchemaRegistry,
    get_default_registry,
)

__all__ = [
    # Schema
    "FieldKind",
    "FieldSpec",
    "FieldOrder",
    "RequiredIf",
    "AtLeastOneOf",
    "Schema",
    "StepDefinition",
    "CategoryDefinition",
    "SchemaDefinitionError",
    "UnknownStepError",
    "UnknownFieldError",
    "is_filled",
    # Catalog
    "PROPERTY_CATEGORIES",
    "ENTITY_METADATA_FIELDS",
    "ENTITY_CONSTRAINTS",
    # Registry
    "StepSchemaRegistry",
    "get_default_registry",
]
