"""
Step Schema Registry - Lookup from Step/Category to Validation Schema

Pure lookup over the static catalog. The registry checks the catalog once
at construction (unique ids, injective ordinals, single field ownership)
so that a misconfigured catalog fails at startup.
"""

from __future__ import annotations

from typing import Optional

from property_wizard.catalog.schema import (
    CategoryDefinition,
    CrossFieldConstraint,
    FieldSpec,
    Schema,
    SchemaDefinitionError,
    StepDefinition,
    UnknownFieldError,
    UnknownStepError,
    leading_segment,
)
from property_wizard.catalog.steps import (
    ENTITY_CONSTRAINTS,
    ENTITY_METADATA_FIELDS,
    PROPERTY_CATEGORIES,
)


# =============================================================================
# Registry
# =============================================================================


class StepSchemaRegistry:
    """
    Registry of wizard steps, categories and their schemas.

    Steps are kept in ordinal order. Every field belongs to exactly one step,
    which lets error paths be mapped back to the step that owns them.
    """

    def __init__(
        self,
        categories: tuple[CategoryDefinition, ...],
        entity_fields: tuple[FieldSpec, ...] = (),
        entity_constraints: tuple[CrossFieldConstraint, ...] = (),
    ):
        """
        Initialise and check the catalog.

        Args:
            categories: Ordered categories, each with ordered steps
            entity_fields: Metadata fields not owned by any step
            entity_constraints: Cross-step rules for the full entity

        Raises:
            SchemaDefinitionError: If the catalog is inconsistent
        """
        if not categories:
            raise SchemaDefinitionError("Catalog has no categories")

        self._categories = tuple(categories)
        self._category_index: dict[str, CategoryDefinition] = {}
        self._step_index: dict[str, StepDefinition] = {}
        self._field_owner: dict[str, str] = {}
        self._field_specs: dict[str, FieldSpec] = {}

        steps: list[StepDefinition] = []
        for category in self._categories:
            if category.category_id in self._category_index:
                raise SchemaDefinitionError(f"Duplicate category: {category.category_id}")
            self._category_index[category.category_id] = category

            for step in category.steps:
                if step.step_id in self._step_index:
                    raise SchemaDefinitionError(f"Duplicate step: {step.step_id}")
                self._step_index[step.step_id] = step
                steps.append(step)

                for spec in step.schema.fields:
                    owner = self._field_owner.get(spec.name)
                    if owner is not None:
                        raise SchemaDefinitionError(
                            f"Field {spec.name} is declared by both {owner} and {step.step_id}"
                        )
                    self._field_owner[spec.name] = step.step_id
                    self._field_specs[spec.name] = spec

        ordinals = [step.ordinal for step in steps]
        if len(set(ordinals)) != len(ordinals):
            raise SchemaDefinitionError("Step ordinals must be unique")
        if ordinals != sorted(ordinals):
            raise SchemaDefinitionError("Steps must be listed in ordinal order")
        self._steps = tuple(steps)

        for spec in entity_fields:
            if spec.name in self._field_specs:
                raise SchemaDefinitionError(
                    f"Entity field {spec.name} is already declared by step "
                    f"{self._field_owner[spec.name]}"
                )
            self._field_specs[spec.name] = spec

        # Merging re-checks for duplicates and dangling constraint references
        self._entity_schema = Schema().merge(
            *(step.schema for step in self._steps),
            extra_fields=tuple(entity_fields),
            constraints=tuple(entity_constraints),
        )

    # =========================================================================
    # Step Lookup
    # =========================================================================

    @property
    def steps(self) -> tuple[StepDefinition, ...]:
        """All steps in wizard order."""
        return self._steps

    @property
    def categories(self) -> tuple[CategoryDefinition, ...]:
        return self._categories

    @property
    def step_count(self) -> int:
        return len(self._steps)

    def step(self, step_id: str) -> StepDefinition:
        """
        Get a step by id.

        Raises:
            UnknownStepError: If the step is not in the catalog
        """
        try:
            return self._step_index[step_id]
        except KeyError:
            raise UnknownStepError(f"Unknown step: {step_id}") from None

    def step_at(self, index: int) -> StepDefinition:
        """
        Get a step by zero-based position.

        Raises:
            UnknownStepError: If the index is out of range
        """
        if not 0 <= index < len(self._steps):
            raise UnknownStepError(f"Step index out of range: {index}")
        return self._steps[index]

    def index_of(self, step_id: str) -> int:
        """Get the zero-based position of a step."""
        return self._steps.index(self.step(step_id))

    def schema_for(self, step_id: str) -> Schema:
        """
        Get the validation schema for a step.

        Raises:
            UnknownStepError: If the step is not in the catalog
        """
        return self.step(step_id).schema

    # =========================================================================
    # Category Lookup
    # =========================================================================

    def category(self, category_id: str) -> CategoryDefinition:
        """
        Get a category by id.

        Raises:
            UnknownStepError: If the category is not in the catalog
        """
        try:
            return self._category_index[category_id]
        except KeyError:
            raise UnknownStepError(f"Unknown category: {category_id}") from None

    def category_schema(self, category_id: str) -> Schema:
        """Merged schema of every step in a category."""
        category = self.category(category_id)
        return Schema().merge(*(step.schema for step in category.steps))

    def required_fields_by_category(self) -> dict[str, tuple[str, ...]]:
        """Completion catalog: category id to its required field names."""
        return {
            category.category_id: category.required_fields
            for category in self._categories
        }

    # =========================================================================
    # Field Lookup
    # =========================================================================

    def entity_schema(self) -> Schema:
        """Union of every step schema plus entity metadata and entity rules."""
        return self._entity_schema

    def is_known_field(self, name: str) -> bool:
        return name in self._field_specs

    def field_spec(self, name: str) -> FieldSpec:
        """
        Get the specification of a top-level field.

        Raises:
            UnknownFieldError: If no step or entity metadata declares it
        """
        try:
            return self._field_specs[name]
        except KeyError:
            raise UnknownFieldError(f"Unknown field: {name}") from None

    def step_for_field(self, path: str) -> Optional[StepDefinition]:
        """
        Get the step that owns a field or dotted error path.

        Returns None for entity metadata fields, which no step owns.

        Raises:
            UnknownFieldError: If the field is not declared at all
        """
        name = leading_segment(path)
        if name not in self._field_specs:
            raise UnknownFieldError(f"Unknown field: {name}")
        owner = self._field_owner.get(name)
        return self._step_index[owner] if owner is not None else None

    def to_dict(self) -> dict:
        """Convert catalog to dictionary for rendering."""
        return {
            "categories": [category.to_dict() for category in self._categories],
            "steps": [step.to_dict() for step in self._steps],
        }


# =============================================================================
# Singleton Instance
# =============================================================================

_registry_instance: Optional[StepSchemaRegistry] = None


def get_default_registry() -> StepSchemaRegistry:
    """
    Get the process-wide registry built from the static property catalog.

    Returns:
        StepSchemaRegistry instance
    """
    global _registry_instance
    if _registry_instance is None:
        _registry_instance = StepSchemaRegistry(
            categories=PROPERTY_CATEGORIES,
            entity_fields=ENTITY_METADATA_FIELDS,
            entity_constraints=ENTITY_CONSTRAINTS,
        )
    return _registry_instance
