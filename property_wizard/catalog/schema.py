"""
Wizard Schema - Declarative Field and Step Definitions

Defines the building blocks of the property wizard catalog:
field specifications (one closed value kind per field), cross-field
constraints, composable schemas and the immutable step/category records.

Schemas are checked when they are constructed. A malformed schema is a
programming error and fails at import time, never at validation time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final, Mapping, Optional, Union


# =============================================================================
# Exceptions
# =============================================================================


class SchemaDefinitionError(ValueError):
    """Raised when the step catalog or a schema is misconfigured."""


class UnknownStepError(LookupError):
    """Raised when a step id, category id or step index is not in the catalog."""


class UnknownFieldError(LookupError):
    """Raised when a field name is not declared by any step or the entity schema."""


# =============================================================================
# Enums
# =============================================================================


class FieldKind(Enum):
    """
    Closed set of value kinds a wizard field can hold.

    TEXT: free text or a single choice
    NUMBER: integer or decimal (digit strings are accepted and coerced)
    BOOLEAN: yes/no toggle
    TEXT_LIST: list of strings (tags, checkbox grids)
    RECORD_LIST: list of small records, e.g. bed configurations
    """

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    TEXT_LIST = "text_list"
    RECORD_LIST = "record_list"


# =============================================================================
# Constants
# =============================================================================

# Message keys understood by FieldSpec.messages
MESSAGE_KEYS: Final[frozenset[str]] = frozenset(
    {
        "required",
        "type",
        "min_length",
        "max_length",
        "minimum",
        "maximum",
        "pattern",
        "choices",
        "url",
        "min_items",
    }
)

_SEQUENCE_KINDS: Final[frozenset[FieldKind]] = frozenset(
    {FieldKind.TEXT_LIST, FieldKind.RECORD_LIST}
)


# =============================================================================
# Helpers
# =============================================================================


def is_filled(value: Any) -> bool:
    """
    Check whether a snapshot value counts as provided.

    Missing, None, blank strings and empty sequences are not filled.
    False and 0 are filled: they are explicit answers.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) > 0
    return True


def leading_segment(path: str) -> str:
    """Return the top-level field name of a dotted error path."""
    return path.split(".", 1)[0]


# =============================================================================
# Field Specification
# =============================================================================


@dataclass(frozen=True)
class FieldSpec:
    """
    Declaration of a single wizard field.

    The kind decides which constraints apply. Text constraints (length,
    pattern, choices) only make sense for TEXT fields, numeric bounds only
    for NUMBER fields, min_items only for list kinds. url applies to a TEXT
    value or to every entry of a TEXT_LIST.
    """

    name: str
    kind: FieldKind
    label: str = ""
    required: bool = False

    # Written by persistence, never through a wizard edit
    system_managed: bool = False

    # Text constraints
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    choices: tuple[str, ...] = ()
    url: bool = False

    # Numeric constraints
    minimum: Optional[float] = None
    exclusive_minimum: bool = False
    maximum: Optional[float] = None

    # List constraints
    min_items: Optional[int] = None
    item_fields: tuple["FieldSpec", ...] = ()

    # Custom error copy, keyed by constraint name
    messages: Mapping[str, str] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:
        """Reject inconsistent declarations."""
        if not self.name or "." in self.name:
            raise SchemaDefinitionError(f"Invalid field name: {self.name!r}")

        if not self.label:
            object.__setattr__(self, "label", self.name.replace("_", " ").capitalize())

        text_only = (
            self.min_length is not None
            or self.max_length is not None
            or self.pattern is not None
            or self.choices
        )
        if text_only and self.kind != FieldKind.TEXT:
            raise SchemaDefinitionError(
                f"{self.name}: text constraints declared on a {self.kind.value} field"
            )

        if self.url and self.kind not in (FieldKind.TEXT, FieldKind.TEXT_LIST):
            raise SchemaDefinitionError(
                f"{self.name}: url declared on a {self.kind.value} field"
            )

        numeric = self.minimum is not None or self.maximum is not None
        if numeric and self.kind != FieldKind.NUMBER:
            raise SchemaDefinitionError(
                f"{self.name}: numeric bounds declared on a {self.kind.value} field"
            )

        if self.min_items is not None and self.kind not in _SEQUENCE_KINDS:
            raise SchemaDefinitionError(
                f"{self.name}: min_items declared on a {self.kind.value} field"
            )

        if self.item_fields and self.kind != FieldKind.RECORD_LIST:
            raise SchemaDefinitionError(
                f"{self.name}: item fields declared on a {self.kind.value} field"
            )
        if self.kind == FieldKind.RECORD_LIST and not self.item_fields:
            raise SchemaDefinitionError(f"{self.name}: record list without item fields")

        for item in self.item_fields:
            if item.kind in _SEQUENCE_KINDS:
                raise SchemaDefinitionError(
                    f"{self.name}.{item.name}: nested lists are not supported"
                )
        item_names = [item.name for item in self.item_fields]
        if len(item_names) != len(set(item_names)):
            raise SchemaDefinitionError(f"{self.name}: duplicate item field names")

        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise SchemaDefinitionError(f"{self.name}: min_length exceeds max_length")

        if (
            self.minimum is not None
            and self.maximum is not None
            and self.minimum > self.maximum
        ):
            raise SchemaDefinitionError(f"{self.name}: minimum exceeds maximum")

        if self.pattern is not None:
            try:
                re.compile(self.pattern)
            except re.error as e:
                raise SchemaDefinitionError(f"{self.name}: invalid pattern ({e})") from e

        unknown_keys = set(self.messages) - MESSAGE_KEYS
        if unknown_keys:
            raise SchemaDefinitionError(
                f"{self.name}: unknown message keys {sorted(unknown_keys)}"
            )

    def message(self, key: str, default: str) -> str:
        """Get the custom message for a constraint, or the default copy."""
        return self.messages.get(key, default)

    def item_field(self, name: str) -> Optional["FieldSpec"]:
        """Get a nested item field by name."""
        for item in self.item_fields:
            if item.name == name:
                return item
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for catalog rendering."""
        data: dict[str, Any] = {
            "name": self.name,
            "kind": self.kind.value,
            "label": self.label,
            "required": self.required,
        }
        if self.choices:
            data["choices"] = list(self.choices)
        if self.item_fields:
            data["item_fields"] = [item.to_dict() for item in self.item_fields]
        return data


# =============================================================================
# Cross-Field Constraints
# =============================================================================


def _comparable(value: Any) -> Union[float, str]:
    """Years and numbers compare numerically, ISO dates lexically."""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    try:
        return float(text)
    except ValueError:
        return text


@dataclass(frozen=True)
class FieldOrder:
    """The later field must not come before the earlier one (years, ISO dates)."""

    earlier: str
    later: str
    message: str

    @property
    def fields(self) -> tuple[str, ...]:
        return (self.earlier, self.later)

    def check(self, values: Mapping[str, Any]) -> Optional[tuple[str, str]]:
        first = values.get(self.earlier)
        second = values.get(self.later)
        if not (is_filled(first) and is_filled(second)):
            return None

        left, right = _comparable(first), _comparable(second)
        if type(left) is not type(right):
            left, right = str(first).strip(), str(second).strip()
        if right < left:
            return self.later, self.message
        return None


@dataclass(frozen=True)
class RequiredIf:
    """A field becomes required once another field is switched on."""

    field: str
    when: str
    message: str

    @property
    def fields(self) -> tuple[str, ...]:
        return (self.field, self.when)

    def check(self, values: Mapping[str, Any]) -> Optional[tuple[str, str]]:
        trigger = values.get(self.when)
        if trigger is True or (not isinstance(trigger, bool) and is_filled(trigger)):
            if not is_filled(values.get(self.field)):
                return self.field, self.message
        return None


@dataclass(frozen=True)
class AtLeastOneOf:
    """At least one of the fields must be filled. Reported on the first field."""

    names: tuple[str, ...]
    message: str

    def __post_init__(self) -> None:
        if len(self.names) < 2:
            raise SchemaDefinitionError("AtLeastOneOf needs two or more fields")

    @property
    def fields(self) -> tuple[str, ...]:
        return self.names

    def check(self, values: Mapping[str, Any]) -> Optional[tuple[str, str]]:
        if any(is_filled(values.get(name)) for name in self.names):
            return None
        return self.names[0], self.message


CrossFieldConstraint = Union[FieldOrder, RequiredIf, AtLeastOneOf]


# =============================================================================
# Schema
# =============================================================================


@dataclass(frozen=True)
class Schema:
    """
    Declarative validation schema: ordered fields plus cross-field constraints.

    Schemas compose with merge(); the full-entity schema is the merge of every
    step schema plus entity metadata and entity-level constraints.
    """

    fields: tuple[FieldSpec, ...] = ()
    constraints: tuple[CrossFieldConstraint, ...] = ()

    def __post_init__(self) -> None:
        names = [spec.name for spec in self.fields]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise SchemaDefinitionError(f"Duplicate fields in schema: {duplicates}")

        known = set(names)
        for constraint in self.constraints:
            missing = [name for name in constraint.fields if name not in known]
            if missing:
                raise SchemaDefinitionError(
                    f"{type(constraint).__name__} references unknown fields: {missing}"
                )

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields if spec.required)

    def field(self, name: str) -> Optional[FieldSpec]:
        """Get a field specification by name."""
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def merge(
        self,
        *others: "Schema",
        extra_fields: tuple[FieldSpec, ...] = (),
        constraints: tuple[CrossFieldConstraint, ...] = (),
    ) -> "Schema":
        """
        Compose this schema with others.

        Raises:
            SchemaDefinitionError: If two schemas declare the same field
        """
        fields = list(self.fields)
        merged_constraints = list(self.constraints)
        for other in others:
            fields.extend(other.fields)
            merged_constraints.extend(other.constraints)
        fields.extend(extra_fields)
        merged_constraints.extend(constraints)
        return Schema(fields=tuple(fields), constraints=tuple(merged_constraints))


# =============================================================================
# Steps and Categories
# =============================================================================


@dataclass(frozen=True)
class StepDefinition:
    """
    One page of the property wizard.

    Immutable; built once from the static catalog at import time.
    """

    step_id: str
    title: str
    category: str
    ordinal: int
    schema: Schema
    subtitle: str = ""

    @property
    def field_names(self) -> tuple[str, ...]:
        return self.schema.field_names

    @property
    def required_fields(self) -> tuple[str, ...]:
        return self.schema.required_fields

    def to_dict(self) -> dict:
        """Convert to dictionary for catalog rendering."""
        return {
            "step_id": self.step_id,
            "title": self.title,
            "subtitle": self.subtitle,
            "category": self.category,
            "ordinal": self.ordinal,
            "fields": [spec.to_dict() for spec in self.schema.fields],
            "required_fields": list(self.required_fields),
        }


@dataclass(frozen=True)
class CategoryDefinition:
    """A group of consecutive steps; completion is tracked per category."""

    category_id: str
    title: str
    steps: tuple[StepDefinition, ...]

    def __post_init__(self) -> None:
        if not self.steps:
            raise SchemaDefinitionError(f"Category {self.category_id} has no steps")
        for step in self.steps:
            if step.category != self.category_id:
                raise SchemaDefinitionError(
                    f"Step {step.step_id} is tagged {step.category}, "
                    f"not {self.category_id}"
                )

    @property
    def required_fields(self) -> tuple[str, ...]:
        required: list[str] = []
        for step in self.steps:
            required.extend(step.required_fields)
        return tuple(required)

    def to_dict(self) -> dict:
        return {
            "category_id": self.category_id,
            "title": self.title,
            "steps": [step.step_id for step in self.steps],
        }
