"""
Wizard Validation - Step and Entity Validation with Per-Field Errors

Validates a form snapshot against a step schema or the full entity schema.
Validation is fail-soft: bad user data never raises, it produces a
FieldErrorMap keyed by dotted field path. Only an unknown step id or a
malformed schema (programming errors) raise.

The snapshot is only ever read. Coerced values live in a local dict.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from property_wizard.catalog.registry import StepSchemaRegistry, get_default_registry
from property_wizard.catalog.schema import (
    FieldKind,
    FieldSpec,
    Schema,
    is_filled,
)


logger = logging.getLogger(__name__)

FieldErrorMap = dict[str, str]

_DIGITS = re.compile(r"^\d+$")


# =============================================================================
# Validation Result
# =============================================================================


@dataclass(frozen=True)
class EntityValidationResult:
    """
    Result of full-entity validation, the pre-submit gate.

    errors_by_step groups every step-owned error under its step id so the
    UI can jump to first_invalid_step. Errors on entity metadata fields
    (owned by no step) appear only in errors.
    """

    valid: bool
    errors: Mapping[str, str] = field(default_factory=dict)
    errors_by_step: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    first_invalid_step: Optional[str] = None

    @property
    def invalid_steps(self) -> tuple[str, ...]:
        return tuple(self.errors_by_step)

    def to_dict(self) -> dict:
        """Convert result to dictionary."""
        return {
            "valid": self.valid,
            "errors": dict(self.errors),
            "errors_by_step": {
                step_id: dict(step_errors)
                for step_id, step_errors in self.errors_by_step.items()
            },
            "first_invalid_step": self.first_invalid_step,
        }


# =============================================================================
# Field Rules
# =============================================================================


def _bound(value: float) -> str:
    return f"{value:g}"


def _is_url(value: str) -> bool:
    parsed = urlparse(value.strip())
    return bool(parsed.scheme and parsed.netloc)


def _check_text(spec: FieldSpec, value: Any, path: str) -> tuple[Any, FieldErrorMap]:
    if not isinstance(value, str):
        return None, {path: spec.message("type", f"{spec.label} must be text")}

    if spec.min_length is not None and len(value) < spec.min_length:
        return None, {
            path: spec.message(
                "min_length",
                f"{spec.label} must be at least {spec.min_length} characters",
            )
        }
    if spec.max_length is not None and len(value) > spec.max_length:
        return None, {
            path: spec.message(
                "max_length",
                f"{spec.label} must be at most {spec.max_length} characters",
            )
        }
    if spec.pattern is not None and not re.fullmatch(spec.pattern, value):
        return None, {path: spec.message("pattern", f"{spec.label} has an invalid format")}
    if spec.choices and value not in spec.choices:
        return None, {
            path: spec.message(
                "choices",
                f"{spec.label} must be one of: {', '.join(spec.choices)}",
            )
        }
    if spec.url and not _is_url(value):
        return None, {path: spec.message("url", f"{spec.label} must be a valid URL")}
    return value, {}


def _check_number(spec: FieldSpec, value: Any, path: str) -> tuple[Any, FieldErrorMap]:
    type_error = {path: spec.message("type", f"{spec.label} must be a number")}

    # bool is an int subclass; a checkbox value is never a count
    if isinstance(value, bool):
        return None, type_error
    if isinstance(value, str):
        text = value.strip()
        if not _DIGITS.match(text):
            return None, type_error
        number: float = int(text)
    elif isinstance(value, (int, float)):
        number = value
    else:
        return None, type_error

    if number != number:  # NaN
        return None, type_error

    if spec.minimum is not None:
        too_small = number <= spec.minimum if spec.exclusive_minimum else number < spec.minimum
        if too_small:
            default = (
                f"{spec.label} must be greater than {_bound(spec.minimum)}"
                if spec.exclusive_minimum
                else f"{spec.label} must be at least {_bound(spec.minimum)}"
            )
            return None, {path: spec.message("minimum", default)}
    if spec.maximum is not None and number > spec.maximum:
        return None, {
            path: spec.message("maximum", f"{spec.label} must be at most {_bound(spec.maximum)}")
        }
    return number, {}


def _check_boolean(spec: FieldSpec, value: Any, path: str) -> tuple[Any, FieldErrorMap]:
    if not isinstance(value, bool):
        return None, {path: spec.message("type", f"{spec.label} must be yes or no")}
    return value, {}


def _check_min_items(spec: FieldSpec, items: list, path: str) -> FieldErrorMap:
    if spec.min_items is not None and len(items) < spec.min_items:
        return {
            path: spec.message(
                "min_items",
                f"{spec.label} needs at least {spec.min_items} entries",
            )
        }
    return {}


def _check_text_list(spec: FieldSpec, value: Any, path: str) -> tuple[Any, FieldErrorMap]:
    if not isinstance(value, (list, tuple)):
        return None, {path: spec.message("type", f"{spec.label} must be a list")}

    errors = _check_min_items(spec, list(value), path)
    if errors:
        return None, errors

    for index, item in enumerate(value):
        if not isinstance(item, str):
            errors[f"{path}.{index}"] = "Each entry must be text"
        elif spec.url and not _is_url(item):
            errors[f"{path}.{index}"] = spec.message("url", "Each entry must be a valid URL")
    if errors:
        return None, errors
    return list(value), {}


def _check_record_list(spec: FieldSpec, value: Any, path: str) -> tuple[Any, FieldErrorMap]:
    if not isinstance(value, (list, tuple)):
        return None, {path: spec.message("type", f"{spec.label} must be a list")}

    errors = _check_min_items(spec, list(value), path)
    if errors:
        return None, errors

    records: list[dict] = []
    for index, item in enumerate(value):
        item_path = f"{path}.{index}"
        if not isinstance(item, Mapping):
            errors[item_path] = "Each entry must be a set of details"
            continue
        record: dict[str, Any] = {}
        for item_spec in spec.item_fields:
            coerced, item_errors = check_field(
                item_spec, item.get(item_spec.name), f"{item_path}.{item_spec.name}"
            )
            errors.update(item_errors)
            record[item_spec.name] = coerced
        records.append(record)

    if errors:
        return None, errors
    return records, {}


_KIND_CHECKS = {
    FieldKind.TEXT: _check_text,
    FieldKind.NUMBER: _check_number,
    FieldKind.BOOLEAN: _check_boolean,
    FieldKind.TEXT_LIST: _check_text_list,
    FieldKind.RECORD_LIST: _check_record_list,
}


def check_field(spec: FieldSpec, value: Any, path: Optional[str] = None) -> tuple[Any, FieldErrorMap]:
    """
    Run one field's rule chain.

    Stops at the first failing rule for a scalar field. Record lists check
    every entry so each nested path gets its own message.

    Args:
        spec: Field specification
        value: Raw snapshot value (may be None when absent)
        path: Error path, defaults to the field name

    Returns:
        Tuple of (coerced value or None, errors for this field)
    """
    path = path or spec.name

    if not is_filled(value):
        if spec.required:
            return None, {path: spec.message("required", f"{spec.label} is required")}
        return None, {}

    return _KIND_CHECKS[spec.kind](spec, value, path)


def validate_schema(schema: Schema, snapshot: Mapping[str, Any]) -> FieldErrorMap:
    """
    Validate a snapshot against a schema.

    Every field is evaluated. Cross-field constraints run only when all the
    fields they reference passed, so one path never collects two messages.

    Args:
        schema: Schema to validate against
        snapshot: Field name to raw value

    Returns:
        FieldErrorMap, empty when valid
    """
    errors: FieldErrorMap = {}
    values: dict[str, Any] = {}
    failed: set[str] = set()

    for spec in schema.fields:
        coerced, field_errors = check_field(spec, snapshot.get(spec.name))
        if field_errors:
            errors.update(field_errors)
            failed.add(spec.name)
        else:
            values[spec.name] = coerced

    for constraint in schema.constraints:
        if any(name in failed for name in constraint.fields):
            continue
        outcome = constraint.check(values)
        if outcome is not None:
            path, message = outcome
            errors.setdefault(path, message)

    return errors


# =============================================================================
# Validation Engine
# =============================================================================


class ValidationEngine:
    """Validates snapshots per step, per category, or for the whole entity."""

    def __init__(self, registry: Optional[StepSchemaRegistry] = None):
        self._registry = registry or get_default_registry()

    @property
    def registry(self) -> StepSchemaRegistry:
        return self._registry

    def validate_step(self, step_id: str, snapshot: Mapping[str, Any]) -> FieldErrorMap:
        """
        Validate the fields of one step.

        Raises:
            UnknownStepError: If the step id is not in the catalog
        """
        return validate_schema(self._registry.schema_for(step_id), snapshot)

    def validate_category(self, category_id: str, snapshot: Mapping[str, Any]) -> FieldErrorMap:
        """
        Validate every step of a category together.

        Raises:
            UnknownStepError: If the category id is not in the catalog
        """
        return validate_schema(self._registry.category_schema(category_id), snapshot)

    def validate_entity(self, snapshot: Mapping[str, Any]) -> EntityValidationResult:
        """
        Validate the full entity before submission.

        Args:
            snapshot: Complete form snapshot

        Returns:
            EntityValidationResult; valid is False whenever any error exists
        """
        errors = validate_schema(self._registry.entity_schema(), snapshot)

        errors_by_step: dict[str, dict[str, str]] = {}
        for path, message in errors.items():
            step = self._registry.step_for_field(path)
            if step is None:
                continue
            errors_by_step.setdefault(step.step_id, {})[path] = message

        # Catalog order, so the first key is the earliest invalid step
        ordered = {
            step.step_id: errors_by_step[step.step_id]
            for step in self._registry.steps
            if step.step_id in errors_by_step
        }
        first_invalid_step = next(iter(ordered), None)

        if errors:
            logger.debug(
                "Entity validation failed: %d errors across %d steps",
                len(errors),
                len(ordered),
            )

        return EntityValidationResult(
            valid=not errors,
            errors=errors,
            errors_by_step=ordered,
            first_invalid_step=first_invalid_step,
        )
