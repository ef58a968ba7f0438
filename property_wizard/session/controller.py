"""
Wizard Controller - Working State of One Property Wizard Session

Owns the snapshot, the current step, per-step errors, completion and the
submit/save-draft lifecycle. Delegates validation to ValidationEngine,
progress to CompletionTracker and every role decision to
SensitiveFieldPolicy. Persistence happens only through the collaborator,
and only on save-draft and submit.

Lifecycle:
    EDITING -> VALIDATING -> EDITING       (navigation)
    EDITING -> VALIDATING -> ERROR         (submit rejected)
    EDITING -> SUBMITTING -> COMPLETE      (submit accepted)
    EDITING -> SUBMITTING -> ERROR         (persistence failed, retry allowed)

One controller serves one session on one event loop. Only persistence
calls suspend; while one is pending, field edits are accepted but a
second submit, save or navigation is rejected.
"""

from __future__ import annotations

import copy
import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Union

from property_wizard.catalog.registry import StepSchemaRegistry, get_default_registry
from property_wizard.catalog.schema import StepDefinition, UnknownFieldError, leading_segment
from property_wizard.completion import CompletionResult, CompletionTracker
from property_wizard.security.sensitive_fields import (
    DEFAULT_POLICY,
    PolicyViolation,
    RoleLike,
    SensitiveFieldPolicy,
)
from property_wizard.session.persistence import (
    ExternalOperationError,
    PersistenceResult,
    PropertyPersistence,
)
from property_wizard.validation import FieldErrorMap, ValidationEngine


logger = logging.getLogger(__name__)

REJECTED_MESSAGE = "Please fix the highlighted errors before submitting"


# =============================================================================
# Exceptions
# =============================================================================


class OperationInFlightError(RuntimeError):
    """Raised when submit, save or navigation is requested while one is pending."""


class SessionClosedError(RuntimeError):
    """Raised when a completed session is asked to change."""


# =============================================================================
# Enums
# =============================================================================


class WizardState(Enum):
    """Lifecycle state of a wizard session."""

    EDITING = "editing"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    ERROR = "error"
    COMPLETE = "complete"


# =============================================================================
# Result Types
# =============================================================================


@dataclass(frozen=True)
class NavigationResult:
    """
    Outcome of a navigation request.

    to_index is where the session now stands. When a forward move is
    blocked, errors holds the failing step's errors.
    """

    requested_index: int
    from_index: int
    to_index: int
    step_id: str
    errors: Mapping[str, str] = field(default_factory=dict)

    @property
    def moved(self) -> bool:
        return self.to_index != self.from_index

    @property
    def blocked(self) -> bool:
        return self.to_index != self.requested_index

    def to_dict(self) -> dict:
        return {
            "requested_index": self.requested_index,
            "from_index": self.from_index,
            "to_index": self.to_index,
            "step_id": self.step_id,
            "moved": self.moved,
            "blocked": self.blocked,
        }


@dataclass(frozen=True)
class SubmitSucceeded:
    """Returned when the entity was created."""

    entity_id: Optional[str]

    def to_dict(self) -> dict:
        return {"status": "succeeded", "entity_id": self.entity_id}


@dataclass(frozen=True)
class SubmitRejected:
    """Returned when entity validation failed; persistence was not called."""

    errors: Mapping[str, str]
    errors_by_step: Mapping[str, Mapping[str, str]]
    first_invalid_step: Optional[str]

    def to_dict(self) -> dict:
        # Error messages are served through view(role), never from here
        return {
            "status": "rejected",
            "first_invalid_step": self.first_invalid_step,
            "invalid_steps": list(self.errors_by_step),
        }


@dataclass(frozen=True)
class SubmitFailed:
    """Returned when the persistence collaborator failed."""

    reason: str

    def to_dict(self) -> dict:
        return {"status": "failed", "reason": self.reason}


SubmitResult = Union[SubmitSucceeded, SubmitRejected, SubmitFailed]


@dataclass(frozen=True)
class DraftSaved:
    """Returned when the draft was stored."""

    draft_id: Optional[str]

    def to_dict(self) -> dict:
        return {"status": "saved", "draft_id": self.draft_id}


@dataclass(frozen=True)
class DraftFailed:
    """Returned when the draft could not be stored."""

    reason: str

    def to_dict(self) -> dict:
        return {"status": "failed", "reason": self.reason}


DraftResult = Union[DraftSaved, DraftFailed]


# =============================================================================
# Controller
# =============================================================================


class WizardController:
    """
    State machine for one property wizard session.

    Usage:
        controller = WizardController(get_property_repository())
        controller.update_field("building_name", "Marina Heights", Role.STAFF)
        nav = controller.next_step()
        result = await controller.submit()
        payload = controller.view(Role.STAFF)
    """

    def __init__(
        self,
        persistence: PropertyPersistence,
        registry: Optional[StepSchemaRegistry] = None,
        policy: Optional[SensitiveFieldPolicy] = None,
        snapshot: Optional[Mapping[str, Any]] = None,
    ):
        """
        Initialise a session.

        Args:
            persistence: Collaborator for create_entity / save_draft
            registry: Step catalog (defaults to the property catalog)
            policy: Sensitive field policy
            snapshot: Initial values, e.g. a resumed draft
        """
        self._registry = registry or get_default_registry()
        self._engine = ValidationEngine(self._registry)
        self._tracker = CompletionTracker(self._registry)
        self._policy = policy or DEFAULT_POLICY
        self._persistence = persistence

        self._snapshot: dict[str, Any] = copy.deepcopy(dict(snapshot or {}))
        self._errors_by_step: dict[str, dict[str, str]] = {}
        self._entity_errors: dict[str, str] = {}
        self._current_index = 0
        self._state = WizardState.EDITING
        self._pending = False
        self._revision = 0
        self._dirty: dict[str, int] = {}
        self._entity_id: Optional[str] = None
        self._last_error: Optional[str] = None
        self._completion = self._tracker.compute(self._snapshot)

    @classmethod
    async def from_draft(
        cls,
        persistence: PropertyPersistence,
        draft_id: str,
        registry: Optional[StepSchemaRegistry] = None,
        policy: Optional[SensitiveFieldPolicy] = None,
    ) -> "WizardController":
        """
        Resume a session from a stored draft.

        Raises:
            ExternalOperationError: If the backend cannot load drafts or the
                draft does not exist
        """
        load_draft: Optional[Callable[[str], Any]] = getattr(persistence, "load_draft", None)
        if load_draft is None:
            raise ExternalOperationError("Persistence backend cannot load drafts")

        snapshot = load_draft(draft_id)
        if inspect.isawaitable(snapshot):
            snapshot = await snapshot
        if snapshot is None:
            raise ExternalOperationError(f"Draft {draft_id} not found")

        snapshot = dict(snapshot)
        snapshot["id"] = draft_id
        logger.info("Resumed draft %s", draft_id)
        return cls(persistence, registry=registry, policy=policy, snapshot=snapshot)

    # =========================================================================
    # Guards
    # =========================================================================

    def _ensure_open(self) -> None:
        if self._state == WizardState.COMPLETE:
            raise SessionClosedError("Wizard session is complete")

    def _ensure_idle(self) -> None:
        if self._pending:
            raise OperationInFlightError("Another operation is in progress")

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def snapshot(self) -> dict[str, Any]:
        """Deep copy of the working values."""
        return copy.deepcopy(self._snapshot)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_step(self) -> StepDefinition:
        return self._registry.step_at(self._current_index)

    @property
    def is_first_step(self) -> bool:
        return self._current_index == 0

    @property
    def is_last_step(self) -> bool:
        return self._current_index == self._registry.step_count - 1

    @property
    def errors(self) -> FieldErrorMap:
        """Errors of the current step."""
        return dict(self._errors_by_step.get(self.current_step.step_id, {}))

    @property
    def errors_by_step(self) -> dict[str, dict[str, str]]:
        return {step_id: dict(errors) for step_id, errors in self._errors_by_step.items()}

    @property
    def entity_errors(self) -> FieldErrorMap:
        """Errors on entity metadata, which no step owns."""
        return dict(self._entity_errors)

    def field_error(self, path: str) -> Optional[str]:
        """Error message for a field or dotted path, if any."""
        for errors in self._errors_by_step.values():
            if path in errors:
                return errors[path]
        return self._entity_errors.get(path)

    @property
    def completion(self) -> CompletionResult:
        return self._completion

    @property
    def is_pending(self) -> bool:
        return self._pending

    @property
    def dirty_fields(self) -> frozenset[str]:
        """Fields changed since the last successful draft save."""
        return frozenset(self._dirty)

    @property
    def entity_id(self) -> Optional[str]:
        return self._entity_id

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    # =========================================================================
    # Field Updates
    # =========================================================================

    def _check_editable(self, name: str, role: RoleLike) -> None:
        if not self._registry.is_known_field(name):
            raise UnknownFieldError(f"Unknown field: {name}")
        if self._registry.field_spec(name).system_managed:
            raise PolicyViolation(f"{name} is managed by the system", field_name=name)
        if not self._policy.can_edit(role, name):
            raise PolicyViolation(f"Role may not edit {name}", field_name=name)

    def _write(self, name: str, value: Any) -> None:
        if value is None:
            self._snapshot.pop(name, None)
        else:
            self._snapshot[name] = copy.deepcopy(value)

        # Optimistic: the error clears now and is re-checked on the next validation
        for step_id in list(self._errors_by_step):
            errors = self._errors_by_step[step_id]
            for path in [p for p in errors if leading_segment(p) == name]:
                del errors[path]
            if not errors:
                del self._errors_by_step[step_id]
        for path in [p for p in self._entity_errors if leading_segment(p) == name]:
            del self._entity_errors[path]

        self._revision += 1
        self._dirty[name] = self._revision

    def _after_edit(self) -> None:
        self._completion = self._tracker.compute(self._snapshot)
        if self._state == WizardState.ERROR:
            self._state = WizardState.EDITING

    def update_field(self, name: str, value: Any, role: RoleLike) -> None:
        """
        Set one field. None clears it.

        Does not validate. Allowed while a submit or save is pending.

        Raises:
            UnknownFieldError: If no step or entity metadata declares the field
            PolicyViolation: If the role may not edit the field
            SessionClosedError: If the session is complete
        """
        self._ensure_open()
        self._check_editable(name, role)
        self._write(name, value)
        self._after_edit()

    def update_fields(self, values: Mapping[str, Any], role: RoleLike) -> None:
        """
        Set several fields at once.

        Every name is checked before anything is written, so a rejected
        batch leaves the snapshot untouched.
        """
        self._ensure_open()
        for name in values:
            self._check_editable(name, role)
        for name, value in values.items():
            self._write(name, value)
        self._after_edit()

    # =========================================================================
    # Navigation
    # =========================================================================

    def _set_step_errors(self, step_id: str, errors: FieldErrorMap) -> None:
        if errors:
            self._errors_by_step[step_id] = dict(errors)
        else:
            self._errors_by_step.pop(step_id, None)

    def go_to_step(self, target_index: int) -> NavigationResult:
        """
        Move to a step by zero-based index.

        Forward moves validate every step from the current one up to, not
        including, the target, and stop on the first invalid one. Backward
        moves never validate.

        Raises:
            UnknownStepError: If the index is out of range
            OperationInFlightError: If a submit or save is pending
            SessionClosedError: If the session is complete
        """
        self._ensure_open()
        self._ensure_idle()
        target = self._registry.step_at(target_index)
        origin = self._current_index

        if target_index <= origin:
            self._current_index = target_index
            self._state = WizardState.EDITING
            return NavigationResult(
                requested_index=target_index,
                from_index=origin,
                to_index=target_index,
                step_id=target.step_id,
                errors=dict(self._errors_by_step.get(target.step_id, {})),
            )

        self._state = WizardState.VALIDATING
        for index in range(origin, target_index):
            step = self._registry.step_at(index)
            errors = self._engine.validate_step(step.step_id, self._snapshot)
            self._set_step_errors(step.step_id, errors)
            if errors:
                self._current_index = index
                self._state = WizardState.EDITING
                logger.info(
                    "Navigation to %s stopped at %s with %d errors",
                    target.step_id,
                    step.step_id,
                    len(errors),
                )
                return NavigationResult(
                    requested_index=target_index,
                    from_index=origin,
                    to_index=index,
                    step_id=step.step_id,
                    errors=dict(errors),
                )

        self._current_index = target_index
        self._state = WizardState.EDITING
        return NavigationResult(
            requested_index=target_index,
            from_index=origin,
            to_index=target_index,
            step_id=target.step_id,
        )

    def go_to_step_id(self, step_id: str) -> NavigationResult:
        """Move to a step by id (UnknownStepError if unknown)."""
        return self.go_to_step(self._registry.index_of(step_id))

    def next_step(self) -> NavigationResult:
        """Advance one step; on the last step this stays put."""
        if self.is_last_step:
            return self.go_to_step(self._current_index)
        return self.go_to_step(self._current_index + 1)

    def previous_step(self) -> NavigationResult:
        """Go back one step; on the first step this stays put."""
        return self.go_to_step(max(self._current_index - 1, 0))

    # =========================================================================
    # Persistence
    # =========================================================================

    async def _call(
        self,
        operation: str,
        method: Callable[[dict[str, Any]], Any],
        payload: dict[str, Any],
    ) -> PersistenceResult:
        """Run one collaborator call; every failure becomes a failed result."""
        self._pending = True
        try:
            outcome = method(payload)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except ExternalOperationError as e:
            logger.warning("%s failed: %s", operation, e)
            return PersistenceResult.failed(str(e))
        except Exception:
            logger.exception("%s raised an unexpected error", operation)
            return PersistenceResult.failed(f"Unexpected error during {operation}")
        finally:
            self._pending = False

        if not isinstance(outcome, PersistenceResult):
            logger.error("%s returned %s instead of a PersistenceResult", operation, type(outcome).__name__)
            return PersistenceResult.failed(f"Invalid response from {operation}")
        if not outcome.success:
            logger.warning("%s failed: %s", operation, outcome.error)
        return outcome

    async def submit(self) -> SubmitResult:
        """
        Validate the whole entity and, if valid, create it.

        A rejected submit jumps to the first invalid step and never reaches
        persistence. A failed create keeps the snapshot so the user can retry.

        Raises:
            OperationInFlightError: If a submit or save is pending
            SessionClosedError: If the session is complete
        """
        self._ensure_open()
        self._ensure_idle()

        self._state = WizardState.VALIDATING
        result = self._engine.validate_entity(self._snapshot)

        if not result.valid:
            self._errors_by_step = {
                step_id: dict(errors) for step_id, errors in result.errors_by_step.items()
            }
            owned = {path for errors in result.errors_by_step.values() for path in errors}
            self._entity_errors = {
                path: message for path, message in result.errors.items() if path not in owned
            }
            if result.first_invalid_step is not None:
                self._current_index = self._registry.index_of(result.first_invalid_step)
            self._state = WizardState.ERROR
            self._last_error = REJECTED_MESSAGE
            logger.info(
                "Submit rejected: %d errors, first invalid step %s",
                len(result.errors),
                result.first_invalid_step,
            )
            return SubmitRejected(
                errors=dict(result.errors),
                errors_by_step=self.errors_by_step,
                first_invalid_step=result.first_invalid_step,
            )

        self._errors_by_step = {}
        self._entity_errors = {}
        self._state = WizardState.SUBMITTING
        outcome = await self._call(
            "create_entity", self._persistence.create_entity, copy.deepcopy(self._snapshot)
        )

        if not outcome.success:
            self._state = WizardState.ERROR
            self._last_error = outcome.error or "Submission failed"
            return SubmitFailed(reason=self._last_error)

        self._entity_id = outcome.id
        self._dirty.clear()
        self._last_error = None
        self._state = WizardState.COMPLETE
        logger.info("Submitted property %s", outcome.id)
        return SubmitSucceeded(entity_id=outcome.id)

    async def save_draft(self) -> DraftResult:
        """
        Store the snapshot as a draft without validating it.

        On success the draft id is kept in the snapshot's id field, so the
        next save updates the same draft, and fields saved are no longer dirty.

        Raises:
            OperationInFlightError: If a submit or save is pending
            SessionClosedError: If the session is complete
        """
        self._ensure_open()
        self._ensure_idle()

        saved_revision = self._revision
        outcome = await self._call(
            "save_draft", self._persistence.save_draft, copy.deepcopy(self._snapshot)
        )

        if not outcome.success:
            self._last_error = outcome.error or "Draft could not be saved"
            return DraftFailed(reason=self._last_error)

        if outcome.id:
            self._snapshot["id"] = outcome.id
        # Edits made while the save was in flight stay dirty
        self._dirty = {
            name: revision for name, revision in self._dirty.items() if revision > saved_revision
        }
        self._last_error = None
        logger.info("Saved draft %s", outcome.id)
        return DraftSaved(draft_id=outcome.id or self._snapshot.get("id"))

    # =========================================================================
    # Serialization
    # =========================================================================

    def view(self, role: RoleLike) -> dict[str, Any]:
        """
        Plain-data view of the session for a consumer acting under a role.

        The only serializer of session state. Sensitive fields are removed
        from the snapshot, the errors and the field lists for non-privileged
        roles.
        """
        policy = self._policy
        step = self.current_step

        errors_by_step: dict[str, dict[str, str]] = {}
        for step_id, errors in self._errors_by_step.items():
            visible = policy.sanitize_errors(errors, role)
            if visible:
                errors_by_step[step_id] = visible

        return {
            "state": self._state.value,
            "current_step": {
                "step_id": step.step_id,
                "title": step.title,
                "subtitle": step.subtitle,
                "category": step.category,
                "index": self._current_index,
                "fields": [
                    spec.to_dict()
                    for spec in step.schema.fields
                    if policy.can_view(role, spec.name)
                ],
            },
            "progress": {
                "index": self._current_index,
                "total": self._registry.step_count,
                "is_first": self.is_first_step,
                "is_last": self.is_last_step,
            },
            "errors": policy.sanitize_errors(self.errors, role),
            "errors_by_step": errors_by_step,
            "entity_errors": policy.sanitize_errors(self._entity_errors, role),
            "completion": self._completion.to_dict(),
            "is_pending": self._pending,
            "dirty_fields": sorted(policy.visible_fields(role, self._dirty)),
            "entity_id": self._entity_id,
            "last_error": self._last_error,
            "snapshot": policy.sanitize(self._snapshot, role),
        }
