"""
Property Wizard Routes - JSON API over Wizard Sessions

Thin glue between HTTP and WizardController. Every response that carries
session data is built from controller.view(role) and checked by the
sensitive field policy before it leaves the process.

Error mapping:
- PolicyViolation -> 403
- UnknownFieldError / UnknownStepError -> 400
- Unknown session or draft -> 404
- OperationInFlightError -> 409
- SessionClosedError -> 410
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from property_wizard.catalog import (
    StepSchemaRegistry,
    UnknownFieldError,
    UnknownStepError,
    get_default_registry,
)
from property_wizard.security import DEFAULT_POLICY, PolicyViolation, Role
from property_wizard.session import (
    ExternalOperationError,
    OperationInFlightError,
    PropertyPersistence,
    SessionClosedError,
    WizardController,
    get_property_repository,
)
from utils.config import Config
from utils.formatting import format_percent, format_step_position
from web.identity import resolve_role
from web.session_store import WizardSessionStore, get_session_store


logger = logging.getLogger(__name__)


# =============================================================================
# Router Setup
# =============================================================================

router = APIRouter(prefix="/wizard", tags=["wizard"])


def get_persistence() -> PropertyPersistence:
    """Persistence collaborator for new sessions (overridable in tests)."""
    return get_property_repository(str(Config.load().repository_path))


def get_registry() -> StepSchemaRegistry:
    return get_default_registry()


# =============================================================================
# Request Models
# =============================================================================


class CreateSessionRequest(BaseModel):
    """Start a new wizard, or resume a stored draft."""

    draft_id: Optional[str] = None


class UpdateFieldsRequest(BaseModel):
    """Field name to value; null clears a field."""

    values: dict[str, Any] = Field(default_factory=dict)


class NavigateRequest(BaseModel):
    """Exactly one of target_index, step_id or direction."""

    target_index: Optional[int] = None
    step_id: Optional[str] = None
    direction: Optional[Literal["next", "previous"]] = None


# =============================================================================
# Helpers
# =============================================================================


def _to_http(error: Exception) -> HTTPException:
    """Map a controller exception to an HTTP error."""
    if isinstance(error, PolicyViolation):
        return HTTPException(status_code=403, detail=str(error))
    if isinstance(error, (UnknownFieldError, UnknownStepError)):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, OperationInFlightError):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, SessionClosedError):
        return HTTPException(status_code=410, detail=str(error))
    return HTTPException(status_code=500, detail="Internal error")


def _require_session(store: WizardSessionStore, session_id: str) -> WizardController:
    controller = store.get(session_id)
    if controller is None:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return controller


def _respond(payload: dict, role: Role, status_code: int = 200) -> JSONResponse:
    """Last check before anything leaves: no sensitive key for this role."""
    try:
        DEFAULT_POLICY.assert_sanitized(payload, role)
    except PolicyViolation as e:
        logger.error("Withheld response leaking field %s to role %s", e.field_name, role.value)
        raise HTTPException(status_code=500, detail="Response withheld") from e
    return JSONResponse(payload, status_code=status_code)


def _session_payload(session_id: str, controller: WizardController, role: Role) -> dict:
    view = controller.view(role)
    view["session_id"] = session_id
    view["completion_label"] = format_percent(view["completion"]["overall"])
    view["progress"]["label"] = format_step_position(
        view["progress"]["index"], view["progress"]["total"]
    )
    return view


# =============================================================================
# Catalog
# =============================================================================


@router.get("/catalog")
async def get_catalog(
    role: Role = Depends(resolve_role),
    registry: StepSchemaRegistry = Depends(get_registry),
):
    """Ordered categories and steps, with fields the role may not see removed."""
    steps = []
    for step in registry.steps:
        data = step.to_dict()
        data["fields"] = [
            spec for spec in data["fields"] if DEFAULT_POLICY.can_view(role, spec["name"])
        ]
        data["required_fields"] = DEFAULT_POLICY.visible_fields(role, data["required_fields"])
        steps.append(data)

    return _respond(
        {
            "categories": [category.to_dict() for category in registry.categories],
            "steps": steps,
        },
        role,
    )


# =============================================================================
# Sessions
# =============================================================================


@router.post("/sessions")
async def create_session(
    body: Optional[CreateSessionRequest] = None,
    role: Role = Depends(resolve_role),
    persistence: PropertyPersistence = Depends(get_persistence),
    registry: StepSchemaRegistry = Depends(get_registry),
    store: WizardSessionStore = Depends(get_session_store),
):
    """Start a wizard session, optionally resuming a draft."""
    draft_id = body.draft_id if body else None

    if draft_id:
        try:
            controller = await WizardController.from_draft(
                persistence, draft_id, registry=registry
            )
        except ExternalOperationError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
    else:
        controller = WizardController(persistence, registry=registry)

    session_id = store.add(controller)
    logger.info("Opened wizard session %s", session_id)
    return _respond(_session_payload(session_id, controller, role), role, status_code=201)


@router.get("/sessions/{session_id}")
async def get_session(
    session_id: str,
    role: Role = Depends(resolve_role),
    store: WizardSessionStore = Depends(get_session_store),
):
    """Current view of a session."""
    controller = _require_session(store, session_id)
    return _respond(_session_payload(session_id, controller, role), role)


@router.delete("/sessions/{session_id}")
async def delete_session(
    session_id: str,
    store: WizardSessionStore = Depends(get_session_store),
):
    """Discard a session. Stored drafts are not affected."""
    if not store.remove(session_id):
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return JSONResponse({"success": True, "session_id": session_id})


@router.patch("/sessions/{session_id}/fields")
async def update_fields(
    session_id: str,
    body: UpdateFieldsRequest,
    role: Role = Depends(resolve_role),
    store: WizardSessionStore = Depends(get_session_store),
):
    """Set one or more fields. Nothing is written if any field is rejected."""
    controller = _require_session(store, session_id)
    try:
        controller.update_fields(body.values, role)
    except (PolicyViolation, UnknownFieldError, SessionClosedError) as e:
        raise _to_http(e) from e
    return _respond(_session_payload(session_id, controller, role), role)


@router.post("/sessions/{session_id}/navigate")
async def navigate(
    session_id: str,
    body: NavigateRequest,
    role: Role = Depends(resolve_role),
    store: WizardSessionStore = Depends(get_session_store),
):
    """Move between steps; forward moves validate the steps passed over."""
    controller = _require_session(store, session_id)

    given = [
        name
        for name in ("target_index", "step_id", "direction")
        if getattr(body, name) is not None
    ]
    if len(given) != 1:
        raise HTTPException(
            status_code=400,
            detail="Provide exactly one of target_index, step_id or direction",
        )

    try:
        if body.target_index is not None:
            result = controller.go_to_step(body.target_index)
        elif body.step_id is not None:
            result = controller.go_to_step_id(body.step_id)
        elif body.direction == "next":
            result = controller.next_step()
        else:
            result = controller.previous_step()
    except (UnknownStepError, OperationInFlightError, SessionClosedError) as e:
        raise _to_http(e) from e

    return _respond(
        {
            "navigation": result.to_dict(),
            "session": _session_payload(session_id, controller, role),
        },
        role,
    )


@router.post("/sessions/{session_id}/submit")
async def submit(
    session_id: str,
    role: Role = Depends(resolve_role),
    store: WizardSessionStore = Depends(get_session_store),
):
    """Validate the whole property and create it."""
    controller = _require_session(store, session_id)
    try:
        result = await controller.submit()
    except (OperationInFlightError, SessionClosedError) as e:
        raise _to_http(e) from e

    return _respond(
        {
            "result": result.to_dict(),
            "session": _session_payload(session_id, controller, role),
        },
        role,
    )


@router.post("/sessions/{session_id}/draft")
async def save_draft(
    session_id: str,
    role: Role = Depends(resolve_role),
    store: WizardSessionStore = Depends(get_session_store),
):
    """Store the current values as a draft, without validation."""
    controller = _require_session(store, session_id)
    try:
        result = await controller.save_draft()
    except (OperationInFlightError, SessionClosedError) as e:
        raise _to_http(e) from e

    return _respond(
        {
            "result": result.to_dict(),
            "session": _session_payload(session_id, controller, role),
        },
        role,
    )
