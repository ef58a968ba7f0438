"""
Persistence Collaborator - Contract for Entity Creation and Draft Storage

The wizard core never persists anything. It hands a deep copy of the
snapshot to a collaborator implementing PropertyPersistence and turns the
outcome into a result object. Collaborator methods may be plain functions
or coroutines.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Optional, Protocol, Union, runtime_checkable


# =============================================================================
# Exceptions
# =============================================================================


class ExternalOperationError(Exception):
    """Raised by a persistence backend when a create, save or load fails."""


# =============================================================================
# Result Types
# =============================================================================


@dataclass(frozen=True)
class PersistenceResult:
    """Outcome of a persistence call: the stored id on success, a reason otherwise."""

    success: bool
    id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, entity_id: str) -> "PersistenceResult":
        return cls(success=True, id=entity_id)

    @classmethod
    def failed(cls, error: str) -> "PersistenceResult":
        return cls(success=False, error=error)

    def to_dict(self) -> dict:
        return {"success": self.success, "id": self.id, "error": self.error}


MaybeAwaitable = Union[PersistenceResult, Awaitable[PersistenceResult]]


# =============================================================================
# Protocol
# =============================================================================


@runtime_checkable
class PropertyPersistence(Protocol):
    """
    Storage backend for finished properties and in-progress drafts.

    save_draft inserts when the snapshot has no id and updates the draft
    named by snapshot["id"] otherwise. Backends that can resume drafts also
    provide load_draft(draft_id) returning the stored snapshot or None.
    """

    def create_entity(self, snapshot: dict[str, Any]) -> MaybeAwaitable:
        ...

    def save_draft(self, snapshot: dict[str, Any]) -> MaybeAwaitable:
        ...
