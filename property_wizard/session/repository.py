"""
Property Repository - In-Memory Storage for Properties and Drafts

Reference implementation of the PropertyPersistence contract.
Keeps submitted properties and wizard drafts in memory, with optional
JSON file persistence for development.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from property_wizard.session.persistence import ExternalOperationError, PersistenceResult


logger = logging.getLogger(__name__)

# Status given to every property created from the wizard
INITIAL_STATUS = "pending"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Repository
# =============================================================================


class PropertyRepository:
    """
    Repository for submitted properties and in-progress drafts.

    Records are plain dicts keyed by id. Callers always receive copies.
    """

    def __init__(self, persist_path: Optional[str] = None):
        """
        Initialise repository.

        Args:
            persist_path: Optional path to persist data to JSON file
        """
        self._properties: dict[str, dict[str, Any]] = {}
        self._drafts: dict[str, dict[str, Any]] = {}
        self._persist_path = Path(persist_path) if persist_path else None

        if self._persist_path and self._persist_path.exists():
            self._load_from_file()

    def _save_to_file(
        self,
        properties: dict[str, dict[str, Any]],
        drafts: dict[str, dict[str, Any]],
    ) -> None:
        """Persist data to file."""
        if not self._persist_path:
            return

        data = {
            "properties": properties,
            "drafts": drafts,
            "saved_at": _now(),
        }

        try:
            self._persist_path.parent.mkdir(parents=True, exist_ok=True)
            self._persist_path.write_text(json.dumps(data, indent=2))
        except (OSError, TypeError, ValueError) as e:
            raise ExternalOperationError(f"Could not write repository data: {e}") from e

    def _load_from_file(self) -> None:
        """Load data from file."""
        if not self._persist_path or not self._persist_path.exists():
            return

        try:
            data = json.loads(self._persist_path.read_text())
            self._properties = dict(data.get("properties", {}))
            self._drafts = dict(data.get("drafts", {}))
        except (json.JSONDecodeError, AttributeError, ValueError) as e:
            # Start fresh rather than refuse to boot
            logger.warning("Could not load repository data from %s: %s", self._persist_path, e)

    def _commit(
        self,
        properties: dict[str, dict[str, Any]],
        drafts: dict[str, dict[str, Any]],
    ) -> None:
        """Write the new state, then adopt it. A failed write changes nothing."""
        self._save_to_file(properties, drafts)
        self._properties = properties
        self._drafts = drafts

    # =========================================================================
    # Persistence Contract
    # =========================================================================

    def create_entity(self, snapshot: dict[str, Any]) -> PersistenceResult:
        """
        Create a property from a validated wizard snapshot.

        If the snapshot carries the id of a draft, that draft is deleted:
        the submitted property replaces it.

        Args:
            snapshot: Complete form snapshot

        Returns:
            PersistenceResult with the new property id

        Raises:
            ExternalOperationError: If the data cannot be persisted
        """
        draft_id = snapshot.get("id")
        property_id = str(uuid.uuid4())
        timestamp = _now()

        record = dict(snapshot)
        record.update(
            {
                "id": property_id,
                "status": INITIAL_STATUS,
                "created_at": timestamp,
                "updated_at": timestamp,
            }
        )
        properties = dict(self._properties)
        properties[property_id] = json.loads(json.dumps(record))

        drafts = dict(self._drafts)
        replaced = bool(draft_id) and drafts.pop(draft_id, None) is not None

        self._commit(properties, drafts)
        if replaced:
            logger.info("Draft %s replaced by property %s", draft_id, property_id)
        return PersistenceResult.ok(property_id)

    def save_draft(self, snapshot: dict[str, Any]) -> PersistenceResult:
        """
        Insert a new draft, or update the draft named by snapshot["id"].

        Raises:
            ExternalOperationError: If the id names no stored draft, or the
                data cannot be persisted
        """
        draft_id = snapshot.get("id")
        timestamp = _now()

        if draft_id:
            existing = self._drafts.get(draft_id)
            if existing is None:
                raise ExternalOperationError(f"Draft {draft_id} not found")
            created_at = existing.get("created_at", timestamp)
        else:
            draft_id = str(uuid.uuid4())
            created_at = timestamp

        record = dict(snapshot)
        record.update({"id": draft_id, "created_at": created_at, "updated_at": timestamp})
        drafts = dict(self._drafts)
        drafts[draft_id] = json.loads(json.dumps(record))

        self._commit(dict(self._properties), drafts)
        return PersistenceResult.ok(draft_id)

    def load_draft(self, draft_id: str) -> Optional[dict[str, Any]]:
        """Get a copy of a stored draft, or None."""
        draft = self._drafts.get(draft_id)
        return json.loads(json.dumps(draft)) if draft is not None else None

    # =========================================================================
    # Query Operations
    # =========================================================================

    def delete_draft(self, draft_id: str) -> bool:
        """
        Delete a draft.

        Returns:
            True if deleted, False if not found
        """
        if draft_id not in self._drafts:
            return False

        drafts = dict(self._drafts)
        del drafts[draft_id]
        self._commit(dict(self._properties), drafts)
        return True

    def get(self, property_id: str) -> Optional[dict[str, Any]]:
        """Get a copy of a submitted property, or None."""
        record = self._properties.get(property_id)
        return json.loads(json.dumps(record)) if record is not None else None

    def list_properties(self) -> list[dict[str, Any]]:
        """All submitted properties, newest first."""
        return sorted(
            (json.loads(json.dumps(record)) for record in self._properties.values()),
            key=lambda record: record.get("created_at", ""),
            reverse=True,
        )

    def list_drafts(self) -> list[dict[str, Any]]:
        """All drafts, most recently saved first."""
        return sorted(
            (json.loads(json.dumps(record)) for record in self._drafts.values()),
            key=lambda record: record.get("updated_at", ""),
            reverse=True,
        )

    def count(self) -> int:
        """Get total number of submitted properties."""
        return len(self._properties)


# =============================================================================
# Singleton Instance
# =============================================================================

_repository_instance: Optional[PropertyRepository] = None


def get_property_repository(persist_path: Optional[str] = None) -> PropertyRepository:
    """
    Get the property repository singleton.

    Args:
        persist_path: Optional path for persistence (only used on first call)

    Returns:
        PropertyRepository instance
    """
    global _repository_instance
    if _repository_instance is None:
        _repository_instance = PropertyRepository(persist_path)
    return _repository_instance


def reset_property_repository() -> None:
    """Drop the singleton so the next call builds a fresh repository."""
    global _repository_instance
    _repository_instance = None
