"""
Tests for the Property Repository

Tests cover:
- Entity creation and draft replacement
- Draft insert/update/load/delete
- JSON file persistence
- Failed writes leave memory unchanged
- Singleton accessor
"""

import asyncio
import json
import logging

import pytest

from property_wizard.session import (
    ExternalOperationError,
    PropertyRepository,
    SubmitFailed,
    WizardController,
    get_property_repository,
    reset_property_repository,
)


class TestCreateEntity:
    """Tests for create_entity."""

    def test_create_assigns_id_and_pending_status(self, repository, complete_snapshot):
        result = repository.create_entity(complete_snapshot)

        assert result.success
        record = repository.get(result.id)
        assert record["status"] == "pending"
        assert record["building_name"] == "Marina Heights"
        assert record["created_at"] == record["updated_at"]
        assert repository.count() == 1

    def test_create_deletes_named_draft(self, repository, complete_snapshot):
        draft = repository.save_draft({"building_name": "Marina Heights"})
        complete_snapshot["id"] = draft.id

        result = repository.create_entity(complete_snapshot)

        assert result.id != draft.id
        assert repository.load_draft(draft.id) is None

    def test_records_are_copies(self, repository, complete_snapshot):
        result = repository.create_entity(complete_snapshot)

        repository.get(result.id)["building_name"] = "Changed"

        assert repository.get(result.id)["building_name"] == "Marina Heights"

    def test_list_properties(self, repository, complete_snapshot):
        repository.create_entity(complete_snapshot)
        repository.create_entity(complete_snapshot)
        assert len(repository.list_properties()) == 2


class TestDrafts:
    """Tests for draft storage."""

    def test_insert_then_update(self, repository):
        first = repository.save_draft({"building_name": "Marina Heights"})
        second = repository.save_draft({"id": first.id, "building_name": "Marina Towers"})

        assert second.id == first.id
        assert repository.load_draft(first.id)["building_name"] == "Marina Towers"
        assert len(repository.list_drafts()) == 1

    def test_update_keeps_created_at(self, repository):
        first = repository.save_draft({"unit_number": "1204"})
        created_at = repository.load_draft(first.id)["created_at"]

        repository.save_draft({"id": first.id, "unit_number": "1205"})

        assert repository.load_draft(first.id)["created_at"] == created_at

    def test_update_unknown_draft(self, repository):
        with pytest.raises(ExternalOperationError):
            repository.save_draft({"id": "missing", "unit_number": "1204"})

    def test_delete_draft(self, repository):
        draft = repository.save_draft({"unit_number": "1204"})

        assert repository.delete_draft(draft.id)
        assert not repository.delete_draft(draft.id)
        assert repository.list_drafts() == []


class TestFilePersistence:
    """Tests for the optional JSON file."""

    def test_reload_from_file(self, tmp_path, complete_snapshot):
        path = tmp_path / "data" / "properties.json"
        repository = PropertyRepository(str(path))
        created = repository.create_entity(complete_snapshot)
        draft = repository.save_draft({"unit_number": "1204"})

        reloaded = PropertyRepository(str(path))

        assert reloaded.get(created.id)["unit_number"] == "1204"
        assert reloaded.load_draft(draft.id)["unit_number"] == "1204"

    def test_corrupt_file_starts_fresh(self, tmp_path, caplog):
        path = tmp_path / "properties.json"
        path.write_text("{not json")

        with caplog.at_level(logging.WARNING):
            repository = PropertyRepository(str(path))

        assert repository.count() == 0
        assert "Could not load repository data" in caplog.text

    def test_file_contents(self, tmp_path):
        path = tmp_path / "properties.json"
        repository = PropertyRepository(str(path))
        repository.save_draft({"unit_number": "1204"})

        data = json.loads(path.read_text())

        assert len(data["drafts"]) == 1
        assert data["properties"] == {}


class TestFailedWrites:
    """Tests for writes that cannot reach the file."""

    @pytest.fixture
    def blocked_repository(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        return PropertyRepository(str(blocker / "properties.json"))

    def test_failed_create_stores_nothing(self, blocked_repository, complete_snapshot):
        with pytest.raises(ExternalOperationError):
            blocked_repository.create_entity(complete_snapshot)

        assert blocked_repository.count() == 0

    def test_failed_create_keeps_replaced_draft(self, tmp_path, complete_snapshot):
        path = tmp_path / "properties.json"
        repository = PropertyRepository(str(path))
        draft = repository.save_draft({"building_name": "Marina Heights"})
        complete_snapshot["id"] = draft.id

        path.unlink()
        path.mkdir()
        with pytest.raises(ExternalOperationError):
            repository.create_entity(complete_snapshot)

        assert repository.load_draft(draft.id)["building_name"] == "Marina Heights"
        assert repository.count() == 0

    def test_failed_draft_save_stores_nothing(self, blocked_repository):
        with pytest.raises(ExternalOperationError):
            blocked_repository.save_draft({"unit_number": "1204"})

        assert blocked_repository.list_drafts() == []

    def test_retried_submit_never_duplicates(self, blocked_repository, complete_snapshot):
        controller = WizardController(blocked_repository, snapshot=complete_snapshot)

        first = asyncio.run(controller.submit())
        second = asyncio.run(controller.submit())

        assert isinstance(first, SubmitFailed)
        assert isinstance(second, SubmitFailed)
        assert blocked_repository.count() == 0
        assert controller.snapshot == complete_snapshot


class TestSingleton:
    """Tests for get_property_repository."""

    def test_same_instance_until_reset(self):
        reset_property_repository()
        try:
            first = get_property_repository()
            assert get_property_repository() is first

            reset_property_repository()
            assert get_property_repository() is not first
        finally:
            reset_property_repository()
