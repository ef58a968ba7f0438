"""
Tests for Wizard Validation

Tests cover:
- Required fields and custom messages
- Numeric coercion and bounds
- Text length, pattern and URL rules
- Nested record list paths
- Cross-field constraints
- Full-entity validation and step grouping
"""

import copy

import pytest

from property_wizard.catalog import UnknownStepError
from property_wizard.validation import ValidationEngine


@pytest.fixture
def engine(registry):
    return ValidationEngine(registry)


# =============================================================================
# Required Fields
# =============================================================================


class TestRequiredFields:
    """Tests for missing required values."""

    def test_empty_identity_step(self, engine):
        errors = engine.validate_step("identity-location", {})

        assert errors == {
            "property_reference": "Property reference is required",
            "building_name": "Building name is required",
            "unit_number": "Unit number is required",
            "full_address": "Full address is required",
            "property_type": "Property type is required",
        }

    def test_valid_identity_step(self, engine, identity_values):
        assert engine.validate_step("identity-location", identity_values) == {}

    def test_whitespace_only_is_missing(self, engine, identity_values):
        identity_values["building_name"] = "   "
        errors = engine.validate_step("identity-location", identity_values)
        assert errors == {"building_name": "Building name is required"}

    def test_optional_fields_may_be_absent(self, engine):
        assert engine.validate_step("entertainment-hub", {}) == {}

    def test_short_address(self, engine, identity_values):
        identity_values["full_address"] = "Dubai"
        errors = engine.validate_step("identity-location", identity_values)
        assert errors == {"full_address": "Please provide a complete address"}

    def test_empty_required_list(self, engine):
        errors = engine.validate_step("cooking-essentials", {"major_appliances": []})
        assert errors["major_appliances"] == "At least one major appliance is required"

    def test_unknown_step_raises(self, engine):
        with pytest.raises(UnknownStepError):
            engine.validate_step("rooftop-pool", {})


# =============================================================================
# Numbers
# =============================================================================


class TestNumericFields:
    """Tests for NUMBER fields."""

    @pytest.fixture
    def space(self):
        return {"bedrooms": 2, "bathrooms": 1, "max_occupancy": 3}

    def test_valid_numbers(self, engine, space):
        assert engine.validate_step("space-capacity", space) == {}

    def test_digit_strings_are_coerced(self, engine):
        values = {"bedrooms": "3", "bathrooms": " 2 ", "max_occupancy": "6"}
        assert engine.validate_step("space-capacity", values) == {}

    def test_zero_bedrooms_allowed(self, engine, space):
        space["bedrooms"] = 0
        assert engine.validate_step("space-capacity", space) == {}

    def test_non_numeric_string(self, engine, space):
        space["bedrooms"] = "three"
        errors = engine.validate_step("space-capacity", space)
        assert errors == {"bedrooms": "Bedrooms must be a number"}

    def test_boolean_is_not_a_number(self, engine, space):
        space["bathrooms"] = True
        errors = engine.validate_step("space-capacity", space)
        assert errors == {"bathrooms": "Bathrooms must be a number"}

    def test_negative_bedrooms(self, engine, space):
        space["bedrooms"] = -1
        errors = engine.validate_step("space-capacity", space)
        assert errors == {"bedrooms": "Bedrooms cannot be negative"}

    def test_occupancy_minimum(self, engine, space):
        space["max_occupancy"] = 0
        errors = engine.validate_step("space-capacity", space)
        assert errors == {"max_occupancy": "Maximum occupancy must be at least 1"}

    def test_square_meters_must_be_positive(self, engine, space):
        space["square_meters"] = 0
        errors = engine.validate_step("space-capacity", space)
        assert errors == {"square_meters": "Square meters must be positive"}


# =============================================================================
# Text Rules
# =============================================================================


class TestTextFields:
    """Tests for length, pattern and URL rules."""

    @pytest.fixture
    def story(self):
        return {"description": "A" * 50}

    def test_description_minimum(self, engine):
        errors = engine.validate_step("description-story", {"description": "A" * 49})
        assert errors == {"description": "Description should be at least 50 characters"}

    def test_description_maximum(self, engine):
        errors = engine.validate_step("description-story", {"description": "A" * 2001})
        assert errors == {"description": "Description should not exceed 2000 characters"}

    def test_description_boundaries(self, engine, story):
        assert engine.validate_step("description-story", story) == {}
        story["description"] = "A" * 2000
        assert engine.validate_step("description-story", story) == {}

    def test_year_pattern(self, engine, story):
        story["year_built"] = "12"
        errors = engine.validate_step("description-story", story)
        assert errors == {"year_built": "Year built must be a 4-digit year"}

    def test_year_pattern_rejects_trailing_newline(self, engine, story):
        story["year_built"] = "2020\n"
        errors = engine.validate_step("description-story", story)
        assert errors == {"year_built": "Year built must be a 4-digit year"}

    def test_text_field_rejects_number(self, engine, story):
        story["year_built"] = 2012
        errors = engine.validate_step("description-story", story)
        assert list(errors) == ["year_built"]

    def test_invalid_url(self, engine):
        errors = engine.validate_step("visual-impression", {"primary_photo": "living-room.jpg"})
        assert errors == {"primary_photo": "Primary photo must be a valid URL"}

    def test_valid_url(self, engine):
        values = {"floor_plan": "https://cdn.example.com/plans/1204.pdf"}
        assert engine.validate_step("visual-impression", values) == {}

    def test_each_kitchen_photo_must_be_url(self, engine):
        values = {
            "kitchen_photos": [
                "https://cdn.example.com/kitchen/1.jpg",
                "not a url",
                "kitchen-2.jpg",
            ]
        }

        errors = engine.validate_step("special-kitchen", values)

        assert errors == {
            "kitchen_photos.1": "Kitchen photo must be a valid URL",
            "kitchen_photos.2": "Kitchen photo must be a valid URL",
        }

    def test_kitchen_photo_urls_accepted(self, engine):
        values = {"kitchen_photos": ["https://cdn.example.com/kitchen/1.jpg"]}
        assert engine.validate_step("special-kitchen", values) == {}


# =============================================================================
# Record Lists
# =============================================================================


class TestRecordLists:
    """Tests for nested record paths."""

    def test_missing_nested_value(self, engine):
        values = {
            "bed_configurations": [
                {"name": "Master", "size": "King", "type": "Double"},
                {"name": "Second", "size": "", "type": "Twin"},
            ]
        }
        errors = engine.validate_step("sleep-sanctuary", values)
        assert errors == {"bed_configurations.1.size": "Bed size is required"}

    def test_several_nested_errors(self, engine):
        values = {"bed_configurations": [{"name": "Master"}]}
        errors = engine.validate_step("sleep-sanctuary", values)
        assert errors == {
            "bed_configurations.0.size": "Bed size is required",
            "bed_configurations.0.type": "Bed type is required",
        }

    def test_entry_must_be_a_record(self, engine):
        errors = engine.validate_step("sleep-sanctuary", {"bed_configurations": ["King"]})
        assert list(errors) == ["bed_configurations.0"]

    def test_empty_record_list(self, engine):
        errors = engine.validate_step("sleep-sanctuary", {"bed_configurations": []})
        assert errors == {
            "bed_configurations": "At least one bed configuration is required"
        }

    def test_list_field_rejects_text(self, engine):
        errors = engine.validate_step("sleep-sanctuary", {"bed_configurations": "King"})
        assert list(errors) == ["bed_configurations"]


# =============================================================================
# Cross-Field Constraints
# =============================================================================


class TestCrossFieldConstraints:
    """Tests for FieldOrder and RequiredIf."""

    @pytest.fixture
    def story(self):
        return {"description": "A" * 60, "year_built": "2015"}

    def test_renovated_before_built(self, engine, story):
        story["year_renovated"] = "2010"
        errors = engine.validate_step("description-story", story)
        assert errors == {"year_renovated": "Year renovated cannot be before the year built"}

    def test_renovated_same_year(self, engine, story):
        story["year_renovated"] = "2015"
        assert engine.validate_step("description-story", story) == {}

    def test_order_skipped_when_field_invalid(self, engine, story):
        story["year_built"] = "15"
        story["year_renovated"] = "2010"
        errors = engine.validate_step("description-story", story)
        assert errors == {"year_built": "Year built must be a 4-digit year"}

    def test_hair_dryer_details_required_when_available(self, engine):
        values = {
            "shower_bath_config": "Walk-in shower",
            "towel_details": "Two per guest",
            "hair_dryer_available": True,
        }
        errors = engine.validate_step("bathroom-bliss", values)
        assert errors == {"hair_dryer_details": "Please describe the hair dryer"}

    def test_hair_dryer_details_optional_when_unavailable(self, engine):
        values = {
            "shower_bath_config": "Walk-in shower",
            "towel_details": "Two per guest",
            "hair_dryer_available": False,
        }
        assert engine.validate_step("bathroom-bliss", values) == {}


# =============================================================================
# Entity Validation
# =============================================================================


class TestEntityValidation:
    """Tests for the pre-submit gate."""

    def test_complete_snapshot_is_valid(self, engine, complete_snapshot):
        result = engine.validate_entity(complete_snapshot)

        assert result.valid
        assert result.errors == {}
        assert result.first_invalid_step is None

    def test_empty_snapshot(self, engine):
        result = engine.validate_entity({})

        assert not result.valid
        assert result.first_invalid_step == "identity-location"
        assert result.invalid_steps[0] == "identity-location"
        assert "connected-living" in result.errors_by_step

    def test_errors_grouped_by_owning_step(self, engine, complete_snapshot):
        del complete_snapshot["wifi_password"]
        complete_snapshot["bed_configurations"][0]["size"] = ""

        result = engine.validate_entity(complete_snapshot)

        assert result.errors_by_step == {
            "sleep-sanctuary": {"bed_configurations.0.size": "Bed size is required"},
            "connected-living": {"wifi_password": "WiFi password is required"},
        }
        assert result.first_invalid_step == "sleep-sanctuary"

    def test_photo_or_floor_plan_required(self, engine, complete_snapshot):
        del complete_snapshot["primary_photo"]

        result = engine.validate_entity(complete_snapshot)

        assert result.errors == {"primary_photo": "Please add a primary photo or a floor plan"}
        assert result.first_invalid_step == "visual-impression"

    def test_floor_plan_alone_is_enough(self, engine, complete_snapshot):
        del complete_snapshot["primary_photo"]
        complete_snapshot["floor_plan"] = "https://cdn.example.com/plans/1204.pdf"

        assert engine.validate_entity(complete_snapshot).valid

    def test_metadata_error_has_no_step(self, engine, complete_snapshot):
        complete_snapshot["status"] = "archived"

        result = engine.validate_entity(complete_snapshot)

        assert not result.valid
        assert "status" in result.errors
        assert result.errors_by_step == {}
        assert result.first_invalid_step is None

    def test_validation_does_not_modify_snapshot(self, engine, complete_snapshot):
        complete_snapshot["bedrooms"] = "2"
        before = copy.deepcopy(complete_snapshot)

        engine.validate_entity(complete_snapshot)

        assert complete_snapshot == before

    def test_to_dict(self, engine):
        data = engine.validate_entity({}).to_dict()
        assert data["valid"] is False
        assert data["first_invalid_step"] == "identity-location"

    def test_validate_category(self, engine):
        errors = engine.validate_category("technology", {"wifi_network": "Home"})
        assert errors == {"wifi_password": "WiFi password is required"}
