"""
Tests for the Property Wizard Step Catalog

Tests cover:
- Catalog shape (categories, steps, ordinals)
- Field ownership and dotted path resolution
- Schema construction errors
- Registry lookup errors
"""

import pytest

from property_wizard.catalog import (
    AtLeastOneOf,
    CategoryDefinition,
    FieldKind,
    FieldOrder,
    FieldSpec,
    Schema,
    SchemaDefinitionError,
    StepDefinition,
    StepSchemaRegistry,
    UnknownFieldError,
    UnknownStepError,
    is_filled,
)
from property_wizard.security import SENSITIVE_FIELDS


EXPECTED_STEP_IDS = [
    "identity-location",
    "space-capacity",
    "description-story",
    "visual-impression",
    "fire-emergency",
    "access-security",
    "safety-features",
    "cooking-essentials",
    "dining-cookware",
    "special-kitchen",
    "sleep-sanctuary",
    "bedroom-comfort",
    "bathroom-bliss",
    "bathroom-features",
    "connected-living",
    "entertainment-hub",
    "laundry-solutions",
    "cleaning-maintenance",
    "climate-control",
    "getting-around",
    "local-gems",
    "inclusive-design",
    "green-living",
]


def _text(name, **kwargs):
    return FieldSpec(name=name, kind=FieldKind.TEXT, **kwargs)


def _step(step_id, category, ordinal, *fields):
    return StepDefinition(
        step_id=step_id,
        title=step_id.title(),
        category=category,
        ordinal=ordinal,
        schema=Schema(fields=tuple(fields)),
    )


# =============================================================================
# Catalog Shape
# =============================================================================


class TestCatalogShape:
    """Tests for the static property catalog."""

    def test_eight_categories(self, registry):
        assert [c.category_id for c in registry.categories] == [
            "basic-info",
            "safety-security",
            "kitchen-dining",
            "bedrooms-bathrooms",
            "technology",
            "practical-living",
            "location-lifestyle",
            "accessibility-sustainability",
        ]

    def test_steps_in_wizard_order(self, registry):
        assert [s.step_id for s in registry.steps] == EXPECTED_STEP_IDS
        assert registry.step_count == 23

    def test_ordinals_are_positions(self, registry):
        assert [s.ordinal for s in registry.steps] == list(range(23))

    def test_every_category_has_required_fields(self, registry):
        for category_id, required in registry.required_fields_by_category().items():
            assert required, category_id

    def test_technology_checklist(self, registry):
        catalog = registry.required_fields_by_category()
        assert catalog["technology"] == ("wifi_network", "wifi_password")

    def test_sensitive_fields_are_declared(self, registry):
        for name in SENSITIVE_FIELDS:
            assert registry.is_known_field(name)

    def test_to_dict_lists_every_step(self, registry):
        data = registry.to_dict()
        assert len(data["categories"]) == 8
        assert len(data["steps"]) == 23
        assert data["steps"][0]["required_fields"][0] == "property_reference"


# =============================================================================
# Lookups
# =============================================================================


class TestRegistryLookup:
    """Tests for step and field lookups."""

    def test_schema_for_known_step(self, registry):
        schema = registry.schema_for("connected-living")
        assert "wifi_password" in schema.field_names

    def test_schema_for_unknown_step_raises(self, registry):
        with pytest.raises(UnknownStepError):
            registry.schema_for("rooftop-pool")

    def test_unknown_step_is_lookup_error(self, registry):
        with pytest.raises(LookupError):
            registry.step("rooftop-pool")

    @pytest.mark.parametrize("index", [-1, 23, 100])
    def test_step_at_out_of_range(self, registry, index):
        with pytest.raises(UnknownStepError):
            registry.step_at(index)

    def test_index_of(self, registry):
        assert registry.index_of("sleep-sanctuary") == 10

    def test_step_for_nested_path(self, registry):
        step = registry.step_for_field("bed_configurations.0.name")
        assert step.step_id == "sleep-sanctuary"

    def test_metadata_field_has_no_step(self, registry):
        assert registry.step_for_field("status") is None
        assert registry.step_for_field("listing_credentials") is None

    def test_unknown_field_raises(self, registry):
        with pytest.raises(UnknownFieldError):
            registry.step_for_field("helipad")
        with pytest.raises(UnknownFieldError):
            registry.field_spec("helipad")

    def test_entity_schema_includes_metadata(self, registry):
        names = registry.entity_schema().field_names
        assert "status" in names
        assert "revenue_band" in names
        assert "building_name" in names

    def test_unknown_category_raises(self, registry):
        with pytest.raises(UnknownStepError):
            registry.category("garden")


# =============================================================================
# Schema Definition Errors
# =============================================================================


class TestSchemaDefinition:
    """Malformed schemas fail at construction."""

    def test_min_length_above_max_length(self):
        with pytest.raises(SchemaDefinitionError):
            _text("name", min_length=10, max_length=5)

    def test_choices_on_number_field(self):
        with pytest.raises(SchemaDefinitionError):
            FieldSpec(name="floors", kind=FieldKind.NUMBER, choices=("1", "2"))

    def test_url_on_number_field(self):
        with pytest.raises(SchemaDefinitionError):
            FieldSpec(name="floors", kind=FieldKind.NUMBER, url=True)

    def test_url_allowed_on_text_list(self):
        spec = FieldSpec(name="photos", kind=FieldKind.TEXT_LIST, url=True)
        assert spec.url

    def test_item_fields_on_text_field(self):
        with pytest.raises(SchemaDefinitionError):
            _text("rooms", item_fields=(_text("name"),))

    def test_record_list_needs_item_fields(self):
        with pytest.raises(SchemaDefinitionError):
            FieldSpec(name="rooms", kind=FieldKind.RECORD_LIST)

    def test_unknown_message_key(self):
        with pytest.raises(SchemaDefinitionError):
            _text("name", messages={"too_long": "Nope"})

    def test_dotted_field_name(self):
        with pytest.raises(SchemaDefinitionError):
            _text("rooms.name")

    def test_duplicate_field_in_schema(self):
        with pytest.raises(SchemaDefinitionError):
            Schema(fields=(_text("name"), _text("name")))

    def test_constraint_on_unknown_field(self):
        with pytest.raises(SchemaDefinitionError):
            Schema(
                fields=(_text("year_built"),),
                constraints=(FieldOrder("year_built", "year_renovated", "Bad order"),),
            )

    def test_at_least_one_of_needs_two_fields(self):
        with pytest.raises(SchemaDefinitionError):
            AtLeastOneOf(names=("primary_photo",), message="Add a photo")

    def test_step_tagged_with_other_category(self):
        with pytest.raises(SchemaDefinitionError):
            CategoryDefinition("basics", "Basics", (_step("one", "other", 0, _text("a")),))

    def test_field_owned_by_two_steps(self):
        category = CategoryDefinition(
            "basics",
            "Basics",
            (
                _step("one", "basics", 0, _text("name")),
                _step("two", "basics", 1, _text("name")),
            ),
        )
        with pytest.raises(SchemaDefinitionError):
            StepSchemaRegistry((category,))

    def test_duplicate_ordinals(self):
        category = CategoryDefinition(
            "basics",
            "Basics",
            (
                _step("one", "basics", 0, _text("a")),
                _step("two", "basics", 0, _text("b")),
            ),
        )
        with pytest.raises(SchemaDefinitionError):
            StepSchemaRegistry((category,))

    def test_label_defaults_from_name(self):
        assert _text("building_name").label == "Building name"


# =============================================================================
# Filled Values
# =============================================================================


class TestIsFilled:
    """Tests for the shared notion of a provided value."""

    @pytest.mark.parametrize("value", [None, "", "   ", [], {}, ()])
    def test_not_filled(self, value):
        assert not is_filled(value)

    @pytest.mark.parametrize("value", [False, 0, "x", ["a"], 0.0])
    def test_filled(self, value):
        assert is_filled(value)
