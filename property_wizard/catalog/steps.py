"""
Property Wizard Catalog - Static Ordered Step Definitions

The eight checklist categories and their steps, in wizard order.
Required fields double as the completion checklist for each category.
"""

from __future__ import annotations

from typing import Final

from property_wizard.catalog.schema import (
    AtLeastOneOf,
    CategoryDefinition,
    FieldKind,
    FieldOrder,
    FieldSpec,
    RequiredIf,
    Schema,
    StepDefinition,
)


# =============================================================================
# Field Shorthands
# =============================================================================


def _text(name: str, label: str, required: bool = False, **kwargs) -> FieldSpec:
    return FieldSpec(name=name, kind=FieldKind.TEXT, label=label, required=required, **kwargs)


def _number(name: str, label: str, required: bool = False, **kwargs) -> FieldSpec:
    return FieldSpec(name=name, kind=FieldKind.NUMBER, label=label, required=required, **kwargs)


def _flag(name: str, label: str) -> FieldSpec:
    return FieldSpec(name=name, kind=FieldKind.BOOLEAN, label=label)


def _tags(name: str, label: str, required: bool = False, **kwargs) -> FieldSpec:
    return FieldSpec(name=name, kind=FieldKind.TEXT_LIST, label=label, required=required, **kwargs)


def _required_text(name: str, label: str, message: str, **kwargs) -> FieldSpec:
    return _text(name, label, required=True, min_length=1, messages={"required": message, "min_length": message}, **kwargs)


YEAR_PATTERN: Final[str] = r"^\d{4}$"


# =============================================================================
# Basic Information
# =============================================================================

IDENTITY_LOCATION: Final = Schema(
    fields=(
        _required_text("property_reference", "Property reference", "Property reference is required"),
        _required_text("building_name", "Building name", "Building name is required"),
        _required_text("unit_number", "Unit number", "Unit number is required"),
        _text(
            "full_address",
            "Full address",
            required=True,
            min_length=10,
            messages={
                "required": "Full address is required",
                "min_length": "Please provide a complete address",
            },
        ),
        _required_text("property_type", "Property type", "Property type is required"),
    )
)

SPACE_CAPACITY: Final = Schema(
    fields=(
        _number(
            "square_meters",
            "Square meters",
            minimum=0,
            exclusive_minimum=True,
            messages={
                "type": "Square meters must be a number",
                "minimum": "Square meters must be positive",
            },
        ),
        _number(
            "bedrooms",
            "Bedrooms",
            required=True,
            minimum=0,
            messages={
                "required": "Number of bedrooms is required",
                "type": "Bedrooms must be a number",
                "minimum": "Bedrooms cannot be negative",
            },
        ),
        _number(
            "bathrooms",
            "Bathrooms",
            required=True,
            minimum=0,
            messages={
                "required": "Number of bathrooms is required",
                "type": "Bathrooms must be a number",
                "minimum": "Bathrooms cannot be negative",
            },
        ),
        _number(
            "max_occupancy",
            "Maximum occupancy",
            required=True,
            minimum=1,
            messages={
                "required": "Maximum occupancy is required",
                "type": "Maximum occupancy must be a number",
                "minimum": "Maximum occupancy must be at least 1",
            },
        ),
    )
)

DESCRIPTION_STORY: Final = Schema(
    fields=(
        _text(
            "year_built",
            "Year built",
            pattern=YEAR_PATTERN,
            messages={"pattern": "Year built must be a 4-digit year"},
        ),
        _text(
            "year_renovated",
            "Year renovated",
            pattern=YEAR_PATTERN,
            messages={"pattern": "Year renovated must be a 4-digit year"},
        ),
        _text(
            "description",
            "Description",
            required=True,
            min_length=50,
            max_length=2000,
            messages={
                "required": "Description is required",
                "min_length": "Description should be at least 50 characters",
                "max_length": "Description should not exceed 2000 characters",
            },
        ),
    ),
    constraints=(
        FieldOrder(
            earlier="year_built",
            later="year_renovated",
            message="Year renovated cannot be before the year built",
        ),
    ),
)

VISUAL_IMPRESSION: Final = Schema(
    fields=(
        _text(
            "primary_photo",
            "Primary photo",
            url=True,
            messages={"url": "Primary photo must be a valid URL"},
        ),
        _text(
            "floor_plan",
            "Floor plan",
            url=True,
            messages={"url": "Floor plan must be a valid URL"},
        ),
    )
)


# =============================================================================
# Safety & Security
# =============================================================================

SMOKE_DETECTOR_FIELDS: Final = (
    _required_text("location", "Location", "Location is required"),
    _text("expiry_date", "Expiry date"),
)

FIRE_EMERGENCY: Final = Schema(
    fields=(
        FieldSpec(
            name="smoke_detectors",
            kind=FieldKind.RECORD_LIST,
            label="Smoke detectors",
            item_fields=SMOKE_DETECTOR_FIELDS,
        ),
        _required_text(
            "fire_extinguisher_location",
            "Fire extinguisher location",
            "Fire extinguisher location is required",
        ),
        _text("fire_extinguisher_expiry", "Fire extinguisher expiry"),
        _flag("emergency_exit_plan", "Emergency exit plan"),
        _required_text("first_aid_location", "First aid kit location", "First aid kit location is required"),
    )
)

ACCESS_SECURITY: Final = Schema(
    fields=(
        _required_text("door_lock_type", "Door lock type", "Door lock type is required"),
        _text("smart_lock_code", "Smart lock code"),
        _required_text(
            "building_security",
            "Building security",
            "Building security information is required",
        ),
        _tags("cctv_coverage", "CCTV coverage"),
    )
)

SAFETY_FEATURES: Final = Schema(
    fields=(
        _required_text("emergency_contacts", "Emergency contacts", "Emergency contacts are required"),
        _text("window_security", "Window security"),
        _text("balcony_safety", "Balcony safety"),
        _tags("child_safety_features", "Child safety features"),
    )
)


# =============================================================================
# Kitchen & Dining
# =============================================================================

COOKING_ESSENTIALS: Final = Schema(
    fields=(
        _tags(
            "major_appliances",
            "Major appliances",
            required=True,
            min_items=1,
            messages={
                "required": "At least one major appliance is required",
                "min_items": "At least one major appliance is required",
            },
        ),
        _tags("small_appliances", "Small appliances"),
        _required_text("cookware_inventory", "Cookware inventory", "Cookware inventory is required"),
        _required_text("dishware_count", "Dishware count", "Dishware count is required"),
        _number(
            "dining_capacity",
            "Dining capacity",
            required=True,
            minimum=1,
            messages={
                "required": "Dining capacity is required",
                "type": "Dining capacity must be a number",
                "minimum": "Dining capacity must be at least 1",
            },
        ),
    )
)

DINING_COOKWARE: Final = Schema(
    fields=(
        _text("water_filtration", "Water filtration"),
        _text("coffee_tea_facilities", "Coffee & tea facilities"),
        _text("waste_disposal", "Waste disposal"),
        _tags("pantry_staples", "Pantry staples"),
    )
)

SPECIAL_KITCHEN: Final = Schema(
    fields=(
        _text("special_features", "Special features"),
        _text("counter_material", "Counter material"),
        _tags(
            "kitchen_photos",
            "Kitchen photos",
            url=True,
            messages={"url": "Kitchen photo must be a valid URL"},
        ),
    )
)


# =============================================================================
# Bedrooms & Bathrooms
# =============================================================================

ROOM_CONFIG_FIELDS: Final = (
    _required_text("name", "Room name", "Room name is required"),
    _required_text("size", "Bed size", "Bed size is required"),
    _required_text("type", "Bed type", "Bed type is required"),
)

SLEEP_SANCTUARY: Final = Schema(
    fields=(
        FieldSpec(
            name="bed_configurations",
            kind=FieldKind.RECORD_LIST,
            label="Bed configurations",
            required=True,
            min_items=1,
            item_fields=ROOM_CONFIG_FIELDS,
            messages={
                "required": "At least one bed configuration is required",
                "min_items": "At least one bed configuration is required",
            },
        ),
        _text("extra_bedding_location", "Extra bedding location"),
        _text("mattress_type", "Mattress type"),
        _text("pillow_details", "Pillow details"),
        _text("closet_details", "Closet details"),
    )
)

BEDROOM_COMFORT: Final = Schema(
    fields=(
        _flag("blackout_curtains", "Blackout curtains"),
        _tags("bedroom_electronics", "Bedroom electronics"),
        _text("furniture_inventory", "Furniture inventory"),
        _tags("bedroom_amenities", "Bedroom amenities"),
    )
)

BATHROOM_BLISS: Final = Schema(
    fields=(
        _required_text(
            "shower_bath_config",
            "Shower/bath configuration",
            "Shower/bath configuration is required",
        ),
        _required_text("towel_details", "Towel details", "Towel details are required"),
        _tags("toiletries_provided", "Toiletries provided"),
        _flag("hair_dryer_available", "Hair dryer available"),
        _text("hair_dryer_details", "Hair dryer details"),
    ),
    constraints=(
        RequiredIf(
            field="hair_dryer_details",
            when="hair_dryer_available",
            message="Please describe the hair dryer",
        ),
    ),
)

BATHROOM_FEATURES: Final = Schema(
    fields=(
        _text("water_pressure", "Water pressure"),
        _text("hot_water_system", "Hot water system"),
        _text("ventilation", "Ventilation"),
        _tags("bathroom_special_features", "Bathroom special features"),
        _tags("bathroom_accessibility_features", "Bathroom accessibility features"),
    )
)


# =============================================================================
# Technology
# =============================================================================

CONNECTED_LIVING: Final = Schema(
    fields=(
        _required_text("wifi_network", "WiFi network", "WiFi network name is required"),
        _required_text("wifi_password", "WiFi password", "WiFi password is required"),
        _text("internet_speed", "Internet speed"),
        _tags("smart_home_features", "Smart home features"),
        _text("router_location", "Router location"),
    )
)

ENTERTAINMENT_HUB: Final = Schema(
    fields=(
        _text("tv_details", "TV details"),
        _text("streaming_services", "Streaming services"),
        _text("speaker_systems", "Speaker systems"),
        _tags("remote_controls", "Remote controls"),
        _text("charging_stations", "Charging stations"),
        _text("backup_solutions", "Backup solutions"),
    )
)


# =============================================================================
# Practical Living
# =============================================================================

UTILITY_ACCOUNT_FIELDS: Final = (
    _required_text("provider", "Provider", "Provider is required"),
    _text("account_number", "Account number"),
    _text("login", "Login"),
)

LAUNDRY_SOLUTIONS: Final = Schema(
    fields=(
        _required_text("washer_details", "Washer details", "Washer details are required"),
        _required_text("dryer_details", "Dryer details", "Dryer details are required"),
        _flag("detergent_provided", "Detergent provided"),
        _flag("iron_board_available", "Iron & board available"),
        _text("drying_rack_location", "Drying rack location"),
        _flag("laundry_basket_available", "Laundry basket available"),
        _text("building_laundry_info", "Building laundry info"),
    )
)

CLEANING_MAINTENANCE: Final = Schema(
    fields=(
        _required_text("vacuum_details", "Vacuum details", "Vacuum details are required"),
        _tags("cleaning_supplies", "Cleaning supplies"),
        _text("cleaning_schedule", "Cleaning schedule"),
        _text("special_instructions", "Special instructions"),
        _flag("stain_removal_kit", "Stain removal kit"),
    )
)

CLIMATE_CONTROL: Final = Schema(
    fields=(
        _required_text("ac_units_details", "AC units", "AC unit details are required"),
        _required_text("heating_system", "Heating system", "Heating system details are required"),
        _text("thermostat_instructions", "Thermostat instructions"),
        _text("ventilation_systems", "Ventilation systems"),
        _text("air_purifiers", "Air purifiers"),
        _text("electrical_panel_location", "Electrical panel location"),
        FieldSpec(
            name="utility_accounts",
            kind=FieldKind.RECORD_LIST,
            label="Utility accounts",
            item_fields=UTILITY_ACCOUNT_FIELDS,
        ),
    )
)


# =============================================================================
# Location & Lifestyle
# =============================================================================

NEARBY_LOCATION_FIELDS: Final = (
    _required_text("type", "Location type", "Location type is required"),
    _required_text("name", "Location name", "Location name is required"),
    _required_text("distance", "Distance", "Distance is required"),
    _text("walkTime", "Walk time"),
)

GETTING_AROUND: Final = Schema(
    fields=(
        _required_text("public_transport", "Public transport", "Public transport details are required"),
        FieldSpec(
            name="nearby_locations",
            kind=FieldKind.RECORD_LIST,
            label="Nearby locations",
            item_fields=NEARBY_LOCATION_FIELDS,
        ),
        _text("walking_score", "Walking score"),
        _required_text(
            "neighborhood_description",
            "Neighborhood description",
            "Neighborhood description is required",
        ),
    )
)

LOCAL_GEMS: Final = Schema(
    fields=(
        _tags("restaurants", "Restaurants"),
        _required_text("grocery_shopping", "Grocery shopping", "Grocery shopping details are required"),
        _tags("tourist_attractions", "Tourist attractions"),
        _required_text("emergency_services", "Emergency services", "Emergency services are required"),
        _text("local_tips", "Local tips"),
        _text("weather_patterns", "Weather patterns"),
        _text("safety_assessment", "Safety assessment"),
    )
)


# =============================================================================
# Accessibility & Sustainability
# =============================================================================

INCLUSIVE_DESIGN: Final = Schema(
    fields=(
        _required_text("step_free_access", "Step-free access", "Step-free access details are required"),
        _text("elevator_accessibility", "Elevator accessibility"),
        _text("doorway_widths", "Doorway widths"),
        _tags("bathroom_features", "Accessible bathroom features"),
        _text("kitchen_height", "Kitchen height"),
        _tags("visual_features", "Visual features"),
        _tags("auditory_features", "Auditory features"),
    )
)

GREEN_LIVING: Final = Schema(
    fields=(
        _text("energy_rating", "Energy rating"),
        _text("renewable_features", "Renewable features"),
        _required_text(
            "recycling_instructions",
            "Recycling instructions",
            "Recycling instructions are required",
        ),
        _tags("efficient_appliances", "Efficient appliances"),
        _tags("water_conservation", "Water conservation"),
        _tags("eco_products", "Eco products"),
        _text("sustainable_materials", "Sustainable materials"),
    )
)


# =============================================================================
# Entity Metadata and Entity-Level Rules
# =============================================================================

PROPERTY_STATUSES: Final[tuple[str, ...]] = ("active", "maintenance", "inactive", "pending")
REVENUE_BANDS: Final[tuple[str, ...]] = ("budget", "mid-range", "luxury", "ultra-luxury")

# Not owned by any step. id and the timestamps belong to persistence
ENTITY_METADATA_FIELDS: Final[tuple[FieldSpec, ...]] = (
    _text("id", "Draft id", system_managed=True),
    _text(
        "status",
        "Status",
        choices=PROPERTY_STATUSES,
        messages={"choices": "Status must be one of: " + ", ".join(PROPERTY_STATUSES)},
    ),
    _text(
        "revenue_band",
        "Revenue band",
        choices=REVENUE_BANDS,
        messages={"choices": "Revenue band must be one of: " + ", ".join(REVENUE_BANDS)},
    ),
    _text("created_at", "Created at", system_managed=True),
    _text("updated_at", "Updated at", system_managed=True),
    _text("listing_credentials", "Listing platform credentials"),
)

ENTITY_CONSTRAINTS: Final = (
    AtLeastOneOf(
        names=("primary_photo", "floor_plan"),
        message="Please add a primary photo or a floor plan",
    ),
)


# =============================================================================
# Ordered Catalog
# =============================================================================

# (category_id, title, ((step_id, title, subtitle, schema), ...))
_CATALOG: Final = (
    (
        "basic-info",
        "Basic Information",
        (
            ("identity-location", "Identity & Location", "Let's start with the essentials", IDENTITY_LOCATION),
            ("space-capacity", "Space & Capacity", "Tell us about the property size", SPACE_CAPACITY),
            ("description-story", "Description & Story", "Describe the property in detail", DESCRIPTION_STORY),
            ("visual-impression", "Visual First Impression", "Add photos and floor plans", VISUAL_IMPRESSION),
        ),
    ),
    (
        "safety-security",
        "Safety & Security",
        (
            ("fire-emergency", "Fire & Emergency Safety", "Essential safety equipment", FIRE_EMERGENCY),
            ("access-security", "Access & Building Security", "Secure entry and access", ACCESS_SECURITY),
            ("safety-features", "Safety Features & Contacts", "Additional safety information", SAFETY_FEATURES),
        ),
    ),
    (
        "kitchen-dining",
        "Kitchen & Dining",
        (
            ("cooking-essentials", "Cooking Essentials", "Major appliances and features", COOKING_ESSENTIALS),
            ("dining-cookware", "Dining & Cookware", "Dining capacity and inventory", DINING_COOKWARE),
            ("special-kitchen", "Special Kitchen Features", "Unique kitchen amenities", SPECIAL_KITCHEN),
        ),
    ),
    (
        "bedrooms-bathrooms",
        "Bedrooms & Bathrooms",
        (
            ("sleep-sanctuary", "Sleep Sanctuary", "Bed configurations and comfort", SLEEP_SANCTUARY),
            ("bedroom-comfort", "Bedroom Comfort", "Additional bedroom amenities", BEDROOM_COMFORT),
            ("bathroom-bliss", "Bathroom Bliss", "Shower, bath, and towels", BATHROOM_BLISS),
            ("bathroom-features", "Bathroom Features", "Special bathroom amenities", BATHROOM_FEATURES),
        ),
    ),
    (
        "technology",
        "Technology",
        (
            ("connected-living", "Connected Living", "WiFi, smart home, and charging", CONNECTED_LIVING),
            ("entertainment-hub", "Entertainment Hub", "TV, streaming, and audio", ENTERTAINMENT_HUB),
        ),
    ),
    (
        "practical-living",
        "Practical Living",
        (
            ("laundry-solutions", "Laundry Solutions", "Washer, dryer, and laundry supplies", LAUNDRY_SOLUTIONS),
            ("cleaning-maintenance", "Cleaning & Maintenance", "Cleaning supplies and schedules", CLEANING_MAINTENANCE),
            ("climate-control", "Climate Control", "AC, heating, and ventilation", CLIMATE_CONTROL),
        ),
    ),
    (
        "location-lifestyle",
        "Location & Lifestyle",
        (
            ("getting-around", "Getting Around", "Transport and accessibility", GETTING_AROUND),
            ("local-gems", "Local Gems", "Restaurants, shops, and attractions", LOCAL_GEMS),
        ),
    ),
    (
        "accessibility-sustainability",
        "Accessibility & Sustainability",
        (
            ("inclusive-design", "Inclusive Design", "Accessibility features", INCLUSIVE_DESIGN),
            ("green-living", "Green Living", "Eco-friendly features", GREEN_LIVING),
        ),
    ),
)


def build_property_categories() -> tuple[CategoryDefinition, ...]:
    """Build the ordered category tuple; step ordinals follow catalog order."""
    categories: list[CategoryDefinition] = []
    ordinal = 0
    for category_id, category_title, step_rows in _CATALOG:
        steps: list[StepDefinition] = []
        for step_id, title, subtitle, schema in step_rows:
            steps.append(
                StepDefinition(
                    step_id=step_id,
                    title=title,
                    subtitle=subtitle,
                    category=category_id,
                    ordinal=ordinal,
                    schema=schema,
                )
            )
            ordinal += 1
        categories.append(
            CategoryDefinition(category_id=category_id, title=category_title, steps=tuple(steps))
        )
    return tuple(categories)


PROPERTY_CATEGORIES: Final[tuple[CategoryDefinition, ...]] = build_property_categories()
