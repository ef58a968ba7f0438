"""
Shared fixtures for the property wizard tests.
"""

import copy

import pytest

from property_wizard.catalog import get_default_registry
from property_wizard.security import SensitiveFieldPolicy
from property_wizard.session import PropertyRepository


# =============================================================================
# Snapshots
# =============================================================================

COMPLETE_SNAPSHOT = {
    # Basic information
    "property_reference": "MAR-1204",
    "building_name": "Marina Heights",
    "unit_number": "1204",
    "full_address": "Marina Walk, Dubai Marina, Dubai",
    "property_type": "apartment",
    "square_meters": 110,
    "bedrooms": 2,
    "bathrooms": 2,
    "max_occupancy": 4,
    "year_built": "2012",
    "year_renovated": "2020",
    "description": (
        "Bright two-bedroom apartment on the twelfth floor with full marina "
        "views, a wraparound balcony and direct access to the promenade."
    ),
    "primary_photo": "https://cdn.example.com/properties/mar-1204/living.jpg",
    # Safety & security
    "smoke_detectors": [{"location": "Hallway", "expiry_date": "2027-01-01"}],
    "fire_extinguisher_location": "Kitchen cabinet under the sink",
    "first_aid_location": "Master bathroom vanity",
    "door_lock_type": "Smart lock with keypad",
    "smart_lock_code": "482913",
    "building_security": "24/7 concierge and key-card lifts",
    "emergency_contacts": "Building manager +971 4 000 0000",
    # Kitchen & dining
    "major_appliances": ["Oven", "Fridge", "Dishwasher"],
    "cookware_inventory": "Full pan set, wok, baking trays",
    "dishware_count": "Eight place settings",
    "dining_capacity": 4,
    # Bedrooms & bathrooms
    "bed_configurations": [
        {"name": "Master", "size": "King", "type": "Double"},
        {"name": "Second", "size": "Single", "type": "Twin"},
    ],
    "shower_bath_config": "Rain shower and separate tub",
    "towel_details": "Two bath towels per guest",
    "hair_dryer_available": True,
    "hair_dryer_details": "Dyson, top vanity drawer",
    # Technology
    "wifi_network": "MarinaHeights-1204",
    "wifi_password": "sunset-1204",
    # Practical living
    "washer_details": "Bosch front loader",
    "dryer_details": "Bosch condenser dryer",
    "vacuum_details": "Dyson cordless in the hall closet",
    "ac_units_details": "Central AC, one unit per room",
    "heating_system": "Not required",
    "utility_accounts": [
        {"provider": "DEWA", "account_number": "2001887766", "login": "ops@example.com"}
    ],
    # Location & lifestyle
    "public_transport": "Tram stop two minutes away",
    "neighborhood_description": "Waterfront promenade with cafes",
    "grocery_shopping": "Supermarket in the building podium",
    "emergency_services": "Hospital ten minutes by car",
    # Accessibility & sustainability
    "step_free_access": "Level access from the lobby",
    "recycling_instructions": "Recycling chute on every floor",
    # Entity metadata
    "listing_credentials": "airbnb:ops@example.com",
}


@pytest.fixture
def complete_snapshot():
    """Snapshot that passes full-entity validation."""
    return copy.deepcopy(COMPLETE_SNAPSHOT)


@pytest.fixture
def identity_values():
    """Values that make the first step valid."""
    return {
        "property_reference": "MAR-1204",
        "building_name": "Marina Heights",
        "unit_number": "1204",
        "full_address": "Marina Walk, Dubai Marina, Dubai",
        "property_type": "apartment",
    }


# =============================================================================
# Components
# =============================================================================


@pytest.fixture
def registry():
    return get_default_registry()


@pytest.fixture
def policy():
    return SensitiveFieldPolicy()


@pytest.fixture
def repository():
    """In-memory repository, no file persistence."""
    return PropertyRepository()
