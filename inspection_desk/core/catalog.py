"""Inspection point catalog and the sample clients used to seed a new store."""
from __future__ import annotations

from typing import Dict, List

from inspection_desk.core.models import Client

INSPECTION_CATEGORIES: Dict[str, List[str]] = {
    "Structural & Interior": [
        "Hairline Cracks",
        "Ceilings",
        "Walls",
        "Floors",
        "Doors & Locks",
        "Wardrobes & Cabinets Functionality",
        "Switch Logic & Placement",
        "Stoppers & Door Closers",
        "Window Lock & Roller Mechanism",
        "Curtain Box Provision",
    ],
    "Safety / Utility": [
        "Access Panel for AC Maintenance",
        "Water Heater Installation Check",
        "Water Pump Operational Test",
        "Fire Alarm/Smoke Detector Test",
    ],
    "Plumbing System": [
        "Water Pressure & Flow",
        "Pipes & Fittings",
        "Sinks, Showers, Toilets",
        "Hot Water System",
        "Water Tank Status (Cleaning)",
        "Under-Sink Leaks",
        "Drainage Flow Speed",
        "Toilet Flushing Pressure",
        "Drain Ventilation (Gurgling Sounds)",
    ],
    "Moisture & Thermal": ["Signs of Damp or Mold", "Thermal Imaging"],
    "Kitchen Inspection": [
        "Cabinet Quality & Alignment",
        "Countertops & Backsplash",
        "Sink & Mixer Tap Functionality",
        "Kitchen Appliances",
    ],
    "HVAC System": ["AC Units", "Ventilation Fans", "Thermostat Functionality"],
    "Fire & Safety": ["Smoke Detectors", "Fire Extinguishers"],
    "Finishing & Aesthetics": ["Paint Finish", "Joinery (wardrobes, cabinets)", "Flooring Condition"],
    "External Inspection": ["Roof Condition", "Walls & Paint", "Drainage", "Windows & Doors"],
    "External Area": [
        "Balcony Drainage Test",
        "Tiling Level & Grouting",
        "Lighting in Outdoor Areas",
        "External Tap Functionality",
    ],
    "Electrical System": [
        "Main Distribution Board (DB)",
        "Sockets & Switches",
        "Lighting Fixtures",
        "Grounding & Earthing",
        "DB Labeling",
        "All Light Points Working",
        "All Power Outlets Tested",
        "AC Drainage Check",
        "Isolators for AC & Heater",
        "Telephone/Internet Outlet Presence",
        "Bell/Intercom Functionality",
    ],
    "Bathroom Inspection": [
        "Tiling & Grouting",
        "Waterproofing Issues",
        "Toilet Flushing",
        "Water Pressure",
        "Toilets/Wet Areas Floor Slope",
        "Exhaust Fan Working",
        "Glass Shower Partition Sealing",
    ],
}

SAMPLE_CLIENT_DOCUMENTS = [
    {
        "id": "client_1",
        "name": "Ahmed Al Farsi",
        "email": "ahmed.farsi@email.com",
        "phone": "91234567",
        "address": "Villa 123, Al Mouj\nMuscat, Oman",
        "properties": [
            {"id": "prop_1a", "location": "Villa 123, Al Mouj", "type": "Residential", "size": 350},
            {"id": "prop_1b", "location": "Office 404, Knowledge Oasis", "type": "Commercial", "size": 120},
        ],
    },
    {
        "id": "client_2",
        "name": "Fatima Al Balushi",
        "email": "fatima.b@email.com",
        "phone": "98765432",
        "address": "Apartment 7B, Qurum Heights\nMuscat, Oman",
        "properties": [
            {"id": "prop_2a", "location": "Apt 7B, Qurum Heights", "type": "Residential", "size": 180},
        ],
    },
    {
        "id": "client_3",
        "name": "Global Investments LLC",
        "email": "contact@globalinvest.com",
        "phone": "24601122",
        "address": "PO Box 500, PC 112\nRuwi, Oman",
        "properties": [
            {"id": "prop_3a", "location": "Warehouse #5, Rusayl Industrial", "type": "Commercial", "size": 1500},
            {"id": "prop_3b", "location": "Building C, Ghala Heights", "type": "Commercial", "size": 2500},
        ],
    },
]


def sample_clients() -> List[Client]:
    """Return fresh copies of the built-in sample clients."""

    return [Client.from_dict(document) for document in SAMPLE_CLIENT_DOCUMENTS]


def points_for(category: str) -> List[str]:
    """Return the catalog points for a category, or an empty list when unknown."""

    return list(INSPECTION_CATEGORIES.get(category, []))
