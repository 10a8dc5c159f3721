"""
Hard-coded ads shown when the ads API returns nothing or fails.
"""
from typing import List
from schemas import Ad

PLACEHOLDER_LINK = "#"

_EQUIPMENT_ADS = (
    {
        "id": "1",
        "title": "MediTech Pro",
        "description": "Advanced medical equipment for modern healthcare",
        "category": "Medical Equipment",
        "link": PLACEHOLDER_LINK,
    },
    {
        "id": "2",
        "title": "HealthCare Plus",
        "description": "Complete healthcare management solution",
        "category": "Software",
        "link": PLACEHOLDER_LINK,
    },
    {
        "id": "3",
        "title": "LabConnect",
        "description": "Seamless laboratory test integration",
        "category": "Laboratory",
        "link": PLACEHOLDER_LINK,
    },
)

_PATIENT_ADS = (
    {
        "id": "1",
        "title": "NeuroCalm",
        "description": "Advanced neurological support for better brain health",
        "category": "Neurology",
        "link": PLACEHOLDER_LINK,
    },
    {
        "id": "2",
        "title": "CardioCare Plus",
        "description": "Complete heart health solution for cardiovascular wellness",
        "category": "Cardiology",
        "link": PLACEHOLDER_LINK,
    },
    {
        "id": "3",
        "title": "OrthoFlex",
        "description": "Joint and bone support for active lifestyle",
        "category": "Orthopedics",
        "link": PLACEHOLDER_LINK,
    },
)


def doctor_default_ads() -> List[Ad]:
    return [Ad(**item) for item in _EQUIPMENT_ADS]


def patient_default_ads() -> List[Ad]:
    return [Ad(**item) for item in _PATIENT_ADS]


def bottom_default_ads() -> List[Ad]:
    # The bottom strip reuses the equipment set
    return [Ad(**item) for item in _EQUIPMENT_ADS]
