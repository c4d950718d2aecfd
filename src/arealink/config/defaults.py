from typing import Any

DEFAULT_AREAS: list[dict[str, Any]] = [
    {"area_id": "living_room"},
    {"area_id": "kitchen"},
    {"area_id": "bedroom"},
    {"area_id": "office"},
]


def get_default_areas() -> list[dict[str, Any]]:
    """Return a fresh copy of the default dashboard area configuration."""
    return [dict(area) for area in DEFAULT_AREAS]
