"""
FDI tooth chart for the permanent dentition.

Tooth numbers are two digits: the quadrant (1-4, clockwise from the
patient's upper right) followed by the tooth's place counted from the
midline (1-8).
"""

from __future__ import annotations

QUADRANTS: dict[int, str] = {
    1: "Upper Right",
    2: "Upper Left",
    3: "Lower Left",
    4: "Lower Right",
}

TOOTH_TYPES: dict[int, str] = {
    1: "Central Incisor",
    2: "Lateral Incisor",
    3: "Canine",
    4: "First Premolar",
    5: "Second Premolar",
    6: "First Molar",
    7: "Second Molar",
    8: "Third Molar",
}

UNKNOWN_POSITION = "Unknown"

DEFAULT_TREATMENT_TYPES: tuple[str, ...] = (
    "Consultation",
    "Cleaning",
    "Filling",
    "Root Canal",
    "Crown",
    "Extraction",
    "Other",
)


def get_all_teeth() -> list[str]:
    """All 32 permanent teeth in quadrant order: 11-18, 21-28, 31-38, 41-48."""
    return [f"{q}{t}" for q in QUADRANTS for t in TOOTH_TYPES]


def _split(tooth_number: str) -> tuple[int, int] | None:
    value = (tooth_number or "").strip()
    if len(value) != 2 or not value.isdigit():
        return None
    quadrant, tooth = int(value[0]), int(value[1])
    if quadrant not in QUADRANTS or tooth not in TOOTH_TYPES:
        return None
    return quadrant, tooth


def is_valid_tooth(tooth_number: str) -> bool:
    return _split(tooth_number) is not None


def get_tooth_position(tooth_number: str) -> str:
    """Quadrant name for a tooth, e.g. '36' -> 'Lower Left'."""
    parts = _split(tooth_number)
    return QUADRANTS[parts[0]] if parts else UNKNOWN_POSITION


def get_tooth_name(tooth_number: str) -> str:
    """Full name, e.g. '11' -> 'Upper Right Central Incisor'."""
    parts = _split(tooth_number)
    if parts is None:
        return f"Tooth {tooth_number}"
    quadrant, tooth = parts
    return f"{QUADRANTS[quadrant]} {TOOTH_TYPES[tooth]}"


def get_treatment_types(configured: list[str] | None = None) -> list[str]:
    """Treatment types offered on the form; rules file first, built-ins otherwise."""
    return list(configured) if configured else list(DEFAULT_TREATMENT_TYPES)
