"""
Consistency checks over the persisted database.
"""

from typing import Any, Dict, List

from .crossref import PLATFORM_ID_FIELDS, build_index
from .database import (
    Confidence,
    GameRecord,
    RotationKind,
    RotationType,
    iter_records,
)


# Plausible physical range for a finite wheel
MIN_DEGREES = 90
MAX_DEGREES = 1080

_ROTATION_TYPES = {t.value for t in RotationType}
_CONFIDENCES = {c.value for c in Confidence}


def check_record(key: str, entry: Dict[str, Any]) -> List[str]:
    """Return the issues found in one database entry."""
    issues: List[str] = []
    try:
        record = GameRecord.from_dict(key, entry)
    except ValueError as e:
        return [f"{key}: {e}"]

    if not record.emulators:
        issues.append(f"{key}: no emulator mapping")
    if not record.sources:
        issues.append(f"{key}: no sources")
    if record.rotation_type not in _ROTATION_TYPES:
        issues.append(f"{key}: unknown rotation_type '{record.rotation_type}'")
    if record.confidence not in _CONFIDENCES:
        issues.append(f"{key}: unknown confidence '{record.confidence}'")

    optical = record.rotation_type == RotationType.OPTICAL_ENCODER.value
    kind = record.rotation.kind
    if kind is RotationKind.INFINITE and not optical:
        issues.append(f"{key}: infinite rotation should be typed optical_encoder")
    if kind is RotationKind.KNOWN:
        if optical:
            issues.append(f"{key}: optical_encoder with finite rotation {record.rotation.degrees}")
        if not MIN_DEGREES <= record.rotation.degrees <= MAX_DEGREES:
            issues.append(f"{key}: rotation {record.rotation.degrees} outside "
                          f"{MIN_DEGREES}-{MAX_DEGREES}")
    return issues


def check_database(doc: Dict[str, Any]) -> List[str]:
    """
    Check every entry plus cross-entry identifier uniqueness.

    Returns:
        Human-readable issues, empty when the database is consistent.
    """
    issues: List[str] = []
    for key, entry in iter_records(doc):
        issues.extend(check_record(key, entry))

    for platform in PLATFORM_ID_FIELDS:
        index = build_index(doc, platform)
        for ident, first, second in index.duplicates:
            issues.append(f"{platform} id '{ident}' claimed by both '{first}' and '{second}'")
    return issues
