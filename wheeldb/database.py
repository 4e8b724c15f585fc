"""
Persisted wheel rotation database: record model and loader.

The database document is JSON with top-level ``version``, ``generated`` and
``games`` (stable key -> game record). It is read-only to every tool in this
package; edits happen through the research workflow.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class DatabaseError(ValueError):
    """Raised when the database document has an invalid structure."""


class RotationKind(Enum):
    """Which of the three rotation states a value is in."""
    KNOWN = "known"
    INFINITE = "infinite"
    UNKNOWN = "unknown"


class RotationType(Enum):
    """Wheel mechanism."""
    MECHANICAL_STOP = "mechanical_stop"
    OPTICAL_ENCODER = "optical_encoder"
    POTENTIOMETER = "potentiometer"
    UNKNOWN = "unknown"


class Confidence(Enum):
    """Strength of the provenance behind a rotation value."""
    VERIFIED = "verified"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


# JSON encoding of an infinite (optical encoder) wheel
INFINITE_SENTINEL = -1


@dataclass(frozen=True)
class Rotation:
    """
    Wheel rotation value.

    Stored in JSON as an integer, ``-1`` for infinite rotation, or ``null``
    when unknown. Internally the three states stay distinct.
    """
    kind: RotationKind
    degrees: Optional[int] = None

    @classmethod
    def known(cls, degrees: int) -> "Rotation":
        return cls(RotationKind.KNOWN, degrees)

    @classmethod
    def infinite(cls) -> "Rotation":
        return cls(RotationKind.INFINITE)

    @classmethod
    def unknown(cls) -> "Rotation":
        return cls(RotationKind.UNKNOWN)

    @classmethod
    def from_json(cls, value: Any) -> "Rotation":
        """
        Decode a ``rotation_degrees`` value.

        Args:
            value: None, -1, a positive integer, or a numeric string.

        Returns:
            Rotation in the matching state.

        Raises:
            ValueError: If the value is not a valid rotation.
        """
        if value is None:
            return cls.unknown()
        if isinstance(value, bool):
            raise ValueError(f"Invalid rotation value: {value!r}")
        if isinstance(value, str):
            try:
                value = int(value.strip())
            except ValueError:
                raise ValueError(f"Invalid rotation value: {value!r}") from None
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if not isinstance(value, int):
            raise ValueError(f"Invalid rotation value: {value!r}")
        if value == INFINITE_SENTINEL:
            return cls.infinite()
        if value <= 0:
            raise ValueError(f"Invalid rotation value: {value!r}")
        return cls.known(value)

    def to_json(self) -> Optional[int]:
        """Encode back to the JSON convention (int, -1 or None)."""
        if self.kind is RotationKind.KNOWN:
            return self.degrees
        if self.kind is RotationKind.INFINITE:
            return INFINITE_SENTINEL
        return None

    @property
    def is_known(self) -> bool:
        """True for a finite or infinite value, False when unknown."""
        return self.kind is not RotationKind.UNKNOWN


@dataclass
class GameRecord:
    """One entry of the persisted database."""
    key: str
    title: str
    rotation: Rotation
    rotation_type: str = RotationType.UNKNOWN.value
    confidence: str = Confidence.UNKNOWN.value
    manufacturer: Optional[str] = None
    year: Optional[str] = None
    notes: str = ""
    sources: List[Dict[str, Any]] = field(default_factory=list)
    emulators: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> "GameRecord":
        """
        Build a record from its JSON form.

        Raises:
            ValueError: If ``rotation_degrees`` is not a valid rotation.
        """
        year = data.get("year")
        return cls(
            key=key,
            title=data.get("title") or key,
            rotation=Rotation.from_json(data.get("rotation_degrees")),
            rotation_type=data.get("rotation_type") or RotationType.UNKNOWN.value,
            confidence=data.get("confidence") or Confidence.UNKNOWN.value,
            manufacturer=data.get("manufacturer"),
            year=str(year) if year is not None else None,
            notes=data.get("notes") or "",
            sources=list(data.get("sources") or []),
            emulators=dict(data.get("emulators") or {}),
        )

    def emulator(self, platform: str) -> Optional[Dict[str, Any]]:
        """Get this record's mapping for a platform, if any."""
        mapping = self.emulators.get(platform)
        if isinstance(mapping, dict):
            return mapping
        return None


def load_database(path: Union[str, Path]) -> Optional[Dict[str, Any]]:
    """
    Load the database document.

    Args:
        path: Path to the database JSON file.

    Returns:
        The parsed document, or None if the file does not exist.

    Raises:
        DatabaseError: If the file is not valid UTF-8 JSON or lacks a ``games`` mapping.
    """
    path = Path(path)
    if not path.exists():
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            doc = json.load(f)
    except json.JSONDecodeError as e:
        raise DatabaseError(f"{path} is not valid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise DatabaseError(f"{path} is not valid UTF-8: {e}") from e

    if not isinstance(doc, dict):
        raise DatabaseError(f"{path}: top level must be an object")
    if not isinstance(doc.get("games", {}), dict):
        raise DatabaseError(f"{path}: 'games' must be an object")
    doc.setdefault("games", {})
    return doc


def iter_records(doc: Dict[str, Any]):
    """
    Yield (key, raw entry) pairs in sorted key order.

    Sorted order keeps every pass over the database deterministic.
    """
    games = doc.get("games") or {}
    for key in sorted(games):
        entry = games[key]
        if isinstance(entry, dict):
            yield key, entry
