"""
TeknoParrot inventory: game profiles that declare a wheel analog input,
enriched from side-car metadata and cross-referenced against the database.
"""

import json
import xml.etree.ElementTree as ET
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .crossref import CrossReferenceIndex, TEKNOPARROT
from .output import utc_timestamp


WHEEL_ANALOG_TYPE = "Wheel"
METADATA_ROTATION_FIELD = "wheel_rotation"


@dataclass
class TeknoParrotCandidate:
    """Inventory entry for one game profile."""
    profile: str
    title: str
    genre: Optional[str] = None
    platform: Optional[str] = None
    year: Optional[str] = None
    emulation_profile: Optional[str] = None
    emulator_type: Optional[str] = None
    executable: Optional[str] = None
    wheel_inputs: List[str] = field(default_factory=list)
    metadata_rotation: Optional[Any] = None
    has_metadata_rotation: bool = False
    detected_by: List[str] = field(default_factory=list)
    already_in_database: bool = False
    database_key: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProfileScan:
    """Output of one profile directory pass."""
    candidates: Dict[str, TeknoParrotCandidate] = field(default_factory=dict)
    profiles_available: bool = False
    metadata_available: bool = False
    files_scanned: int = 0
    failed: int = 0


def _text(root: ET.Element, tag: str) -> Optional[str]:
    value = root.findtext(tag)
    if value is None:
        return None
    return value.strip() or None


def parse_profile(profile: str, root: ET.Element) -> Optional[TeknoParrotCandidate]:
    """
    Build a candidate from a parsed game profile.

    Args:
        profile: Profile identifier (file stem).
        root: Parsed profile document root.

    Returns:
        Candidate if any joystick button has analog type "Wheel", else None.
    """
    wheel_inputs: List[str] = []
    is_wheel = False
    for button in root.iter("JoystickButtons"):
        if button.findtext("AnalogType") != WHEEL_ANALOG_TYPE:
            continue
        is_wheel = True
        name = _text(button, "ButtonName")
        if name and name not in wheel_inputs:
            wheel_inputs.append(name)

    if not is_wheel:
        return None

    return TeknoParrotCandidate(
        profile=profile,
        title=profile,
        emulation_profile=_text(root, "EmulationProfile"),
        emulator_type=_text(root, "EmulatorType"),
        executable=_text(root, "ExecutableName"),
        wheel_inputs=wheel_inputs,
        detected_by=["game_profile"],
    )


def _coerce_rotation(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return value.strip()
    return value


def apply_metadata(candidate: TeknoParrotCandidate, metadata: Dict[str, Any]) -> None:
    """
    Enrich a candidate from its side-car metadata.

    A falsy rotation value (missing, empty, 0) counts as absent.
    """
    candidate.title = metadata.get("game_name") or candidate.title
    candidate.genre = metadata.get("game_genre") or None
    candidate.platform = metadata.get("platform") or None
    year = metadata.get("release_year")
    candidate.year = str(year) if year else None

    rotation = _coerce_rotation(metadata.get(METADATA_ROTATION_FIELD))
    if rotation:
        candidate.metadata_rotation = rotation
        candidate.has_metadata_rotation = True

    if "metadata" not in candidate.detected_by:
        candidate.detected_by.append("metadata")


def read_metadata(path: Path) -> Optional[Dict[str, Any]]:
    """Read one side-car metadata file; None if missing or malformed."""
    if not path.exists():
        return None
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        print(f"[teknoparrot] Warning: skipping metadata {path.name}: {e}")
        return None
    if not isinstance(data, dict):
        print(f"[teknoparrot] Warning: skipping metadata {path.name}: not an object")
        return None
    return data


def scan_profiles(
    profiles_dir: Union[str, Path],
    metadata_dir: Union[str, Path],
) -> ProfileScan:
    """
    Scan a GameProfiles directory for wheel games.

    Args:
        profiles_dir: Directory of ``*.xml`` game profiles.
        metadata_dir: Directory of ``*.json`` side-car metadata.

    Returns:
        ProfileScan; ``profiles_available`` is False if the directory is missing.
    """
    profiles_dir = Path(profiles_dir)
    metadata_dir = Path(metadata_dir)
    scan = ProfileScan(metadata_available=metadata_dir.is_dir())

    if not profiles_dir.is_dir():
        print(f"[teknoparrot] Warning: {profiles_dir} not found, skipping game profiles")
        return scan
    scan.profiles_available = True
    if not scan.metadata_available:
        print(f"[teknoparrot] Warning: {metadata_dir} not found, using profile names as titles")

    for path in sorted(profiles_dir.glob("*.xml")):
        scan.files_scanned += 1
        try:
            root = ET.parse(path).getroot()
        except (ET.ParseError, OSError) as e:
            scan.failed += 1
            print(f"[teknoparrot] Warning: skipping profile {path.name}: {e}")
            continue

        candidate = parse_profile(path.stem, root)
        if candidate is None:
            continue

        if scan.metadata_available:
            metadata = read_metadata(metadata_dir / f"{path.stem}.json")
            if metadata is not None:
                apply_metadata(candidate, metadata)

        scan.candidates[candidate.profile] = candidate

    print(f"[teknoparrot] {scan.files_scanned} profiles scanned, "
          f"{len(scan.candidates)} wheel games, {scan.failed} failed")
    return scan


def cross_reference(
    candidates: Dict[str, TeknoParrotCandidate],
    index: CrossReferenceIndex,
) -> None:
    """Mark each candidate with its database key, if any."""
    for candidate in candidates.values():
        key = index.lookup(candidate.profile)
        candidate.already_in_database = key is not None
        candidate.database_key = key


def summarize(candidates: List[TeknoParrotCandidate]) -> Dict[str, int]:
    """Aggregate counts for the inventory summary."""
    return {
        "total_candidates": len(candidates),
        "with_metadata": sum(1 for c in candidates if "metadata" in c.detected_by),
        "with_metadata_rotation": sum(1 for c in candidates if c.has_metadata_rotation),
        "already_in_database": sum(1 for c in candidates if c.already_in_database),
        "needs_research": sum(1 for c in candidates if not c.already_in_database),
    }


def build_inventory(
    candidates: Dict[str, TeknoParrotCandidate],
    sources_used: Dict[str, bool],
    generated: Optional[str] = None,
) -> Dict[str, Any]:
    """Build the inventory document, games sorted by profile name."""
    ordered = [candidates[name] for name in sorted(candidates)]
    return {
        "generated": generated or utc_timestamp(),
        "platform": TEKNOPARROT,
        "sources_used": dict(sources_used),
        "games": [c.to_dict() for c in ordered],
        "summary": summarize(ordered),
    }
