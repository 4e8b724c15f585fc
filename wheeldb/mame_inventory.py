"""
MAME inventory: merge catver, listxml and controls.xml candidates and
cross-reference them against the database.

Merge precedence:
    1. listxml machines (richest records)
    2. catver-only ROM names, as minimal records
    3. controls.xml descriptions, attached or as minimal records
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .crossref import CrossReferenceIndex, MAME
from .listxml import MachineRecord
from .output import utc_timestamp


@dataclass
class MameCandidate:
    """Inventory entry for one ROM name."""
    romname: str
    title: Optional[str] = None
    year: Optional[str] = None
    manufacturer: Optional[str] = None
    cloneof: Optional[str] = None
    category: Optional[str] = None
    control_types: List[str] = field(default_factory=list)
    controls_description: Optional[str] = None
    detected_by: List[str] = field(default_factory=list)
    already_in_database: bool = False
    database_key: Optional[str] = None
    parent_database_key: Optional[str] = None

    def add_source(self, tag: str) -> None:
        """Record a detecting source once."""
        if tag not in self.detected_by:
            self.detected_by.append(tag)

    @property
    def has_relevant_controls(self) -> bool:
        return bool(self.control_types) or self.controls_description is not None

    @property
    def needs_research(self) -> bool:
        return not self.already_in_database and self.parent_database_key is None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _from_machine(machine: MachineRecord) -> MameCandidate:
    return MameCandidate(
        romname=machine.romname,
        title=machine.title,
        year=machine.year,
        manufacturer=machine.manufacturer,
        cloneof=machine.cloneof,
        category=machine.category,
        control_types=list(machine.control_types),
        detected_by=list(machine.detected_by),
    )


def merge_sources(
    machines: Optional[Dict[str, MachineRecord]],
    categories: Optional[Dict[str, str]],
    controls: Optional[Dict[str, str]],
) -> Dict[str, MameCandidate]:
    """
    Merge the three MAME sources into one candidate per ROM name.

    Inputs are not modified; merging the same inputs again gives equal output.

    Args:
        machines: listxml scan results, or None if unavailable.
        categories: catver driving/racing map, or None if unavailable.
        controls: controls.xml description map, or None if unavailable.

    Returns:
        Candidates keyed by ROM name.
    """
    merged: Dict[str, MameCandidate] = {}

    for romname, machine in (machines or {}).items():
        merged[romname] = _from_machine(machine)

    for romname, category in (categories or {}).items():
        if romname in merged:
            continue
        merged[romname] = MameCandidate(
            romname=romname,
            category=category,
            detected_by=["catver"],
        )

    for romname, description in (controls or {}).items():
        candidate = merged.get(romname)
        if candidate is None:
            candidate = MameCandidate(romname=romname)
            merged[romname] = candidate
        candidate.controls_description = description
        candidate.add_source("controls_xml")

    return merged


def cross_reference(
    candidates: Dict[str, MameCandidate],
    index: CrossReferenceIndex,
    inheriting_parents: Optional[Dict[str, str]] = None,
) -> None:
    """
    Mark each candidate with its database key, if any.

    Clones whose parent's entry has ``clones_inherit`` set get
    ``parent_database_key``.
    """
    inheriting_parents = inheriting_parents or {}
    for candidate in candidates.values():
        key = index.lookup(candidate.romname)
        candidate.already_in_database = key is not None
        candidate.database_key = key
        candidate.parent_database_key = None
        if key is None and candidate.cloneof:
            candidate.parent_database_key = inheriting_parents.get(candidate.cloneof)


def summarize(candidates: List[MameCandidate]) -> Dict[str, int]:
    """Aggregate counts for the inventory summary."""
    return {
        "total_candidates": len(candidates),
        "with_relevant_controls": sum(1 for c in candidates if c.has_relevant_controls),
        "parent_roms": sum(1 for c in candidates if not c.cloneof),
        "already_in_database": sum(1 for c in candidates if c.already_in_database),
        "needs_research": sum(1 for c in candidates if c.needs_research),
    }


def build_inventory(
    candidates: Dict[str, MameCandidate],
    sources_used: Dict[str, bool],
    generated: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the inventory document.

    Args:
        candidates: Merged and cross-referenced candidates.
        sources_used: Availability flag per source.
        generated: ISO-8601 timestamp; defaults to now (UTC).

    Returns:
        JSON-ready document with games sorted by ROM name.
    """
    ordered = [candidates[name] for name in sorted(candidates)]
    return {
        "generated": generated or utc_timestamp(),
        "platform": MAME,
        "sources_used": dict(sources_used),
        "games": [c.to_dict() for c in ordered],
        "summary": summarize(ordered),
    }
