"""
Native identifier -> database key lookup, one index per platform.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .database import iter_records


MAME = "mame"
TEKNOPARROT = "teknoparrot"

# Field inside each platform's emulator mapping that holds the native identifier
PLATFORM_ID_FIELDS: Dict[str, str] = {
    MAME: "romname",
    TEKNOPARROT: "profile",
}


def normalize_identifier(platform: str, value: Any) -> Optional[str]:
    """Normalize a native identifier for lookup."""
    if value is None:
        return None
    ident = str(value).strip()
    if not ident:
        return None
    if platform == TEKNOPARROT and ident.lower().endswith(".xml"):
        ident = ident[:-4]
    return ident


@dataclass
class CrossReferenceIndex:
    """Lookup from a platform's native identifier to a database key."""
    platform: str
    entries: Dict[str, str] = field(default_factory=dict)
    # (identifier, replaced key, winning key)
    duplicates: List[Tuple[str, str, str]] = field(default_factory=list)
    available: bool = True

    def lookup(self, identifier: str) -> Optional[str]:
        """Get the database key for an identifier, or None."""
        ident = normalize_identifier(self.platform, identifier)
        if ident is None:
            return None
        return self.entries.get(ident)

    def __contains__(self, identifier: str) -> bool:
        return self.lookup(identifier) is not None

    def __len__(self) -> int:
        return len(self.entries)


def build_index(doc: Optional[Dict[str, Any]], platform: str) -> CrossReferenceIndex:
    """
    Build the cross-reference index for a platform.

    Database keys are visited in sorted order, so when two entries claim the
    same identifier the later key wins. Every such collision is recorded on
    ``duplicates`` and reported.

    Args:
        doc: Loaded database document, or None if unavailable.
        platform: Emulator platform key (e.g. "mame").

    Returns:
        Index; ``available`` is False when no database was given.
    """
    if doc is None:
        return CrossReferenceIndex(platform=platform, available=False)

    id_field = PLATFORM_ID_FIELDS.get(platform, "game_id")
    index = CrossReferenceIndex(platform=platform)

    for key, entry in iter_records(doc):
        mapping = (entry.get("emulators") or {}).get(platform)
        if not isinstance(mapping, dict):
            continue
        ident = normalize_identifier(platform, mapping.get(id_field))
        if ident is None:
            continue
        previous = index.entries.get(ident)
        if previous is not None and previous != key:
            index.duplicates.append((ident, previous, key))
            print(f"[crossref] Warning: {platform} id '{ident}' mapped by both "
                  f"'{previous}' and '{key}', using '{key}'")
        index.entries[ident] = key

    return index


def clone_inheriting_keys(doc: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """
    Map MAME parent ROM names to database keys whose values apply to clones.

    Only entries whose mame mapping sets ``clones_inherit`` are included.
    """
    inherit: Dict[str, str] = {}
    if doc is None:
        return inherit
    for key, entry in iter_records(doc):
        mapping = (entry.get("emulators") or {}).get(MAME)
        if not isinstance(mapping, dict) or not mapping.get("clones_inherit"):
            continue
        romname = normalize_identifier(MAME, mapping.get("romname"))
        if romname:
            inherit[romname] = key
    return inherit
