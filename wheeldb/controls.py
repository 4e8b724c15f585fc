"""
Reader for controls.xml control descriptions.

Tag and attribute names have changed case between upstream revisions, so
every logical field is resolved through an ordered alias list.
"""

import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Iterator, Optional, Union


WHEEL_PATTERN = re.compile(r"wheel|steering|paddle", re.IGNORECASE)

ALIASES: Dict[str, tuple] = {
    "game_tag": ("game", "Game"),
    "game_id": ("romname", "RomName", "romName", "name", "Name"),
    "control_tag": ("control", "Control"),
    "control_name": ("name", "Name"),
    "misc_tag": ("miscDetails", "MiscDetails", "misc_details"),
}


def _collapse(text: str) -> str:
    return " ".join(text.split())


def first_attribute(elem: ET.Element, field: str) -> Optional[str]:
    """Resolve an attribute through its aliases, first non-empty wins."""
    for name in ALIASES[field]:
        value = elem.get(name)
        if value and value.strip():
            return value.strip()
    return None


def iter_tagged(elem: ET.Element, field: str) -> Iterator[ET.Element]:
    """Yield descendants matching any alias of a tag (all aliases, not first only)."""
    for tag in ALIASES[field]:
        yield from elem.iter(tag)


def match_wheel_description(unit: ET.Element) -> Optional[str]:
    """
    Find a wheel-related description for one game unit.

    Tried in order: control names, misc details text, whole unit text.

    Returns:
        The matching text, or None.
    """
    for control in iter_tagged(unit, "control_tag"):
        name = first_attribute(control, "control_name")
        if name and WHEEL_PATTERN.search(name):
            return name

    for misc in iter_tagged(unit, "misc_tag"):
        text = _collapse("".join(misc.itertext()))
        if WHEEL_PATTERN.search(text):
            return text

    text = _collapse("".join(unit.itertext()))
    if WHEEL_PATTERN.search(text):
        return text
    return None


def parse_controls(root: ET.Element) -> Dict[str, str]:
    """
    Collect wheel descriptions from a parsed controls document.

    Returns:
        Mapping of ROM name to matched description.
    """
    matches: Dict[str, str] = {}
    for unit in iter_tagged(root, "game_tag"):
        romname = first_attribute(unit, "game_id")
        if romname is None:
            continue
        description = match_wheel_description(unit)
        if description is not None:
            matches[romname] = description
    return matches


def read_controls(path: Union[str, Path]) -> Optional[Dict[str, str]]:
    """
    Read a controls.xml file.

    Returns:
        Mapping of ROM name to description, or None if the file is missing
        or cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        print(f"[controls] Warning: {path} not found, skipping control descriptions")
        return None

    try:
        root = ET.parse(path).getroot()
    except (ET.ParseError, OSError) as e:
        print(f"[controls] Warning: could not parse {path}: {e}")
        return None

    matches = parse_controls(root)
    print(f"[controls] {len(matches)} games with wheel-like controls")
    return matches
