"""
Streaming scanner for MAME -listxml machine descriptors.

The full document runs to hundreds of megabytes, so it is never parsed as a
whole. Lines are read forward-only; each machine unit is cut out as a raw
fragment, rejected cheaply by substring check when it has no relevant
control, and only otherwise parsed on its own.
"""

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union
from xml.sax.saxutils import unescape


# Analog control types that indicate a steering wheel (lightgun axes etc. excluded)
RELEVANT_CONTROL_TYPES = ("paddle", "dial", "ad_stick")
_CONTROL_MARKERS = tuple(f'type="{t}"' for t in RELEVANT_CONTROL_TYPES)

# Older listxml revisions use <game> for the unit element
UNIT_TAGS = ("machine", "game")

_UNIT_OPEN = re.compile(r"<(%s)(\s[^>]*?)?(/?)>" % "|".join(UNIT_TAGS))
_ATTRIBUTE = re.compile(r'([\w:.-]+)\s*=\s*"([^"]*)"')
_ENTITIES = {"&quot;": '"', "&apos;": "'"}

PROGRESS_EVERY = 10000


@dataclass
class MachineRecord:
    """A machine that carries a wheel-like control or a driving category."""
    romname: str
    title: Optional[str] = None
    year: Optional[str] = None
    manufacturer: Optional[str] = None
    cloneof: Optional[str] = None
    category: Optional[str] = None
    control_types: List[str] = field(default_factory=list)
    detected_by: List[str] = field(default_factory=list)


@dataclass
class ScanResult:
    """Output of one listxml pass."""
    machines: Dict[str, MachineRecord] = field(default_factory=dict)
    units_scanned: int = 0
    malformed: int = 0


def _parse_attributes(text: str) -> Dict[str, str]:
    return {
        name: unescape(value, _ENTITIES)
        for name, value in _ATTRIBUTE.findall(text or "")
    }


def iter_units(lines: Iterable[str]) -> Iterator[Tuple[Dict[str, str], str]]:
    """
    Cut machine units out of a line stream.

    Args:
        lines: Iterable of text lines (e.g. an open file).

    Yields:
        (opening tag attributes, raw fragment from opening to closing tag).
    """
    buffer: List[str] = []
    attrs: Dict[str, str] = {}
    closing = ""

    for line in lines:
        # A line may hold several units (compact documents)
        while line:
            if not buffer:
                match = _UNIT_OPEN.search(line)
                if match is None:
                    break
                attrs = _parse_attributes(match.group(2))
                if match.group(3):
                    yield attrs, match.group(0)
                    line = line[match.end():]
                    continue
                closing = f"</{match.group(1)}>"
                line = line[match.start():]

            end = line.find(closing)
            if end == -1:
                buffer.append(line)
                break
            buffer.append(line[:end + len(closing)])
            yield attrs, "".join(buffer)
            buffer = []
            line = line[end + len(closing):]

    if buffer:
        # Truncated document: hand over what we have, parsing will reject it
        yield attrs, "".join(buffer)


def _is_skippable(attrs: Dict[str, str]) -> bool:
    return (
        attrs.get("isbios") == "yes"
        or attrs.get("isdevice") == "yes"
        or attrs.get("runnable") == "no"
    )


def _relevant_controls(unit: ET.Element) -> List[str]:
    found: List[str] = []
    for control in unit.iter("control"):
        ctype = control.get("type")
        if ctype in RELEVANT_CONTROL_TYPES and ctype not in found:
            found.append(ctype)
    return found


def scan_listxml(
    lines: Iterable[str],
    categories: Optional[Dict[str, str]] = None,
) -> ScanResult:
    """
    Scan machine descriptors for wheel candidates.

    A unit is kept when it has a paddle, dial or ad_stick control, or when
    its name is in ``categories``. Units that fail to parse are reported
    and skipped.

    Args:
        lines: Line stream of the listxml document.
        categories: Driving/racing category map from catver, if available.

    Returns:
        ScanResult with matching machines keyed by ROM name.
    """
    categories = categories or {}
    result = ScanResult()

    for attrs, fragment in iter_units(lines):
        result.units_scanned += 1
        if result.units_scanned % PROGRESS_EVERY == 0:
            print(f"[listxml] {result.units_scanned} units scanned...")

        name = attrs.get("name")
        if not name or _is_skippable(attrs):
            continue

        category = categories.get(name)
        if category is None and not any(m in fragment for m in _CONTROL_MARKERS):
            continue

        try:
            unit = ET.fromstring(fragment)
        except ET.ParseError as e:
            result.malformed += 1
            print(f"[listxml] Warning: skipping malformed unit '{name}': {e}")
            continue

        control_types = _relevant_controls(unit)
        if not control_types and category is None:
            continue

        detected_by = []
        if control_types:
            detected_by.append("listxml")
        if category is not None:
            detected_by.append("catver")

        result.machines[name] = MachineRecord(
            romname=name,
            title=(unit.findtext("description") or "").strip() or None,
            year=(unit.findtext("year") or "").strip() or None,
            manufacturer=(unit.findtext("manufacturer") or "").strip() or None,
            cloneof=attrs.get("cloneof") or None,
            category=category,
            control_types=control_types,
            detected_by=detected_by,
        )

    return result


def read_listxml(
    path: Union[str, Path],
    categories: Optional[Dict[str, str]] = None,
) -> Optional[ScanResult]:
    """
    Scan a listxml file.

    Returns:
        ScanResult, or None if the file is unavailable.
    """
    path = Path(path)
    if not path.exists():
        print(f"[listxml] Warning: {path} not found, skipping machine descriptors")
        return None

    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            result = scan_listxml(f, categories)
    except OSError as e:
        print(f"[listxml] Warning: could not read {path}: {e}")
        return None

    print(f"[listxml] {result.units_scanned} units scanned, "
          f"{len(result.machines)} candidates, {result.malformed} malformed")
    return result
