"""
Export the database into flat lookup formats (CSV and XML).

Only entries with a MAME mapping and a known rotation are exported. Both
renderings are sorted by ROM name and byte-stable for identical input.
"""

import csv
import io
import shutil
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Union

from .crossref import MAME
from .database import GameRecord, iter_records


CSV_HEADER = (
    "romname", "title", "manufacturer", "year",
    "rotation_degrees", "rotation_type", "confidence",
)
XML_ROOT = "wheelRotationDatabase"
XML_RECORD = "game"

JSON_NAME = "wheel-rotation.json"
CSV_NAME = "wheel-rotation.csv"
XML_NAME = "wheel-rotation.xml"


@dataclass
class ExportRow:
    """One exported game."""
    romname: str
    title: str
    manufacturer: str
    year: str
    rotation_degrees: int
    rotation_type: str
    confidence: str


def select_rows(doc: Dict[str, Any]) -> List[ExportRow]:
    """
    Project database entries into export rows.

    Entries without a MAME ROM name or with an unknown rotation are left
    out. ``-1`` (infinite) is kept as is.

    Returns:
        Rows sorted by ROM name.
    """
    rows: List[ExportRow] = []
    for key, entry in iter_records(doc):
        try:
            record = GameRecord.from_dict(key, entry)
        except ValueError as e:
            print(f"[export] Warning: skipping '{key}': {e}")
            continue

        mapping = record.emulator(MAME)
        romname = (mapping or {}).get("romname")
        if not romname or not record.rotation.is_known:
            continue

        rows.append(ExportRow(
            romname=str(romname),
            title=record.title,
            manufacturer=record.manufacturer or "",
            year=record.year or "",
            rotation_degrees=record.rotation.to_json(),
            rotation_type=record.rotation_type,
            confidence=record.confidence,
        ))

    rows.sort(key=lambda row: row.romname)
    return rows


def render_csv(rows: List[ExportRow]) -> str:
    """
    Render rows as CSV.

    Text fields are quoted with embedded quotes doubled; the rotation is
    written as a bare integer.
    """
    buffer = io.StringIO()
    buffer.write(",".join(CSV_HEADER) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for row in rows:
        writer.writerow([
            row.romname,
            row.title,
            row.manufacturer,
            row.year,
            row.rotation_degrees,
            row.rotation_type,
            row.confidence,
        ])
    return buffer.getvalue()


def render_xml(rows: List[ExportRow], version: str, generated: str) -> str:
    """Render rows as an XML document, one element per game."""
    root = ET.Element(XML_ROOT, {
        "version": version,
        "generated": generated,
        "gameCount": str(len(rows)),
    })
    for row in rows:
        ET.SubElement(root, XML_RECORD, {
            "romname": row.romname,
            "title": row.title,
            "manufacturer": row.manufacturer,
            "year": row.year,
            "rotation": str(row.rotation_degrees),
            "type": row.rotation_type,
            "confidence": row.confidence,
        })
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"


def export_database(
    doc: Dict[str, Any],
    database_path: Union[str, Path],
    dist_dir: Union[str, Path],
) -> Dict[str, Path]:
    """
    Write the JSON copy, CSV and XML exports.

    Args:
        doc: Loaded database document.
        database_path: Source file, copied verbatim.
        dist_dir: Output directory (must exist).

    Returns:
        Mapping of format name to written path.

    Raises:
        OSError: If any output cannot be written.
    """
    dist_dir = Path(dist_dir)
    rows = select_rows(doc)

    paths = {
        "json": dist_dir / JSON_NAME,
        "csv": dist_dir / CSV_NAME,
        "xml": dist_dir / XML_NAME,
    }
    shutil.copyfile(database_path, paths["json"])
    with open(paths["csv"], "w", encoding="utf-8", newline="") as f:
        f.write(render_csv(rows))
    with open(paths["xml"], "w", encoding="utf-8", newline="") as f:
        f.write(render_xml(
            rows,
            version=str(doc.get("version") or ""),
            generated=str(doc.get("generated") or ""),
        ))

    print(f"[export] {len(rows)} games exported to {dist_dir}")
    return paths
