"""
Pipeline runs for the wheel rotation database.

Ties together the source readers, merge, cross-reference, and export.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from config import Config
from . import catver, controls, export, listxml, mame_inventory, teknoparrot
from .check import check_database
from .crossref import MAME, TEKNOPARROT, build_index, clone_inheriting_keys
from .database import DatabaseError, load_database
from .output import write_json


MAME_INVENTORY_NAME = "mame-inventory.json"
TEKNOPARROT_INVENTORY_NAME = "teknoparrot-inventory.json"


def load_database_for_crossref(path: Path) -> Optional[Dict[str, Any]]:
    """Load the database, or None (cross-referencing disabled) if unusable."""
    try:
        doc = load_database(path)
    except DatabaseError as e:
        print(f"[crossref] Warning: {e}; cross-referencing disabled")
        return None
    if doc is None:
        print(f"[crossref] Warning: {path} not found; cross-referencing disabled")
    return doc


def run_mame_inventory(config: Config, generated: Optional[str] = None) -> Path:
    """
    Build and write the MAME inventory.

    Returns:
        Path of the written inventory.

    Raises:
        OSError: If the inventory cannot be written.
    """
    categories = catver.read_catver(config.catver_path)
    scan = listxml.read_listxml(config.listxml_path, categories)
    descriptions = controls.read_controls(config.controls_path)
    doc = load_database_for_crossref(config.database_path)

    candidates = mame_inventory.merge_sources(
        scan.machines if scan is not None else None,
        categories,
        descriptions,
    )
    mame_inventory.cross_reference(
        candidates,
        build_index(doc, MAME),
        clone_inheriting_keys(doc),
    )

    inventory = mame_inventory.build_inventory(
        candidates,
        sources_used={
            "catver": categories is not None,
            "listxml": scan is not None,
            "controls_xml": descriptions is not None,
            "database": doc is not None,
        },
        generated=generated,
    )
    if not any(inventory["sources_used"][s] for s in ("catver", "listxml", "controls_xml")):
        print("[inventory] Warning: no MAME sources available, writing empty inventory")

    path = write_json(config.inventory_dir / MAME_INVENTORY_NAME, inventory)
    summary = inventory["summary"]
    print(f"[inventory] {summary['total_candidates']} MAME candidates, "
          f"{summary['needs_research']} need research -> {path}")
    return path


def run_teknoparrot_inventory(config: Config, generated: Optional[str] = None) -> Path:
    """
    Build and write the TeknoParrot inventory.

    Raises:
        OSError: If the inventory cannot be written.
    """
    scan = teknoparrot.scan_profiles(config.profiles_dir, config.metadata_dir)
    doc = load_database_for_crossref(config.database_path)
    teknoparrot.cross_reference(scan.candidates, build_index(doc, TEKNOPARROT))

    inventory = teknoparrot.build_inventory(
        scan.candidates,
        sources_used={
            "game_profiles": scan.profiles_available,
            "metadata": scan.metadata_available,
            "database": doc is not None,
        },
        generated=generated,
    )

    path = write_json(config.inventory_dir / TEKNOPARROT_INVENTORY_NAME, inventory)
    summary = inventory["summary"]
    print(f"[inventory] {summary['total_candidates']} TeknoParrot candidates, "
          f"{summary['needs_research']} need research -> {path}")
    return path


def run_export(config: Config) -> Dict[str, Path]:
    """
    Export the database to the dist directory.

    Raises:
        FileNotFoundError: If the database does not exist.
        DatabaseError: If the database is malformed.
        OSError: If an output cannot be written.
    """
    doc = load_database(config.database_path)
    if doc is None:
        raise FileNotFoundError(f"Database not found: {config.database_path}")
    return export.export_database(doc, config.database_path, config.dist_dir)


def run_check(config: Config) -> list:
    """
    Check the database for consistency issues.

    Raises:
        FileNotFoundError: If the database does not exist.
        DatabaseError: If the database is malformed.
    """
    doc = load_database(config.database_path)
    if doc is None:
        raise FileNotFoundError(f"Database not found: {config.database_path}")
    return check_database(doc)
