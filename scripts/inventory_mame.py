"""
Build the MAME wheel candidate inventory.

Merges catver.ini, mame.xml (-listxml) and controls.xml from the deps
directory and marks which candidates are already in the database.

Usage:
    python scripts/inventory_mame.py
    python scripts/inventory_mame.py --deps-dir deps --output inventory
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))
from config import Config
from wheeldb.main import run_mame_inventory


def main():
    config = Config()

    parser = argparse.ArgumentParser(description="Build the MAME wheel candidate inventory")
    parser.add_argument("--database", type=Path, default=config.database_path, help="Database JSON path")
    parser.add_argument("--deps-dir", type=Path, default=config.deps_dir, help="Directory with catver.ini, mame.xml, controls.xml")
    parser.add_argument("--output", type=Path, default=config.inventory_dir, help="Inventory output directory")
    args = parser.parse_args()

    config.database_path = args.database
    config.deps_dir = args.deps_dir
    config.inventory_dir = args.output

    try:
        config.inventory_dir.mkdir(parents=True, exist_ok=True)
        run_mame_inventory(config)
    except OSError as e:
        print(f"Could not write inventory: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
