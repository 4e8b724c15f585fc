"""
Build the TeknoParrot wheel candidate inventory.

Scans GameProfiles/*.xml for profiles with a Wheel analog input, enriches
them from Metadata/*.json and marks which are already in the database.

Usage:
    python scripts/inventory_teknoparrot.py
    python scripts/inventory_teknoparrot.py --teknoparrot-dir deps/teknoparrot
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))
from config import Config
from wheeldb.main import run_teknoparrot_inventory


def main():
    config = Config()

    parser = argparse.ArgumentParser(description="Build the TeknoParrot wheel candidate inventory")
    parser.add_argument("--database", type=Path, default=config.database_path, help="Database JSON path")
    parser.add_argument("--teknoparrot-dir", type=Path, default=config.teknoparrot_dir, help="Directory with GameProfiles/ and Metadata/")
    parser.add_argument("--output", type=Path, default=config.inventory_dir, help="Inventory output directory")
    args = parser.parse_args()

    config.database_path = args.database
    config.teknoparrot_dir = args.teknoparrot_dir
    config.inventory_dir = args.output

    try:
        config.inventory_dir.mkdir(parents=True, exist_ok=True)
        run_teknoparrot_inventory(config)
    except OSError as e:
        print(f"Could not write inventory: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
