"""
Export the database to JSON, CSV and XML under the dist directory.

Usage:
    python scripts/export_database.py
    python scripts/export_database.py --database data/wheel-rotation.json --output dist
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))
from config import Config
from wheeldb.database import DatabaseError
from wheeldb.main import run_export


def main():
    config = Config()

    parser = argparse.ArgumentParser(description="Export the wheel rotation database")
    parser.add_argument("--database", type=Path, default=config.database_path, help="Database JSON path")
    parser.add_argument("--output", type=Path, default=config.dist_dir, help="Export output directory")
    args = parser.parse_args()

    config.database_path = args.database
    config.dist_dir = args.output

    try:
        config.dist_dir.mkdir(parents=True, exist_ok=True)
        paths = run_export(config)
    except (OSError, DatabaseError) as e:
        print(f"Export failed: {e}")
        return 1

    for fmt, path in paths.items():
        print(f"  {fmt}: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
