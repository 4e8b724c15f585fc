"""
Check the database for consistency issues.

Usage:
    python scripts/check_database.py
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))
from config import Config
from wheeldb.database import DatabaseError
from wheeldb.main import run_check


def main():
    config = Config()

    parser = argparse.ArgumentParser(description="Check the wheel rotation database")
    parser.add_argument("--database", type=Path, default=config.database_path, help="Database JSON path")
    args = parser.parse_args()

    config.database_path = args.database

    try:
        issues = run_check(config)
    except (OSError, DatabaseError) as e:
        print(f"Check failed: {e}")
        return 1

    if not issues:
        print(f"{config.database_path}: no issues found")
        return 0

    print(f"{len(issues)} issue(s) in {config.database_path}:")
    for issue in issues:
        print(f"  - {issue}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
