"""
Reader for catver.ini style category listings.
"""

import re
from pathlib import Path
from typing import Dict, Optional, Union


CATEGORY_SECTION = "[Category]"
DRIVING_PATTERN = re.compile(r"driving|racing", re.IGNORECASE)


def parse_catver(lines) -> Dict[str, str]:
    """
    Collect driving/racing entries from the [Category] section.

    Args:
        lines: Iterable of text lines.

    Returns:
        Mapping of ROM name to category string. A key seen twice keeps
        its last value.
    """
    categories: Dict[str, str] = {}
    in_section = False

    for raw in lines:
        line = raw.strip()
        if line == CATEGORY_SECTION:
            in_section = True
            continue
        if line.startswith("["):
            if in_section:
                break
            continue
        if not in_section or not line or line.startswith(";"):
            continue
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if key and DRIVING_PATTERN.search(value):
            categories[key] = value

    return categories


def read_catver(path: Union[str, Path]) -> Optional[Dict[str, str]]:
    """
    Read a category file.

    Returns:
        Mapping of ROM name to category, or None if the file is unavailable.
    """
    path = Path(path)
    if not path.exists():
        print(f"[catver] Warning: {path} not found, skipping category source")
        return None

    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            categories = parse_catver(f)
    except OSError as e:
        print(f"[catver] Warning: could not read {path}: {e}")
        return None

    print(f"[catver] {len(categories)} driving/racing entries")
    return categories
