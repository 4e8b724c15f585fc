"""
Shared helpers for writing derived documents.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Union


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def write_json(path: Union[str, Path], doc: Dict[str, Any]) -> Path:
    """
    Write a document as UTF-8 JSON.

    Raises:
        OSError: If the file cannot be written.
    """
    path = Path(path)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        json.dump(doc, f, indent=2, ensure_ascii=False)
        f.write("\n")
    return path
