"""
Configuration for the arcade wheel rotation database tooling.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env file
load_dotenv()


@dataclass
class Config:
    """Configuration with environment variable support."""

    # Persisted database (single source of truth)
    database_path: Path = field(
        default_factory=lambda: Path(os.getenv("WHEELDB_DATABASE", "data/wheel-rotation.json"))
    )

    # Upstream dependency files
    deps_dir: Path = field(
        default_factory=lambda: Path(os.getenv("WHEELDB_DEPS_DIR", "deps"))
    )
    teknoparrot_dir: Path = field(
        default_factory=lambda: Path(os.getenv("WHEELDB_TEKNOPARROT_DIR", "deps/teknoparrot"))
    )

    # Derived outputs
    inventory_dir: Path = field(
        default_factory=lambda: Path(os.getenv("WHEELDB_INVENTORY_DIR", "inventory"))
    )
    dist_dir: Path = field(
        default_factory=lambda: Path(os.getenv("WHEELDB_DIST_DIR", "dist"))
    )

    # File names inside deps_dir
    catver_name: str = "catver.ini"
    listxml_name: str = "mame.xml"
    controls_name: str = "controls.xml"

    def __post_init__(self):
        """Normalize path fields given as strings."""
        self.database_path = Path(self.database_path)
        self.deps_dir = Path(self.deps_dir)
        self.teknoparrot_dir = Path(self.teknoparrot_dir)
        self.inventory_dir = Path(self.inventory_dir)
        self.dist_dir = Path(self.dist_dir)

    @property
    def catver_path(self) -> Path:
        return self.deps_dir / self.catver_name

    @property
    def listxml_path(self) -> Path:
        return self.deps_dir / self.listxml_name

    @property
    def controls_path(self) -> Path:
        return self.deps_dir / self.controls_name

    @property
    def profiles_dir(self) -> Path:
        return self.teknoparrot_dir / "GameProfiles"

    @property
    def metadata_dir(self) -> Path:
        return self.teknoparrot_dir / "Metadata"
