"""
Base configuration classes for project and storage settings.

Provides the project-level layout (where the data directory lives) and the
result cache backend selection.
"""

from dataclasses import dataclass


@dataclass
class ProjectConfig:
    """Project-level configuration."""

    name: str = "loomin"
    data_dir: str = ".data"


@dataclass
class StorageConfig:
    """Result cache storage configuration."""

    backend: str = "sqlite"  # sqlite, memory
    # Empty means sqlite:///<data_dir>/simulation_cache.db
    database_url: str = ""
    echo: bool = False
