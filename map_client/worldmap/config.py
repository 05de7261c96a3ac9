"""
Configuration shared by the terminal app and the backend.
"""

import os
import logging
from typing import Optional
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass
class AppConfig:
    """World map configuration."""
    data_dir: str = "./worlds"
    default_radius: Optional[int] = None  # None = whole connected component
    log_level: str = "WARNING"
    log_file: str = "worldmap.log"
    port: int = 8000

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "AppConfig":
        """Build a config from WORLDMAP_* environment variables (and .env)."""
        if load_env_file:
            load_dotenv()

        radius = os.getenv("WORLDMAP_DEFAULT_RADIUS", "").strip()

        return cls(
            data_dir=os.getenv("WORLDMAP_DATA_DIR", cls.data_dir),
            default_radius=int(radius) if radius else None,
            log_level=os.getenv("WORLDMAP_LOG_LEVEL", cls.log_level).upper(),
            log_file=os.getenv("WORLDMAP_LOG_FILE", cls.log_file),
            port=int(os.getenv("PORT", cls.port)),
        )

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)

    def world_path(self, world_name: str) -> Path:
        """Path of a world file inside the data directory."""
        name = Path(world_name).name
        if not name.endswith(".json"):
            name = f"{name}.json"
        return self.data_path / name

    def log_level_value(self) -> int:
        return getattr(logging, self.log_level, logging.WARNING)
