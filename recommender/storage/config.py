from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path.cwd() / ".env")


@dataclass(frozen=True)
class StorageConfig:
    database_url: str = os.getenv("RECOMMENDER_DATABASE_URL", "sqlite:///recommender_system.sqlite")
    echo: bool = False  # Set to True for SQL debugging


DEFAULT_STORAGE_CONFIG = StorageConfig()
