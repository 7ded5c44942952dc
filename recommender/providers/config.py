from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the working directory
load_dotenv(Path.cwd() / ".env")


@dataclass(frozen=True)
class ProviderConfig:
    tmdb_api_key: str = os.getenv("TMDB_API_KEY", "")
    google_places_api_key: str = os.getenv("GOOGLE_PLACES_API_KEY", "")
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    tmdb_image_base_url: str = "https://image.tmdb.org/t/p/"
    google_places_url: str = "https://maps.googleapis.com/maps/api/place/textsearch/json"
    watch_region: str = os.getenv("TMDB_WATCH_REGION", "US")
    timeout: float = 10.0


DEFAULT_PROVIDER_CONFIG = ProviderConfig()
