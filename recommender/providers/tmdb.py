from __future__ import annotations

import logging
from typing import Any, Literal

import httpx
from pydantic import ValidationError

from ..models import Movie, TvShow
from .config import DEFAULT_PROVIDER_CONFIG, ProviderConfig
from .genre_cache import GenreCache

logger = logging.getLogger(__name__)

MediaType = Literal["movie", "tv"]

DETAIL_APPENDS = "watch/providers,external_ids"


def _dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _dicts(value: Any) -> list[dict]:
    """The object entries of a JSON array; anything else yields nothing."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


class TmdbClient:
    """TMDB access for one media type.

    Every method returns empty data (``[]`` or ``None``) when the API key is
    missing or the request fails; nothing is raised to the caller.
    """

    def __init__(
        self,
        media_type: MediaType,
        http: httpx.AsyncClient,
        config: ProviderConfig = DEFAULT_PROVIDER_CONFIG,
    ) -> None:
        self.media_type = media_type
        self.http = http
        self.config = config
        self.genres = GenreCache(self._load_genres)
        self._warned_missing_key = False

    @property
    def is_configured(self) -> bool:
        return bool(self.config.tmdb_api_key)

    async def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> dict | None:
        if not self.is_configured:
            if not self._warned_missing_key:
                logger.warning("TMDB_API_KEY is not set; %s data is unavailable", self.media_type)
                self._warned_missing_key = True
            return None

        query = {"api_key": self.config.tmdb_api_key, **(params or {})}
        try:
            response = await self.http.get(
                f"{self.config.tmdb_base_url}/{endpoint}", params=query, timeout=self.config.timeout
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            # The request URL carries the key, so only the status is logged.
            logger.warning("TMDB API error %s for %s", exc.response.status_code, endpoint)
            return None
        except httpx.HTTPError as exc:
            logger.warning("TMDB request for %s failed: %s", endpoint, type(exc).__name__)
            return None
        except ValueError:
            logger.warning("TMDB returned invalid JSON for %s", endpoint)
            return None
        if not isinstance(data, dict):
            logger.warning("TMDB returned a %s body for %s", type(data).__name__, endpoint)
            return None
        return data

    async def _load_genres(self) -> dict[int, str]:
        data = await self._get(f"genre/{self.media_type}/list")
        if not data:
            return {}
        genres = {g["id"]: g["name"] for g in _dicts(data.get("genres")) if "id" in g and "name" in g}
        logger.debug("Loaded %d %s genres", len(genres), self.media_type)
        return genres

    def _streaming_providers(self, data: dict) -> list[str]:
        regions = _dict(_dict(data.get("watch/providers")).get("results"))
        region = _dict(regions.get(self.config.watch_region))
        return [p["provider_name"] for p in _dicts(region.get("flatrate")) if p.get("provider_name")]

    async def _to_entity(self, data: Any) -> Movie | TvShow | None:
        if not isinstance(data, dict):
            logger.warning("Skipping non-object TMDB %s record", self.media_type)
            return None
        try:
            if "genres" in data:
                genres = [g["name"] for g in _dicts(data.get("genres")) if g.get("name")]
            else:
                genres = await self.genres.names_for(data.get("genre_ids"))
            imdb_id = _dict(data.get("external_ids")).get("imdb_id") or data.get("imdb_id")

            common = {
                "external_id": str(data.get("id", "")),
                "overview": data.get("overview") or "",
                "vote_average": data.get("vote_average"),
                "vote_count": data.get("vote_count") or 0,
                "poster_path": data.get("poster_path"),
                "genres": genres,
                "original_language": data.get("original_language"),
                "imdb_id": imdb_id,
                "streaming_providers": self._streaming_providers(data),
            }
            if self.media_type == "movie":
                return Movie(
                    title=data.get("title") or "Untitled",
                    release_date=data.get("release_date") or None,
                    runtime=data.get("runtime"),
                    **common,
                )
            return TvShow(
                name=data.get("name") or "Untitled",
                first_air_date=data.get("first_air_date") or None,
                number_of_seasons=data.get("number_of_seasons"),
                episode_run_time=data.get("episode_run_time") or [],
                **common,
            )
        except (ValidationError, AttributeError, KeyError, TypeError):
            logger.warning("Skipping malformed TMDB %s record %r", self.media_type, data.get("id"))
            return None

    async def _to_entities(self, data: dict | None) -> list[Movie | TvShow]:
        if not data:
            return []
        entities = []
        for item in _dicts(data.get("results")):
            entity = await self._to_entity(item)
            if entity is not None:
                entities.append(entity)
        return entities

    async def list_popular(self, page: int = 1) -> list[Movie | TvShow]:
        return await self._to_entities(await self._get(f"{self.media_type}/popular", {"page": page}))

    async def search(self, query: str, page: int = 1, year: int | None = None) -> list[Movie | TvShow]:
        params: dict[str, Any] = {"query": query, "page": page}
        if year:
            params["year" if self.media_type == "movie" else "first_air_date_year"] = year
        return await self._to_entities(await self._get(f"search/{self.media_type}", params))

    async def get_details(self, external_id: str) -> Movie | TvShow | None:
        data = await self._get(
            f"{self.media_type}/{external_id}", {"append_to_response": DETAIL_APPENDS}
        )
        return await self._to_entity(data) if data else None

    async def get_similar(self, external_id: str, page: int = 1) -> list[Movie | TvShow]:
        """Items TMDB recommends for viewers of ``external_id``."""
        return await self._to_entities(
            await self._get(f"{self.media_type}/{external_id}/recommendations", {"page": page})
        )

    async def genre_names(self) -> list[str]:
        return sorted((await self.genres.get()).values())

    async def watch_provider_names(self) -> list[str]:
        data = await self._get(
            f"watch/providers/{self.media_type}", {"watch_region": self.config.watch_region}
        )
        if not data:
            return []
        return sorted({p["provider_name"] for p in _dicts(data.get("results")) if p.get("provider_name")})

    def poster_url(self, path: str | None, size: str = "w342") -> str | None:
        return f"{self.config.tmdb_image_base_url}{size}{path}" if path else None
