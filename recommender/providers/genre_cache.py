from __future__ import annotations

from typing import Awaitable, Callable

GenreLoader = Callable[[], Awaitable[dict[int, str]]]


class GenreCache:
    """Genre id -> name table for one TMDB media type.

    Filled from ``loader`` on first use and kept for the life of the owning
    client; ``invalidate`` forces the next lookup to reload. An empty load
    (missing key, failed call) is not cached.
    """

    def __init__(self, loader: GenreLoader) -> None:
        self._loader = loader
        self._genres: dict[int, str] | None = None
        self.hits = 0
        self.misses = 0

    async def get(self) -> dict[int, str]:
        if self._genres is not None:
            self.hits += 1
            return self._genres
        self.misses += 1
        genres = await self._loader()
        if genres:
            self._genres = genres
        return genres

    async def names_for(self, genre_ids: list[int] | None) -> list[str]:
        if not genre_ids:
            return []
        genres = await self.get()
        return [genres[g] for g in genre_ids if g in genres]

    def invalidate(self) -> None:
        self._genres = None

    def stats(self) -> dict:
        total = self.hits + self.misses
        return {
            "size": len(self._genres or {}),
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": round(self.hits / total * 100, 1) if total > 0 else 0.0,
        }
