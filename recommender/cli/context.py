from __future__ import annotations

from dataclasses import dataclass

import httpx

from ..engine.orchestrator import Recommender
from ..engine.rules import MOVIE_RULES, RESTAURANT_RULES, TV_SHOW_RULES
from ..providers.config import DEFAULT_PROVIDER_CONFIG, ProviderConfig
from ..providers.google_places import GooglePlacesClient
from ..providers.tmdb import TmdbClient
from ..storage.stores import CatalogStore, InteractionStore, MediaPreferenceStore, Stores


@dataclass
class MediaDomain:
    """Everything the movie or TV menu needs."""

    label: str
    plural: str
    year_label: str
    duration_label: str
    catalog: CatalogStore
    preferences: MediaPreferenceStore
    ratings: InteractionStore
    client: TmdbClient
    recommender: Recommender


@dataclass
class AppContext:
    stores: Stores
    places: GooglePlacesClient
    restaurant_recommender: Recommender
    movies: MediaDomain
    tv_shows: MediaDomain

    def missing_configuration(self) -> list[str]:
        missing = []
        if not self.movies.client.is_configured:
            missing.append("TMDB_API_KEY")
        if not self.places.is_configured:
            missing.append("GOOGLE_PLACES_API_KEY")
        return missing


def build_context(
    stores: Stores,
    http: httpx.AsyncClient,
    config: ProviderConfig = DEFAULT_PROVIDER_CONFIG,
) -> AppContext:
    movie_client = TmdbClient("movie", http, config)
    tv_client = TmdbClient("tv", http, config)

    return AppContext(
        stores=stores,
        places=GooglePlacesClient(http, config),
        restaurant_recommender=Recommender(RESTAURANT_RULES, stores.restaurants, stores.restaurant_likes),
        movies=MediaDomain(
            label="Movie",
            plural="movies",
            year_label="Release year",
            duration_label="Runtime (minutes)",
            catalog=stores.movies,
            preferences=stores.movie_preferences,
            ratings=stores.movie_ratings,
            client=movie_client,
            recommender=Recommender(MOVIE_RULES, stores.movies, stores.movie_ratings, movie_client),
        ),
        tv_shows=MediaDomain(
            label="TV Show",
            plural="TV shows",
            year_label="First air year",
            duration_label="Average episode runtime (minutes)",
            catalog=stores.tv_shows,
            preferences=stores.tv_show_preferences,
            ratings=stores.tv_show_ratings,
            client=tv_client,
            recommender=Recommender(TV_SHOW_RULES, stores.tv_shows, stores.tv_show_ratings, tv_client),
        ),
    )
