from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from ..models import Restaurant
from .config import DEFAULT_PROVIDER_CONFIG, ProviderConfig

logger = logging.getLogger(__name__)

_TYPE_CUISINES: dict[str, str] = {
    "cafe": "Cafe",
    "bakery": "Bakery",
    "bar": "Bar",
}

_NAME_KEYWORDS: dict[str, str] = {
    "pizza": "Pizza",
    "sushi": "Sushi",
    "burger": "Burgers",
    "taco": "Mexican",
    "pho": "Vietnamese",
    "curry": "Indian",
    "pasta": "Italian",
    "steakhouse": "Steakhouse",
}

_DIETARY_TYPES: dict[str, str] = {
    "vegetarian_restaurant": "vegetarian",
    "vegan_restaurant": "vegan",
}


def map_types_to_cuisines(place_types: list[str] | None, place_name: str) -> list[str]:
    """Derive cuisine labels from Google place types and the place name."""
    if not place_types:
        return ["Miscellaneous"]

    cuisines: list[str] = []

    def _add(cuisine: str) -> None:
        if cuisine not in cuisines:
            cuisines.append(cuisine)

    for place_type in place_types:
        if place_type in _TYPE_CUISINES:
            _add(_TYPE_CUISINES[place_type])
        elif place_type.endswith("_restaurant"):
            words = place_type.removesuffix("_restaurant").split("_")
            _add(" ".join(w.capitalize() for w in words))

    name_lower = place_name.lower()
    for keyword, cuisine in _NAME_KEYWORDS.items():
        if keyword in name_lower:
            _add(cuisine)

    if not cuisines:
        _add("Restaurant" if "restaurant" in place_types else "Food")
    return cuisines


def map_types_to_dietary(place_types: list[str] | None) -> list[str]:
    if not place_types:
        return []
    return [label for t, label in _DIETARY_TYPES.items() if t in place_types]


class GooglePlacesClient:
    """Restaurant text search. Returns ``[]`` on any failure."""

    def __init__(self, http: httpx.AsyncClient, config: ProviderConfig = DEFAULT_PROVIDER_CONFIG) -> None:
        self.http = http
        self.config = config
        self._warned_missing_key = False

    @property
    def is_configured(self) -> bool:
        return bool(self.config.google_places_api_key)

    async def search_by_location(self, location: str, max_results: int = 20) -> list[Restaurant]:
        if not self.is_configured:
            if not self._warned_missing_key:
                logger.warning("GOOGLE_PLACES_API_KEY is not set; restaurant search is unavailable")
                self._warned_missing_key = True
            return []

        query = f"restaurants in {location}"
        params = {"query": query, "key": self.config.google_places_api_key, "type": "restaurant"}
        logger.info("Fetching restaurants for query: %r", query)
        try:
            response = await self.http.get(
                self.config.google_places_url, params=params, timeout=self.config.timeout
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning("Google Places error %s", exc.response.status_code)
            return []
        except httpx.HTTPError as exc:
            logger.warning("Google Places request failed: %s", type(exc).__name__)
            return []
        except ValueError:
            logger.warning("Google Places returned invalid JSON")
            return []
        if not isinstance(data, dict):
            logger.warning("Google Places returned a %s body", type(data).__name__)
            return []

        status = data.get("status")
        if status == "ZERO_RESULTS":
            logger.info("No restaurants found for %r", query)
            return []
        if status != "OK":
            logger.warning("Google Places status %s: %s", status, data.get("error_message", ""))
            return []

        restaurants: list[Restaurant] = []
        results = data.get("results")
        for place in (results if isinstance(results, list) else [])[:max_results]:
            if not isinstance(place, dict):
                continue
            name = place.get("name") or "Name N/A"
            try:
                restaurants.append(
                    Restaurant(
                        external_id=place.get("place_id") or "",
                        name=name,
                        address=place.get("formatted_address") or place.get("vicinity") or "Address N/A",
                        cuisines=map_types_to_cuisines(place.get("types"), name),
                        dietary_options=map_types_to_dietary(place.get("types")),
                        rating=place.get("rating"),
                    )
                )
            except (ValidationError, AttributeError, TypeError):
                logger.warning("Skipping malformed place %r", place.get("place_id"))
        logger.info("Fetched %d restaurants", len(restaurants))
        return restaurants
