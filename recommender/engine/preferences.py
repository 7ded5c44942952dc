from __future__ import annotations

from dataclasses import dataclass, field

from .constraints import UNCONSTRAINED, Constrained, Constraint

MIN_RESTAURANT_RATING = 1.0
MAX_RESTAURANT_RATING = 5.0
DEFAULT_RESTAURANT_MIN_RATING = 3.0
MAX_MEDIA_RATING = 10.0


@dataclass
class RestaurantPreferences:
    user_id: int
    favorite_cuisines: Constraint = UNCONSTRAINED
    dietary_restrictions: Constraint = UNCONSTRAINED
    min_rating: float = DEFAULT_RESTAURANT_MIN_RATING

    def __post_init__(self) -> None:
        if not MIN_RESTAURANT_RATING <= self.min_rating <= MAX_RESTAURANT_RATING:
            raise ValueError(
                f"min_rating must be within [{MIN_RESTAURANT_RATING}, {MAX_RESTAURANT_RATING}]"
            )

    @property
    def rating_floor(self) -> Constraint:
        return Constrained(self.min_rating)


@dataclass
class MediaPreferences:
    """Movie and TV preferences.

    ``duration_*`` bounds apply to the movie runtime or to the average TV
    episode runtime; ``year_*`` bounds apply to the release or first-air year.
    ``min_rating`` is compared against the provider vote average (0-10).
    """

    user_id: int
    preferred_genres: Constraint = UNCONSTRAINED
    preferred_languages: Constraint = UNCONSTRAINED
    year_min: Constraint = UNCONSTRAINED
    year_max: Constraint = UNCONSTRAINED
    duration_min: Constraint = UNCONSTRAINED
    duration_max: Constraint = UNCONSTRAINED
    min_rating: Constraint = UNCONSTRAINED
    preferred_streaming_providers: Constraint = field(default=UNCONSTRAINED)

    def __post_init__(self) -> None:
        if isinstance(self.min_rating, Constrained) and not 0.0 <= self.min_rating.value <= MAX_MEDIA_RATING:
            raise ValueError(f"min_rating must be within [0, {MAX_MEDIA_RATING}]")
        for low, high in ((self.year_min, self.year_max), (self.duration_min, self.duration_max)):
            if isinstance(low, Constrained) and isinstance(high, Constrained) and low.value > high.value:
                raise ValueError(f"lower bound {low.value} is above upper bound {high.value}")
        if isinstance(self.preferred_languages, Constrained):
            # Languages are ISO 639-1 codes, compared lowercase.
            self.preferred_languages = Constrained(
                frozenset(code.lower() for code in self.preferred_languages.value)
            )

    @property
    def rating_floor(self) -> Constraint:
        return self.min_rating


Preferences = RestaurantPreferences | MediaPreferences
