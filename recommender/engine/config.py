from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringWeights:
    """
    Score contributions shared by every domain.

    ``jitter`` is the exclusive upper bound of the uniform tie-breaker and
    must stay well below the smallest fixed bonus.
    """

    category_match: float = 10.0
    category_any: float = 5.0
    requirement_match: float = 20.0
    language_match: float = 10.0
    provider_match: float = 5.0
    rating_met: float = 10.0
    rating_margin: float = 25.0
    jitter: float = 0.5

    @property
    def below_rating_floor(self) -> float:
        """Score an entity under the minimum rating needs to stay eligible."""
        return (self.category_match + self.requirement_match) / 2


@dataclass(frozen=True)
class RecommenderConfig:
    default_count: int = 5
    candidate_window: int = 30
    min_ratings_for_similar: int = 2
    similar_seed_count: int = 3


DEFAULT_SCORING_WEIGHTS = ScoringWeights()
DEFAULT_RECOMMENDER_CONFIG = RecommenderConfig()
