"""
Recommendation orchestrator.

Responsibilities:
- Gather candidates for one domain from the local catalog and/or provider.
- Run the scoring engine over them (content phase).
- Top up from the provider's "recommended for item X" endpoint, seeded by
  the user's best-rated items (similarity phase).
- Top up from the provider's popular list in order (fallback phase).
- Never return an excluded or duplicate entity, never more than ``count``.
"""
from __future__ import annotations

import logging
import random
from typing import Any, Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from .config import DEFAULT_RECOMMENDER_CONFIG, DEFAULT_SCORING_WEIGHTS, RecommenderConfig, ScoringWeights
from ..models import Entity
from .exclusion import ExclusionSet
from .preferences import Preferences
from .rules import DomainRules
from .scoring import rank

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)


class Recommender(Generic[E]):
    """One recommendation engine, instantiated once per domain.

    ``catalog`` and ``interactions`` follow the storage layer's store
    interfaces; ``provider`` is a TMDB client (or ``None`` for domains that
    recommend from the local catalog only).
    """

    def __init__(
        self,
        rules: DomainRules,
        catalog: Any,
        interactions: Any,
        provider: Any = None,
        weights: ScoringWeights = DEFAULT_SCORING_WEIGHTS,
        config: RecommenderConfig = DEFAULT_RECOMMENDER_CONFIG,
        rng: random.Random | None = None,
    ) -> None:
        if rules.candidates_from_provider and provider is None:
            raise ValueError(f"{rules.name} recommendations need a content provider")
        self.rules = rules
        self.catalog = catalog
        self.interactions = interactions
        self.provider = provider
        self.weights = weights
        self.config = config
        self.rng = rng or random.Random()

    async def get_recommendations(
        self,
        user_id: int,
        preferences: Preferences,
        exclude: ExclusionSet | None = None,
        count: int | None = None,
    ) -> list[E]:
        """Return up to ``count`` entities, best first.

        ``exclude`` is updated in place with every entity returned. A short
        or empty list means the available inventory ran out.
        """
        count = self.config.default_count if count is None else count
        exclude = exclude if exclude is not None else ExclusionSet()
        if count <= 0:
            return []

        picks: list[E] = []
        popular: list[E] = []
        if self.rules.candidates_from_provider:
            self._hydrate_exclusions(exclude)
            popular = await self.provider.list_popular(page=1)
        logger.debug("[%s] user %s: %d ids excluded", self.rules.name, user_id, len(exclude))

        candidates = await self._content_candidates(popular, exclude)
        self._content_phase(candidates, preferences, exclude, picks, count)

        if self.rules.has_similarity_phase and len(picks) < count:
            await self._similarity_phase(user_id, exclude, picks, count)

        if self.rules.candidates_from_provider and len(picks) < count:
            await self._fallback_phase(popular, exclude, picks, count)

        if not picks:
            logger.info("No %s recommendations available for user %s", self.rules.name, user_id)
        return picks[:count]

    # -- phases -------------------------------------------------------------

    def _content_phase(
        self,
        candidates: list[E],
        preferences: Preferences,
        exclude: ExclusionSet,
        picks: list[E],
        count: int,
    ) -> None:
        ranked = rank(candidates, preferences, self.rules, self.weights, self.rng)
        logger.debug(
            "[%s] content phase: %d candidates, %d eligible",
            self.rules.name, len(candidates), len(ranked),
        )
        for scored in ranked:
            if len(picks) >= count:
                break
            self._append(scored.entity, exclude, picks)

    async def _similarity_phase(
        self,
        user_id: int,
        exclude: ExclusionSet,
        picks: list[E],
        count: int,
    ) -> None:
        ratings = self.interactions.list_ratings_for_user(user_id)
        if len(ratings) < self.config.min_ratings_for_similar:
            return
        logger.info("[%s] similarity phase seeded by %d ratings", self.rules.name, len(ratings))

        seeds = sorted(ratings, key=lambda r: r.value, reverse=True)[: self.config.similar_seed_count]
        for seed in seeds:
            if len(picks) >= count:
                break
            for item in await self.provider.get_similar(seed.external_id):
                if len(picks) >= count:
                    break
                if exclude.excludes_external(item.external_id):
                    continue
                entity = await self._fetch_and_store(item.external_id)
                if entity is not None:
                    self._append(entity, exclude, picks)

    async def _fallback_phase(
        self,
        popular: list[E],
        exclude: ExclusionSet,
        picks: list[E],
        count: int,
    ) -> None:
        logger.info("[%s] falling back to popular items", self.rules.name)
        for item in popular:
            if len(picks) >= count:
                break
            if exclude.excludes_external(item.external_id):
                continue
            entity = self.catalog.find_by_external_id(item.external_id)
            if entity is None:
                entity = await self._fetch_and_store(item.external_id)
            if entity is not None:
                self._append(entity, exclude, picks)

    # -- helpers ------------------------------------------------------------

    async def _content_candidates(self, popular: list[E], exclude: ExclusionSet) -> list[E]:
        if not self.rules.candidates_from_provider:
            return [e for e in self.catalog.list_all() if not exclude.excludes(e)]

        candidates: list[E] = []
        for item in popular[: self.config.candidate_window]:
            if exclude.excludes_external(item.external_id):
                continue
            entity = await self._fetch_and_store(item.external_id)
            if entity is not None:
                candidates.append(entity)

        if not popular:
            logger.info("[%s] provider returned nothing, scoring the local catalog", self.rules.name)
            local = [e for e in self.catalog.list_all() if not exclude.excludes(e)]
            candidates = local[: self.config.candidate_window]
        return candidates

    async def _fetch_and_store(self, external_id: str) -> E | None:
        details = await self.provider.get_details(external_id)
        if details is None:
            return None
        try:
            return self.catalog.upsert(details)
        except SQLAlchemyError:
            logger.warning(
                "[%s] could not store %s, skipping", self.rules.name, external_id, exc_info=True
            )
            return None

    def _hydrate_exclusions(self, exclude: ExclusionSet) -> None:
        # Provider results carry only external ids; map excluded rows to theirs.
        for local_id in list(exclude.local_ids):
            entity = self.catalog.find_by_local_id(local_id)
            if entity is not None:
                exclude.external_ids.add(str(entity.external_id))

    @staticmethod
    def _append(entity: E, exclude: ExclusionSet, picks: list[E]) -> bool:
        if exclude.excludes(entity):
            return False
        if any(p.external_id == entity.external_id for p in picks):
            return False
        picks.append(entity)
        exclude.add(entity)
        return True
