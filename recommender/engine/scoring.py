"""
Scoring engine shared by all recommendation domains.

Responsibilities:
- Apply the domain's hard requirements (any failure rejects the entity).
- Add soft bonuses for category overlap, language, streaming providers and
  rating margin above the user's minimum.
- Break ties with a small random jitter and rank candidates.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Generic, Iterable, TypeVar

from .config import DEFAULT_SCORING_WEIGHTS, ScoringWeights
from .constraints import Constrained, value_or
from .rules import DomainRules

logger = logging.getLogger(__name__)

E = TypeVar("E")


@dataclass(frozen=True)
class ScoredCandidate(Generic[E]):
    entity: E
    base: float
    jitter: float = 0.0

    @property
    def score(self) -> float:
        return self.base + self.jitter if self.base > 0 else 0.0

    @property
    def rejected(self) -> bool:
        return self.base <= 0


def _category_matches(categories: Iterable[str], preferred: frozenset[str]) -> int:
    have = {c.lower() for c in categories}
    return len({p.lower() for p in preferred} & have)


def _provider_match(available: Iterable[str], preferred: frozenset[str]) -> bool:
    have = {p.lower() for p in available}
    return any(p.lower() in have for p in preferred)


def _base_score(entity: Any, prefs: Any, rules: DomainRules, w: ScoringWeights) -> float:
    score = 0.0

    for requirement in rules.requirements:
        outcome = requirement.check(entity, prefs)
        if outcome is None:
            continue
        if not outcome:
            return 0.0
        if requirement.bonus:
            score += getattr(w, requirement.bonus)

    preferred = rules.preferred_categories(prefs)
    if isinstance(preferred, Constrained):
        score += w.category_match * _category_matches(rules.categories(entity), preferred.value)
    else:
        score += w.category_any

    if rules.preferred_providers is not None and rules.streaming_providers is not None:
        wanted = rules.preferred_providers(prefs)
        if isinstance(wanted, Constrained) and _provider_match(rules.streaming_providers(entity), wanted.value):
            score += w.provider_match

    floor = value_or(prefs.rating_floor, None)
    rating = rules.rating(entity)
    if rating is None:
        if floor is not None:
            return 0.0
    elif floor is None or rating >= floor:
        score += w.rating_met
        score += w.rating_margin * (rating - (floor or 0.0)) / rules.rating_scale
    elif score < w.below_rating_floor:
        # Under the rating bar: only an otherwise strong match survives.
        return 0.0

    return score


def score(
    entity: E,
    prefs: Any,
    rules: DomainRules,
    weights: ScoringWeights = DEFAULT_SCORING_WEIGHTS,
    rng: random.Random | None = None,
) -> ScoredCandidate[E]:
    """Score one entity against one preference record.

    Malformed entities degrade to a rejected candidate instead of raising.
    """
    try:
        base = _base_score(entity, prefs, rules, weights)
    except (AttributeError, TypeError, ValueError):
        logger.debug("Could not score %s entity %r", rules.name, entity, exc_info=True)
        base = 0.0

    if base <= 0:
        return ScoredCandidate(entity=entity, base=0.0)
    jitter = (rng or random).random() * weights.jitter
    return ScoredCandidate(entity=entity, base=base, jitter=jitter)


def rank(
    candidates: Iterable[E],
    prefs: Any,
    rules: DomainRules,
    weights: ScoringWeights = DEFAULT_SCORING_WEIGHTS,
    rng: random.Random | None = None,
) -> list[ScoredCandidate[E]]:
    """Score all candidates, drop rejects and sort best first."""
    scored = [score(c, prefs, rules, weights, rng) for c in candidates]
    eligible = [s for s in scored if not s.rejected]
    eligible.sort(key=lambda s: s.score, reverse=True)
    return eligible
