"""
Per-domain rules descriptors.

A ``DomainRules`` tells the generic scoring engine which entity attributes
are hard requirements, which are soft bonuses, and how the orchestrator
gathers candidates for the domain.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable

from .constraints import Constrained, Constraint


@dataclass(frozen=True)
class Requirement:
    """A hard filter.

    ``check`` returns ``None`` when the user stated no such constraint,
    ``True`` when the entity satisfies it and ``False`` otherwise.
    ``bonus`` names the ``ScoringWeights`` field awarded on success.
    """

    name: str
    check: Callable[[Any, Any], bool | None]
    bonus: str | None = None


@dataclass(frozen=True)
class DomainRules:
    name: str
    rating_scale: float
    categories: Callable[[Any], Iterable[str]]
    preferred_categories: Callable[[Any], Constraint]
    rating: Callable[[Any], float | None]
    requirements: tuple[Requirement, ...] = ()
    streaming_providers: Callable[[Any], Iterable[str]] | None = None
    preferred_providers: Callable[[Any], Constraint] | None = None
    candidates_from_provider: bool = False
    has_similarity_phase: bool = False


def _dietary(restaurant, prefs) -> bool | None:
    if not isinstance(prefs.dietary_restrictions, Constrained):
        return None
    options = [o.lower() for o in restaurant.dietary_options]
    return all(
        any(restriction.lower() in option for option in options)
        for restriction in prefs.dietary_restrictions.value
    )


def _language(item, prefs) -> bool | None:
    if not isinstance(prefs.preferred_languages, Constrained):
        return None
    if not item.original_language:
        return False
    return item.original_language.lower() in prefs.preferred_languages.value


def _within(value: int | None, low: Constraint, high: Constraint) -> bool | None:
    if not isinstance(low, Constrained) and not isinstance(high, Constrained):
        return None
    if value is None:
        return False
    if isinstance(low, Constrained) and value < low.value:
        return False
    if isinstance(high, Constrained) and value > high.value:
        return False
    return True


def _year(item, prefs) -> bool | None:
    return _within(item.year, prefs.year_min, prefs.year_max)


def _duration(item, prefs) -> bool | None:
    return _within(item.duration, prefs.duration_min, prefs.duration_max)


RESTAURANT_RULES = DomainRules(
    name="restaurant",
    rating_scale=5.0,
    categories=lambda r: r.cuisines,
    preferred_categories=lambda p: p.favorite_cuisines,
    rating=lambda r: r.rating,
    requirements=(Requirement("dietary", _dietary, bonus="requirement_match"),),
)

MOVIE_RULES = DomainRules(
    name="movie",
    rating_scale=10.0,
    categories=lambda m: m.genres,
    preferred_categories=lambda p: p.preferred_genres,
    rating=lambda m: m.vote_average,
    requirements=(
        Requirement("language", _language, bonus="language_match"),
        Requirement("year", _year),
        Requirement("duration", _duration),
    ),
    streaming_providers=lambda m: m.streaming_providers,
    preferred_providers=lambda p: p.preferred_streaming_providers,
    candidates_from_provider=True,
    has_similarity_phase=True,
)

TV_SHOW_RULES = replace(MOVIE_RULES, name="tv_show")
