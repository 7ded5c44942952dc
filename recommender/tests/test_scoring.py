import random

import pytest

from recommender.engine.config import DEFAULT_SCORING_WEIGHTS as W
from recommender.engine.constraints import Constrained, set_constraint
from recommender.engine.preferences import MediaPreferences, RestaurantPreferences
from recommender.engine.rules import MOVIE_RULES, RESTAURANT_RULES, TV_SHOW_RULES
from recommender.engine.scoring import rank, score
from recommender.models import Movie, Restaurant, TvShow


def _restaurant(external_id, cuisines, dietary=(), rating=None):
    return Restaurant(
        external_id=external_id,
        name=f"Place {external_id}",
        cuisines=list(cuisines),
        dietary_options=list(dietary),
        rating=rating,
    )


def _movie(external_id="1", **overrides):
    fields = {
        "title": f"Movie {external_id}",
        "release_date": "2015-06-01",
        "vote_average": 7.0,
        "genres": ["Action"],
        "runtime": 110,
        "original_language": "en",
    }
    fields.update(overrides)
    return Movie(external_id=external_id, **fields)


def _rprefs(cuisines=(), dietary=(), min_rating=1.0):
    return RestaurantPreferences(
        user_id=1,
        favorite_cuisines=set_constraint(cuisines),
        dietary_restrictions=set_constraint(dietary),
        min_rating=min_rating,
    )


def test_italian_vegetarian_scenario():
    prefs = _rprefs(["Italian"], ["vegetarian"], 4.0)
    a = _restaurant("a", ["Italian"], ["vegetarian", "vegan"], 4.5)
    b = _restaurant("b", ["Mexican"], ["vegetarian"], 4.8)
    c = _restaurant("c", ["Italian"], [], 4.2)

    assert score(c, prefs, RESTAURANT_RULES).score == 0
    assert score(a, prefs, RESTAURANT_RULES).base == pytest.approx(20 + 10 + 10 + 25 * 0.5 / 5)
    assert score(b, prefs, RESTAURANT_RULES).base == pytest.approx(20 + 10 + 25 * 0.8 / 5)

    ranked = rank([a, b, c], prefs, RESTAURANT_RULES, rng=random.Random(7))
    assert [s.entity.external_id for s in ranked] == ["a", "b"]


def test_unset_preferences_accept_everything_ordered_by_rating():
    prefs = _rprefs()
    catalog = [
        _restaurant("low", ["Thai"], rating=3.0),
        _restaurant("high", ["Greek"], rating=4.5),
        _restaurant("mid", [], rating=4.0),
    ]
    ranked = rank(catalog, prefs, RESTAURANT_RULES, rng=random.Random(1))
    assert all(s.score > 0 for s in ranked)
    assert [s.entity.external_id for s in ranked] == ["high", "mid", "low"]


def test_hard_filters_are_and_not_or():
    prefs = _rprefs(dietary=["vegetarian", "gluten-free"])
    only_one = _restaurant("x", ["Italian"], ["vegetarian"], 4.5)
    both = _restaurant("y", ["Italian"], ["Vegetarian options", "gluten-free menu"], 4.5)
    assert score(only_one, prefs, RESTAURANT_RULES).score == 0
    assert score(both, prefs, RESTAURANT_RULES).score > 0

    media_prefs = MediaPreferences(
        user_id=1,
        preferred_languages=set_constraint(["en"]),
        year_min=Constrained(2000),
        year_max=Constrained(2010),
    )
    assert score(_movie(release_date="2015-01-01"), media_prefs, MOVIE_RULES).score == 0
    assert score(_movie(original_language="fr", release_date="2005-01-01"), media_prefs, MOVIE_RULES).score == 0
    assert score(_movie(release_date="2005-01-01"), media_prefs, MOVIE_RULES).score > 0


def test_no_category_preference_gets_half_weight_bonus():
    entity = _restaurant("x", ["Thai"], rating=3.0)
    unset = score(entity, _rprefs(), RESTAURANT_RULES).base
    unmatched = score(entity, _rprefs(["Italian"]), RESTAURANT_RULES).base

    assert unset > 0
    assert unset - unmatched == pytest.approx(W.category_any)
    assert W.category_any == W.category_match / 2


def test_each_matching_category_adds_a_bonus():
    prefs = _rprefs(["italian", "pizza"])
    one = score(_restaurant("1", ["Italian"], rating=3.0), prefs, RESTAURANT_RULES).base
    two = score(_restaurant("2", ["Italian", "Pizza"], rating=3.0), prefs, RESTAURANT_RULES).base
    assert two - one == pytest.approx(W.category_match)


def test_below_rating_floor_survives_only_as_a_strong_match():
    strong = _rprefs(["Italian"], ["vegetarian"], 4.0)
    weak = _rprefs(["Italian"], min_rating=4.0)
    entity = _restaurant("x", ["Italian"], ["vegetarian"], 3.5)

    kept = score(entity, strong, RESTAURANT_RULES)
    assert kept.base == pytest.approx(W.requirement_match + W.category_match)
    assert score(entity, weak, RESTAURANT_RULES).score == 0


def test_missing_rating_with_a_floor_is_rejected():
    entity = _restaurant("x", ["Italian"], rating=None)
    assert score(entity, _rprefs(["Italian"], min_rating=2.0), RESTAURANT_RULES).score == 0

    movie = _movie(vote_average=None)
    assert score(movie, MediaPreferences(user_id=1), MOVIE_RULES).score > 0
    assert score(movie, MediaPreferences(user_id=1, min_rating=Constrained(5.0)), MOVIE_RULES).score == 0


def test_missing_attribute_for_a_stated_constraint_fails():
    prefs = MediaPreferences(user_id=1, duration_max=Constrained(120))
    assert score(_movie(runtime=None), prefs, MOVIE_RULES).score == 0
    no_language = MediaPreferences(user_id=1, preferred_languages=set_constraint(["en"]))
    assert score(_movie(original_language=None), no_language, MOVIE_RULES).score == 0


def test_malformed_entity_is_rejected_not_raised():
    result = score(object(), _rprefs(), RESTAURANT_RULES)
    assert result.rejected
    assert result.score == 0


def test_media_bonuses():
    prefs = MediaPreferences(
        user_id=1,
        preferred_genres=set_constraint(["Action"]),
        preferred_languages=set_constraint(["EN"]),
        min_rating=Constrained(6.0),
        preferred_streaming_providers=set_constraint(["netflix"]),
    )
    movie = _movie(vote_average=8.0, streaming_providers=["Netflix", "Hulu"])
    expected = W.language_match + W.category_match + W.provider_match + W.rating_met + W.rating_margin * 2 / 10
    assert score(movie, prefs, MOVIE_RULES).base == pytest.approx(expected)


def test_tv_duration_uses_first_episode_runtime():
    prefs = MediaPreferences(user_id=1, duration_min=Constrained(40), duration_max=Constrained(60))
    show = TvShow(external_id="9", name="Show", first_air_date="2019-01-01", episode_run_time=[45, 70])
    assert score(show, prefs, TV_SHOW_RULES).score > 0
    assert score(show.model_copy(update={"episode_run_time": [25]}), prefs, TV_SHOW_RULES).score == 0


def test_jitter_is_bounded_and_never_rescues_a_reject():
    rng = random.Random(42)
    prefs = _rprefs(dietary=["vegan"])
    for i in range(200):
        accepted = score(_restaurant(str(i), ["Thai"], ["vegan"], 4.0), prefs, RESTAURANT_RULES, rng=rng)
        assert 0 <= accepted.jitter < W.jitter
        rejected = score(_restaurant(str(i), ["Thai"], [], 4.0), prefs, RESTAURANT_RULES, rng=rng)
        assert rejected.score == 0 and rejected.jitter == 0


def test_rank_is_descending_within_jitter():
    rng = random.Random(3)
    catalog = [
        _restaurant(str(i), ["Italian"] if i % 2 else ["Thai"], rating=1.0 + (i % 9) * 0.5)
        for i in range(40)
    ]
    ranked = rank(catalog, _rprefs(["Italian"]), RESTAURANT_RULES, rng=rng)
    scores = [s.score for s in ranked]
    assert scores == sorted(scores, reverse=True)
    for first, second in zip(ranked, ranked[1:]):
        assert first.base >= second.base - W.jitter


def test_below_rating_floor_threshold():
    assert W.below_rating_floor == pytest.approx((W.category_match + W.requirement_match) / 2)


def test_case_variants_of_one_category_count_once():
    entity = _restaurant("x", ["Italian"], rating=3.0)
    once = score(entity, _rprefs(["Italian"]), RESTAURANT_RULES).base
    hand_built = RestaurantPreferences(user_id=1, favorite_cuisines=Constrained(frozenset({"Italian", "italian"})), min_rating=1.0)
    assert score(entity, hand_built, RESTAURANT_RULES).base == pytest.approx(once)
    assert score(entity, _rprefs(["Italian", "italian"]), RESTAURANT_RULES).base == pytest.approx(once)
