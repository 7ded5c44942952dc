import pytest

from recommender.engine.constraints import (
    UNCONSTRAINED,
    Constrained,
    Unconstrained,
    describe,
    from_storage_list,
    is_constrained,
    number_constraint,
    parse_set_constraint,
    set_constraint,
    to_storage,
    value_or,
)
from recommender.engine.preferences import MediaPreferences, RestaurantPreferences


def test_unconstrained_is_a_falsy_singleton():
    assert Unconstrained() is UNCONSTRAINED
    assert not UNCONSTRAINED
    assert not is_constrained(UNCONSTRAINED)


@pytest.mark.parametrize("raw", ["", "   ", ",,", "Any", "italian, any"])
def test_blank_or_any_input_is_unconstrained(raw):
    assert parse_set_constraint(raw) is UNCONSTRAINED


def test_set_constraint_trims_and_drops_blanks():
    constraint = parse_set_constraint(" Italian , ,Mexican ")
    assert constraint == Constrained(frozenset({"Italian", "Mexican"}))


def test_number_constraint_none_is_unconstrained():
    assert number_constraint(None) is UNCONSTRAINED
    assert number_constraint(0) == Constrained(0)
    assert value_or(number_constraint(7.5), None) == 7.5
    assert value_or(UNCONSTRAINED, "fallback") == "fallback"


def test_storage_round_trip():
    assert to_storage(UNCONSTRAINED) is None
    assert to_storage(Constrained(frozenset({"b", "a"}))) == ["a", "b"]
    assert to_storage(Constrained(1990)) == 1990
    assert from_storage_list(None) is UNCONSTRAINED
    assert from_storage_list([]) is UNCONSTRAINED
    assert from_storage_list(["a", "b"]) == Constrained(frozenset({"a", "b"}))


def test_describe():
    assert describe(UNCONSTRAINED) == "Any"
    assert describe(UNCONSTRAINED, "None") == "None"
    assert describe(Constrained(frozenset({"Thai", "Indian"}))) == "Indian, Thai"
    assert describe(Constrained(120)) == "120"


def test_restaurant_min_rating_is_range_checked():
    with pytest.raises(ValueError):
        RestaurantPreferences(user_id=1, min_rating=0.5)
    with pytest.raises(ValueError):
        RestaurantPreferences(user_id=1, min_rating=5.5)
    assert RestaurantPreferences(user_id=1).rating_floor == Constrained(3.0)


def test_media_preferences_lowercase_languages_and_check_rating():
    prefs = MediaPreferences(user_id=1, preferred_languages=Constrained(frozenset({"EN", "Es"})))
    assert prefs.preferred_languages == Constrained(frozenset({"en", "es"}))
    assert prefs.rating_floor is UNCONSTRAINED
    with pytest.raises(ValueError):
        MediaPreferences(user_id=1, min_rating=Constrained(11.0))


def test_set_constraint_collapses_case_duplicates():
    assert parse_set_constraint("Italian, italian , ITALIAN, Thai") == Constrained(frozenset({"Italian", "Thai"}))


def test_media_preferences_reject_inverted_ranges():
    with pytest.raises(ValueError):
        MediaPreferences(user_id=1, year_min=Constrained(2010), year_max=Constrained(2000))
    with pytest.raises(ValueError):
        MediaPreferences(user_id=1, duration_min=Constrained(120), duration_max=Constrained(90))
    assert MediaPreferences(user_id=1, year_min=Constrained(2000), year_max=Constrained(2000))
