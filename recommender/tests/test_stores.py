import time

import pytest

from recommender.engine.constraints import UNCONSTRAINED, Constrained, set_constraint
from recommender.engine.preferences import MediaPreferences, RestaurantPreferences
from recommender.models import Movie, Restaurant, TvShow
from recommender.storage.config import StorageConfig
from recommender.storage.database import Database
from recommender.storage.seed import SEED_USERS, seed_initial_users
from recommender.storage.stores import Stores


@pytest.fixture
def stores(tmp_path):
    database = Database(StorageConfig(database_url=f"sqlite:///{tmp_path / 'test.sqlite'}"))
    database.create_all()
    yield Stores(database)
    database.dispose()


def test_ensure_user_is_idempotent(stores):
    first = stores.users.ensure("Alice")
    again = stores.users.ensure("  Alice ")
    assert first.id == again.id
    assert stores.users.get(first.id).name == "Alice"
    assert stores.users.get(999) is None
    with pytest.raises(ValueError):
        stores.users.ensure("   ")


def test_upsert_keeps_local_id_and_updates_in_place(stores):
    movie = Movie(external_id="603", title="The Matrix", genres=["Action"], runtime=136)
    first = stores.movies.upsert(movie)
    second = stores.movies.upsert(movie)
    assert first.id == second.id
    assert len(stores.movies.list_all()) == 1

    updated = stores.movies.upsert(movie.model_copy(update={"vote_average": 8.2, "genres": ["Action", "Sci-Fi"]}))
    assert updated.id == first.id
    assert len(stores.movies.list_all()) == 1
    stored = stores.movies.find_by_external_id("603")
    assert stored.vote_average == 8.2
    assert stored.genres == ["Action", "Sci-Fi"]
    assert stores.movies.find_by_local_id(first.id).title == "The Matrix"


def test_catalogs_are_separate_per_domain(stores):
    stores.movies.upsert(Movie(external_id="1", title="Movie"))
    stores.tv_shows.upsert(TvShow(external_id="1", name="Show", episode_run_time=[42]))
    assert stores.movies.find_by_external_id("1").title == "Movie"
    assert stores.tv_shows.find_by_external_id("1").duration == 42


def test_restaurant_preferences_round_trip(stores):
    user = stores.users.ensure("Bob")
    assert stores.restaurant_preferences.get(user.id) is None

    prefs = RestaurantPreferences(
        user_id=user.id,
        favorite_cuisines=set_constraint(["Thai", "Indian"]),
        min_rating=4.2,
    )
    stores.restaurant_preferences.upsert(prefs)
    loaded = stores.restaurant_preferences.get(user.id)
    assert loaded.favorite_cuisines == Constrained(frozenset({"Thai", "Indian"}))
    assert loaded.dietary_restrictions is UNCONSTRAINED
    assert loaded.min_rating == 4.2


def test_media_preferences_keep_unset_fields_unset(stores):
    user = stores.users.ensure("Carol")
    prefs = MediaPreferences(
        user_id=user.id,
        preferred_genres=set_constraint(["Drama"]),
        year_min=Constrained(1990),
        min_rating=Constrained(6.5),
    )
    stores.movie_preferences.upsert(prefs)
    loaded = stores.movie_preferences.get(user.id)

    assert loaded == prefs
    assert loaded.year_max is UNCONSTRAINED
    assert loaded.preferred_streaming_providers is UNCONSTRAINED
    assert stores.tv_show_preferences.get(user.id) is None


def test_interactions_last_write_wins(stores):
    user = stores.users.ensure("Dana")
    movie = stores.movies.upsert(Movie(external_id="11", title="Star Wars"))
    stores.movie_ratings.record(user.id, movie.id, 2)
    stores.movie_ratings.record(user.id, movie.id, 5)

    ratings = stores.movie_ratings.list_ratings_for_user(user.id)
    assert len(ratings) == 1
    assert ratings[0].value == 5
    assert ratings[0].external_id == "11"
    assert stores.movie_ratings.list_entity_ids_for_user(user.id) == [movie.id]


def test_ratings_ordered_by_value_then_recency(stores):
    user = stores.users.ensure("Eve")
    ids = {}
    for external_id in ("a", "b", "c"):
        ids[external_id] = stores.tv_shows.upsert(TvShow(external_id=external_id, name=external_id)).id
    stores.tv_show_ratings.record(user.id, ids["a"], 3)
    stores.tv_show_ratings.record(user.id, ids["b"], 5)
    time.sleep(0.01)
    stores.tv_show_ratings.record(user.id, ids["c"], 5)

    assert [r.external_id for r in stores.tv_show_ratings.list_ratings_for_user(user.id)] == ["c", "b", "a"]


def test_likes_are_per_user(stores):
    alice = stores.users.ensure("Alice")
    bob = stores.users.ensure("Bob")
    place = stores.restaurants.upsert(Restaurant(external_id="p1", name="Trattoria", rating=4.4))
    stores.restaurant_likes.record(alice.id, place.id, 1)

    assert stores.restaurant_likes.list_entity_ids_for_user(alice.id) == [place.id]
    assert stores.restaurant_likes.list_entity_ids_for_user(bob.id) == []


def test_seed_runs_once(stores):
    assert seed_initial_users(stores) == len(SEED_USERS)
    assert seed_initial_users(stores) == 0

    fiona = stores.users.find_by_name("Fiona")
    prefs = stores.restaurant_preferences.get(fiona.id)
    assert prefs.favorite_cuisines is UNCONSTRAINED
    bob = stores.users.find_by_name("Bob")
    assert stores.restaurant_preferences.get(bob.id).dietary_restrictions == Constrained(frozenset({"vegetarian"}))
