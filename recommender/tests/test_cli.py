import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

from recommender.cli.main import build_parser, main, select_or_register_user
from recommender.cli.media import manage_preferences, show_recommendations
from recommender.cli.restaurant import show_recommendations as show_restaurants
from recommender.engine.constraints import Constrained
from recommender.engine.preferences import MediaPreferences, RestaurantPreferences
from recommender.models import Movie, Restaurant, User

ALICE = User(id=1, name="Alice")


def _users(existing=(ALICE,)):
    users = MagicMock()
    users.list_all.return_value = list(existing)
    users.get.side_effect = lambda user_id: next((u for u in existing if u.id == user_id), None)
    users.ensure.side_effect = lambda name: User(id=99, name=name)
    return users


@patch("builtins.input", side_effect=["7", "1"])
def test_select_existing_user_after_bad_id(mock_input, capsys):
    assert select_or_register_user(_users()) == ALICE
    assert "User ID not found." in capsys.readouterr().out


@patch("builtins.input", side_effect=["n", "", "Zed"])
def test_register_new_user(mock_input):
    users = _users()
    assert select_or_register_user(users) == User(id=99, name="Zed")
    users.ensure.assert_called_once_with("Zed")


@patch("builtins.input", return_value="0")
def test_exit_from_user_selection(mock_input):
    assert select_or_register_user(_users(())) is None


def test_parser_defaults():
    args = build_parser().parse_args(["--database-url", "sqlite://"])
    assert args.database_url == "sqlite://"
    assert args.log_level


@patch("recommender.cli.main.asyncio.run", side_effect=KeyboardInterrupt)
@patch("recommender.cli.main._run")
@patch("recommender.cli.main.setup_logging")
def test_main_exits_cleanly_on_interrupt(mock_logging, mock_inner, mock_run):
    assert main([]) == 0


def _media_domain(recommendations):
    domain = MagicMock()
    domain.plural = "movies"
    domain.preferences.get.return_value = None
    domain.ratings.list_entity_ids_for_user.return_value = [5]
    domain.recommender.get_recommendations = AsyncMock(return_value=recommendations)
    return domain


@patch("builtins.input", side_effect=["1", "4", "0"])
def test_media_recommendations_then_rate(mock_input):
    movie = Movie(id=7, external_id="603", title="The Matrix")
    domain = _media_domain([movie])

    asyncio.run(show_recommendations(domain, ALICE))

    _, prefs, exclude = domain.recommender.get_recommendations.call_args.args
    assert prefs.user_id == ALICE.id
    assert exclude.local_ids == {5}
    domain.ratings.record.assert_called_once_with(ALICE.id, 7, 4)


def test_media_empty_recommendations_message(capsys):
    asyncio.run(show_recommendations(_media_domain([]), ALICE))
    assert "No movies to recommend right now" in capsys.readouterr().out


@patch("builtins.input", side_effect=["y", "n", "s"])
def test_restaurant_show_next_loop(mock_input):
    first = Restaurant(id=1, external_id="a", name="Trattoria", rating=4.5)
    second = Restaurant(id=2, external_id="b", name="Taqueria", rating=4.0)
    third = Restaurant(id=3, external_id="c", name="Bistro", rating=3.9)
    ctx = MagicMock()
    ctx.stores.restaurants.list_all.return_value = [first, second, third]
    ctx.stores.restaurant_likes.list_entity_ids_for_user.return_value = []
    ctx.restaurant_recommender.get_recommendations = AsyncMock(side_effect=[[first, second], [third]])

    asyncio.run(show_restaurants(ctx, ALICE, RestaurantPreferences(user_id=ALICE.id)))

    ctx.stores.restaurant_likes.record.assert_called_once_with(ALICE.id, 1, 1)
    assert ctx.restaurant_recommender.get_recommendations.await_count == 2


def _preference_domain(current):
    domain = MagicMock()
    domain.label = "Movie"
    domain.preferences.get.return_value = current
    domain.client.genre_names = AsyncMock(return_value=["Drama"])
    domain.client.watch_provider_names = AsyncMock(return_value=[])
    return domain


@patch("builtins.input", side_effect=["", "", "2000", "1995", "2005", "", "", "", ""])
def test_media_preferences_reask_upper_bound_below_lower(mock_input):
    domain = _preference_domain(None)

    prefs = asyncio.run(manage_preferences(domain, ALICE))

    assert prefs.year_min == Constrained(2000)
    assert prefs.year_max == Constrained(2005)
    domain.preferences.upsert.assert_called_once_with(prefs)


@patch("builtins.input", side_effect=["", "", "2000", "-", "", "", "", ""])
def test_media_preferences_inverted_range_not_saved(mock_input, capsys):
    current = MediaPreferences(user_id=ALICE.id, year_max=Constrained(1990))
    domain = _preference_domain(current)

    assert asyncio.run(manage_preferences(domain, ALICE)) is current
    domain.preferences.upsert.assert_not_called()
    assert "Preferences not saved" in capsys.readouterr().out
