"""Movie and TV show menus (both domains share one flow)."""
from __future__ import annotations

from ..engine.constraints import value_or
from ..engine.exclusion import ExclusionSet
from ..engine.preferences import MAX_MEDIA_RATING, MediaPreferences
from ..models import Movie, TvShow, User
from .context import MediaDomain
from .display import format_media_details, format_media_summary
from .prompts import ask, ask_menu_index, ask_number, ask_number_constraint, ask_set_constraint

SEARCH_RESULTS_SHOWN = 10


def _load_preferences(domain: MediaDomain, user: User) -> MediaPreferences:
    return domain.preferences.get(user.id) or MediaPreferences(user_id=user.id)


def _rate(domain: MediaDomain, user: User, item: Movie | TvShow) -> None:
    value = ask_number(
        f"Your rating for {item.display_name} (1-5, Enter to skip): ",
        minimum=1,
        maximum=5,
        integer=True,
    )
    if value is None:
        return
    stored = item if item.id is not None else domain.catalog.upsert(item)
    domain.ratings.record(user.id, stored.id, int(value))
    print(f"Rated {item.display_name} {value}/5.")


async def manage_preferences(domain: MediaDomain, user: User) -> MediaPreferences:
    print(f"\n--- Manage {domain.label} Preferences ---")
    current = _load_preferences(domain, user)

    genres = await domain.client.genre_names()
    if genres:
        print("Available genres: " + ", ".join(genres))
    preferred_genres = ask_set_constraint("Preferred genres", current.preferred_genres)
    languages = ask_set_constraint("Preferred languages as ISO codes, e.g. en, es", current.preferred_languages)
    year_min = ask_number_constraint(f"{domain.year_label} from", current.year_min, minimum=1870, maximum=2100)
    year_max = ask_number_constraint(
        f"{domain.year_label} to", current.year_max, minimum=value_or(year_min, 1870), maximum=2100
    )
    duration_min = ask_number_constraint(f"{domain.duration_label} at least", current.duration_min, minimum=0)
    duration_max = ask_number_constraint(
        f"{domain.duration_label} at most", current.duration_max, minimum=value_or(duration_min, 0)
    )
    min_rating = ask_number_constraint(
        f"Minimum TMDB rating (0-{MAX_MEDIA_RATING:g})",
        current.min_rating,
        minimum=0,
        maximum=MAX_MEDIA_RATING,
        integer=False,
    )
    providers = await domain.client.watch_provider_names()
    if providers:
        print("Streaming providers: " + ", ".join(providers[:40]))
    streaming = ask_set_constraint("Preferred streaming providers", current.preferred_streaming_providers)

    try:
        prefs = MediaPreferences(
            user_id=user.id,
            preferred_genres=preferred_genres,
            preferred_languages=languages,
            year_min=year_min,
            year_max=year_max,
            duration_min=duration_min,
            duration_max=duration_max,
            min_rating=min_rating,
            preferred_streaming_providers=streaming,
        )
    except ValueError as exc:
        print(f"Preferences not saved: {exc}")
        return current
    domain.preferences.upsert(prefs)
    print("Preferences updated!")
    return prefs


async def show_recommendations(domain: MediaDomain, user: User) -> None:
    prefs = _load_preferences(domain, user)
    exclude = ExclusionSet.from_local_ids(domain.ratings.list_entity_ids_for_user(user.id))

    print(f"\nFinding {domain.plural} for you...")
    recommendations = await domain.recommender.get_recommendations(user.id, prefs, exclude)
    if not recommendations:
        print(f"No {domain.plural} to recommend right now. Try adjusting your preferences or rating more titles.")
        return

    print(f"\nRecommended {domain.plural}:")
    for index, item in enumerate(recommendations, start=1):
        print(format_media_summary(item, index))

    while True:
        selected = ask_menu_index("Rate one of these? Enter its number (0 to finish): ", len(recommendations))
        if selected is None:
            return
        _rate(domain, user, recommendations[selected])


async def _search_and_select(domain: MediaDomain) -> Movie | TvShow | None:
    query = ask(f"Search for a {domain.label.lower()}: ")
    if not query:
        return None
    results = (await domain.client.search(query))[:SEARCH_RESULTS_SHOWN]
    if not results:
        print(f"No {domain.plural} found for your search.")
        return None

    print("\nSearch Results:")
    for index, item in enumerate(results, start=1):
        print(format_media_summary(item, index))
    selected = ask_menu_index("Select by number (0 to cancel): ", len(results))
    if selected is None:
        return None

    chosen = results[selected]
    details = await domain.client.get_details(chosen.external_id)
    return domain.catalog.upsert(details or chosen)


async def search_and_rate(domain: MediaDomain, user: User) -> None:
    item = await _search_and_select(domain)
    if item is not None:
        print(format_media_details(item, domain.client.poster_url(item.poster_path, "w154")))
        _rate(domain, user, item)


async def view_details(domain: MediaDomain) -> None:
    item = await _search_and_select(domain)
    if item is not None:
        print(format_media_details(item, domain.client.poster_url(item.poster_path)))


def list_my_ratings(domain: MediaDomain, user: User) -> None:
    ratings = domain.ratings.list_ratings_for_user(user.id)
    if not ratings:
        print(f"You haven't rated any {domain.plural} yet.")
        return
    print(f"\nYour rated {domain.plural}:")
    for record in ratings:
        item = domain.catalog.find_by_local_id(record.entity_id)
        title = item.display_name if item else f"#{record.external_id}"
        print(f"   {record.value}/5  {title}")


async def run_media_cli(domain: MediaDomain, user: User) -> None:
    print(f"\n--- {domain.label} Recommender ---")

    while True:
        print(f"\n{domain.label} Menu:")
        print("1. Get Recommendations")
        print(f"2. Search and Rate a {domain.label}")
        print(f"3. View {domain.label} Details")
        print("4. My Ratings")
        print("5. Manage My Preferences")
        print("0. Back to Main Menu")
        choice = ask("Choose an option: ")

        if choice == "1":
            await show_recommendations(domain, user)
        elif choice == "2":
            await search_and_rate(domain, user)
        elif choice == "3":
            await view_details(domain)
        elif choice == "4":
            list_my_ratings(domain, user)
        elif choice == "5":
            await manage_preferences(domain, user)
        elif choice == "0":
            return
        else:
            print("Invalid option.")
