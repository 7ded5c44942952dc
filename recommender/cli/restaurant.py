from __future__ import annotations

from pathlib import Path

from ..data_ingestion.ingest import run_ingestion
from ..engine.constraints import describe
from ..engine.exclusion import ExclusionSet
from ..engine.preferences import (
    DEFAULT_RESTAURANT_MIN_RATING,
    MAX_RESTAURANT_RATING,
    MIN_RESTAURANT_RATING,
    RestaurantPreferences,
)
from ..models import User
from .context import AppContext
from .display import format_restaurant
from .prompts import ask, ask_number, ask_set_constraint, ask_yes_no


def manage_preferences(ctx: AppContext, user: User, current: RestaurantPreferences | None) -> RestaurantPreferences:
    print("\n--- Manage Restaurant Preferences ---")
    prefs = current or RestaurantPreferences(user_id=user.id)

    cuisines = ask_set_constraint("Favorite cuisines", prefs.favorite_cuisines)
    dietary = ask_set_constraint("Dietary restrictions", prefs.dietary_restrictions, unset_label="None")
    min_rating = ask_number(
        f"Minimum rating ({MIN_RESTAURANT_RATING:g}-{MAX_RESTAURANT_RATING:g}, current: {prefs.min_rating}): ",
        default=prefs.min_rating,
        minimum=MIN_RESTAURANT_RATING,
        maximum=MAX_RESTAURANT_RATING,
    )

    prefs = RestaurantPreferences(
        user_id=user.id,
        favorite_cuisines=cuisines,
        dietary_restrictions=dietary,
        min_rating=float(min_rating),
    )
    ctx.stores.restaurant_preferences.upsert(prefs)
    print("Preferences updated!")
    return prefs


async def show_recommendations(ctx: AppContext, user: User, prefs: RestaurantPreferences) -> None:
    if not ctx.stores.restaurants.list_all():
        print("No restaurants saved yet. Fetch some by location or import a CSV first.")
        return

    liked = ctx.stores.restaurant_likes.list_entity_ids_for_user(user.id)
    shown = ExclusionSet.from_local_ids(liked)
    recommender = ctx.restaurant_recommender

    batch = await recommender.get_recommendations(user.id, prefs, shown)
    if not batch:
        print("\nNo restaurants match your current preferences and haven't been liked or shown.")
        return

    while batch:
        restaurant = batch.pop(0)
        print("\n" + format_restaurant(restaurant))
        action = ask("Like it? (y/n, 's' to stop for now): ").lower()
        if action == "y":
            ctx.stores.restaurant_likes.record(user.id, restaurant.id, 1)
            print(f"You liked {restaurant.name}!")
        elif action == "s":
            return

        if not batch:
            batch = await recommender.get_recommendations(user.id, prefs, shown)
            if not batch:
                print("\nNo more matching restaurants to show based on your preferences and likes.")


async def fetch_by_location(ctx: AppContext) -> None:
    location = ask("Enter city/area to search for restaurants: ")
    if not location:
        print("No location entered.")
        return
    found = await ctx.places.search_by_location(location)
    if not found:
        print("No restaurants fetched. Check the location or your Google Places configuration.")
        return
    for restaurant in found:
        ctx.stores.restaurants.upsert(restaurant)
    print(f"Saved {len(found)} restaurants near {location}.")


def import_csv(ctx: AppContext) -> None:
    raw = ask("Path to restaurant CSV: ")
    if not raw:
        return
    path = Path(raw).expanduser()
    if not path.is_file():
        print(f"File not found: {path}")
        return
    try:
        count = run_ingestion(path, ctx.stores.restaurants)
    except ValueError as exc:
        print(f"Could not import {path}: {exc}")
        return
    print(f"Imported {count} restaurants.")


async def run_restaurant_cli(ctx: AppContext, user: User) -> None:
    print("\n--- Restaurant Recommender ---")

    prefs = ctx.stores.restaurant_preferences.get(user.id)
    if prefs is None:
        print("No restaurant preferences found.")
        if ask_yes_no("Set up your restaurant preferences now? (y/n): "):
            prefs = manage_preferences(ctx, user, None)
        else:
            prefs = RestaurantPreferences(user_id=user.id, min_rating=DEFAULT_RESTAURANT_MIN_RATING)
            ctx.stores.restaurant_preferences.upsert(prefs)
            print("Using default preferences. You can change them later.")

    while True:
        print("\nRestaurant Menu:")
        print(
            f"   (cuisines: {describe(prefs.favorite_cuisines)}; "
            f"dietary: {describe(prefs.dietary_restrictions, 'None')}; min rating: {prefs.min_rating})"
        )
        print("1. Get Recommendations")
        print("2. Fetch New Restaurants (by location)")
        print("3. Import Restaurants from CSV")
        print("4. Manage My Preferences")
        print("0. Back to Main Menu")
        choice = ask("Choose an option: ")

        if choice == "1":
            await show_recommendations(ctx, user, prefs)
        elif choice == "2":
            await fetch_by_location(ctx)
        elif choice == "3":
            import_csv(ctx)
        elif choice == "4":
            prefs = manage_preferences(ctx, user, prefs)
        elif choice == "0":
            return
        else:
            print("Invalid option.")
