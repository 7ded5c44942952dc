"""
Interactive entry point.

Usage:
    recommender [--database-url URL] [--log-level LEVEL]
    python -m recommender
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
from dataclasses import replace

import httpx

from ..models import User
from ..providers.config import DEFAULT_PROVIDER_CONFIG
from ..storage.config import DEFAULT_STORAGE_CONFIG
from ..storage.database import Database
from ..storage.seed import seed_initial_users
from ..storage.stores import Stores, UserStore
from .context import AppContext, build_context
from .media import run_media_cli
from .prompts import MAX_ATTEMPTS, ask
from .restaurant import run_restaurant_cli

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    # Request lines would otherwise interleave with the menus.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def register_user(users: UserStore) -> User | None:
    for _ in range(MAX_ATTEMPTS):
        name = ask("Enter your name: ")
        if name:
            user = users.ensure(name)
            print(f"Welcome, {user.name}! (ID: {user.id})")
            return user
        print("Name cannot be empty.")
    return None


def select_or_register_user(users: UserStore) -> User | None:
    """Pick an existing user by id or register a new one; ``None`` exits."""
    while True:
        existing = users.list_all()
        print("\n--- Select User ---")
        if existing:
            for user in existing:
                print(f"{user.id}. {user.name}")
        else:
            print("No users found.")
        print("N. Register New User")
        print("0. Exit")

        choice = ask("Enter your choice (ID, N, or 0): ").lower()
        if choice == "0":
            return None
        if choice == "n":
            user = register_user(users)
            if user is not None:
                return user
            continue
        if choice.isdigit():
            user = users.get(int(choice))
            if user is not None:
                print(f"Logged in as: {user.name}")
                return user
            print("User ID not found.")
        else:
            print("Invalid input.")


async def run_main_cli(ctx: AppContext) -> None:
    user = select_or_register_user(ctx.stores.users)
    while user is not None:
        print(f"\n=== Main Menu ({user.name}) ===")
        print("1. Restaurant Recommendations")
        print("2. Movie Recommendations")
        print("3. TV Show Recommendations")
        print("9. Change User")
        print("0. Exit")
        choice = ask("Choose an option: ")

        if choice == "1":
            await run_restaurant_cli(ctx, user)
        elif choice == "2":
            await run_media_cli(ctx.movies, user)
        elif choice == "3":
            await run_media_cli(ctx.tv_shows, user)
        elif choice == "9":
            user = select_or_register_user(ctx.stores.users)
        elif choice == "0":
            break
        else:
            print("Invalid option.")
    print("Goodbye!")


async def _run(args: argparse.Namespace) -> None:
    storage_config = DEFAULT_STORAGE_CONFIG
    if args.database_url:
        storage_config = replace(storage_config, database_url=args.database_url)

    database = Database(storage_config)
    try:
        database.create_all()
        stores = Stores(database)
        seed_initial_users(stores)

        async with httpx.AsyncClient(timeout=DEFAULT_PROVIDER_CONFIG.timeout) as http:
            ctx = build_context(stores, http, DEFAULT_PROVIDER_CONFIG)
            missing = ctx.missing_configuration()
            if missing:
                print(
                    f"Warning: {', '.join(missing)} not set. "
                    "Features that need those services will return no results."
                )
            await run_main_cli(ctx)
    finally:
        database.dispose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recommender",
        description="Restaurant, movie and TV show recommendations in your terminal.",
    )
    parser.add_argument("--database-url", default=None, help="SQLAlchemy URL (default from RECOMMENDER_DATABASE_URL)")
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"), help="Logging level")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        asyncio.run(_run(args))
    except (KeyboardInterrupt, EOFError):
        print("\nGoodbye!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
