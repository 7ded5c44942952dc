from __future__ import annotations

import logging

from ..engine.constraints import set_constraint
from ..engine.preferences import RestaurantPreferences
from .stores import Stores

logger = logging.getLogger(__name__)

SEED_USERS: list[dict] = [
    {"name": "Alice", "cuisines": ["Italian", "Mexican"], "dietary": [], "min_rating": 4.0},
    {"name": "Bob", "cuisines": ["Indian", "Thai", "Vietnamese"], "dietary": ["vegetarian"], "min_rating": 4.2},
    {"name": "Charlie", "cuisines": ["American", "BBQ"], "dietary": [], "min_rating": 3.5},
    {"name": "Diana", "cuisines": ["Japanese", "Sushi", "Ramen"], "dietary": ["gluten-free"], "min_rating": 4.5},
    {"name": "Edward", "cuisines": ["Mediterranean", "Greek", "Cafe"], "dietary": ["vegan"], "min_rating": 3.8},
    {"name": "Fiona", "cuisines": ["Any"], "dietary": [], "min_rating": 3.0},
]


def seed_initial_users(stores: Stores) -> int:
    """Create the demo users and their restaurant preferences.

    Does nothing when the users table already has rows. Returns the number
    of users created.
    """
    if stores.users.count() > 0:
        return 0

    for entry in SEED_USERS:
        user = stores.users.ensure(entry["name"])
        stores.restaurant_preferences.upsert(
            RestaurantPreferences(
                user_id=user.id,
                favorite_cuisines=set_constraint(entry["cuisines"]),
                dietary_restrictions=set_constraint(entry["dietary"]),
                min_rating=entry["min_rating"],
            )
        )
    logger.info("Seeded %d demo users", len(SEED_USERS))
    return len(SEED_USERS)
