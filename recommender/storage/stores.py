"""
Stores used by the engine and the CLI.

Every store operation runs in its own short session. Rows are converted to
pydantic models (catalog entities) or preference dataclasses at this
boundary, so JSON columns and NULLs never reach the engine.
"""
from __future__ import annotations

import logging
from typing import Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from ..engine.constraints import from_storage_list, number_constraint, to_storage
from ..engine.preferences import DEFAULT_RESTAURANT_MIN_RATING, MediaPreferences, RestaurantPreferences
from ..models import Movie, RatingRecord, Restaurant, TvShow, User
from .database import Database
from .tables import (
    MediaPreferenceMixin,
    MovieRatingRow,
    MovieRow,
    MoviePreferenceRow,
    RestaurantLikeRow,
    RestaurantPreferenceRow,
    RestaurantRow,
    TvShowPreferenceRow,
    TvShowRatingRow,
    TvShowRow,
    UserRow,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class UserStore:
    def __init__(self, database: Database) -> None:
        self.database = database

    def ensure(self, name: str) -> User:
        """Return the user called ``name``, creating it if needed."""
        name = name.strip()
        if not name:
            raise ValueError("User name cannot be empty")
        existing = self.find_by_name(name)
        if existing is not None:
            return existing
        try:
            with self.database.session() as db:
                row = UserRow(name=name)
                db.add(row)
                db.flush()
                return User(id=row.id, name=row.name)
        except IntegrityError:
            user = self.find_by_name(name)
            if user is None:
                raise
            return user

    def get(self, user_id: int) -> User | None:
        with self.database.session() as db:
            row = db.get(UserRow, user_id)
            return User(id=row.id, name=row.name) if row else None

    def find_by_name(self, name: str) -> User | None:
        with self.database.session() as db:
            row = db.scalar(select(UserRow).where(UserRow.name == name))
            return User(id=row.id, name=row.name) if row else None

    def list_all(self) -> list[User]:
        with self.database.session() as db:
            rows = db.scalars(select(UserRow).order_by(UserRow.name)).all()
            return [User(id=r.id, name=r.name) for r in rows]

    def count(self) -> int:
        with self.database.session() as db:
            return db.scalar(select(func.count()).select_from(UserRow)) or 0


class CatalogStore(Generic[M]):
    """Local cache of one domain's entities, keyed by external id."""

    def __init__(self, database: Database, row_cls: type, model_cls: type[M]) -> None:
        self.database = database
        self.row_cls = row_cls
        self.model_cls = model_cls

    def _to_model(self, row) -> M:
        return self.model_cls.model_validate(row, from_attributes=True)

    def find_by_external_id(self, external_id: str) -> M | None:
        with self.database.session() as db:
            row = db.scalar(select(self.row_cls).where(self.row_cls.external_id == str(external_id)))
            return self._to_model(row) if row else None

    def find_by_local_id(self, local_id: int) -> M | None:
        with self.database.session() as db:
            row = db.get(self.row_cls, local_id)
            return self._to_model(row) if row else None

    def list_all(self) -> list[M]:
        with self.database.session() as db:
            rows = db.scalars(select(self.row_cls).order_by(self.row_cls.id)).all()
            return [self._to_model(r) for r in rows]

    def upsert(self, entity: M) -> M:
        """Insert ``entity`` or refresh the row with the same external id.

        The local id of an existing row never changes.
        """
        try:
            return self._write(entity)
        except IntegrityError:
            logger.debug("Row for %s appeared concurrently, updating in place", entity.external_id)
            return self._write(entity)

    def _write(self, entity: M) -> M:
        data = entity.model_dump(exclude={"id"})
        data["external_id"] = str(data["external_id"])
        with self.database.session() as db:
            row = db.scalar(select(self.row_cls).where(self.row_cls.external_id == data["external_id"]))
            if row is None:
                row = self.row_cls(**data)
                db.add(row)
            else:
                for key, value in data.items():
                    setattr(row, key, value)
            db.flush()
            return self._to_model(row)


class RestaurantPreferenceStore:
    def __init__(self, database: Database) -> None:
        self.database = database

    def get(self, user_id: int) -> RestaurantPreferences | None:
        with self.database.session() as db:
            row = db.get(RestaurantPreferenceRow, user_id)
            if row is None:
                return None
            return RestaurantPreferences(
                user_id=row.user_id,
                favorite_cuisines=from_storage_list(row.favorite_cuisines),
                dietary_restrictions=from_storage_list(row.dietary_restrictions),
                min_rating=row.min_rating if row.min_rating is not None else DEFAULT_RESTAURANT_MIN_RATING,
            )

    def upsert(self, prefs: RestaurantPreferences) -> None:
        with self.database.session() as db:
            row = db.get(RestaurantPreferenceRow, prefs.user_id)
            if row is None:
                row = RestaurantPreferenceRow(user_id=prefs.user_id)
                db.add(row)
            row.favorite_cuisines = to_storage(prefs.favorite_cuisines)
            row.dietary_restrictions = to_storage(prefs.dietary_restrictions)
            row.min_rating = prefs.min_rating


_MEDIA_PREFERENCE_FIELDS = (
    "preferred_genres",
    "preferred_languages",
    "year_min",
    "year_max",
    "duration_min",
    "duration_max",
    "min_rating",
    "preferred_streaming_providers",
)
_LIST_FIELDS = {"preferred_genres", "preferred_languages", "preferred_streaming_providers"}


class MediaPreferenceStore:
    def __init__(self, database: Database, row_cls: type[MediaPreferenceMixin]) -> None:
        self.database = database
        self.row_cls = row_cls

    def get(self, user_id: int) -> MediaPreferences | None:
        with self.database.session() as db:
            row = db.get(self.row_cls, user_id)
            if row is None:
                return None
            values = {}
            for name in _MEDIA_PREFERENCE_FIELDS:
                stored = getattr(row, name)
                values[name] = from_storage_list(stored) if name in _LIST_FIELDS else number_constraint(stored)
            return MediaPreferences(user_id=row.user_id, **values)

    def upsert(self, prefs: MediaPreferences) -> None:
        with self.database.session() as db:
            row = db.get(self.row_cls, prefs.user_id)
            if row is None:
                row = self.row_cls(user_id=prefs.user_id)
                db.add(row)
            for name in _MEDIA_PREFERENCE_FIELDS:
                setattr(row, name, to_storage(getattr(prefs, name)))


class InteractionStore:
    """Likes or ratings keyed by (user, entity); the last write wins."""

    def __init__(self, database: Database, row_cls: type, catalog_row_cls: type) -> None:
        self.database = database
        self.row_cls = row_cls
        self.catalog_row_cls = catalog_row_cls

    def record(self, user_id: int, entity_id: int, value: int) -> None:
        with self.database.session() as db:
            row = db.scalar(
                select(self.row_cls).where(
                    self.row_cls.user_id == user_id, self.row_cls.entity_id == entity_id
                )
            )
            if row is None:
                db.add(self.row_cls(user_id=user_id, entity_id=entity_id, value=value))
            else:
                row.value = value

    def list_entity_ids_for_user(self, user_id: int) -> list[int]:
        with self.database.session() as db:
            return list(
                db.scalars(select(self.row_cls.entity_id).where(self.row_cls.user_id == user_id)).all()
            )

    def list_ratings_for_user(self, user_id: int) -> list[RatingRecord]:
        """Interactions with their entity's external id, highest value first."""
        catalog = self.catalog_row_cls
        with self.database.session() as db:
            rows = db.execute(
                select(self.row_cls.entity_id, self.row_cls.value, catalog.external_id)
                .join(catalog, catalog.id == self.row_cls.entity_id)
                .where(self.row_cls.user_id == user_id)
                .order_by(self.row_cls.value.desc(), self.row_cls.updated_at.desc())
            ).all()
            return [RatingRecord(entity_id=r[0], value=r[1], external_id=r[2]) for r in rows]


class Stores:
    """All stores for one database, grouped per domain."""

    def __init__(self, database: Database) -> None:
        self.database = database
        self.users = UserStore(database)

        self.restaurants = CatalogStore(database, RestaurantRow, Restaurant)
        self.restaurant_preferences = RestaurantPreferenceStore(database)
        self.restaurant_likes = InteractionStore(database, RestaurantLikeRow, RestaurantRow)

        self.movies = CatalogStore(database, MovieRow, Movie)
        self.movie_preferences = MediaPreferenceStore(database, MoviePreferenceRow)
        self.movie_ratings = InteractionStore(database, MovieRatingRow, MovieRow)

        self.tv_shows = CatalogStore(database, TvShowRow, TvShow)
        self.tv_show_preferences = MediaPreferenceStore(database, TvShowPreferenceRow)
        self.tv_show_ratings = InteractionStore(database, TvShowRatingRow, TvShowRow)
