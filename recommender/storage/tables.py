"""SQLAlchemy models for users, catalogs, preferences and interactions."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow, onupdate=_utcnow, nullable=False
    )


class UserRow(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<UserRow(id={self.id}, name='{self.name}')>"


# -- catalogs -----------------------------------------------------------------


class CatalogMixin(TimestampMixin):
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)


class RestaurantRow(Base, CatalogMixin):
    __tablename__ = "restaurants"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(Text, default="", nullable=False)
    cuisines: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    dietary_options: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)


class MediaMixin(CatalogMixin):
    overview: Mapped[str] = mapped_column(Text, default="", nullable=False)
    vote_average: Mapped[float | None] = mapped_column(Float, nullable=True)
    vote_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    poster_path: Mapped[str | None] = mapped_column(String(255), nullable=True)
    genres: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    original_language: Mapped[str | None] = mapped_column(String(10), nullable=True)
    imdb_id: Mapped[str | None] = mapped_column(String(20), nullable=True)
    streaming_providers: Mapped[list] = mapped_column(JSON, default=list, nullable=False)


class MovieRow(Base, MediaMixin):
    __tablename__ = "movies"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    release_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    runtime: Mapped[int | None] = mapped_column(Integer, nullable=True)


class TvShowRow(Base, MediaMixin):
    __tablename__ = "tv_shows"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    first_air_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    number_of_seasons: Mapped[int | None] = mapped_column(Integer, nullable=True)
    episode_run_time: Mapped[list] = mapped_column(JSON, default=list, nullable=False)


# -- preferences (one row per user; NULL means unconstrained) -----------------


class RestaurantPreferenceRow(Base, TimestampMixin):
    __tablename__ = "restaurant_preferences"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    favorite_cuisines: Mapped[list | None] = mapped_column(JSON, nullable=True)
    dietary_restrictions: Mapped[list | None] = mapped_column(JSON, nullable=True)
    min_rating: Mapped[float] = mapped_column(Float, nullable=False)


class MediaPreferenceMixin(TimestampMixin):
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    preferred_genres: Mapped[list | None] = mapped_column(JSON, nullable=True)
    preferred_languages: Mapped[list | None] = mapped_column(JSON, nullable=True)
    year_min: Mapped[int | None] = mapped_column(Integer, nullable=True)
    year_max: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_min: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_max: Mapped[int | None] = mapped_column(Integer, nullable=True)
    min_rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    preferred_streaming_providers: Mapped[list | None] = mapped_column(JSON, nullable=True)


class MoviePreferenceRow(Base, MediaPreferenceMixin):
    __tablename__ = "movie_preferences"


class TvShowPreferenceRow(Base, MediaPreferenceMixin):
    __tablename__ = "tv_show_preferences"


# -- interactions (composite key, last write wins) ----------------------------


class InteractionMixin(TimestampMixin):
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False)


class RestaurantLikeRow(Base, InteractionMixin):
    __tablename__ = "restaurant_likes"

    entity_id: Mapped[int] = mapped_column(
        "restaurant_id", ForeignKey("restaurants.id", ondelete="CASCADE"), primary_key=True
    )


class MovieRatingRow(Base, InteractionMixin):
    __tablename__ = "movie_ratings"

    entity_id: Mapped[int] = mapped_column(
        "movie_id", ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True
    )


class TvShowRatingRow(Base, InteractionMixin):
    __tablename__ = "tv_show_ratings"

    entity_id: Mapped[int] = mapped_column(
        "tv_show_id", ForeignKey("tv_shows.id", ondelete="CASCADE"), primary_key=True
    )
