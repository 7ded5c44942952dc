from __future__ import annotations

from pydantic import BaseModel, Field


class User(BaseModel):
    id: int
    name: str


class Restaurant(BaseModel):
    id: int | None = None
    external_id: str = Field(..., min_length=1, description="Google place id or csv:<row>")
    name: str
    address: str = ""
    cuisines: list[str] = Field(default_factory=list)
    dietary_options: list[str] = Field(default_factory=list)
    rating: float | None = Field(default=None, ge=0.0, le=5.0)

    @property
    def display_name(self) -> str:
        return self.name


def _year_of(date_str: str | None) -> int | None:
    if not date_str or len(date_str) < 4:
        return None
    try:
        return int(date_str[:4])
    except ValueError:
        return None


class Movie(BaseModel):
    id: int | None = None
    external_id: str = Field(..., min_length=1, description="TMDB id as text")
    title: str
    overview: str = ""
    release_date: str | None = None
    vote_average: float | None = None
    vote_count: int = 0
    poster_path: str | None = None
    genres: list[str] = Field(default_factory=list)
    runtime: int | None = None
    original_language: str | None = None
    imdb_id: str | None = None
    streaming_providers: list[str] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.title

    @property
    def year(self) -> int | None:
        return _year_of(self.release_date)

    @property
    def duration(self) -> int | None:
        return self.runtime


class TvShow(BaseModel):
    id: int | None = None
    external_id: str = Field(..., min_length=1, description="TMDB id as text")
    name: str
    overview: str = ""
    first_air_date: str | None = None
    vote_average: float | None = None
    vote_count: int = 0
    poster_path: str | None = None
    genres: list[str] = Field(default_factory=list)
    number_of_seasons: int | None = None
    episode_run_time: list[int] = Field(default_factory=list)
    original_language: str | None = None
    imdb_id: str | None = None
    streaming_providers: list[str] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.name

    @property
    def year(self) -> int | None:
        return _year_of(self.first_air_date)

    @property
    def duration(self) -> int | None:
        # TMDB reports the average episode runtime as the first element.
        return self.episode_run_time[0] if self.episode_run_time else None


Entity = Restaurant | Movie | TvShow


class RatingRecord(BaseModel):
    entity_id: int
    external_id: str
    value: int = Field(..., ge=1, le=5)
