from __future__ import annotations

from ..models import Movie, Restaurant, TvShow

RULE = "-" * 40


def format_restaurant(restaurant: Restaurant) -> str:
    lines = [RULE, f" How about: {restaurant.name}?", f"      Address: {restaurant.address or 'N/A'}"]
    lines.append(f"      Cuisines: {', '.join(restaurant.cuisines) or 'N/A'}")
    if restaurant.rating is not None:
        lines.append(f"      Rating: {'*' * round(restaurant.rating)} ({restaurant.rating:.1f})")
    if restaurant.dietary_options:
        lines.append(f"      Dietary: {', '.join(restaurant.dietary_options)}")
    lines.append(RULE)
    return "\n".join(lines)


def format_media_summary(item: Movie | TvShow, index: int | None = None) -> str:
    prefix = f"{index}. " if index is not None else ""
    year = item.year or "N/A"
    rating = f"{item.vote_average:.1f}/10" if item.vote_average is not None else "N/A"
    genres = ", ".join(item.genres) or "N/A"
    return f"{prefix}{item.display_name} ({year}) - {rating} - {genres}"


def format_media_details(item: Movie | TvShow, poster_url: str | None = None) -> str:
    lines = [RULE, f"{item.display_name} ({item.year or 'N/A'})", f"   TMDB ID: {item.external_id}"]
    if item.imdb_id:
        lines.append(f"   IMDb ID: {item.imdb_id}")
    if item.vote_average is not None:
        lines.append(f"   Rating: {item.vote_average:.1f}/10 ({item.vote_count} votes)")
    lines.append(f"   Genres: {', '.join(item.genres) or 'N/A'}")
    if isinstance(item, Movie):
        lines.append(f"   Runtime: {f'{item.runtime} min' if item.runtime else 'N/A'}")
    else:
        lines.append(f"   Seasons: {item.number_of_seasons or 'N/A'}")
        lines.append(f"   Episode runtime: {f'{item.duration} min' if item.duration else 'N/A'}")
    lines.append(f"   Language: {item.original_language or 'N/A'}")
    if item.streaming_providers:
        lines.append(f"   Stream on: {', '.join(item.streaming_providers)}")
    if poster_url:
        lines.append(f"   Poster: {poster_url}")
    if item.overview:
        lines.extend(["", item.overview])
    lines.append(RULE)
    return "\n".join(lines)
