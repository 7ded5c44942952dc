"""
External content providers.

Responsibilities:
- Read API credentials from the environment.
- Fetch restaurants from Google Places text search.
- Fetch movies and TV shows from TMDB (popular, search, details,
  recommendations, genre and watch-provider lists).
- Degrade to "no data" when a key is missing or a call fails.
"""
