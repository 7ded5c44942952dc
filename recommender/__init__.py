"""
Multi-domain recommender.

Suggests restaurants, movies and TV shows to registered users from their
stored preferences, their likes/ratings and data pulled from Google Places
and TMDB.
"""
