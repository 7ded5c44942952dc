"""
Persistence layer.

Responsibilities:
- Own the SQLAlchemy engine and session lifecycle.
- Map users, catalog entities, preferences and likes/ratings to tables.
- Expose upsert-style stores to the engine and the CLI.
"""
