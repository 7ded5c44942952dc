"""
Restaurant CSV import.

Responsibilities:
- Read a restaurant dataset (e.g. a Zomato export) with pandas.
- Normalize it into the Restaurant catalog schema.
- Upsert every row into the local restaurant catalog.
"""
