"""
Column mapping for restaurant CSV imports.

Datasets name their columns differently; the first candidate present in
the file wins.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class IngestionConfig:
    """
    Configuration for the restaurant CSV import.
    """

    id_columns: List[str] = field(default_factory=lambda: ["id", "place_id", "restaurant_id", "url"])
    name_columns: List[str] = field(default_factory=lambda: ["name", "restaurant_name", "res_name"])
    address_columns: List[str] = field(default_factory=lambda: ["address", "full_address", "location"])
    cuisine_columns: List[str] = field(default_factory=lambda: ["cuisines", "cuisine"])
    rating_columns: List[str] = field(default_factory=lambda: ["rating", "rate", "aggregate_rating"])
    dietary_columns: List[str] = field(default_factory=lambda: ["dietary_options", "dietary", "diet"])
    external_id_prefix: str = "csv"


DEFAULT_INGESTION_CONFIG = IngestionConfig()
