from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

import pandas as pd
from pydantic import ValidationError

from ..models import Restaurant
from ..storage.stores import CatalogStore
from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig

logger = logging.getLogger(__name__)


def _normalize_rating(rating: float | int | str | None) -> float | None:
    if rating is None or (isinstance(rating, float) and pd.isna(rating)):
        return None
    raw = str(rating).strip()
    # Handle "X/5" format (e.g. "4.1/5")
    if "/" in raw:
        raw = raw.split("/")[0].strip()
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None

    # Clamp to [0, 5]
    return max(0.0, min(5.0, value))


def _format_id(value: object) -> str:
    # A column with gaps is read as float, so 12 arrives as 12.0.
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _split_list(value: object) -> List[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return []
    return [part.strip() for part in str(value).split(",") if part.strip()]


def load_restaurants(csv_path: Path, config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> List[Restaurant]:
    """
    Read a restaurant CSV and map it into Restaurant models.

    Rows without a name are skipped. The external id is ``<prefix>:<id>``
    when the file has an id column, else ``<prefix>:<file stem>:<row>``.
    """
    df = pd.read_csv(csv_path)

    def _first_present(columns: List[str]) -> str | None:
        for col in columns:
            if col in df.columns:
                return col
        return None

    col_id = _first_present(config.id_columns)
    col_name = _first_present(config.name_columns)
    col_address = _first_present(config.address_columns)
    col_cuisines = _first_present(config.cuisine_columns)
    col_rating = _first_present(config.rating_columns)
    col_dietary = _first_present(config.dietary_columns)

    if col_name is None:
        raise ValueError(f"{csv_path} has no restaurant name column")

    restaurants: List[Restaurant] = []
    for index, row in df.iterrows():
        name = row[col_name]
        if pd.isna(name) or not str(name).strip():
            continue
        if col_id and pd.notna(row[col_id]):
            external_id = f"{config.external_id_prefix}:{_format_id(row[col_id])}"
        else:
            external_id = f"{config.external_id_prefix}:{csv_path.stem}:{index}"
        address = row[col_address] if col_address and pd.notna(row[col_address]) else ""
        try:
            restaurants.append(
                Restaurant(
                    external_id=external_id,
                    name=str(name).strip(),
                    address=str(address),
                    cuisines=_split_list(row[col_cuisines]) if col_cuisines else [],
                    dietary_options=_split_list(row[col_dietary]) if col_dietary else [],
                    rating=_normalize_rating(row[col_rating]) if col_rating else None,
                )
            )
        except ValidationError:
            logger.warning("Skipping malformed row %s in %s", index, csv_path)
    return restaurants


def run_ingestion(
    csv_path: Path,
    catalog: CatalogStore,
    config: IngestionConfig = DEFAULT_INGESTION_CONFIG,
) -> int:
    """
    Import a restaurant CSV into the local catalog.

    Steps:
    - Read and normalize the CSV.
    - Upsert each restaurant keyed on its external id (re-imports update in place).

    Returns the number of restaurants written.
    """
    restaurants = load_restaurants(Path(csv_path), config)
    for restaurant in restaurants:
        catalog.upsert(restaurant)
    logger.info("Imported %d restaurants from %s", len(restaurants), csv_path)
    return len(restaurants)


if __name__ == "__main__":
    from ..storage.config import StorageConfig
    from ..storage.database import Database
    from ..storage.stores import Stores

    parser = argparse.ArgumentParser(description="Import restaurants from a CSV file")
    parser.add_argument("csv_path", type=Path)
    parser.add_argument("--database-url", default=StorageConfig().database_url)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    database = Database(StorageConfig(database_url=args.database_url))
    database.create_all()
    count = run_ingestion(args.csv_path, Stores(database).restaurants)
    print(f"Import complete. {count} restaurants saved to {args.database_url}")
