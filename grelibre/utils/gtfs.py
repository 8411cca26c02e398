"""
GTFS routes.txt loading.
"""

import io
import logging
from pathlib import Path
from typing import Dict, List, Union

import pandas as pd
from pydantic import ValidationError

from grelibre.schemas.schedules import GtfsRoute

logger = logging.getLogger(__name__)


def _read_records(source) -> List[Dict[str, str]]:
    try:
        df = pd.read_csv(source, dtype=str, keep_default_na=False, skip_blank_lines=True)
    except pd.errors.EmptyDataError:
        return []

    df.columns = [str(column).lstrip("\ufeff").strip() for column in df.columns]
    return df.fillna("").to_dict("records")


def parse_routes_csv(text: str) -> List[Dict[str, str]]:
    """
    Parse CSV text with a header row into one dict per data row.

    Blank lines are skipped and short rows are padded with empty strings.
    """
    return _read_records(io.StringIO(text))


def load_gtfs_routes(path: Union[str, Path]) -> List[GtfsRoute]:
    """
    Load the routes of a GTFS routes.txt file.

    A missing or unreadable file yields no route; lines are then shown
    with default colors.
    """
    try:
        records = _read_records(Path(path))
    except (OSError, pd.errors.ParserError) as e:
        logger.warning("Could not read GTFS routes from %s: %s", path, str(e))
        return []

    routes = []
    for record in records:
        # Empty optional columns fall back to the model defaults
        record = {key: value for key, value in record.items() if value.strip()}
        try:
            routes.append(GtfsRoute.model_validate(record))
        except ValidationError as e:
            logger.warning("Skipping invalid GTFS route %s: %s", record.get("route_id"), str(e))
    return routes
