"""
Farm Advisor - row-oriented in-memory datastore.

Tables hold plain dict rows. Every row gets an ``id`` and ``created_at`` on insert and is
owned by a ``user_id``; reads are always scoped to the caller.
"""
import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

SOIL_DATA = "soil_data"
CROP_RECOMMENDATIONS = "crop_recommendations"
FERTILIZER_RECOMMENDATIONS = "fertilizer_recommendations"
YIELD_PREDICTIONS = "yield_predictions"

TABLES = (SOIL_DATA, CROP_RECOMMENDATIONS, FERTILIZER_RECOMMENDATIONS, YIELD_PREDICTIONS)

_tables: Dict[str, List[dict]] = {name: [] for name in TABLES}
_lock = threading.Lock()


def _table(name: str) -> List[dict]:
    if name not in _tables:
        raise KeyError(f"Unknown table: {name}")
    return _tables[name]


def insert_row(table: str, row: dict) -> dict:
    """Insert a copy of ``row`` and return it with ``id`` and ``created_at`` filled in."""
    record = dict(row)
    record["id"] = str(uuid.uuid4())
    record["created_at"] = datetime.now(timezone.utc)
    with _lock:
        _table(table).append(record)
    logger.info("Inserted %s row %s", table, record["id"])
    return dict(record)


def get_row(table: str, row_id: str, user_id: str) -> Optional[dict]:
    """Single row by id, or None when absent or owned by someone else."""
    with _lock:
        for record in _table(table):
            if record["id"] == row_id and record["user_id"] == user_id:
                return dict(record)
    return None


def list_rows(table: str, user_id: str) -> List[dict]:
    """All rows owned by ``user_id``, newest first."""
    with _lock:
        rows = [dict(r) for r in _table(table) if r["user_id"] == user_id]
    # Insertion order breaks ties between identical timestamps
    return list(reversed(rows))


def reset() -> None:
    with _lock:
        for rows in _tables.values():
            rows.clear()
