"""SQLiteStore — local file-based store for single-reviewer use.

Schema:
  properties — one row per property. Field values and the review blob are
               stored as JSON text; the review blob is replaced wholesale on
               every save (last write wins, no versioning).
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any

from sectionreview_store.base import BaseStore, utc_now
from sectionreview_store.models import PropertyRecord

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS properties (
    property_id     TEXT PRIMARY KEY,
    fields_json     TEXT DEFAULT '{}',
    reviews_json    TEXT,
    updated_at      TEXT
);
"""


class SQLiteStore(BaseStore):
    """Stores properties in a local SQLite database file.

    The database file path defaults to `.sectionreview.db` in the current
    working directory. Configure via .sectionreview.yml: `store_path: ...`.
    """

    def __init__(self, db_path: str = ".sectionreview.db"):
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def load(self, property_id: str) -> PropertyRecord | None:
        row = self._conn.execute("SELECT * FROM properties WHERE property_id=?", (property_id,)).fetchone()
        if row is None:
            return None
        return self._row_to_record(row)

    def save_review_state(self, property_id: str, blob: dict) -> bool:
        try:
            self._conn.execute(
                """
                INSERT INTO properties (property_id, reviews_json, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(property_id) DO UPDATE SET
                  reviews_json = excluded.reviews_json,
                  updated_at = excluded.updated_at
                """,
                (property_id, json.dumps(blob), utc_now()),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            logger.warning("SQLiteStore.save_review_state() failed (%s): %s", type(e).__name__, e)
            return False
        return True

    def save_fields(self, property_id: str, fields: dict[str, Any]) -> bool:
        try:
            existing = self.load(property_id)
            merged = {**(existing.fields if existing else {}), **fields}
            self._conn.execute(
                """
                INSERT INTO properties (property_id, fields_json, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(property_id) DO UPDATE SET
                  fields_json = excluded.fields_json,
                  updated_at = excluded.updated_at
                """,
                (property_id, json.dumps(merged), utc_now()),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            logger.warning("SQLiteStore.save_fields() failed (%s): %s", type(e).__name__, e)
            return False
        return True

    def close(self) -> None:
        self._conn.close()

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> PropertyRecord:
        try:
            fields = json.loads(row["fields_json"] or "{}")
        except json.JSONDecodeError:
            logger.warning("Ignoring unparseable fields for property %s", row["property_id"])
            fields = {}
        # The review blob is handed to the engine as-is; it owns migration
        # and recovery of malformed state.
        reviews = row["reviews_json"]
        try:
            review_state = json.loads(reviews) if reviews else None
        except json.JSONDecodeError:
            review_state = reviews
        return PropertyRecord(
            property_id=row["property_id"],
            fields=fields if isinstance(fields, dict) else {},
            review_state=review_state,
            updated_at=row["updated_at"] or "",
        )
