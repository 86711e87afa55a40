"""GistStore — zero-infrastructure shared property store via GitHub Gist.

Access follows the Gist ACL: anyone who can read the Gist can load a
property's review state.

Data format: one JSON file per property named `sectionreview_<id>.json`
inside the Gist, holding {"fields": {...}, "reviews": {...}, "updatedAt": ...}.
Every save rewrites that file (last write wins).
"""

from __future__ import annotations

import json
import logging
from typing import Any

from sectionreview_store.base import BaseStore, utc_now
from sectionreview_store.models import PropertyRecord

logger = logging.getLogger(__name__)

_FILENAME_TEMPLATE = "sectionreview_{property_id}.json"


def gist_filename(property_id: str) -> str:
    safe = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in property_id)
    return _FILENAME_TEMPLATE.format(property_id=safe)


class GistStore(BaseStore):
    """Stores each property as a JSON file in a GitHub Gist.

    The Gist ID is stored in .sectionreview.yml under `gist_id`.
    """

    def __init__(self, gist_id: str, token: str):
        try:
            from github import Github
        except ImportError:
            raise ImportError("PyGithub is required for GistStore. Install sectionreview with its store extras.")
        self._gist_id = gist_id
        self._gh = Github(token)

    def _get_gist(self):
        return self._gh.get_gist(self._gist_id)

    def load(self, property_id: str) -> PropertyRecord | None:
        try:
            gist = self._get_gist()
            doc = self._read_document(gist, property_id)
        except Exception as e:
            logger.warning("GistStore.load() failed: %s", e)
            return None
        if doc is None:
            return None
        return self._from_dict(property_id, doc)

    def save_review_state(self, property_id: str, blob: dict) -> bool:
        return self._update(property_id, lambda doc: doc.__setitem__("reviews", blob))

    def save_fields(self, property_id: str, fields: dict[str, Any]) -> bool:
        return self._update(property_id, lambda doc: doc.setdefault("fields", {}).update(fields))

    def _update(self, property_id: str, mutate) -> bool:
        try:
            gist = self._get_gist()
            doc = self._read_document(gist, property_id) or {"fields": {}, "reviews": None}
            mutate(doc)
            doc["updatedAt"] = utc_now()
            gist.edit(files={gist_filename(property_id): {"content": json.dumps(doc, indent=2)}})
        except Exception as e:
            # Never abort the reviewer's action because persistence failed;
            # the in-memory state stays authoritative until the next write.
            logger.warning("GistStore write for %s failed (%s): %s", property_id, type(e).__name__, e)
            return False
        return True

    def _read_document(self, gist, property_id: str) -> dict | None:
        """Read the property's JSON document from the Gist, or return None."""
        file_obj = gist.files.get(gist_filename(property_id))
        if file_obj is None:
            return None
        try:
            doc = json.loads(file_obj.content)
        except (json.JSONDecodeError, AttributeError, TypeError):
            return None
        return doc if isinstance(doc, dict) else None

    @staticmethod
    def _from_dict(property_id: str, d: dict) -> PropertyRecord:
        fields = d.get("fields")
        return PropertyRecord(
            property_id=property_id,
            fields=fields if isinstance(fields, dict) else {},
            review_state=d.get("reviews"),
            updated_at=d.get("updatedAt", ""),
        )
