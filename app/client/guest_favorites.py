"""Favorites for guests, kept only in local storage.

The list is stored most-recent first as JSON under a single key and is never
sent to the backend.
"""

import json
import uuid
from datetime import datetime, timezone

from app.client.storage import Storage

STORAGE_KEY = "sipSnap_guest_favorites"


class GuestFavorites:
    def __init__(self, storage: Storage, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def save(self, entry: dict) -> list[dict]:
        """Prepend ``entry`` with a fresh id and timestamp; return the new list."""
        saved = {
            **entry,
            "id": str(uuid.uuid4()),
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        items = [saved, *self.list()]
        self._write(items)
        return items

    def delete(self, favorite_id: str) -> list[dict]:
        items = [item for item in self.list() if item.get("id") != favorite_id]
        self._write(items)
        return items

    def _write(self, items: list[dict]) -> None:
        self.storage.set_item(self.key, json.dumps(items))

    # Defined last so the name does not shadow the builtin in annotations above
    def list(self) -> list[dict]:
        """Stored favorites; anything missing or malformed reads as []."""
        raw = self.storage.get_item(self.key)
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except ValueError:
            return []
        if not isinstance(items, list):
            return []
        return [item for item in items if isinstance(item, dict)]
