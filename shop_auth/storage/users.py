"""
In-process user repository.
Rows are plain dicts, copied on the way in and out so callers never share state.
"""
import threading
import uuid
from datetime import datetime, timezone
from typing import Any


class UserRepository:
    def __init__(self):
        self._rows: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def insert(self, data: dict) -> dict:
        row = dict(data)
        row.setdefault("id", uuid.uuid4().hex)
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        with self._lock:
            self._rows[row["id"]] = row
            return dict(row)

    def get(self, user_id: str) -> dict | None:
        with self._lock:
            row = self._rows.get(user_id)
            return dict(row) if row else None

    def find_one(self, **filters) -> dict | None:
        with self._lock:
            for row in self._rows.values():
                if all(row.get(k) == v for k, v in filters.items()):
                    return dict(row)
        return None

    def list(self) -> list[dict]:
        with self._lock:
            rows = sorted(self._rows.values(), key=lambda r: r["created_at"])
            return [dict(r) for r in rows]

    def update(self, user_id: str, data: dict) -> dict | None:
        with self._lock:
            row = self._rows.get(user_id)
            if row is None:
                return None
            row.update(data)
            return dict(row)

    def delete(self, user_id: str) -> bool:
        with self._lock:
            return self._rows.pop(user_id, None) is not None
