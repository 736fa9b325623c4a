"""
In-memory OTP record store.
One record per phone number; contents are lost on process restart.
"""
import threading
from dataclasses import dataclass
from datetime import datetime


@dataclass
class OtpRecord:
    code: str
    expires_at: datetime
    attempts: int = 0

    def is_expired(self, now: datetime) -> bool:
        # Strictly after: a check at the exact expiry instant is still valid
        return now > self.expires_at


class OtpStore:
    """Phone number -> OtpRecord mapping guarded by a re-entrant lock."""

    def __init__(self):
        self._records: dict[str, OtpRecord] = {}
        self.lock = threading.RLock()

    def put(self, phone_number: str, record: OtpRecord) -> None:
        with self.lock:
            self._records[phone_number] = record

    def get(self, phone_number: str) -> OtpRecord | None:
        with self.lock:
            return self._records.get(phone_number)

    def delete(self, phone_number: str) -> bool:
        with self.lock:
            return self._records.pop(phone_number, None) is not None

    def purge_expired(self, now: datetime) -> int:
        with self.lock:
            expired = [k for k, r in self._records.items() if r.is_expired(now)]
            for key in expired:
                del self._records[key]
            return len(expired)

    def __len__(self) -> int:
        with self.lock:
            return len(self._records)

    def __contains__(self, phone_number: str) -> bool:
        with self.lock:
            return phone_number in self._records
