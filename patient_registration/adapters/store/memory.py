"""
In-memory record store adapter - Implements RecordStore protocol.

Records are immutable dataclasses, so the store hands out the stored
instances directly. A single lock guards the dict; it is only held for
the duration of one dict operation, never across coordinator calls.
"""

import threading
from dataclasses import replace

from patient_registration.domain.model import RegistrationRecord


class InMemoryRecordStore:
    """
    Implements RecordStore protocol with a thread-safe dict.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Used for development and tests.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, RegistrationRecord] = {}

    def put(self, record: RegistrationRecord) -> None:
        with self._lock:
            self._records[record.id] = record

    def get(self, record_id: str) -> RegistrationRecord | None:
        with self._lock:
            return self._records.get(record_id)

    def compare_and_swap(
        self, record_id: str, expected_version: int, record: RegistrationRecord
    ) -> bool:
        with self._lock:
            current = self._records.get(record_id)
            if current is None or current.version != expected_version:
                return False
            self._records[record_id] = replace(record, version=expected_version + 1)
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
