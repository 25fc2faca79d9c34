from __future__ import annotations

import logging
from collections.abc import Iterable
from threading import Lock

from contract_dashboard.models import ScanRecord, ValidationError

LOGGER = logging.getLogger(__name__)


def _validate(record: ScanRecord) -> None:
    if record.vulnerability_count < 0:
        raise ValidationError(f"vulnerability_count must be >= 0, got {record.vulnerability_count}")


class RecordStore:
    """Newest-first, in-memory history of scan records.

    Mutations take the lock; reads copy under the lock so callers always get a
    consistent snapshot, never a list that is half way through an append or
    a clear.
    """

    def __init__(self, records: Iterable[ScanRecord] | None = None) -> None:
        self._records: list[ScanRecord] = []
        self._lock = Lock()
        if records is not None:
            self.extend_history(records)

    def append(self, record: ScanRecord) -> None:
        _validate(record)
        with self._lock:
            self._records.insert(0, record)
        LOGGER.debug("Stored scan of %s on %s", record.target, record.network)

    def extend_history(self, records: Iterable[ScanRecord]) -> None:
        """Add older records, given newest-first, behind the current ones."""
        batch = list(records)
        for record in batch:
            _validate(record)
        with self._lock:
            self._records.extend(batch)

    def clear(self) -> int:
        with self._lock:
            removed = len(self._records)
            self._records = []
        LOGGER.debug("Cleared %s scan records", removed)
        return removed

    def all(self) -> tuple[ScanRecord, ...]:
        with self._lock:
            return tuple(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
