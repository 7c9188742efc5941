"""
In-Memory Storage Implementation

Keeps finance records in a dict. Used by the tests and as the offline
fallback when Google Sheets is not configured (edits then last only as
long as the process).
"""

import copy
from typing import Any, Optional

from finance_tracker.services.storage.interface import (
    DuplicateError,
    FinanceRecordStorageInterface,
    NotFoundError,
)


class InMemoryFinanceStorage(FinanceRecordStorageInterface):
    """Dict-backed finance record storage; records are deep-copied in and out."""

    def __init__(self, records: Optional[dict[str, dict[str, Any]]] = None):
        self._records: dict[str, dict[str, Any]] = copy.deepcopy(records or {})

    async def get_record(self, user_identifier: str) -> Optional[dict[str, Any]]:
        record = self._records.get(user_identifier)
        return copy.deepcopy(record) if record is not None else None

    async def create_record(self, user_identifier: str, record: dict[str, Any]) -> bool:
        if user_identifier in self._records:
            raise DuplicateError(f"Finance record already exists: {user_identifier}")
        self._records[user_identifier] = copy.deepcopy(record)
        return True

    async def update_record(self, user_identifier: str, record: dict[str, Any]) -> bool:
        if user_identifier not in self._records:
            raise NotFoundError(f"Finance record not found: {user_identifier}")
        self._records[user_identifier] = copy.deepcopy(record)
        return True
