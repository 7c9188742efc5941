"""Services package."""

from finance_tracker.services.storage import (
    ConnectionError,
    DuplicateError,
    FinanceRecordStorageInterface,
    GoogleSheetsClient,
    GoogleSheetsFinanceStorage,
    InMemoryFinanceStorage,
    NotFoundError,
    StorageError,
)

__all__ = [
    "ConnectionError",
    "DuplicateError",
    "FinanceRecordStorageInterface",
    "GoogleSheetsClient",
    "GoogleSheetsFinanceStorage",
    "InMemoryFinanceStorage",
    "NotFoundError",
    "StorageError",
]
