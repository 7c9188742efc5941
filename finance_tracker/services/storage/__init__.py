"""
Storage Services Package

Provides the abstract finance record interface and its implementations.
Google Sheets is the hosted backend; the in-memory store backs tests
and offline use.
"""

from finance_tracker.services.storage.interface import (
    ConnectionError,
    DuplicateError,
    FinanceRecordStorageInterface,
    NotFoundError,
    StorageError,
)
from finance_tracker.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsFinanceStorage,
)
from finance_tracker.services.storage.memory import InMemoryFinanceStorage

__all__ = [
    # Interfaces
    "FinanceRecordStorageInterface",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsFinanceStorage",
    "InMemoryFinanceStorage",
]
