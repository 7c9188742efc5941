"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for the finance record.
This allows us to:
1. Swap Google Sheets for a hosted database later
2. Use in-memory storage for testing
3. Keep the sync logic decoupled from any backend

The interface is intentionally tiny: one row per user, keyed by a fixed
identifier, with create-on-first-use, read-one and update-one.
Records cross this boundary as plain dicts in the canonical shape; they
are decoded into a FinanceState one layer up.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class FinanceRecordStorageInterface(ABC):
    """
    Abstract interface for finance record storage.

    Any storage implementation (Google Sheets, PostgreSQL, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def get_record(self, user_identifier: str) -> Optional[dict[str, Any]]:
        """
        Retrieve the record for a user.

        Args:
            user_identifier: The fixed key of the record

        Returns:
            The raw record if found, None otherwise

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def create_record(self, user_identifier: str, record: dict[str, Any]) -> bool:
        """
        Create the record for a user.

        Returns:
            True if created successfully

        Raises:
            DuplicateError: If a record already exists for this user
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def update_record(self, user_identifier: str, record: dict[str, Any]) -> bool:
        """
        Replace the record for a user with `record`.

        Returns:
            True if updated successfully

        Raises:
            NotFoundError: If no record exists for this user
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
