"""
Persistence Sync

Loads the single finance record on start and pushes it back on an
explicit save.

DESIGN DECISION: A failed load is a best-effort refresh that did not
happen, not an error: the current state is returned unchanged and the
failure is reported to an observer. A failed save keeps the in-memory
edits so the user can simply retry.

Concurrent calls are not coordinated. Results are applied in completion
order and the last save wins; storage's single-row update is atomic.
"""

from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import UUID

from finance_tracker.audit import AuditLogger, create_correlation_id
from finance_tracker.config import get_settings
from finance_tracker.models.finance import FinanceState, SaveResult
from finance_tracker.services.storage import (
    FinanceRecordStorageInterface,
    NotFoundError,
)
from finance_tracker.sync.codec import decode_with_report, default_state, encode_state


class SyncError(Exception):
    """Base class for sync failures reported to observers."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class FetchFailure(SyncError):
    """The remote record could not be read (or created on first use)."""
    pass


class SaveFailure(SyncError):
    """The remote record could not be written."""
    pass


FailureObserver = Callable[[SyncError], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FinanceSync:
    """
    Reads and writes one user's finance record through an injected storage.

    The storage client is a constructor argument rather than a module-level
    singleton, so tests can hand in a fake.
    """

    def __init__(
        self,
        storage: FinanceRecordStorageInterface,
        user_identifier: Optional[str] = None,
        audit_logger: Optional[AuditLogger] = None,
        on_failure: Optional[FailureObserver] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._storage = storage
        self._user_identifier = user_identifier or get_settings().app.user_identifier
        self._audit_logger = audit_logger or AuditLogger()
        self._on_failure = on_failure
        self._clock = clock or _utcnow
        self._loads_in_flight = 0
        self._saves_in_flight = 0

    @property
    def user_identifier(self) -> str:
        return self._user_identifier

    @property
    def is_loading(self) -> bool:
        return self._loads_in_flight > 0

    @property
    def is_saving(self) -> bool:
        return self._saves_in_flight > 0

    def _report(self, failure: SyncError) -> None:
        if self._on_failure is not None:
            self._on_failure(failure)

    async def load(
        self,
        current: FinanceState,
        correlation_id: Optional[UUID] = None,
    ) -> FinanceState:
        """
        Fetch and decode the user's record.

        Returns:
            The decoded state; a default state if the record had to be
            created; `current` itself if storage failed.
        """
        correlation_id = correlation_id or create_correlation_id()
        self._loads_in_flight += 1
        try:
            raw = await self._storage.get_record(self._user_identifier)

            if raw is None:
                state = default_state()
                await self._storage.create_record(
                    self._user_identifier,
                    encode_state(state, self._clock()),
                )
                self._audit_logger.log_record_created(self._user_identifier, correlation_id)
                return state

            state, defaulted = decode_with_report(raw)
        except Exception as e:
            failure = FetchFailure(f"Could not load finance record: {e}", cause=e)
            self._audit_logger.log_load_failed(self._user_identifier, str(e), correlation_id)
            self._report(failure)
            return current
        finally:
            self._loads_in_flight -= 1

        if defaulted:
            self._audit_logger.log_record_defaulted(
                self._user_identifier, defaulted, correlation_id
            )
        self._audit_logger.log_record_loaded(self._user_identifier, correlation_id)
        return state

    async def save(
        self,
        state: FinanceState,
        correlation_id: Optional[UUID] = None,
    ) -> SaveResult:
        """
        Write the whole state as one update, stamping `updated_at`.

        A missing row is created. Nothing is rolled back on failure.
        """
        correlation_id = correlation_id or create_correlation_id()
        updated_at = self._clock()
        record = encode_state(state, updated_at)

        self._saves_in_flight += 1
        try:
            try:
                await self._storage.update_record(self._user_identifier, record)
            except NotFoundError:
                await self._storage.create_record(self._user_identifier, record)
        except Exception as e:
            failure = SaveFailure(f"Could not save finance record: {e}", cause=e)
            self._audit_logger.log_save_failed(self._user_identifier, str(e), correlation_id)
            self._report(failure)
            return SaveResult(success=False, error_message=str(failure))
        finally:
            self._saves_in_flight -= 1

        self._audit_logger.log_record_saved(
            self._user_identifier, record["updated_at"], correlation_id
        )
        return SaveResult(success=True, updated_at=updated_at)
