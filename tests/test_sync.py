"""
Tests for loading and saving the finance record.

Storage is either the in-memory backend or an AsyncMock; no real API calls.
"""

import asyncio
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from finance_tracker.models import FinanceState, LineItem
from finance_tracker.orchestrator import FinanceSession, create_app_components
from finance_tracker.services.storage import InMemoryFinanceStorage, StorageError
from finance_tracker.sync import (
    FetchFailure,
    FinanceSync,
    SaveFailure,
    decode_record,
    default_state,
)


FIXED_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
USER = "default_user"


def stored_record(**overrides):
    record = {
        "cash": 500000,
        "bank_accounts": [{"id": 1, "name": "VCB", "amount": 1000000}],
        "salary": 10000000,
        "other_income": 0,
        "fixed_expenses": [{"id": 2, "name": "Rent", "amount": 3000000}],
        "allocation_settings": {"living": 40, "invest": 30, "savings": 20, "play": 10},
        "updated_at": "2026-01-01T00:00:00+00:00",
    }
    record.update(overrides)
    return record


def make_sync(storage, failures=None):
    return FinanceSync(
        storage=storage,
        user_identifier=USER,
        audit_logger=MagicMock(),
        on_failure=failures.append if failures is not None else None,
        clock=lambda: FIXED_TIME,
    )


def failing_storage(error=None):
    storage = MagicMock()
    error = error or StorageError("sheet unavailable")
    storage.get_record = AsyncMock(side_effect=error)
    storage.create_record = AsyncMock(side_effect=error)
    storage.update_record = AsyncMock(side_effect=error)
    return storage


class TestLoad:
    """Tests for FinanceSync.load."""

    def test_load_existing_record(self):
        storage = InMemoryFinanceStorage({USER: stored_record()})
        state = asyncio.run(make_sync(storage).load(default_state()))
        assert state.cash == 500000
        assert state.bank_accounts == [LineItem(id=1, name="VCB", amount=1000000)]

    def test_first_use_creates_default_record(self):
        storage = InMemoryFinanceStorage()
        sync = make_sync(storage)
        state = asyncio.run(sync.load(FinanceState(cash=1)))
        assert state == default_state()

        record = asyncio.run(storage.get_record(USER))
        assert record["cash"] == 0
        assert record["bank_accounts"] == []
        assert record["updated_at"] == FIXED_TIME.isoformat()

    def test_load_failure_keeps_current_state(self):
        """Test that a failed load returns the very same state object."""
        failures = []
        current = FinanceState(cash=123)
        state = asyncio.run(make_sync(failing_storage(), failures).load(current))
        assert state is current
        assert len(failures) == 1
        assert isinstance(failures[0], FetchFailure)
        assert isinstance(failures[0].cause, StorageError)

    def test_create_failure_is_fetch_failure(self):
        failures = []
        storage = MagicMock()
        storage.get_record = AsyncMock(return_value=None)
        storage.create_record = AsyncMock(side_effect=StorageError("quota"))
        current = FinanceState()
        state = asyncio.run(make_sync(storage, failures).load(current))
        assert state is current
        assert isinstance(failures[0], FetchFailure)

    def test_defaulted_fields_are_logged(self):
        storage = InMemoryFinanceStorage({USER: {"cash": 5}})
        sync = make_sync(storage)
        asyncio.run(sync.load(default_state()))
        sync._audit_logger.log_record_defaulted.assert_called_once()
        sync._audit_logger.log_record_loaded.assert_called_once()

    def test_not_loading_after_completion(self):
        sync = make_sync(failing_storage())
        asyncio.run(sync.load(default_state()))
        assert sync.is_loading is False


class TestSave:
    """Tests for FinanceSync.save."""

    def test_save_success(self):
        storage = InMemoryFinanceStorage({USER: stored_record()})
        state = decode_record(stored_record(cash=42))
        result = asyncio.run(make_sync(storage).save(state))
        assert result.success is True
        assert result.updated_at == FIXED_TIME

        record = asyncio.run(storage.get_record(USER))
        assert record["cash"] == 42
        assert record["updated_at"] == FIXED_TIME.isoformat()

    def test_save_creates_missing_row(self):
        storage = InMemoryFinanceStorage()
        result = asyncio.run(make_sync(storage).save(FinanceState(cash=7)))
        assert result.success is True
        assert asyncio.run(storage.get_record(USER))["cash"] == 7

    def test_save_failure_keeps_state(self):
        failures = []
        state = FinanceState(cash=99)
        before = state.model_dump()
        sync = make_sync(failing_storage(), failures)
        result = asyncio.run(sync.save(state))
        assert result.success is False
        assert result.updated_at is None
        assert "sheet unavailable" in result.error_message
        assert state.model_dump() == before
        assert isinstance(failures[0], SaveFailure)
        assert sync.is_saving is False

    def test_is_saving_while_in_flight(self):
        seen = []
        storage = InMemoryFinanceStorage({USER: stored_record()})
        sync = make_sync(storage)

        async def update_record(user_identifier, record):
            seen.append(sync.is_saving)
            return True

        storage.update_record = update_record
        asyncio.run(sync.save(default_state()))
        assert seen == [True]
        assert sync.is_saving is False

    def test_load_then_save_keeps_record(self):
        """Test that saving an unedited record changes only updated_at."""
        original = stored_record()
        storage = InMemoryFinanceStorage({USER: original})
        sync = make_sync(storage)
        state = asyncio.run(sync.load(default_state()))
        asyncio.run(sync.save(state))

        saved = asyncio.run(storage.get_record(USER))
        assert saved.pop("updated_at") == FIXED_TIME.isoformat()
        original.pop("updated_at")
        assert saved == original

    def test_round_trip(self):
        """Test that a saved state loads back equal."""
        storage = InMemoryFinanceStorage()
        sync = make_sync(storage)
        state = decode_record(stored_record())
        asyncio.run(sync.save(state))
        assert asyncio.run(sync.load(default_state())) == state


class TestFinanceSession:
    """Tests for the session that owns the state."""

    def make_session(self, storage):
        return FinanceSession(make_sync(storage))

    def test_load_replaces_state(self):
        session = self.make_session(InMemoryFinanceStorage({USER: stored_record()}))
        assert asyncio.run(session.load()) is True
        assert session.state.cash == 500000

    def test_failed_load_keeps_edits(self):
        session = self.make_session(failing_storage())
        session.set_field("cash", 77)
        assert asyncio.run(session.load()) is False
        assert session.state.cash == 77

    def test_add_item_default_names(self):
        session = self.make_session(InMemoryFinanceStorage())
        assert session.add_item("bank_accounts").name == "New bank"
        assert session.add_item("fixed_expenses").name == "New expense"
        assert session.add_item("fixed_expenses", "Rent").name == "Rent"

    def test_edit_then_summary(self):
        session = self.make_session(InMemoryFinanceStorage())
        session.set_field("salary", "1000000")
        item = session.add_item("fixed_expenses", "Rent")
        session.update_item("fixed_expenses", item.id, "amount", 200000)
        session.set_allocation("living", 50)
        summary = session.summary()
        assert summary.remaining == 800000
        assert summary.jar_amount("living") == 400000
        assert summary.allocation_balanced is False
        session.remove_item("fixed_expenses", item.id)
        assert session.summary().remaining == 1000000

    def test_save_then_reload(self):
        storage = InMemoryFinanceStorage()
        session = self.make_session(storage)
        session.set_field("cash", 1500)
        assert asyncio.run(session.save()).success is True

        other = self.make_session(storage)
        asyncio.run(other.load())
        assert other.state.cash == 1500

    def test_components_without_storage(self):
        session, client = create_app_components(use_storage=False)
        assert client is None
        assert isinstance(session, FinanceSession)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
