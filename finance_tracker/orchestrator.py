"""
Main Orchestrator for Finance Tracker

This module ties together all the components and defines the one flow
the form has: load the record, let the user edit it, show the derived
figures, save it back.

DESIGN DECISION: FinanceSession is the only owner of the FinanceState.
- Edits are synchronous and applied in place (list edits replace lists)
- A load result replaces the state wholesale
- A save is a pure outbound effect; its failure never touches the state
"""

from typing import Any, Optional, Union
from uuid import UUID

from finance_tracker.audit import AuditLogger
from finance_tracker.calculations import summarize
from finance_tracker.config import AppSettings, get_settings
from finance_tracker.entries import ItemField, LineItem
from finance_tracker.models.finance import (
    FinanceState,
    FinanceSummary,
    Jar,
    ListField,
    SaveResult,
    ScalarField,
)
from finance_tracker.services.storage import (
    FinanceRecordStorageInterface,
    GoogleSheetsClient,
    GoogleSheetsFinanceStorage,
    InMemoryFinanceStorage,
)
from finance_tracker.sync import FinanceSync, default_state
from finance_tracker.sync.service import FailureObserver


class FinanceSession:
    """
    Holds the current FinanceState and routes edits, loads and saves.

    Flow:
    1. load()   → state replaced by the stored record (or left as is on failure)
    2. edits    → set_field / add_item / update_item / remove_item / set_allocation
    3. summary()→ derived totals, remainder and jars
    4. save()   → whole state pushed to storage
    """

    def __init__(
        self,
        sync: FinanceSync,
        state: Optional[FinanceState] = None,
        app_settings: Optional[AppSettings] = None,
    ):
        self._sync = sync
        self._state = state or default_state()
        self._app_settings = app_settings or get_settings().app

    @property
    def state(self) -> FinanceState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._sync.is_loading

    @property
    def is_saving(self) -> bool:
        return self._sync.is_saving

    def _default_name(self, list_field: ListField) -> str:
        if list_field == ListField.BANK_ACCOUNTS:
            return self._app_settings.default_bank_name
        return self._app_settings.default_expense_name

    # -- editing -------------------------------------------------------------

    def set_field(self, field: Union[ScalarField, str], value: Any) -> None:
        self._state.set_field(field, value)

    def add_item(
        self,
        list_field: Union[ListField, str],
        name: Optional[str] = None,
    ) -> LineItem:
        """Add an item to a list, named from settings unless `name` is given."""
        list_field = ListField(list_field)
        return self._state.add_item(list_field, name or self._default_name(list_field))

    def update_item(
        self,
        list_field: Union[ListField, str],
        item_id: int,
        field: ItemField,
        value: Any,
    ) -> None:
        self._state.update_item(list_field, item_id, field, value)

    def remove_item(self, list_field: Union[ListField, str], item_id: int) -> None:
        self._state.remove_item(list_field, item_id)

    def set_allocation(self, jar: Union[Jar, str], percent: Any) -> None:
        self._state.set_allocation(jar, percent)

    # -- derived figures -----------------------------------------------------

    def summary(self) -> FinanceSummary:
        return summarize(self._state)

    # -- storage -------------------------------------------------------------

    async def load(self, correlation_id: Optional[UUID] = None) -> bool:
        """
        Refresh from storage.

        Returns True if the state was replaced, False if the load failed
        and the previous state was kept.
        """
        previous = self._state
        loaded = await self._sync.load(previous, correlation_id=correlation_id)
        self._state = loaded
        return loaded is not previous

    async def save(self, correlation_id: Optional[UUID] = None) -> SaveResult:
        return await self._sync.save(self._state, correlation_id=correlation_id)


def create_app_components(
    use_storage: bool = True,
    on_failure: Optional[FailureObserver] = None,
) -> tuple[FinanceSession, Optional[GoogleSheetsClient]]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to initialize Google Sheets storage.
                    Set to False (or leave Sheets unconfigured) to keep
                    the record in memory only.
        on_failure: Observer called with FetchFailure / SaveFailure

    Returns:
        (finance_session, sheets_client)
    """
    audit_logger = AuditLogger()
    sheets_client = None
    storage: FinanceRecordStorageInterface

    if use_storage:
        try:
            sheets_client = GoogleSheetsClient()
            storage = GoogleSheetsFinanceStorage(sheets_client)
        except Exception as e:
            # Storage not configured - continue in memory
            audit_logger.log_error(
                error_type="storage_not_configured",
                error_message=str(e),
            )
            sheets_client = None
            storage = InMemoryFinanceStorage()
    else:
        storage = InMemoryFinanceStorage()

    sync = FinanceSync(
        storage=storage,
        audit_logger=audit_logger,
        on_failure=on_failure,
    )
    return FinanceSession(sync), sheets_client
