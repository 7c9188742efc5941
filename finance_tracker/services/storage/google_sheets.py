"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is used as the hosted row store because:
1. The user can look at (and fix) their numbers directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- No transactions; a save is one row update, last write wins
- List fields are JSON text inside a cell

The implementation follows the abstract interface, so we can swap
to a real database later without changing the sync logic.
"""

import json
from typing import Any, Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.config import GoogleSheetsSettings, get_settings
from finance_tracker.services.storage.interface import (
    ConnectionError,
    DuplicateError,
    FinanceRecordStorageInterface,
    NotFoundError,
    StorageError,
)


# Column mappings for the finance sheet
FINANCE_COLUMNS = [
    "user_identifier",
    "cash",
    "salary",
    "other_income",
    "bank_accounts_json",
    "fixed_expenses_json",
    "allocation_settings_json",
    "updated_at",
]

_JSON_COLUMNS = {
    "bank_accounts_json": "bank_accounts",
    "fixed_expenses_json": "fixed_expenses",
    "allocation_settings_json": "allocation_settings",
}


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_finance_sheet(self) -> gspread.Worksheet:
        """Get or create the finance worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.finance_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.finance_sheet_name,
                rows=100,
                cols=len(FINANCE_COLUMNS),
            )
            sheet.append_row(FINANCE_COLUMNS)
        return sheet


class GoogleSheetsFinanceStorage(FinanceRecordStorageInterface):
    """
    Google Sheets implementation of finance record storage.

    One row per user; the list and allocation fields are JSON-serialized.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _record_to_row(self, user_identifier: str, record: dict[str, Any]) -> list:
        """Convert a canonical record to a spreadsheet row."""
        return [
            user_identifier,
            record.get("cash", 0),
            record.get("salary", 0),
            record.get("other_income", 0),
            json.dumps(record.get("bank_accounts", []), ensure_ascii=False),
            json.dumps(record.get("fixed_expenses", []), ensure_ascii=False),
            json.dumps(record.get("allocation_settings", {}), ensure_ascii=False),
            record.get("updated_at") or "",
        ]

    def _row_to_record(self, row: list) -> dict[str, Any]:
        """
        Convert a spreadsheet row to a raw record.

        Values are passed on loosely typed;
        unreadable JSON becomes None and is defaulted by the decoder.
        """
        record: dict[str, Any] = {}
        for index, column in enumerate(FINANCE_COLUMNS[1:], start=1):
            value = row[index] if index < len(row) else ""
            if column in _JSON_COLUMNS:
                try:
                    record[_JSON_COLUMNS[column]] = json.loads(value) if value else None
                except (TypeError, ValueError):
                    record[_JSON_COLUMNS[column]] = None
            else:
                record[column] = value if value != "" else None
        return record

    def _find_row(self, sheet: gspread.Worksheet, user_identifier: str) -> tuple[int, Optional[list]]:
        """Return (1-based row number, row) for a user, or (0, None)."""
        all_rows = sheet.get_all_values(value_render_option="UNFORMATTED_VALUE")
        for idx, row in enumerate(all_rows[1:], start=2):  # Row 1 is the header
            if row and row[0] == user_identifier:
                return idx, row
        return 0, None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def get_record(self, user_identifier: str) -> Optional[dict[str, Any]]:
        """Retrieve the finance row for a user."""
        try:
            sheet = self._client.get_finance_sheet()
            _, row = self._find_row(sheet, user_identifier)
            return self._row_to_record(row) if row is not None else None
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to get finance record: {e}")

    @retry(
        retry=retry_if_not_exception_type(DuplicateError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def create_record(self, user_identifier: str, record: dict[str, Any]) -> bool:
        """Append a finance row for a user."""
        try:
            sheet = self._client.get_finance_sheet()
            idx, _ = self._find_row(sheet, user_identifier)
            if idx:
                raise DuplicateError(f"Finance record already exists: {user_identifier}")
            sheet.append_row(
                self._record_to_row(user_identifier, record),
                value_input_option="RAW",
            )
            return True
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to create finance record: {e}")

    @retry(
        retry=retry_if_not_exception_type(NotFoundError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def update_record(self, user_identifier: str, record: dict[str, Any]) -> bool:
        """Overwrite a user's finance row in a single range update."""
        try:
            sheet = self._client.get_finance_sheet()
            idx, _ = self._find_row(sheet, user_identifier)
            if not idx:
                raise NotFoundError(f"Finance record not found: {user_identifier}")
            sheet.update(
                range_name=f"A{idx}",
                values=[self._record_to_row(user_identifier, record)],
                value_input_option="RAW",
            )
            return True
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update finance record: {e}")
