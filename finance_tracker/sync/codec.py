"""
Finance Record Codec

Maps between the loosely-typed record held by storage and a fully
populated FinanceState.

DESIGN DECISION: Decoding is partial-record decoding with per-field
fallback, NOT validation. Every fallback lives in this module so it can be
audited in one place:

    cash / salary / other_income   absent or not a number     -> 0
    bank_accounts / fixed_expenses absent or not a list       -> []
                                   JSON text                  -> parsed first
                                   entry not an object        -> dropped
                                   entry id missing/invalid   -> fresh id
                                   entry id repeated in list  -> fresh id
                                   entry name missing         -> ""
                                   entry amount not a number  -> 0
    allocation_settings            absent or not an object    -> 40/30/20/10
                                   one jar missing/invalid    -> that jar's default

Legacy fixed-field records (bank_balance, rent_cost, phone_cost,
debt_interest) are migrated to the list shape on read. Encoding always
writes the canonical list shape.
"""

import json
import math
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from finance_tracker.config import get_settings
from finance_tracker.entries import LineItem, next_item_id
from finance_tracker.formatting import to_amount
from finance_tracker.models.finance import (
    AllocationSettings,
    FinanceState,
    Jar,
    ListField,
    ScalarField,
)


LEGACY_BANK_FIELD = ("bank_balance", "Bank")

LEGACY_EXPENSE_FIELDS = (
    ("rent_cost", "Rent"),
    ("phone_cost", "Phone"),
    ("debt_interest", "Debt interest"),
)


def default_allocation() -> AllocationSettings:
    return AllocationSettings(**get_settings().app.default_allocation)


def default_state() -> FinanceState:
    """The zeroed state used before the first load and for new records."""
    return FinanceState(allocation_settings=default_allocation())


def _from_json_text(value: Any) -> Any:
    """Cells and some clients hand back JSON as text; parse it if possible."""
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return None
    return value


def _valid_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return None


def _is_number(value: Any) -> bool:
    """True for finite numbers and numeric strings, including spelled-out zeros."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str):
        try:
            return Decimal(value.strip()).is_finite()
        except InvalidOperation:
            return False
    return False


def _scalar(raw: Mapping, key: str, defaulted: list[str]) -> int:
    value = raw.get(key)
    if not _is_number(value):
        defaulted.append(key)
        return 0
    return to_amount(value)


def _items(raw: Mapping, key: str, defaulted: list[str]) -> list[LineItem]:
    value = _from_json_text(raw.get(key))
    if not isinstance(value, list):
        defaulted.append(key)
        return []

    items: list[LineItem] = []
    seen: set[int] = set()
    for index, entry in enumerate(value):
        if not isinstance(entry, Mapping):
            defaulted.append(f"{key}[{index}]")
            continue

        item_id = _valid_id(entry.get("id"))
        if item_id is None or item_id in seen:
            item_id = next_item_id(seen)
            defaulted.append(f"{key}[{index}].id")
        seen.add(item_id)

        items.append(
            LineItem(id=item_id, name=entry.get("name"), amount=entry.get("amount"))
        )
    return items


def _legacy_bank_accounts(raw: Mapping) -> Optional[list[LineItem]]:
    key, label = LEGACY_BANK_FIELD
    if key not in raw:
        return None
    return [LineItem(id=1, name=label, amount=raw.get(key))]


def _legacy_fixed_expenses(raw: Mapping) -> Optional[list[LineItem]]:
    if not any(key in raw for key, _ in LEGACY_EXPENSE_FIELDS):
        return None
    return [
        LineItem(id=item_id, name=label, amount=raw.get(key))
        for item_id, (key, label) in enumerate(LEGACY_EXPENSE_FIELDS, start=1)
    ]


def _allocation(raw: Mapping, defaulted: list[str]) -> AllocationSettings:
    defaults = get_settings().app.default_allocation
    value = _from_json_text(raw.get("allocation_settings"))
    if not isinstance(value, Mapping):
        defaulted.append("allocation_settings")
        return AllocationSettings(**defaults)

    percents = {}
    for jar in Jar:
        percent = value.get(jar.value)
        if not _is_number(percent):
            defaulted.append(f"allocation_settings.{jar.value}")
            percents[jar.value] = defaults[jar.value]
        else:
            percents[jar.value] = to_amount(percent)
    return AllocationSettings(**percents)


def decode_with_report(raw: Any) -> tuple[FinanceState, list[str]]:
    """
    Decode a raw record, also returning the names of defaulted fields.

    Never raises; a completely unusable input yields the default state.
    """
    if not isinstance(raw, Mapping):
        raw = {}
    defaulted: list[str] = []

    bank_accounts = _items(raw, ListField.BANK_ACCOUNTS.value, defaulted)
    if not bank_accounts and ListField.BANK_ACCOUNTS.value in defaulted:
        legacy = _legacy_bank_accounts(raw)
        if legacy is not None:
            defaulted.remove(ListField.BANK_ACCOUNTS.value)
            bank_accounts = legacy

    fixed_expenses = _items(raw, ListField.FIXED_EXPENSES.value, defaulted)
    if not fixed_expenses and ListField.FIXED_EXPENSES.value in defaulted:
        legacy = _legacy_fixed_expenses(raw)
        if legacy is not None:
            defaulted.remove(ListField.FIXED_EXPENSES.value)
            fixed_expenses = legacy

    state = FinanceState(
        cash=_scalar(raw, ScalarField.CASH.value, defaulted),
        bank_accounts=bank_accounts,
        salary=_scalar(raw, ScalarField.SALARY.value, defaulted),
        other_income=_scalar(raw, ScalarField.OTHER_INCOME.value, defaulted),
        fixed_expenses=fixed_expenses,
        allocation_settings=_allocation(raw, defaulted),
    )
    return state, defaulted


def decode_record(raw: Any) -> FinanceState:
    """Decode a raw storage record into a fully populated FinanceState."""
    state, _ = decode_with_report(raw)
    return state


def encode_state(
    state: FinanceState,
    updated_at: Optional[Union[datetime, str]] = None,
) -> dict[str, Any]:
    """Encode a FinanceState as the canonical storage record."""
    if isinstance(updated_at, datetime):
        updated_at = updated_at.isoformat()

    return {
        "cash": state.cash,
        "bank_accounts": [item.model_dump() for item in state.bank_accounts],
        "salary": state.salary,
        "other_income": state.other_income,
        "fixed_expenses": [item.model_dump() for item in state.fixed_expenses],
        "allocation_settings": state.allocation_settings.model_dump(),
        "updated_at": updated_at,
    }
