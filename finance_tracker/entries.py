"""
Entry List Manager

CRUD over the ordered line-item lists of a finance record (bank accounts
and fixed expenses).

DESIGN DECISION: Every operation returns a NEW list and never touches the
input. Items are frozen, so an edited item is always a new object while
untouched items can be shared safely. A reactive UI can detect changes
with a plain identity check.
"""

import time
from typing import Any, Callable, Iterable, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from finance_tracker.formatting import to_amount


ItemField = Literal["name", "amount"]


class LineItem(BaseModel):
    """
    One named amount inside a list (a bank account or a fixed expense).

    Amounts are whole units; anything non-numeric is stored as 0.
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(
        ...,
        description="Identifier, unique within its list"
    )
    name: str = Field(
        default="",
        description="User-given label"
    )
    amount: int = Field(
        default=0,
        description="Amount in the smallest currency unit"
    )

    @field_validator('name', mode='before')
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v: Any) -> int:
        return to_amount(v)


class ItemIdGenerator:
    """
    Hands out time-derived item ids.

    Ids start at the current time in milliseconds and are strictly
    increasing for the lifetime of the generator, even when several items
    are added within the same millisecond.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._last = 0

    def next_id(self, existing: Iterable[int] = ()) -> int:
        """Return an id greater than the last one issued and than every id in `existing`."""
        candidate = max(
            self._clock(),
            self._last + 1,
            max(existing, default=0) + 1,
        )
        self._last = candidate
        return candidate


_id_generator = ItemIdGenerator()


def next_item_id(existing: Iterable[int] = ()) -> int:
    """Draw a fresh id from the process-wide generator."""
    return _id_generator.next_id(existing)


def add_item(
    items: Sequence[LineItem],
    default_name: str,
    id_generator: Optional[ItemIdGenerator] = None,
) -> list[LineItem]:
    """Append a new zero-amount item named `default_name`."""
    generator = id_generator or _id_generator
    new_item = LineItem(
        id=generator.next_id(item.id for item in items),
        name=default_name,
        amount=0,
    )
    return [*items, new_item]


def update_item(
    items: Sequence[LineItem],
    item_id: int,
    field: ItemField,
    value: Any,
) -> list[LineItem]:
    """
    Replace the item with `item_id`, setting `field` to `value`.

    Unknown ids leave the list unchanged (a copy is still returned).
    """
    if field not in ("name", "amount"):
        raise ValueError(f"Unknown line item field: {field}")

    return [
        LineItem.model_validate({**item.model_dump(), field: value})
        if item.id == item_id else item
        for item in items
    ]


def remove_item(items: Sequence[LineItem], item_id: int) -> list[LineItem]:
    """Drop the item with `item_id`; no-op if absent."""
    return [item for item in items if item.id != item_id]
