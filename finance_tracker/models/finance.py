"""
Finance State Models

The single aggregate record of a user's financial inputs, plus the
read-only summary derived from it.

DESIGN DECISION: FinanceState is mutable (the form edits it field by
field) but every list edit REPLACES the list rather than mutating it in
place. Assignment is validated, so a stray string typed into an amount
becomes an integer (or 0) before it is ever stored.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from finance_tracker import entries
from finance_tracker.entries import ItemField, LineItem
from finance_tracker.formatting import to_amount


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Jar(str, Enum):
    """Spending jars the positive remainder is split into."""
    LIVING = "living"
    INVEST = "invest"
    SAVINGS = "savings"
    PLAY = "play"

    @property
    def label(self) -> str:
        return _JAR_LABELS[self]


_JAR_LABELS = {
    Jar.LIVING: "Living expenses",
    Jar.INVEST: "Investment",
    Jar.SAVINGS: "Savings",
    Jar.PLAY: "Play",
}


class ListField(str, Enum):
    """The two line-item lists of a finance record."""
    BANK_ACCOUNTS = "bank_accounts"
    FIXED_EXPENSES = "fixed_expenses"


class ScalarField(str, Enum):
    """The plain integer fields of a finance record."""
    CASH = "cash"
    SALARY = "salary"
    OTHER_INCOME = "other_income"


# =============================================================================
# STATE MODELS
# =============================================================================

class AllocationSettings(BaseModel):
    """
    Jar percentages.

    Values are independent integers. They are NOT required to sum to 100;
    a different sum is a valid state that the UI flags.
    """
    living: int = Field(default=40, description="Living expenses jar (%)")
    invest: int = Field(default=30, description="Investment jar (%)")
    savings: int = Field(default=20, description="Savings jar (%)")
    play: int = Field(default=10, description="Play jar (%)")

    @field_validator('living', 'invest', 'savings', 'play', mode='before')
    @classmethod
    def coerce_percent(cls, v: Any) -> int:
        return to_amount(v)

    def percent(self, jar: Union[Jar, str]) -> int:
        return getattr(self, Jar(jar).value)


class FinanceState(BaseModel):
    """
    A user's cash, bank accounts, income, fixed expenses and jar settings.

    Starts zeroed, is replaced wholesale on load and pushed wholesale on save.
    """
    model_config = ConfigDict(validate_assignment=True)

    cash: int = 0
    bank_accounts: list[LineItem] = Field(default_factory=list)
    salary: int = 0
    other_income: int = 0
    fixed_expenses: list[LineItem] = Field(default_factory=list)
    allocation_settings: AllocationSettings = Field(default_factory=AllocationSettings)

    @field_validator('cash', 'salary', 'other_income', mode='before')
    @classmethod
    def coerce_scalar(cls, v: Any) -> int:
        return to_amount(v)

    def items(self, list_field: Union[ListField, str]) -> list[LineItem]:
        """Return the list named by `list_field`."""
        return getattr(self, ListField(list_field).value)

    def set_field(self, field: Union[ScalarField, str], value: Any) -> None:
        """Set cash, salary or other_income."""
        setattr(self, ScalarField(field).value, value)

    def add_item(self, list_field: Union[ListField, str], default_name: str) -> LineItem:
        """Append a fresh item to a list and return it."""
        name = ListField(list_field).value
        updated = entries.add_item(getattr(self, name), default_name)
        setattr(self, name, updated)
        return getattr(self, name)[-1]

    def update_item(
        self,
        list_field: Union[ListField, str],
        item_id: int,
        field: ItemField,
        value: Any,
    ) -> None:
        """Edit one item's name or amount; unknown ids are ignored."""
        name = ListField(list_field).value
        setattr(self, name, entries.update_item(getattr(self, name), item_id, field, value))

    def remove_item(self, list_field: Union[ListField, str], item_id: int) -> None:
        """Remove one item; unknown ids are ignored."""
        name = ListField(list_field).value
        setattr(self, name, entries.remove_item(getattr(self, name), item_id))

    def set_allocation(self, jar: Union[Jar, str], percent: Any) -> None:
        """Set one jar's percentage without touching the others."""
        self.allocation_settings = AllocationSettings.model_validate(
            {**self.allocation_settings.model_dump(), Jar(jar).value: percent}
        )


# =============================================================================
# DERIVED MODELS
# =============================================================================

class JarAllocation(BaseModel):
    """One jar's share of the positive remainder."""
    model_config = ConfigDict(frozen=True)

    jar: Jar
    label: str
    percent: int
    amount: float = Field(
        ...,
        description="safe_remaining * percent / 100"
    )


class FinanceSummary(BaseModel):
    """
    Every figure derived from a FinanceState.

    Built by calculations.summarize(); never stored.
    """
    model_config = ConfigDict(frozen=True)

    total_bank: int
    total_assets: int
    total_income: int
    total_expense: int
    remaining: int = Field(..., description="Income minus fixed expense; may be negative")
    safe_remaining: int = Field(..., ge=0)
    cashflow_ratio: float = Field(..., ge=0.0, le=1.0)

    jars: list[JarAllocation] = Field(default_factory=list)
    total_percent: int
    allocation_balanced: bool = Field(
        ...,
        description="True when the jar percentages sum to exactly 100"
    )

    def jar_amount(self, jar: Union[Jar, str]) -> float:
        jar = Jar(jar)
        for allocation in self.jars:
            if allocation.jar == jar:
                return allocation.amount
        return 0.0


# =============================================================================
# SYNC MODELS
# =============================================================================

class SaveResult(BaseModel):
    """Outcome of pushing the state to storage."""
    model_config = ConfigDict(frozen=True)

    success: bool
    updated_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp stamped on the saved record"
    )
    error_message: Optional[str] = None
