"""
Money Formatting

Pure helpers between integer amounts and the strings a user reads or types.

Amounts are whole units of the smallest currency denomination (đồng by
default), so the display never shows decimals. Separator and symbol come
from AppSettings unless passed explicitly.
"""

import math
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

from finance_tracker.config import get_settings


_NON_DIGITS = re.compile(r"[^0-9]")


def to_amount(value: Any) -> int:
    """
    Coerce a loosely-typed value to an integer amount.

    Anything that is not a well-formed finite number becomes 0.
    Numeric strings are parsed; fractional values are truncated toward zero.
    Never raises.
    """
    if value is None or isinstance(value, bool):
        return int(value or 0)
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        try:
            if not math.isfinite(value):
                return 0
        except (TypeError, ValueError):
            return 0
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            number = Decimal(text)
        except InvalidOperation:
            return 0
        if not number.is_finite():
            return 0
        return int(number)
    return 0


def _group(digits: int, separator: str) -> str:
    return f"{digits:,}".replace(",", separator)


def _whole(amount: Any) -> int:
    """Round a display amount to whole units (half away from zero)."""
    if isinstance(amount, float) and not math.isfinite(amount):
        return 0
    if isinstance(amount, Decimal) and not amount.is_finite():
        return 0
    if isinstance(amount, (float, Decimal)):
        # exact at any magnitude
        return int(Decimal(str(amount)).to_integral_value(rounding=ROUND_HALF_UP))
    return to_amount(amount)


def format_grouped(amount: Any, separator: Optional[str] = None) -> str:
    """Render an amount with thousands separators and no currency symbol."""
    if separator is None:
        separator = get_settings().app.thousands_separator

    value = _whole(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{_group(abs(value), separator)}"


def format_currency(
    amount: Any,
    symbol: Optional[str] = None,
    position: Optional[str] = None,
    separator: Optional[str] = None,
) -> str:
    """
    Render an amount as a currency string, e.g. ``1.234.567 ₫``.

    Negative amounts keep a leading minus sign: ``-2.000.000 ₫``.
    """
    app_settings = get_settings().app
    symbol = app_settings.currency_symbol if symbol is None else symbol
    position = app_settings.currency_symbol_position if position is None else position

    grouped = format_grouped(amount, separator)
    if position == "prefix":
        if grouped.startswith("-"):
            return f"-{symbol}{grouped[1:]}"
        return f"{symbol}{grouped}"
    return f"{grouped} {symbol}"


def parse_typed_input(raw_text: Optional[str]) -> int:
    """
    Parse live-typed text into an integer amount.

    Every non-digit character is discarded, so separators, stray letters
    and partial input are all accepted. An empty result is 0.
    """
    digits = _NON_DIGITS.sub("", raw_text or "")
    return int(digits) if digits else 0
