"""Persistence sync package."""

from finance_tracker.sync.codec import (
    decode_record,
    decode_with_report,
    default_state,
    encode_state,
)
from finance_tracker.sync.service import (
    FetchFailure,
    FinanceSync,
    SaveFailure,
    SyncError,
)

__all__ = [
    "FetchFailure",
    "FinanceSync",
    "SaveFailure",
    "SyncError",
    "decode_record",
    "decode_with_report",
    "default_state",
    "encode_state",
]
