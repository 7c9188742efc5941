"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.entries import LineItem
from finance_tracker.models.finance import (
    AllocationSettings,
    FinanceState,
    FinanceSummary,
    Jar,
    JarAllocation,
    ListField,
    SaveResult,
    ScalarField,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Finance models
    "AllocationSettings",
    "FinanceState",
    "FinanceSummary",
    "Jar",
    "JarAllocation",
    "LineItem",
    "ListField",
    "SaveResult",
    "ScalarField",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
