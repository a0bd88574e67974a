"""
Data Models Package

This package contains all Pydantic models used in PayRank.
All data flowing through the system must conform to these schemas.
"""

from payrank.models.invoice import (
    ImportIssue,
    ImportResult,
    Importance,
    InvoiceCategory,
    InvoiceStatus,
    OverrideState,
    PayablesSnapshot,
    VendorInvoice,
    WaterlineRow,
    WaterlineSummary,
    WeightConfig,
)
from payrank.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Invoice models
    "ImportIssue",
    "ImportResult",
    "Importance",
    "InvoiceCategory",
    "InvoiceStatus",
    "OverrideState",
    "PayablesSnapshot",
    "VendorInvoice",
    "WaterlineRow",
    "WaterlineSummary",
    "WeightConfig",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
