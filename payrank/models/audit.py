"""
Audit Models for PayRank

Every action that changes what gets paid is logged:
intake, manual overrides, weight and cash changes, and each
recomputation of the waterline.

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Intake
    INVOICE_ADDED = "invoice_added"
    INVOICES_IMPORTED = "invoices_imported"
    IMPORT_FAILED = "import_failed"

    # Human decisions
    MANUAL_OVERRIDE_SET = "manual_override_set"
    WEIGHTS_UPDATED = "weights_updated"
    CASH_BALANCE_UPDATED = "cash_balance_updated"

    # Ranking
    ALLOCATION_COMPUTED = "allocation_computed"

    # Snapshot
    SNAPSHOT_EXPORTED = "snapshot_exported"
    SNAPSHOT_LOADED = "snapshot_loaded"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'invoice', 'settings', 'waterline')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one CSV import)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.invoice_added(invoice_id, vendor, amount)
        event = AuditEventBuilder.override_set(invoice_id, status, override)
    """

    @staticmethod
    def invoice_added(
        invoice_id: str,
        vendor: str,
        amount: Decimal,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_ADDED,
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"Invoice added: {vendor} - ${amount}",
            details={
                "vendor": vendor,
                "amount": str(amount),
            },
            is_user_action=True,
        )

    @staticmethod
    def invoices_imported(
        source: str,
        imported: int,
        skipped: int,
        warnings: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICES_IMPORTED,
            severity=AuditSeverity.WARNING if skipped else AuditSeverity.INFO,
            entity_type="import",
            correlation_id=correlation_id,
            description=f"CSV import: {imported} invoices imported, {skipped} rows skipped",
            details={
                "source": source,
                "imported": imported,
                "skipped": skipped,
                "warnings": warnings,
            },
            is_user_action=True,
        )

    @staticmethod
    def import_failed(
        source: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="import",
            correlation_id=correlation_id,
            description=f"CSV import failed: {source}",
            error_message=error_message,
            details={"source": source},
            is_user_action=True,
        )

    @staticmethod
    def override_set(
        invoice_id: str,
        status: str,
        override: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MANUAL_OVERRIDE_SET,
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"Invoice {invoice_id} manually set to {status}",
            details={
                "status": status,
                "override": override,
            },
            is_user_action=True,
        )

    @staticmethod
    def weights_updated(
        importance: float,
        age: float,
        amount: float,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        total = importance + age + amount
        return AuditEvent(
            event_type=AuditEventType.WEIGHTS_UPDATED,
            entity_type="settings",
            correlation_id=correlation_id,
            description=f"Weights set to {importance:g}/{age:g}/{amount:g}",
            details={
                "importance": importance,
                "age": age,
                "amount": amount,
                "sums_to_100": total == 100,
            },
            is_user_action=True,
        )

    @staticmethod
    def cash_updated(
        previous: Decimal,
        current: Decimal,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CASH_BALANCE_UPDATED,
            entity_type="settings",
            correlation_id=correlation_id,
            description=f"Cash balance changed from ${previous} to ${current}",
            details={
                "previous": str(previous),
                "current": str(current),
            },
            is_user_action=True,
        )

    @staticmethod
    def allocation_computed(
        approved_count: int,
        hold_count: int,
        approved_total: Decimal,
        available_cash: Decimal,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALLOCATION_COMPUTED,
            severity=AuditSeverity.DEBUG,
            entity_type="waterline",
            correlation_id=correlation_id,
            description=f"Waterline computed: {approved_count} approved, {hold_count} on hold",
            details={
                "approved_count": approved_count,
                "hold_count": hold_count,
                "approved_total": str(approved_total),
                "available_cash": str(available_cash),
            },
        )

    @staticmethod
    def snapshot_exported(
        path: str,
        invoice_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_EXPORTED,
            entity_type="snapshot",
            correlation_id=correlation_id,
            description=f"Snapshot written to {path}",
            details={"path": path, "invoice_count": invoice_count},
            is_user_action=True,
        )

    @staticmethod
    def snapshot_loaded(
        path: str,
        invoice_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOADED,
            entity_type="snapshot",
            correlation_id=correlation_id,
            description=f"Snapshot loaded from {path}",
            details={"path": path, "invoice_count": invoice_count},
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
