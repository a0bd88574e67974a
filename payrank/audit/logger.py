"""
Audit Logger

DESIGN DECISION: Every change to what gets paid is logged.
This provides:
1. Traceability of manual overrides and weight changes
2. Debugging capability when the waterline looks wrong
3. A history the finance admin can review

The audit logger:
- Gracefully handles failures (doesn't crash the desk if storage fails)
- Supports correlation IDs to trace related events
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

import structlog

from payrank.models.audit import AuditEvent, AuditEventBuilder
from payrank.services.storage import AuditStorageInterface, StorageError


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for the in-app history)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except StorageError as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_invoice_added(
        self,
        invoice_id: str,
        vendor: str,
        amount: Decimal,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.invoice_added(
            invoice_id=invoice_id,
            vendor=vendor,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_invoices_imported(
        self,
        source: str,
        imported: int,
        skipped: int,
        warnings: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a CSV bulk import."""
        self.log(AuditEventBuilder.invoices_imported(
            source=source,
            imported=imported,
            skipped=skipped,
            warnings=warnings,
            correlation_id=correlation_id,
        ))

    def log_import_failed(
        self,
        source: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.import_failed(
            source=source,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_override_toggled(
        self,
        invoice_id: str,
        status: str,
        override: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a manual Approved/Hold toggle."""
        self.log(AuditEventBuilder.override_set(
            invoice_id=invoice_id,
            status=status,
            override=override,
            correlation_id=correlation_id,
        ))

    def log_weights_updated(
        self,
        importance: float,
        age: float,
        amount: float,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.weights_updated(
            importance=importance,
            age=age,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_cash_updated(
        self,
        previous: Decimal,
        current: Decimal,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.cash_updated(
            previous=previous,
            current=current,
            correlation_id=correlation_id,
        ))

    def log_allocation_computed(
        self,
        approved_count: int,
        hold_count: int,
        approved_total: Decimal,
        available_cash: Decimal,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.allocation_computed(
            approved_count=approved_count,
            hold_count=hold_count,
            approved_total=approved_total,
            available_cash=available_cash,
            correlation_id=correlation_id,
        ))

    def log_snapshot_exported(
        self,
        path: str,
        invoice_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.snapshot_exported(
            path=path,
            invoice_count=invoice_count,
            correlation_id=correlation_id,
        ))

    def log_snapshot_loaded(
        self,
        path: str,
        invoice_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.snapshot_loaded(
            path=path,
            invoice_count=invoice_count,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., a CSV import).
    Pass it through all subsequent operations.
    """
    return uuid4()
