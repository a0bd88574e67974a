"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the desk decoupled from where invoices live
2. Use in-memory storage for the app session and for tests
3. Add a real backend later without touching the ranking code

The interface is intentionally simple - we're not building an ORM.
Just the operations the payables desk needs.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional
from uuid import UUID

from payrank.models.audit import AuditEvent
from payrank.models.invoice import (
    VendorInvoice,
    WeightConfig,
)


class InvoiceStorageInterface(ABC):
    """
    Abstract interface for payables storage.

    Holds the raw invoices plus the two external inputs of the
    ranking: the cash balance and the weights.
    Never stores computed scores or allocator statuses.
    """

    @abstractmethod
    def add_invoice(self, invoice: VendorInvoice) -> VendorInvoice:
        """
        Store a new invoice.

        Raises:
            DuplicateError: If an invoice with the same id exists
        """
        pass

    @abstractmethod
    def add_invoices(self, invoices: list[VendorInvoice]) -> int:
        """
        Store several invoices at once.

        Returns:
            Number of invoices stored

        Raises:
            DuplicateError: If any id already exists (nothing is stored)
        """
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: str) -> Optional[VendorInvoice]:
        """
        Retrieve an invoice by its ID.

        Returns:
            The invoice if found, None otherwise
        """
        pass

    @abstractmethod
    def update_invoice(self, invoice: VendorInvoice) -> VendorInvoice:
        """
        Replace an existing invoice.

        Raises:
            NotFoundError: If the invoice doesn't exist
        """
        pass

    @abstractmethod
    def list_invoices(self) -> list[VendorInvoice]:
        """List invoices in insertion order."""
        pass

    @abstractmethod
    def get_cash_balance(self) -> Decimal:
        pass

    @abstractmethod
    def set_cash_balance(self, amount: Decimal) -> None:
        pass

    @abstractmethod
    def get_weights(self) -> WeightConfig:
        pass

    @abstractmethod
    def set_weights(self, weights: WeightConfig) -> None:
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID, in chronological order.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
