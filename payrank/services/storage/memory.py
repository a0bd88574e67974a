"""
In-Memory Storage

Backs a single desk session. Everything is lost when the process exits
unless exported as a snapshot (see snapshot.py).
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from payrank.models.audit import AuditEvent
from payrank.models.invoice import (
    VendorInvoice,
    WeightConfig,
)
from payrank.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    InvoiceStorageInterface,
    NotFoundError,
)


class InMemoryInvoiceStorage(InvoiceStorageInterface):
    """Invoices keyed by id; dicts keep insertion order."""

    def __init__(
        self,
        cash_balance: Decimal = Decimal("0"),
        weights: Optional[WeightConfig] = None,
    ):
        self._invoices: dict[str, VendorInvoice] = {}
        self._cash_balance = Decimal(cash_balance)
        self._weights = weights or WeightConfig()

    def add_invoice(self, invoice: VendorInvoice) -> VendorInvoice:
        if invoice.id in self._invoices:
            raise DuplicateError(f"Invoice already exists: {invoice.id}")
        self._invoices[invoice.id] = invoice
        return invoice

    def add_invoices(self, invoices: list[VendorInvoice]) -> int:
        seen = set()
        for invoice in invoices:
            if invoice.id in self._invoices or invoice.id in seen:
                raise DuplicateError(f"Invoice already exists: {invoice.id}")
            seen.add(invoice.id)

        for invoice in invoices:
            self._invoices[invoice.id] = invoice
        return len(invoices)

    def get_invoice(self, invoice_id: str) -> Optional[VendorInvoice]:
        return self._invoices.get(invoice_id)

    def update_invoice(self, invoice: VendorInvoice) -> VendorInvoice:
        if invoice.id not in self._invoices:
            raise NotFoundError(f"Invoice not found: {invoice.id}")
        self._invoices[invoice.id] = invoice
        return invoice

    def list_invoices(self) -> list[VendorInvoice]:
        return list(self._invoices.values())

    def get_cash_balance(self) -> Decimal:
        return self._cash_balance

    def set_cash_balance(self, amount: Decimal) -> None:
        self._cash_balance = Decimal(amount)

    def get_weights(self) -> WeightConfig:
        return self._weights

    def set_weights(self, weights: WeightConfig) -> None:
        self._weights = weights


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
