"""Shared fixtures for PayRank tests."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from payrank.models.invoice import (
    Importance,
    InvoiceCategory,
    InvoiceStatus,
    OverrideState,
    VendorInvoice,
)

AS_OF = datetime(2024, 6, 1)


@pytest.fixture
def as_of() -> datetime:
    """Fixed 'now' so ages don't drift with the calendar."""
    return AS_OF


@pytest.fixture
def make_invoice():
    """Factory for vendor invoices dated on AS_OF (age 0) by default."""

    def _make(
        invoice_id: str,
        amount="100",
        importance: Importance = Importance.MEDIUM,
        invoice_date: date = AS_OF.date(),
        status: InvoiceStatus = InvoiceStatus.HOLD,
        override: OverrideState = OverrideState.AUTO,
        vendor_name: str = "Test Vendor",
        category: InvoiceCategory = InvoiceCategory.SERVICES,
    ) -> VendorInvoice:
        return VendorInvoice(
            id=invoice_id,
            vendor_name=vendor_name,
            category=category,
            invoice_date=invoice_date,
            due_date=invoice_date,
            amount=Decimal(amount),
            importance=importance,
            status=status,
            override=override,
        )

    return _make
