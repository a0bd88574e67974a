"""
Manual invoice entry.

New invoices always start on HOLD with no override; the allocator
decides their real status on the next read.
"""

import secrets
import string
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from payrank.models.invoice import (
    Importance,
    InvoiceCategory,
    InvoiceStatus,
    OverrideState,
    VendorInvoice,
)

ID_ALPHABET = string.ascii_uppercase + string.digits


def generate_id(prefix: str = "VEND") -> str:
    """Short random id like VEND-7QK2ZD."""
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(6))
    return f"{prefix}-{suffix}"


def new_invoice(
    vendor_name: str,
    amount: Union[Decimal, int, float, str],
    category: InvoiceCategory = InvoiceCategory.SERVICES,
    importance: Importance = Importance.MEDIUM,
    invoice_date: Optional[date] = None,
    due_date: Optional[date] = None,
    invoice_id: Optional[str] = None,
) -> VendorInvoice:
    """
    Build a vendor invoice from the entry form.

    Dates default to today. Raises pydantic's ValidationError on a
    blank vendor or a negative amount.
    """
    today = date.today()
    if isinstance(amount, float):
        amount = Decimal(str(amount))

    return VendorInvoice(
        id=invoice_id or generate_id("VEND"),
        vendor_name=vendor_name,
        category=category,
        amount=amount,
        invoice_date=invoice_date or today,
        due_date=due_date or today,
        importance=importance,
        status=InvoiceStatus.HOLD,
        override=OverrideState.AUTO,
    )
