"""
Waterline figures computed from an allocated invoice sequence.

These feed the dashboard cards (cash position, approved total,
critical debt, net position) and the row-by-row waterline list.
"""

from decimal import Decimal
from typing import Sequence

from payrank.models.invoice import (
    Importance,
    InvoiceStatus,
    VendorInvoice,
    WaterlineRow,
    WaterlineSummary,
)


def _total(invoices: Sequence[VendorInvoice]) -> Decimal:
    return sum((i.amount for i in invoices), Decimal(0))


def summarize(
    invoices: Sequence[VendorInvoice],
    available_cash: Decimal,
) -> WaterlineSummary:
    """Dashboard totals for a ranked invoice set."""
    cash = Decimal(available_cash)
    approved = [i for i in invoices if i.status == InvoiceStatus.APPROVED]
    held = [i for i in invoices if i.status == InvoiceStatus.HOLD]
    critical = [i for i in invoices if i.importance == Importance.CRITICAL]

    approved_total = _total(approved)
    utilization = float(approved_total / cash * 100) if cash > 0 else 0.0

    return WaterlineSummary(
        available_cash=cash,
        approved_total=approved_total,
        hold_total=_total(held),
        critical_total=_total(critical),
        approved_count=len(approved),
        hold_count=len(held),
        utilization_pct=utilization,
        net_position=cash - approved_total,
    )


def waterline_rows(
    invoices: Sequence[VendorInvoice],
    available_cash: Decimal,
) -> list[WaterlineRow]:
    """
    One row per invoice, in the order given.

    The running total only grows on approved rows. An approved row is
    over budget once the running total passes the cash, which only
    happens when manual approvals exceed it.
    """
    cash = Decimal(available_cash)
    running_total = Decimal(0)
    rows = []
    for invoice in invoices:
        is_approved = invoice.status == InvoiceStatus.APPROVED
        if is_approved:
            running_total += invoice.amount
        rows.append(WaterlineRow(
            invoice=invoice,
            running_total=running_total,
            over_budget=is_approved and running_total > cash,
        ))
    return rows
