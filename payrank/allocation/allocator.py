"""
Invoice Ranking & Budget Allocator

Given outstanding vendor invoices, weighting preferences and the cash
available, decide which invoices are approved for payment and which are
held back.

GUARANTEES:
- Same invoices out as in: none dropped, none duplicated
- Every returned invoice has score and age_days set
- Manual overrides keep their status, whatever the score or cash
- Free (AUTO) invoices approved never exceed the cash left after
  manual approvals
- Output is [Approved by score desc, Hold by score desc]

The allocator never raises and never mutates its inputs.

DESIGN DECISION: Budget allocation is greedy by score, not an optimal
subset-sum. An invoice that does not fit is held and the walk carries on
down the list, so a smaller, lower-scored bill can still be approved.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Union

import structlog

from payrank.allocation.scoring import score_invoice
from payrank.models.invoice import (
    InvoiceStatus,
    OverrideState,
    VendorInvoice,
    WeightConfig,
)

logger = structlog.get_logger(__name__)

Cash = Union[Decimal, int, float, str]


def _rank_key(invoice: VendorInvoice) -> tuple[float, str]:
    # Equal scores fall back to invoice id so reruns are deterministic
    return (-(invoice.score or 0.0), invoice.id)


def _to_decimal(value: Cash) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def allocate(
    invoices: Iterable[VendorInvoice],
    weights: WeightConfig,
    available_cash: Cash,
    as_of: Union[date, datetime, None] = None,
) -> list[VendorInvoice]:
    """
    Score every invoice and split them around the available cash.

    Args:
        invoices: Invoices to rank. May be empty.
        weights: Importance/age/amount weights, each divided by 100.
        available_cash: Cash on hand. Negative is allowed.
        as_of: The instant ages are measured from. Defaults to now (UTC).

    Returns:
        New invoice records: approved ones first, then held ones,
        each group by score descending. Paid invoices, if any were
        passed in, keep their status and come last.
    """
    invoices = list(invoices)
    if not invoices:
        return []

    cash = _to_decimal(available_cash)
    max_amount = max(max(invoice.amount for invoice in invoices), Decimal(1))

    scored = []
    for invoice in invoices:
        score, age = score_invoice(invoice, weights, max_amount, as_of)
        scored.append(invoice.model_copy(update={"score": score, "age_days": age}))

    manual_approved = [i for i in scored if i.override == OverrideState.MANUAL_APPROVED]
    manual_hold = [i for i in scored if i.override == OverrideState.MANUAL_HOLD]
    paid = [
        i for i in scored
        if i.override == OverrideState.AUTO and i.status == InvoiceStatus.PAID
    ]
    free = [
        i for i in scored
        if i.override == OverrideState.AUTO and i.status != InvoiceStatus.PAID
    ]

    # Manual approvals are paid first, even past the balance
    manual_total = sum((i.amount for i in manual_approved), Decimal(0))
    remaining_cash = cash - manual_total

    approved = list(manual_approved)
    held = list(manual_hold)
    for invoice in sorted(free, key=_rank_key):
        if remaining_cash >= invoice.amount:
            remaining_cash -= invoice.amount
            approved.append(invoice.model_copy(update={"status": InvoiceStatus.APPROVED}))
        else:
            held.append(invoice.model_copy(update={"status": InvoiceStatus.HOLD}))

    approved.sort(key=_rank_key)
    held.sort(key=_rank_key)
    paid.sort(key=_rank_key)

    logger.debug(
        "allocation_computed",
        invoice_count=len(scored),
        approved_count=len(approved),
        hold_count=len(held),
        manual_count=len(manual_approved) + len(manual_hold),
        available_cash=str(cash),
        remaining_cash=str(remaining_cash),
    )

    return approved + held + paid
