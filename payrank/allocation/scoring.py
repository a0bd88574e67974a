"""
Priority Scoring

Each invoice gets a weighted sum of three signals, each normalized to [0, 1]:

- importance: fixed ordinal map of the importance tier
- age: days since the invoice date, capped at MAX_AGE_DAYS
- amount: share of the largest amount in the batch

The weights are divided by 100 independently. If they sum past 100 the
score exceeds 1; it is not clamped.
"""

import math
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Optional, Union

from payrank.models.invoice import Importance, VendorInvoice, WeightConfig

MAX_AGE_DAYS = 90

SECONDS_PER_DAY = 24 * 60 * 60

IMPORTANCE_WEIGHTS = {
    Importance.CRITICAL: 1.0,
    Importance.HIGH: 0.75,
    Importance.MEDIUM: 0.5,
    Importance.LOW: 0.25,
}


def importance_weight(importance: Optional[Importance]) -> float:
    """Normalized importance; anything outside the four tiers scores 0."""
    return IMPORTANCE_WEIGHTS.get(importance, 0.0)


def _as_instant(value: Union[date, datetime, None]) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def invoice_age_days(
    invoice_date: date,
    as_of: Union[date, datetime, None] = None,
) -> int:
    """
    Whole days between as_of and the invoice date, rounded up.

    The invoice date is taken at midnight. The gap is absolute, so a
    future-dated invoice has a positive age equal to the distance.
    """
    now = _as_instant(as_of)
    issued = datetime.combine(invoice_date, time.min, tzinfo=now.tzinfo)
    seconds = abs((now - issued).total_seconds())
    return math.ceil(seconds / SECONDS_PER_DAY)


def age_weight(age_days: int) -> float:
    return min(age_days, MAX_AGE_DAYS) / MAX_AGE_DAYS


def score_invoice(
    invoice: VendorInvoice,
    weights: WeightConfig,
    max_amount: Decimal,
    as_of: Union[date, datetime, None] = None,
) -> tuple[float, int]:
    """
    Score a single invoice against the batch maximum.

    Returns:
        (score, age_days)
    """
    age = invoice_age_days(invoice.invoice_date, as_of)

    norm_importance = importance_weight(invoice.importance)
    norm_age = age_weight(age)
    norm_amount = float(invoice.amount / max_amount)

    score = (
        norm_importance * (weights.importance / 100)
        + norm_age * (weights.age / 100)
        + norm_amount * (weights.amount / 100)
    )
    return score, age
