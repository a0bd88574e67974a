"""Invoice ranking and budget allocation."""

from payrank.allocation.allocator import allocate
from payrank.allocation.scoring import (
    IMPORTANCE_WEIGHTS,
    MAX_AGE_DAYS,
    age_weight,
    importance_weight,
    invoice_age_days,
    score_invoice,
)
from payrank.allocation.summary import summarize, waterline_rows

__all__ = [
    "IMPORTANCE_WEIGHTS",
    "MAX_AGE_DAYS",
    "age_weight",
    "allocate",
    "importance_weight",
    "invoice_age_days",
    "score_invoice",
    "summarize",
    "waterline_rows",
]
