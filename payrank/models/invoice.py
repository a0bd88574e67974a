"""
Core Data Models for PayRank

These models define the schemas for vendor invoices flowing from intake,
through the allocator, to the waterline display.

DESIGN DECISION: Invoices are frozen Pydantic models.
The allocator never mutates what the caller holds; it produces
annotated copies with model_copy(update=...).
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Importance(str, Enum):
    """
    Ordinal urgency of a vendor bill.

    Ordered Critical > High > Medium > Low.
    Critical covers rent, security and electricity.
    """
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class InvoiceCategory(str, Enum):
    """Vendor bill categories."""
    UTILITIES = "Utilities"
    RENT = "Rent"
    SECURITY = "Security"
    SERVICES = "Services"
    TAX = "Tax"


class InvoiceStatus(str, Enum):
    """
    Payment status of a vendor bill.

    CRITICAL: PAID is set by whoever records the payment.
    The allocator only ever moves invoices between APPROVED and HOLD.
    """
    APPROVED = "Approved"
    HOLD = "Hold"
    PAID = "Paid"


class OverrideState(str, Enum):
    """
    Whether a user has pinned the invoice status.

    AUTO invoices are classified by the allocator on every run.
    MANUAL_* invoices keep their status no matter the score or cash.
    """
    AUTO = "auto"
    MANUAL_APPROVED = "manual_approved"
    MANUAL_HOLD = "manual_hold"


# =============================================================================
# CORE INVOICE MODEL
# =============================================================================

class VendorInvoice(BaseModel):
    """
    An outstanding vendor bill (accounts payable).

    score and age_days are derived fields.
    They stay None until the allocator annotates the invoice.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    # Identity
    id: str = Field(
        ...,
        min_length=1,
        description="Unique invoice identifier"
    )

    vendor_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Vendor name"
    )
    category: InvoiceCategory = Field(
        default=InvoiceCategory.SERVICES,
        description="Bill category"
    )
    invoice_date: date = Field(
        ...,
        description="Date on the invoice (drives age)"
    )
    due_date: date = Field(
        ...,
        description="Payment due date"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount payable"
    )
    importance: Importance = Field(
        default=Importance.MEDIUM,
        description="Importance tier"
    )

    # Status tracking
    status: InvoiceStatus = Field(
        default=InvoiceStatus.HOLD,
        description="Payment status"
    )
    override: OverrideState = Field(
        default=OverrideState.AUTO,
        description="Manual pin on the status, if any"
    )

    # Written only by the allocator
    score: Optional[float] = None
    age_days: Optional[int] = None

    @model_validator(mode='after')
    def validate_override(self) -> 'VendorInvoice':
        """An override must agree with the status it pins."""
        if self.override == OverrideState.MANUAL_APPROVED and self.status != InvoiceStatus.APPROVED:
            raise ValueError("Manual approval requires status Approved")
        if self.override == OverrideState.MANUAL_HOLD and self.status != InvoiceStatus.HOLD:
            raise ValueError("Manual hold requires status Hold")
        return self

    @property
    def is_manual_override(self) -> bool:
        return self.override != OverrideState.AUTO

    def with_manual_toggle(self) -> 'VendorInvoice':
        """
        Flip Approved <-> Hold and pin the new status.

        Mirrors the toggle button on the waterline screen.
        Paid invoices are settled and cannot be toggled.
        """
        if self.status == InvoiceStatus.PAID:
            raise ValueError(f"Invoice {self.id} is already paid")

        if self.status == InvoiceStatus.APPROVED:
            return self.model_copy(update={
                "status": InvoiceStatus.HOLD,
                "override": OverrideState.MANUAL_HOLD,
            })
        return self.model_copy(update={
            "status": InvoiceStatus.APPROVED,
            "override": OverrideState.MANUAL_APPROVED,
        })


class WeightConfig(BaseModel):
    """
    Weighting preferences for the priority score.

    Each weight is divided by 100 on its own. They conventionally sum
    to 100 but are independent knobs; no bounds are enforced here
    (the settings layer bounds the slider range).
    """
    model_config = ConfigDict(frozen=True)

    importance: float = Field(
        default=60.0,
        description="Weight of the importance tier"
    )
    age: float = Field(
        default=30.0,
        description="Weight of invoice age"
    )
    amount: float = Field(
        default=10.0,
        description="Weight of invoice amount"
    )

    @property
    def total(self) -> float:
        return self.importance + self.age + self.amount


# =============================================================================
# INTAKE MODELS
# =============================================================================

class ImportIssue(BaseModel):
    """A single problem found while importing a CSV row."""

    row_number: int = Field(
        ...,
        ge=1,
        description="1-based data row number (header excluded)"
    )
    field: str = Field(
        ...,
        description="Column with the issue"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning)$",
        description="error = row skipped, warning = value coerced"
    )


class ImportResult(BaseModel):
    """Outcome of a bulk import."""

    invoices: list[VendorInvoice] = Field(default_factory=list)
    issues: list[ImportIssue] = Field(default_factory=list)
    rows_seen: int = Field(default=0, ge=0)

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def skipped_count(self) -> int:
        """Rows that produced no invoice."""
        return self.rows_seen - len(self.invoices)


# =============================================================================
# WATERLINE MODELS
# =============================================================================

class WaterlineRow(BaseModel):
    """One line of the waterline display."""

    invoice: VendorInvoice
    running_total: Decimal = Field(
        ...,
        description="Cumulative approved amount up to and including this row"
    )
    over_budget: bool = Field(
        default=False,
        description="Approved but beyond the available cash"
    )


class WaterlineSummary(BaseModel):
    """Dashboard figures for a ranked set of invoices."""

    available_cash: Decimal
    approved_total: Decimal
    hold_total: Decimal
    critical_total: Decimal
    approved_count: int = Field(ge=0)
    hold_count: int = Field(ge=0)
    utilization_pct: float = Field(
        ...,
        description="Approved total as a percentage of available cash"
    )
    net_position: Decimal = Field(
        ...,
        description="Cash left after paying everything approved"
    )

    @property
    def is_over_budget(self) -> bool:
        return self.utilization_pct > 100


# =============================================================================
# SNAPSHOT MODEL
# =============================================================================

class PayablesSnapshot(BaseModel):
    """
    Everything needed to rebuild the payables desk.

    Written to and read from a JSON file.
    """

    cash_balance: Decimal = Field(default=Decimal("0"))
    weights: WeightConfig = Field(default_factory=WeightConfig)
    invoices: list[VendorInvoice] = Field(default_factory=list)
