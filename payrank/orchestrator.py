"""
Main Orchestrator for PayRank

This module ties together storage, intake, the allocator and the audit
log, and defines the flows behind the payables screen:
1. Intake (manual entry, CSV import)
2. Decisions (manual toggle, weights, cash balance)
3. Read (rank → waterline + summary)

DESIGN DECISION: The ranking is never stored.
Every read pulls the raw invoices, weights and cash from storage and
runs the allocator fresh, so a change to any input shows up on the
next read and manual overrides are the only statuses that persist.
"""

from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union
from uuid import UUID

from payrank.allocation import allocate, summarize, waterline_rows
from payrank.audit import AuditLogger, create_correlation_id
from payrank.config import Settings, get_settings
from payrank.intake import CsvImportError, CsvInvoiceImporter
from payrank.models.invoice import (
    ImportResult,
    InvoiceStatus,
    PayablesSnapshot,
    VendorInvoice,
    WaterlineRow,
    WaterlineSummary,
    WeightConfig,
)
from payrank.services.storage import (
    InMemoryAuditStorage,
    InMemoryInvoiceStorage,
    InvoiceStorageInterface,
    NotFoundError,
    StorageError,
    export_snapshot,
    load_snapshot,
    restore_snapshot,
)

AsOf = Union[date, datetime, None]


class PayablesDesk:
    """
    The vendor payables flow.

    Flow:
    1. Intake → invoices land on HOLD with no override
    2. Read → allocator ranks and splits them around the cash
    3. Toggle → user pins an invoice to Approved or Hold
    4. Read again → pinned invoices keep their status, the rest re-rank

    Only the toggle ever writes a status to storage.
    """

    def __init__(
        self,
        storage: Optional[InvoiceStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[Settings] = None,
        importer: Optional[CsvInvoiceImporter] = None,
    ):
        self._settings = settings or get_settings()
        self._storage = storage or InMemoryInvoiceStorage(
            cash_balance=self._settings.app.default_cash_balance,
            weights=self._settings.ranking.to_weights(),
        )
        self._audit_logger = audit_logger or AuditLogger()
        self._importer = importer or CsvInvoiceImporter()

    @property
    def storage(self) -> InvoiceStorageInterface:
        return self._storage

    # -------------------------------------------------------------------------
    # Intake
    # -------------------------------------------------------------------------

    def add_invoice(
        self,
        invoice: VendorInvoice,
        correlation_id: Optional[UUID] = None,
    ) -> VendorInvoice:
        """
        Store a new invoice.

        Raises:
            DuplicateError: If the id is already taken
        """
        stored = self._storage.add_invoice(invoice)
        self._audit_logger.log_invoice_added(
            invoice_id=stored.id,
            vendor=stored.vendor_name,
            amount=stored.amount,
            correlation_id=correlation_id,
        )
        return stored

    def import_csv(
        self,
        source: Union[str, Path],
        correlation_id: Optional[UUID] = None,
    ) -> ImportResult:
        """
        Bulk import vendor bills from a CSV file path.

        Raises:
            CsvImportError: If the file can't be read
        """
        correlation_id = correlation_id or create_correlation_id()
        try:
            result = self._importer.import_file(source)
        except CsvImportError as e:
            self._audit_logger.log_import_failed(str(source), str(e), correlation_id)
            raise
        return self._store_import(str(source), result, correlation_id)

    def import_csv_text(
        self,
        text: str,
        source: str = "upload",
        correlation_id: Optional[UUID] = None,
    ) -> ImportResult:
        """Bulk import from CSV content already in memory (e.g. an upload)."""
        correlation_id = correlation_id or create_correlation_id()
        try:
            result = self._importer.import_text(text)
        except CsvImportError as e:
            self._audit_logger.log_import_failed(source, str(e), correlation_id)
            raise
        return self._store_import(source, result, correlation_id)

    def _store_import(
        self,
        source: str,
        result: ImportResult,
        correlation_id: UUID,
    ) -> ImportResult:
        if result.invoices:
            self._storage.add_invoices(result.invoices)
        self._audit_logger.log_invoices_imported(
            source=source,
            imported=len(result.invoices),
            skipped=result.skipped_count,
            warnings=sum(1 for i in result.issues if i.severity == "warning"),
            correlation_id=correlation_id,
        )
        return result

    # -------------------------------------------------------------------------
    # Decisions
    # -------------------------------------------------------------------------

    def toggle_status(
        self,
        invoice_id: str,
        as_of: AsOf = None,
        correlation_id: Optional[UUID] = None,
    ) -> VendorInvoice:
        """
        Flip an invoice between Approved and Hold and pin it there.

        The flip starts from the status the user currently sees, i.e.
        the allocator's output, not the raw stored status.

        Raises:
            NotFoundError: If no invoice has this id
            ValueError: If the invoice is already paid
        """
        stored = self._storage.get_invoice(invoice_id)
        if stored is None:
            raise NotFoundError(f"Invoice not found: {invoice_id}")

        if stored.status != InvoiceStatus.PAID and not stored.is_manual_override:
            displayed = next(
                i for i in self.ranked_invoices(as_of=as_of, audit=False) if i.id == invoice_id
            )
            stored = stored.model_copy(update={"status": displayed.status})

        toggled = stored.with_manual_toggle()
        self._storage.update_invoice(toggled)
        self._audit_logger.log_override_toggled(
            invoice_id=invoice_id,
            status=toggled.status.value,
            override=toggled.override.value,
            correlation_id=correlation_id,
        )
        return toggled

    def update_weights(
        self,
        weights: WeightConfig,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._storage.set_weights(weights)
        self._audit_logger.log_weights_updated(
            importance=weights.importance,
            age=weights.age,
            amount=weights.amount,
            correlation_id=correlation_id,
        )

    def set_cash_balance(
        self,
        amount: Union[Decimal, int, float, str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        previous = self._storage.get_cash_balance()
        current = Decimal(str(amount)) if isinstance(amount, float) else Decimal(amount)
        self._storage.set_cash_balance(current)
        self._audit_logger.log_cash_updated(previous, current, correlation_id)

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def ranked_invoices(
        self,
        as_of: AsOf = None,
        audit: bool = True,
    ) -> list[VendorInvoice]:
        """
        Rank the outstanding invoices against the current cash.

        Paid invoices are settled and left out.
        """
        outstanding = [
            i for i in self._storage.list_invoices()
            if i.status != InvoiceStatus.PAID
        ]
        cash = self._storage.get_cash_balance()
        ranked = allocate(outstanding, self._storage.get_weights(), cash, as_of=as_of)

        if audit:
            approved = [i for i in ranked if i.status == InvoiceStatus.APPROVED]
            self._audit_logger.log_allocation_computed(
                approved_count=len(approved),
                hold_count=len(ranked) - len(approved),
                approved_total=sum((i.amount for i in approved), Decimal(0)),
                available_cash=cash,
            )
        return ranked

    def waterline(
        self,
        as_of: AsOf = None,
    ) -> tuple[list[WaterlineRow], WaterlineSummary]:
        """Ranked rows with running totals, plus the dashboard figures."""
        ranked = self.ranked_invoices(as_of=as_of)
        cash = self._storage.get_cash_balance()
        return waterline_rows(ranked, cash), summarize(ranked, cash)

    # -------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------

    def export_snapshot(
        self,
        path: Optional[Union[str, Path]] = None,
    ) -> PayablesSnapshot:
        """Write the desk state to JSON (defaults to the configured path)."""
        target = Path(path or self._settings.app.snapshot_path)
        snapshot = export_snapshot(self._storage, target)
        self._audit_logger.log_snapshot_exported(str(target), len(snapshot.invoices))
        return snapshot

    def load_snapshot(
        self,
        path: Optional[Union[str, Path]] = None,
    ) -> PayablesSnapshot:
        """
        Restore the desk state from JSON.

        Raises:
            StorageError: If the file is missing or invalid
        """
        source = Path(path or self._settings.app.snapshot_path)
        snapshot = load_snapshot(source)
        restore_snapshot(self._storage, snapshot)
        self._audit_logger.log_snapshot_loaded(str(source), len(snapshot.invoices))
        return snapshot


def create_app_components(
    load_saved: bool = False,
    settings: Optional[Settings] = None,
) -> tuple[PayablesDesk, InMemoryAuditStorage]:
    """
    Factory function to create all application components.

    Args:
        load_saved: Restore the configured snapshot if it exists.

    Returns:
        (desk, audit_storage)
    """
    settings = settings or get_settings()
    audit_storage = InMemoryAuditStorage()
    audit_logger = AuditLogger(audit_storage)
    desk = PayablesDesk(
        audit_logger=audit_logger,
        settings=settings,
    )

    if load_saved and Path(settings.app.snapshot_path).exists():
        try:
            desk.load_snapshot()
        except StorageError as e:
            # A broken snapshot shouldn't keep the desk from starting
            audit_logger.log_error("snapshot_load_failed", str(e))

    return desk, audit_storage
