"""
CSV Bulk Import

Reads vendor bills from a CSV with the columns

    vendor, category, amount, invoiceDate, dueDate, importance

The first line is a header and is skipped; columns are read by position.

IMPORTANT: The importer coerces rather than rejects, so one messy row
doesn't sink a whole batch. Every replaced value is reported as a
warning ImportIssue and every skipped row as an error ImportIssue.
The allocator downstream assumes well-typed invoices.
"""

import io
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional, Union

import pandas as pd
import structlog
from pydantic import ValidationError

from payrank.intake.manual import generate_id
from payrank.models.invoice import (
    ImportIssue,
    ImportResult,
    Importance,
    InvoiceCategory,
    InvoiceStatus,
    OverrideState,
    VendorInvoice,
)

logger = structlog.get_logger(__name__)

CSV_COLUMNS = ["vendor", "category", "amount", "invoiceDate", "dueDate", "importance"]

UNKNOWN_VENDOR = "Unknown"


class CsvImportError(Exception):
    """The CSV could not be read at all."""
    pass


def _clean_text(value: object) -> str:
    if value is None:
        return ""
    text = str(value).strip()
    if text.lower() in {"", "nan", "none", "n/a", "na"}:
        return ""
    return text


def _money(value: str) -> Optional[Decimal]:
    """
    Parse an amount like "$1,200.50" or "(250.00)".

    Only currency signs, thousands separators and spaces are dropped;
    accounting parentheses mean negative. Anything else that Decimal
    can't read as a finite number gives None.
    """
    text = re.sub(r"[$,\s]", "", value)
    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1]
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return -amount if negative else amount


def _date(value: str) -> Optional[date]:
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.date()


def _enum_lookup(enum_cls, value: str):
    for member in enum_cls:
        if member.value.lower() == value.lower():
            return member
    return None


def _truncate_long_line(fields: list[str]) -> list[str]:
    return fields[:len(CSV_COLUMNS)]


class CsvInvoiceImporter:
    """
    Turns CSV rows into HOLD / AUTO vendor invoices.

    Coercions:
    - blank vendor -> "Unknown"
    - blank or unknown category -> Services
    - missing or unparsable amount -> 0
    - missing or unparsable dates -> today
    - blank or unknown importance -> Medium

    Skipped rows:
    - no values beyond the vendor column
    - negative amount, including "(250.00)"
    """

    def __init__(self, today: Optional[date] = None, id_prefix: str = "VEND"):
        """
        Args:
            today: Date used for missing invoice/due dates. Defaults to
                   the real date at import time.
            id_prefix: Prefix for generated invoice ids.
        """
        self._today = today
        self._id_prefix = id_prefix

    def import_file(self, path: Union[str, Path]) -> ImportResult:
        """
        Import a CSV file from disk.

        Raises:
            CsvImportError: If the file is missing or unreadable
        """
        file_path = Path(path)
        try:
            text = file_path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise CsvImportError(f"Cannot read {file_path}: {e}")
        return self.import_text(text)

    def import_text(self, text: str) -> ImportResult:
        """
        Import CSV content already in memory.

        Raises:
            CsvImportError: If the content is not parseable as CSV
        """
        frame = self._read_frame(text)
        today = self._today or date.today()

        invoices = []
        issues = []
        for position, row in enumerate(frame.itertuples(index=False), start=1):
            invoice, row_issues = self._parse_row(position, list(row), today)
            issues.extend(row_issues)
            if invoice is not None:
                invoices.append(invoice)

        result = ImportResult(invoices=invoices, issues=issues, rows_seen=len(frame))
        logger.info(
            "csv_import_parsed",
            rows_seen=result.rows_seen,
            imported=len(result.invoices),
            skipped=result.skipped_count,
            issues=len(result.issues),
        )
        return result

    def _read_frame(self, text: str) -> pd.DataFrame:
        if not text.strip():
            return pd.DataFrame(columns=CSV_COLUMNS)
        try:
            frame = pd.read_csv(
                io.StringIO(text),
                header=None,
                names=CSV_COLUMNS,
                skiprows=1,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                index_col=False,
                engine="python",
                on_bad_lines=_truncate_long_line,
            )
        except pd.errors.EmptyDataError:
            return pd.DataFrame(columns=CSV_COLUMNS)
        except pd.errors.ParserError as e:
            raise CsvImportError(f"Malformed CSV: {e}")
        return frame.fillna("")

    def _parse_row(
        self,
        row_number: int,
        values: list,
        today: date,
    ) -> tuple[Optional[VendorInvoice], list[ImportIssue]]:
        issues = []

        def warn(field: str, message: str) -> None:
            issues.append(ImportIssue(
                row_number=row_number,
                field=field,
                message=message,
                severity="warning",
            ))

        def reject(field: str, message: str) -> tuple[None, list[ImportIssue]]:
            issues.append(ImportIssue(
                row_number=row_number,
                field=field,
                message=message,
                severity="error",
            ))
            return None, issues

        vendor, category_raw, amount_raw, invoice_date_raw, due_date_raw, importance_raw = (
            _clean_text(v) for v in values
        )

        if not any((category_raw, amount_raw, invoice_date_raw, due_date_raw, importance_raw)):
            return reject("row", "Row has no values beyond the vendor")

        if not vendor:
            warn("vendor", f"Missing vendor, using '{UNKNOWN_VENDOR}'")
            vendor = UNKNOWN_VENDOR

        category = _enum_lookup(InvoiceCategory, category_raw) if category_raw else None
        if category is None:
            if category_raw:
                warn("category", f"Unknown category '{category_raw}', using Services")
            category = InvoiceCategory.SERVICES

        amount = _money(amount_raw) if amount_raw else None
        if amount is None:
            warn("amount", f"Unreadable amount '{amount_raw}', using 0")
            amount = Decimal(0)
        elif amount < 0:
            return reject("amount", f"Negative amount {amount}")

        invoice_date = _date(invoice_date_raw) if invoice_date_raw else None
        if invoice_date is None:
            warn("invoiceDate", f"Unreadable invoice date '{invoice_date_raw}', using today")
            invoice_date = today

        due_date = _date(due_date_raw) if due_date_raw else None
        if due_date is None:
            if due_date_raw:
                warn("dueDate", f"Unreadable due date '{due_date_raw}', using today")
            due_date = today

        importance = _enum_lookup(Importance, importance_raw) if importance_raw else None
        if importance is None:
            if importance_raw:
                warn("importance", f"Unknown importance '{importance_raw}', using Medium")
            importance = Importance.MEDIUM

        try:
            invoice = VendorInvoice(
                id=generate_id(self._id_prefix),
                vendor_name=vendor,
                category=category,
                amount=amount,
                invoice_date=invoice_date,
                due_date=due_date,
                importance=importance,
                status=InvoiceStatus.HOLD,
                override=OverrideState.AUTO,
            )
        except ValidationError as e:
            return reject("row", f"Invalid invoice: {e.error_count()} validation errors")

        return invoice, issues
