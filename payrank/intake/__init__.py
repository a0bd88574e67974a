"""Invoice intake: manual entry and CSV bulk import."""

from payrank.intake.csv_importer import CSV_COLUMNS, CsvImportError, CsvInvoiceImporter
from payrank.intake.manual import generate_id, new_invoice

__all__ = [
    "CSV_COLUMNS",
    "CsvImportError",
    "CsvInvoiceImporter",
    "generate_id",
    "new_invoice",
]
