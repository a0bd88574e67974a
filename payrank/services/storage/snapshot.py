"""
JSON Snapshot

Writes the desk state (cash balance, weights, invoices) to a JSON file
and reads it back. Only raw inputs are written; scores are recomputed
on load like on every other read.
"""

from pathlib import Path
from typing import Union

from pydantic import ValidationError

from payrank.models.invoice import PayablesSnapshot
from payrank.services.storage.interface import (
    InvoiceStorageInterface,
    StorageError,
)


def take_snapshot(storage: InvoiceStorageInterface) -> PayablesSnapshot:
    """Capture the current desk state."""
    invoices = [
        invoice.model_copy(update={"score": None, "age_days": None})
        for invoice in storage.list_invoices()
    ]
    return PayablesSnapshot(
        cash_balance=storage.get_cash_balance(),
        weights=storage.get_weights(),
        invoices=invoices,
    )


def export_snapshot(
    storage: InvoiceStorageInterface,
    path: Union[str, Path],
) -> PayablesSnapshot:
    """
    Write the desk state to a JSON file.

    Parent directories are created as needed.

    Raises:
        StorageError: If the file cannot be written
    """
    snapshot = take_snapshot(storage)
    file_path = Path(path)
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
    except OSError as e:
        raise StorageError(f"Failed to write snapshot to {file_path}: {e}")
    return snapshot


def load_snapshot(path: Union[str, Path]) -> PayablesSnapshot:
    """
    Read and validate a snapshot file.

    Raises:
        StorageError: If the file is missing, unreadable or invalid
    """
    file_path = Path(path)
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise StorageError(f"Failed to read snapshot from {file_path}: {e}")

    try:
        return PayablesSnapshot.model_validate_json(content)
    except ValidationError as e:
        raise StorageError(f"Invalid snapshot {file_path}: {e}")


def restore_snapshot(
    storage: InvoiceStorageInterface,
    snapshot: PayablesSnapshot,
) -> int:
    """
    Load a snapshot into storage.

    Invoices already present (same id) are replaced, new ones added.

    Returns:
        Number of invoices restored
    """
    storage.set_cash_balance(snapshot.cash_balance)
    storage.set_weights(snapshot.weights)

    for invoice in snapshot.invoices:
        if storage.get_invoice(invoice.id) is None:
            storage.add_invoice(invoice)
        else:
            storage.update_invoice(invoice)
    return len(snapshot.invoices)
