"""
Storage Services Package

Provides abstract interfaces and the in-memory implementation for
payables storage, plus the JSON snapshot used to save a session.
"""

from payrank.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    InvoiceStorageInterface,
    NotFoundError,
    StorageError,
)
from payrank.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryInvoiceStorage,
)
from payrank.services.storage.snapshot import (
    export_snapshot,
    load_snapshot,
    restore_snapshot,
    take_snapshot,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "InvoiceStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryInvoiceStorage",
    # Snapshot
    "export_snapshot",
    "load_snapshot",
    "restore_snapshot",
    "take_snapshot",
]
