"""Services package."""

from payrank.services.storage import (
    AuditStorageInterface,
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryInvoiceStorage,
    InvoiceStorageInterface,
    NotFoundError,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "DuplicateError",
    "InMemoryAuditStorage",
    "InMemoryInvoiceStorage",
    "InvoiceStorageInterface",
    "NotFoundError",
    "StorageError",
]
