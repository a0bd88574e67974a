"""Tests for in-memory storage and JSON snapshots."""

import json
from decimal import Decimal

import pytest

from payrank.models.audit import AuditEvent, AuditEventType
from payrank.models.invoice import InvoiceStatus, OverrideState, WeightConfig
from payrank.services.storage import (
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryInvoiceStorage,
    NotFoundError,
    StorageError,
    export_snapshot,
    load_snapshot,
    restore_snapshot,
    take_snapshot,
)


class TestInMemoryInvoiceStorage:
    """Tests for the session invoice store."""

    def test_add_and_get(self, make_invoice):
        """Stored invoices come back by id."""
        storage = InMemoryInvoiceStorage()
        invoice = make_invoice("a")

        storage.add_invoice(invoice)

        assert storage.get_invoice("a") == invoice
        assert storage.get_invoice("missing") is None

    def test_duplicate_rejected(self, make_invoice):
        """Adding the same id twice raises DuplicateError."""
        storage = InMemoryInvoiceStorage()
        storage.add_invoice(make_invoice("a"))

        with pytest.raises(DuplicateError):
            storage.add_invoice(make_invoice("a"))

    def test_add_invoices_all_or_nothing(self, make_invoice):
        """A duplicate in a batch stores nothing from that batch."""
        storage = InMemoryInvoiceStorage()
        storage.add_invoice(make_invoice("a"))

        with pytest.raises(DuplicateError):
            storage.add_invoices([make_invoice("b"), make_invoice("a")])

        assert [i.id for i in storage.list_invoices()] == ["a"]

    def test_update_missing(self, make_invoice):
        """Updating an unknown invoice raises NotFoundError."""
        with pytest.raises(NotFoundError):
            InMemoryInvoiceStorage().update_invoice(make_invoice("ghost"))

    def test_list_in_insertion_order(self, make_invoice):
        """Listing keeps insertion order, whatever the status."""
        storage = InMemoryInvoiceStorage()
        storage.add_invoices([
            make_invoice("b"),
            make_invoice("a", status=InvoiceStatus.PAID),
            make_invoice("c"),
        ])

        assert [i.id for i in storage.list_invoices()] == ["b", "a", "c"]

    def test_cash_and_weights(self):
        """Cash balance and weights round-trip through the store."""
        storage = InMemoryInvoiceStorage(cash_balance=Decimal("15000"))
        assert storage.get_cash_balance() == Decimal("15000")
        assert storage.get_weights() == WeightConfig()

        storage.set_cash_balance(Decimal("-20"))
        storage.set_weights(WeightConfig(importance=10, age=10, amount=80))

        assert storage.get_cash_balance() == Decimal("-20")
        assert storage.get_weights().amount == 80


class TestInMemoryAuditStorage:
    """Tests for the append-only audit store."""

    def test_recent_newest_first(self):
        """Recent events come back newest first, limited."""
        storage = InMemoryAuditStorage()
        for n in range(5):
            storage.append_event(AuditEvent(
                event_type=AuditEventType.INVOICE_ADDED,
                description=f"event {n}",
            ))

        recent = storage.get_recent_events(limit=2)

        assert [e.description for e in recent] == ["event 4", "event 3"]


class TestSnapshot:
    """Tests for JSON export and restore."""

    def test_export_and_load(self, make_invoice, tmp_path):
        """A snapshot written to disk loads back to the same state."""
        storage = InMemoryInvoiceStorage(
            cash_balance=Decimal("1234.56"),
            weights=WeightConfig(importance=50, age=25, amount=25),
        )
        storage.add_invoice(make_invoice("a", amount="10.50"))
        storage.add_invoice(make_invoice(
            "b", status=InvoiceStatus.APPROVED, override=OverrideState.MANUAL_APPROVED,
        ))
        path = tmp_path / "nested" / "payables.json"

        export_snapshot(storage, path)
        snapshot = load_snapshot(path)

        assert snapshot.cash_balance == Decimal("1234.56")
        assert snapshot.weights.importance == 50
        assert [i.id for i in snapshot.invoices] == ["a", "b"]
        assert snapshot.invoices[1].override == OverrideState.MANUAL_APPROVED
        assert json.loads(path.read_text())["invoices"][0]["amount"] == "10.50"

    def test_derived_fields_not_saved(self, make_invoice):
        """Scores are dropped from the snapshot."""
        storage = InMemoryInvoiceStorage()
        storage.add_invoice(make_invoice("a").model_copy(update={"score": 0.9, "age_days": 4}))

        snapshot = take_snapshot(storage)

        assert snapshot.invoices[0].score is None
        assert snapshot.invoices[0].age_days is None

    def test_restore_replaces_and_adds(self, make_invoice):
        """Restoring updates known ids and adds new ones."""
        source = InMemoryInvoiceStorage(cash_balance=Decimal("99"))
        source.add_invoice(make_invoice("a", amount="1"))
        source.add_invoice(make_invoice("b", amount="2"))
        target = InMemoryInvoiceStorage()
        target.add_invoice(make_invoice("a", amount="500"))

        count = restore_snapshot(target, take_snapshot(source))

        assert count == 2
        assert target.get_invoice("a").amount == Decimal("1")
        assert target.get_invoice("b") is not None
        assert target.get_cash_balance() == Decimal("99")

    def test_missing_file(self, tmp_path):
        """Loading a missing file raises StorageError."""
        with pytest.raises(StorageError):
            load_snapshot(tmp_path / "none.json")

    def test_invalid_file(self, tmp_path):
        """Loading malformed JSON raises StorageError."""
        path = tmp_path / "bad.json"
        path.write_text('{"invoices": [{"id": ""}]}')

        with pytest.raises(StorageError):
            load_snapshot(path)
