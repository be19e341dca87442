"""Tests for the Firestore sync adapter."""

from datetime import date, datetime
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from busledger.domain.debts import new_debt
from busledger.domain.entities import DAILY_ENTRIES, DEBTS, OBJECTIVES, Settings
from busledger.domain.ledger import LedgerStore
from busledger.domain.revenue import build_daily_entry
from busledger.sync.firestore import (
    DEFAULT_BUS_ID,
    STATUS_ERROR,
    STATUS_IDLE,
    STATUS_OK,
    FirestoreSync,
    create_firestore_sync,
    decode_cash,
    decode_collection,
)


def snapshot(data, exists=True):
    snap = MagicMock()
    snap.exists = exists
    snap.to_dict.return_value = data if exists else None
    return snap


class FakeClient:
    """Firestore client double keeping one mock per collection and meta document."""

    def __init__(self, collections=None, meta=None):
        self.root = MagicMock()
        self.collections = {}
        self.meta_docs = {}
        self._documents = collections or {}
        self._meta = meta or {}
        self.bus = self.root.collection.return_value.document.return_value
        self.bus.collection.side_effect = self._collection

    def collection(self, name):
        return self.root.collection(name)

    def _collection(self, name):
        if name not in self.collections:
            mock = MagicMock(name=name)
            if name == "meta":
                mock.document.side_effect = self._meta_document
            else:
                mock.stream.return_value = [snapshot(d) for d in self._documents.get(name, [])]
            self.collections[name] = mock
        return self.collections[name]

    def _meta_document(self, name):
        if name not in self.meta_docs:
            mock = MagicMock(name=name)
            data = self._meta.get(name)
            mock.get.return_value = snapshot(data, exists=data is not None)
            self.meta_docs[name] = mock
        return self.meta_docs[name]


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def remote(client):
    return FirestoreSync(client, bus_id="bus-1")


def test_push_entity_writes_document(client, remote):
    """Test pushing an entity."""
    debt = new_debt("Garage Ali", "Clutch", Decimal("100"))
    remote.push_entity(DEBTS, debt)

    client.root.collection.assert_called_with("buses")
    client.root.collection.return_value.document.assert_called_with("bus-1")
    doc = client.collections[DEBTS].document
    doc.assert_called_with(debt.id)
    written = doc.return_value.set.call_args.args[0]
    assert written["supplier"] == "Garage Ali"
    assert written["remainingAmount"] == 100


def test_push_removal_deletes_document(client, remote):
    """Test pushing a removal."""
    remote.push_removal(DEBTS, "abc")
    client.collections[DEBTS].document.assert_called_with("abc")
    client.collections[DEBTS].document.return_value.delete.assert_called_once()


def test_push_cash_and_settings(client, remote):
    """Test pushing cash and settings."""
    remote.push_cash_balance(Decimal("4200"))
    remote.push_settings(Settings(currency="FCFA"))

    client.meta_docs["cash"].set.assert_called_once_with({"cashBalance": 4200})
    assert client.meta_docs["settings"].set.call_args.args[0]["currency"] == "FCFA"


def test_failed_write_is_logged_not_raised(client, remote, caplog):
    """Test that a failed write is logged."""
    client._collection(DEBTS).document.return_value.set.side_effect = RuntimeError("offline")

    remote.push_entity(DEBTS, new_debt("Garage Ali", "Clutch", Decimal("100")))

    assert remote.status == STATUS_ERROR
    assert "Firestore save of debts" in caplog.text


def test_push_all_counts_entities(client, remote):
    """Test pushing the whole ledger."""
    store = LedgerStore()
    store.add_daily_entry(build_daily_entry(date(2024, 3, 15), revenue=Decimal("1000")))
    store.add_debt(new_debt("Garage Ali", "Clutch", Decimal("100")))

    assert remote.push_all(store) == 2
    client.meta_docs["cash"].set.assert_called_once_with({"cashBalance": 1000})


def test_pull_replaces_collections_and_meta():
    """Test pulling remote state."""
    client = FakeClient(
        collections={
            DAILY_ENTRIES: [
                {"id": "d1", "date": "2024-03-14", "dayType": "normal", "revenue": 100, "netRevenue": 100},
                {"id": "d2", "date": "2024-03-15", "dayType": "inactive", "netRevenue": 0},
            ],
            DEBTS: [{"id": "x"}, {"supplier": "no id"}],
        },
        meta={"cash": {"cashBalance": 4200}, "settings": {"currency": "FCFA"}},
    )
    remote = FirestoreSync(client, bus_id="bus-1")
    store = LedgerStore()

    remote.pull(store)

    assert remote.status == STATUS_OK
    assert [e.id for e in store.daily_entries] == ["d2", "d1"]
    assert [d.id for d in store.debts] == ["x"]
    assert store.cash_balance == Decimal("4200")
    assert store.settings.currency == "FCFA"


def test_pull_without_meta_keeps_local_values():
    """Test pulling with no meta documents."""
    remote = FirestoreSync(FakeClient(), bus_id="bus-1")
    store = LedgerStore()
    store.update_cash_balance(Decimal("10"))

    remote.pull(store)
    assert store.cash_balance == Decimal("10")


def test_pull_failure_sets_error_status(client, remote):
    """Test a failed pull."""
    client._collection(DAILY_ENTRIES).stream.side_effect = RuntimeError("offline")
    remote.pull(LedgerStore())
    assert remote.status == STATUS_ERROR


def test_listen_applies_snapshots_and_stop_unsubscribes(client, remote):
    """Test listening to and stopping remote changes."""
    store = LedgerStore()
    remote.listen(store)
    assert remote.status == STATUS_OK

    callback = client.collections[DEBTS].on_snapshot.call_args.args[0]
    callback([snapshot({"id": "x", "supplier": "Garage"})], [], None)
    assert [d.supplier for d in store.debts] == ["Garage"]

    cash_callback = client.meta_docs["cash"].on_snapshot.call_args.args[0]
    cash_callback([snapshot({"cashBalance": 77})], [], None)
    assert store.cash_balance == Decimal("77")

    watch = client.collections[DEBTS].on_snapshot.return_value
    remote.stop()
    watch.unsubscribe.assert_called_once()
    assert remote.status == STATUS_IDLE


def test_listen_twice_registers_once(client, remote):
    """Test listening twice."""
    store = LedgerStore()
    remote.listen(store)
    remote.listen(store)
    assert client.collections[DEBTS].on_snapshot.call_count == 1


def test_decode_cash():
    """Test decoding cash documents."""
    assert decode_cash({"cashBalance": 12.5}) == Decimal("12.5")
    assert decode_cash({"cashBalance": True}) is None
    assert decode_cash({"cashBalance": "100"}) is None
    assert decode_cash(None) is None


def test_decode_collection_skips_malformed_documents():
    """Test that malformed documents are skipped."""
    items = decode_collection(DEBTS, [{"id": "a"}, {"no": "id"}, {"id": "b", "status": "bogus"}])
    assert [d.id for d in items] == ["a"]


def test_decode_collection_drops_undated_objectives(store, lifecycle):
    """Test that objectives without a target date are dropped before reconciling."""
    items = decode_collection(
        OBJECTIVES,
        [{"id": "o1", "title": "No date"}, {"id": "o2", "title": "Tyres", "targetDate": "2024-04-01"}],
    )
    assert [o.id for o in items] == ["o2"]

    store.apply_collection_snapshot(OBJECTIVES, items)
    created = lifecycle.reconcile_objectives(now=datetime(2024, 3, 28, 9, 0))

    assert len(created) == 1
    assert "[o2]" in created[0].message


def test_decode_collection_drops_undated_entries(store, summary_service):
    """Test that daily entries without a date are dropped before summarizing."""
    items = decode_collection(
        DAILY_ENTRIES,
        [
            {"id": "d1", "dayType": "normal", "revenue": 500, "netRevenue": 500},
            {"id": "d2", "date": "2024-03-14", "dayType": "normal", "revenue": 100, "netRevenue": 100},
        ],
    )
    assert [e.id for e in items] == ["d2"]

    store.apply_collection_snapshot(DAILY_ENTRIES, items)
    result = summary_service.summarize_period("week", today=date(2024, 3, 15))

    assert result.entry_count == 1
    assert result.total_revenue == Decimal("100")


def test_create_firestore_sync_reads_environment(monkeypatch):
    """Test creating the adapter from the environment."""
    monkeypatch.setenv("BUSLEDGER_BUS_ID", "bus-env")
    monkeypatch.delenv("FIRESTORE_DATABASE", raising=False)
    with patch("busledger.sync.firestore.firestore.Client") as client_cls:
        remote = create_firestore_sync()

    client_cls.assert_called_once_with(database=None)
    assert remote.bus_id == "bus-env"


def test_create_firestore_sync_default_bus(monkeypatch):
    """Test the default bus id."""
    monkeypatch.delenv("BUSLEDGER_BUS_ID", raising=False)
    with patch("busledger.sync.firestore.firestore.Client"):
        assert create_firestore_sync(database="ledger").bus_id == DEFAULT_BUS_ID
