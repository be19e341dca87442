"""Firestore implementation of the remote sync adapter.

Layout, shared with the other collaborator's client:

    buses/<bus id>/<collection>/<entity id>
    buses/<bus id>/meta/settings
    buses/<bus id>/meta/cash            {"cashBalance": <number>}

Writes are fire-and-forget: failures are logged and recorded in ``status``,
never raised into the ledger operation that caused them.
"""

from __future__ import annotations

import logging
import os
from decimal import Decimal
from typing import Any, Callable, Optional

from google.cloud import firestore

from busledger.database.mappers import (
    COLLECTIONS,
    Document,
    app_data_to_document,
    collection_mapper,
    number_to_document,
    settings_to_document,
    settings_to_domain,
)
from busledger.domain.entities import CASH_DOC, SETTINGS_DOC, Settings
from busledger.domain.ledger import LedgerStore
from busledger.sync.base import SyncPort

logger = logging.getLogger(__name__)

BUSES_COLLECTION = "buses"
META_COLLECTION = "meta"
DEFAULT_BUS_ID = "hiace-bus-001"

STATUS_IDLE = "idle"
STATUS_SYNCING = "syncing"
STATUS_OK = "ok"
STATUS_ERROR = "error"


def _get_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    return value.strip() if value else None


def decode_cash(data: Optional[Document]) -> Optional[Decimal]:
    """Extract the cash balance of a cash document; None unless it is a number."""
    if not data:
        return None
    value = data.get("cashBalance")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return Decimal(str(value))


def decode_settings(data: Optional[Document]) -> Optional[Settings]:
    if not data:
        return None
    return settings_to_domain(data)


def decode_collection(collection_name: str, documents: list[Document]) -> list[Any]:
    """Convert remote documents to entities, skipping malformed ones."""
    mapper = collection_mapper(collection_name)
    items = []
    for doc in documents:
        try:
            items.append(mapper.to_domain(doc))
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("Skipping malformed %s document %s: %s", collection_name, doc.get("id"), e)
    return items


class FirestoreSync(SyncPort):
    """Mirrors the ledger to a Firestore database."""

    def __init__(self, client: firestore.Client, bus_id: str = DEFAULT_BUS_ID):
        """Initialize Firestore sync.

        Args:
            client: Firestore client
            bus_id: Document namespace of the vehicle
        """
        self.client = client
        self.bus_id = bus_id
        self.status = STATUS_IDLE
        self._watches: list[Any] = []

    def _bus(self):
        return self.client.collection(BUSES_COLLECTION).document(self.bus_id)

    def _collection(self, collection_name: str):
        return self._bus().collection(collection_name)

    def _meta(self, doc_name: str):
        return self._bus().collection(META_COLLECTION).document(doc_name)

    def _safely(self, action: str, call: Callable[[], Any]) -> None:
        try:
            call()
        except Exception:
            self.status = STATUS_ERROR
            logger.exception("Firestore %s failed", action)

    # Outbound
    def push_entity(self, collection_name: str, entity: Any) -> None:
        mapper = collection_mapper(collection_name)
        document = mapper.to_document(entity)
        self._safely(
            f"save of {collection_name}/{entity.id}",
            lambda: self._collection(collection_name).document(entity.id).set(document),
        )

    def push_removal(self, collection_name: str, entity_id: str) -> None:
        collection_mapper(collection_name)
        self._safely(
            f"delete of {collection_name}/{entity_id}",
            lambda: self._collection(collection_name).document(entity_id).delete(),
        )

    def push_settings(self, settings: Settings) -> None:
        document = settings_to_document(settings)
        self._safely("save of settings", lambda: self._meta(SETTINGS_DOC).set(document))

    def push_cash_balance(self, cash_balance: Decimal) -> None:
        document = {"cashBalance": number_to_document(cash_balance)}
        self._safely("save of cash balance", lambda: self._meta(CASH_DOC).set(document))

    def push_all(self, store: LedgerStore) -> int:
        """Upload the whole local aggregate.

        Returns:
            Number of entity documents written
        """
        document = app_data_to_document(store.data)
        count = 0
        for name in COLLECTIONS:
            for item in document[name]:
                self._safely(
                    f"save of {name}/{item['id']}",
                    lambda name=name, item=item: self._collection(name).document(item["id"]).set(item),
                )
                count += 1
        self.push_settings(store.settings)
        self.push_cash_balance(store.cash_balance)
        return count

    # Inbound
    def pull(self, store: LedgerStore) -> None:
        """Read every collection and meta document once into the store."""
        self.status = STATUS_SYNCING
        try:
            for name in COLLECTIONS:
                documents = [snapshot.to_dict() or {} for snapshot in self._collection(name).stream()]
                store.apply_collection_snapshot(name, decode_collection(name, documents))
            settings = self._meta(SETTINGS_DOC).get()
            if settings.exists:
                store.apply_document_snapshot(SETTINGS_DOC, decode_settings(settings.to_dict()))
            cash = self._meta(CASH_DOC).get()
            if cash.exists:
                store.apply_document_snapshot(CASH_DOC, decode_cash(cash.to_dict()))
        except Exception:
            self.status = STATUS_ERROR
            logger.exception("Firestore pull failed")
            return
        self.status = STATUS_OK

    def listen(self, store: LedgerStore) -> None:
        """Subscribe the store to remote changes until :meth:`stop` is called."""
        if self._watches:
            return
        self.status = STATUS_SYNCING
        try:
            for name in COLLECTIONS:
                self._watches.append(self._collection(name).on_snapshot(self._collection_listener(store, name)))
            self._watches.append(
                self._meta(SETTINGS_DOC).on_snapshot(self._meta_listener(store, SETTINGS_DOC, decode_settings))
            )
            self._watches.append(self._meta(CASH_DOC).on_snapshot(self._meta_listener(store, CASH_DOC, decode_cash)))
        except Exception:
            self.status = STATUS_ERROR
            logger.exception("Firestore listen failed")
            return
        self.status = STATUS_OK

    def stop(self) -> None:
        """Unsubscribe every listener."""
        for watch in self._watches:
            watch.unsubscribe()
        self._watches = []
        self.status = STATUS_IDLE

    def _collection_listener(self, store: LedgerStore, collection_name: str):
        def on_snapshot(snapshots, changes, read_time):
            documents = [snapshot.to_dict() or {} for snapshot in snapshots]
            store.apply_collection_snapshot(collection_name, decode_collection(collection_name, documents))

        return on_snapshot

    def _meta_listener(self, store: LedgerStore, doc_name: str, decode: Callable[[Optional[Document]], Any]):
        def on_snapshot(snapshots, changes, read_time):
            for snapshot in snapshots:
                data = snapshot.to_dict() if snapshot.exists else None
                store.apply_document_snapshot(doc_name, decode(data))

        return on_snapshot


def create_firestore_sync(bus_id: Optional[str] = None, database: Optional[str] = None) -> FirestoreSync:
    """Create a Firestore sync adapter.

    Args:
        bus_id: Document namespace. If None, checks BUSLEDGER_BUS_ID, then
            defaults to "hiace-bus-001"
        database: Firestore database name. If None, checks FIRESTORE_DATABASE,
            then uses the default database

    Returns:
        FirestoreSync instance
    """
    bus_id = bus_id or _get_env("BUSLEDGER_BUS_ID") or DEFAULT_BUS_ID
    database = database or _get_env("FIRESTORE_DATABASE")
    client = firestore.Client(database=database)
    return FirestoreSync(client, bus_id=bus_id)
