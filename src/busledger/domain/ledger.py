"""Ledger store domain service.

Holds every collection of the ledger plus the cash balance, and keeps the
cash balance consistent with the net revenue of the daily entries.

Rules:
    * Adding a daily entry adds its net revenue to the cash balance and
      deleting one subtracts it.
    * Updating a daily entry re-derives its net revenue and moves the cash
      balance by the difference.
    * Operations on an unknown id are no-ops and return None.
    * Every operation runs under one re-entrant lock, then rewrites the whole
      aggregate through the database and reports the change to the sync port.
"""

import logging
import threading
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

from busledger.database.base import Database
from busledger.domain.debts import clamp_remaining, derive_debt_status
from busledger.domain.entities import (
    AUTOMATIONS,
    CASH_DOC,
    COLLECTION_ATTRIBUTES,
    DAILY_ENTRIES,
    DEBTS,
    NOTIFICATIONS,
    OBJECTIVES,
    PROVISIONAL_DEBTS,
    SETTINGS_DOC,
    AppData,
    AutomationTask,
    DailyEntry,
    Debt,
    DebtStatus,
    Notification,
    Objective,
    ProvisionalDebt,
    ProvisionalDebtStatus,
    Settings,
)
from busledger.domain.errors import ValidationError, unknown_collection
from busledger.domain.revenue import rederive
from busledger.sync.base import NullSync, SyncPort

logger = logging.getLogger(__name__)

DEFAULT_APP_KEY = "busledger-store"

# Collections kept newest-first by date when replaced from a remote snapshot
_DATE_SORTED = {DAILY_ENTRIES, NOTIFICATIONS}


class LedgerStore:
    """In-memory ledger with write-through persistence and remote mirroring."""

    def __init__(
        self,
        db: Optional[Database] = None,
        sync: Optional[SyncPort] = None,
        app_key: str = DEFAULT_APP_KEY,
        data: Optional[AppData] = None,
    ):
        """Initialize the ledger store.

        Args:
            db: Optional database the aggregate is written through to
            sync: Optional remote sync port notified of every mutation
            app_key: Application identifier the aggregate is stored under
            data: Optional initial aggregate (an empty ledger otherwise)
        """
        self.db = db
        self.sync = sync or NullSync()
        self.app_key = app_key
        self.data = data or AppData()
        self._lock = threading.RLock()

    @classmethod
    def open(
        cls,
        db: Optional[Database] = None,
        sync: Optional[SyncPort] = None,
        app_key: str = DEFAULT_APP_KEY,
    ) -> "LedgerStore":
        """Create a store and load its persisted state."""
        store = cls(db=db, sync=sync, app_key=app_key)
        store.load()
        return store

    def __enter__(self) -> "LedgerStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def lock(self) -> threading.RLock:
        """Lock serializing access; hold it to group several operations."""
        return self._lock

    def load(self) -> None:
        """Replace the in-memory aggregate with the persisted one, if any."""
        if self.db is None:
            return
        with self._lock:
            data = self.db.load_app_data(self.app_key)
            if data is not None:
                self.data = data
                logger.debug(
                    "Loaded ledger %s: %d entries, cash balance %s",
                    self.app_key,
                    len(data.daily_entries),
                    data.cash_balance,
                )

    def flush(self) -> None:
        """Write the whole aggregate to the database."""
        if self.db is None:
            return
        with self._lock:
            self.db.save_app_data(self.app_key, self.data)

    def close(self) -> None:
        """Flush persisted state."""
        self.flush()

    # Read access
    @property
    def daily_entries(self) -> tuple[DailyEntry, ...]:
        return tuple(self.data.daily_entries)

    @property
    def debts(self) -> tuple[Debt, ...]:
        return tuple(self.data.debts)

    @property
    def provisional_debts(self) -> tuple[ProvisionalDebt, ...]:
        return tuple(self.data.provisional_debts)

    @property
    def automations(self) -> tuple[AutomationTask, ...]:
        return tuple(self.data.automations)

    @property
    def objectives(self) -> tuple[Objective, ...]:
        return tuple(self.data.objectives)

    @property
    def notifications(self) -> tuple[Notification, ...]:
        return tuple(self.data.notifications)

    @property
    def settings(self) -> Settings:
        return self.data.settings

    @property
    def cash_balance(self) -> Decimal:
        return self.data.cash_balance

    def get_daily_entry(self, entry_id: str) -> Optional[DailyEntry]:
        return self._find(DAILY_ENTRIES, entry_id)

    def find_entry_by_date(self, entry_date: date) -> Optional[DailyEntry]:
        """Return the first daily entry recorded for a date."""
        for entry in self.data.daily_entries:
            if entry.date == entry_date:
                return entry
        return None

    def get_debt(self, debt_id: str) -> Optional[Debt]:
        return self._find(DEBTS, debt_id)

    def get_provisional_debt(self, provisional_debt_id: str) -> Optional[ProvisionalDebt]:
        return self._find(PROVISIONAL_DEBTS, provisional_debt_id)

    def get_automation(self, automation_id: str) -> Optional[AutomationTask]:
        return self._find(AUTOMATIONS, automation_id)

    def get_objective(self, objective_id: str) -> Optional[Objective]:
        return self._find(OBJECTIVES, objective_id)

    def get_notification(self, notification_id: str) -> Optional[Notification]:
        return self._find(NOTIFICATIONS, notification_id)

    # Daily entry operations
    def add_daily_entry(self, entry: DailyEntry) -> DailyEntry:
        """Insert a daily entry and add its net revenue to the cash balance.

        The net revenue is re-derived from the entry's contents; a supplied
        value that disagrees is replaced.

        Returns:
            The stored entry
        """
        derived = rederive(entry)
        if derived.net_revenue != entry.net_revenue:
            logger.warning(
                "Daily entry %s carried net revenue %s, derived %s",
                entry.id,
                entry.net_revenue,
                derived.net_revenue,
            )
        with self._lock:
            self.data.daily_entries = [derived, *self.data.daily_entries]
            self.data.cash_balance += derived.net_revenue
            self._commit()
            logger.debug("Added daily entry %s for %s (net %s)", derived.id, derived.date, derived.net_revenue)
        self._push_entity(DAILY_ENTRIES, derived)
        self._push_cash()
        return derived

    def update_daily_entry(self, entry_id: str, **fields: Any) -> Optional[DailyEntry]:
        """Merge fields into a daily entry.

        The net revenue is re-derived from the merged entry and the cash
        balance moves by the difference with the previous net revenue.

        Returns:
            The updated entry, or None if the id is unknown
        """
        with self._lock:
            existing = self._find(DAILY_ENTRIES, entry_id)
            if existing is None:
                logger.debug("Ignoring update of unknown daily entry %s", entry_id)
                return None
            merged = rederive(replace(existing, **fields))
            delta = merged.net_revenue - existing.net_revenue
            self._replace_item(DAILY_ENTRIES, merged)
            self.data.cash_balance += delta
            self._commit()
        self._push_entity(DAILY_ENTRIES, merged)
        if delta:
            self._push_cash()
        return merged

    def delete_daily_entry(self, entry_id: str) -> Optional[DailyEntry]:
        """Remove a daily entry and subtract its net revenue from the cash balance.

        Returns:
            The removed entry, or None if the id is unknown
        """
        with self._lock:
            removed = self._remove_item(DAILY_ENTRIES, entry_id)
            if removed is None:
                return None
            self.data.cash_balance -= removed.net_revenue
            self._commit()
        self._push_removal(DAILY_ENTRIES, entry_id)
        self._push_cash()
        return removed

    # Debt operations
    def add_debt(self, debt: Debt) -> Debt:
        return self._add(DEBTS, debt)

    def update_debt(self, debt_id: str, **fields: Any) -> Optional[Debt]:
        """Merge fields into a debt.

        ``status`` and ``remaining_amount`` are taken as given; use
        :meth:`record_debt_payment` for a derived status.
        """
        return self._update(DEBTS, debt_id, fields)

    def delete_debt(self, debt_id: str) -> Optional[Debt]:
        return self._delete(DEBTS, debt_id)

    def record_debt_payment(self, debt_id: str, amount: Decimal) -> Optional[Debt]:
        """Reduce a debt's outstanding amount and derive its status.

        The outstanding amount never drops below zero nor exceeds the
        original amount. The cash balance is not touched.
        """
        if amount < 0:
            raise ValidationError(f"Payment amount must not be negative: {amount}")
        with self._lock:
            debt = self._find(DEBTS, debt_id)
            if debt is None:
                return None
            remaining = clamp_remaining(debt.amount, debt.remaining_amount - amount)
            return self._update(
                DEBTS,
                debt_id,
                {"remaining_amount": remaining, "status": derive_debt_status(debt.amount, remaining)},
            )

    def mark_debt_paid(self, debt_id: str) -> Optional[Debt]:
        """Mark a debt fully paid."""
        return self._update(DEBTS, debt_id, {"status": DebtStatus.PAID, "remaining_amount": Decimal("0")})

    # Provisional debt operations
    def add_provisional_debt(self, provisional_debt: ProvisionalDebt) -> ProvisionalDebt:
        return self._add(PROVISIONAL_DEBTS, provisional_debt)

    def update_provisional_debt(self, provisional_debt_id: str, **fields: Any) -> Optional[ProvisionalDebt]:
        return self._update(PROVISIONAL_DEBTS, provisional_debt_id, fields)

    def delete_provisional_debt(self, provisional_debt_id: str) -> Optional[ProvisionalDebt]:
        return self._delete(PROVISIONAL_DEBTS, provisional_debt_id)

    def confirm_provisional_debt(self, provisional_debt_id: str) -> Optional[ProvisionalDebt]:
        """Promote a provisional debt; it stays in its own collection."""
        return self._update(
            PROVISIONAL_DEBTS, provisional_debt_id, {"status": ProvisionalDebtStatus.CONFIRMED}
        )

    def cancel_provisional_debt(self, provisional_debt_id: str) -> Optional[ProvisionalDebt]:
        return self._update(
            PROVISIONAL_DEBTS, provisional_debt_id, {"status": ProvisionalDebtStatus.CANCELLED}
        )

    # Automation operations
    def add_automation(self, task: AutomationTask) -> AutomationTask:
        return self._add(AUTOMATIONS, task)

    def update_automation(self, automation_id: str, **fields: Any) -> Optional[AutomationTask]:
        return self._update(AUTOMATIONS, automation_id, fields)

    def delete_automation(self, automation_id: str) -> Optional[AutomationTask]:
        return self._delete(AUTOMATIONS, automation_id)

    def toggle_automation(self, automation_id: str) -> Optional[AutomationTask]:
        """Flip ``is_active``; nothing else changes."""
        with self._lock:
            task = self._find(AUTOMATIONS, automation_id)
            if task is None:
                return None
            return self._update(AUTOMATIONS, automation_id, {"is_active": not task.is_active})

    # Objective operations
    def add_objective(self, objective: Objective) -> Objective:
        return self._add(OBJECTIVES, objective)

    def update_objective(self, objective_id: str, **fields: Any) -> Optional[Objective]:
        return self._update(OBJECTIVES, objective_id, fields)

    def delete_objective(self, objective_id: str) -> Optional[Objective]:
        return self._delete(OBJECTIVES, objective_id)

    # Notification operations
    def add_notification(self, notification: Notification) -> Notification:
        return self._add(NOTIFICATIONS, notification)

    def update_notification(self, notification_id: str, **fields: Any) -> Optional[Notification]:
        return self._update(NOTIFICATIONS, notification_id, fields)

    def mark_notification_read(self, notification_id: str) -> Optional[Notification]:
        return self._update(NOTIFICATIONS, notification_id, {"read": True})

    def delete_notification(self, notification_id: str) -> Optional[Notification]:
        return self._delete(NOTIFICATIONS, notification_id)

    def clear_all_notifications(self) -> int:
        """Remove every notification.

        Returns:
            Number of notifications removed
        """
        with self._lock:
            removed = self.data.notifications
            self.data.notifications = []
            self._commit()
        for notification in removed:
            self._push_removal(NOTIFICATIONS, notification.id)
        return len(removed)

    # Settings and cash operations
    def update_settings(self, **fields: Any) -> Settings:
        """Shallow-merge fields into the settings."""
        with self._lock:
            self.data.settings = replace(self.data.settings, **fields)
            self._commit()
            settings = self.data.settings
        self._push(self.sync.push_settings, settings)
        return settings

    def update_cash_balance(self, amount: Decimal) -> Decimal:
        """Set the cash balance to an absolute value (manual correction)."""
        with self._lock:
            self.data.cash_balance = amount
            self._commit()
        self._push_cash()
        return amount

    def add_to_cash(self, amount: Decimal) -> Decimal:
        with self._lock:
            self.data.cash_balance += amount
            self._commit()
            balance = self.data.cash_balance
        self._push_cash()
        return balance

    def remove_from_cash(self, amount: Decimal) -> Decimal:
        with self._lock:
            self.data.cash_balance -= amount
            self._commit()
            balance = self.data.cash_balance
        self._push_cash()
        return balance

    # Remote snapshots
    def apply_collection_snapshot(self, collection_name: str, items: Iterable[Any]) -> None:
        """Replace a collection wholesale with the remote state.

        Nothing is pushed back to the remote store.
        """
        attribute = self._attribute(collection_name)
        items = list(items)
        if collection_name in _DATE_SORTED:
            items.sort(key=lambda item: item.date.isoformat() if item.date else "", reverse=True)
        with self._lock:
            setattr(self.data, attribute, items)
            self._commit()
        logger.debug("Applied remote snapshot of %s (%d items)", collection_name, len(items))

    def apply_document_snapshot(self, doc_name: str, value: Any) -> None:
        """Apply a remote singleton document; a None value is ignored."""
        if value is None:
            return
        with self._lock:
            if doc_name == SETTINGS_DOC:
                self.data.settings = value
            elif doc_name == CASH_DOC:
                self.data.cash_balance = value
            else:
                raise ValidationError(unknown_collection(doc_name))
            self._commit()
        logger.debug("Applied remote %s document", doc_name)

    # Internals
    def _attribute(self, collection_name: str) -> str:
        try:
            return COLLECTION_ATTRIBUTES[collection_name]
        except KeyError:
            raise ValidationError(unknown_collection(collection_name)) from None

    def _items(self, collection_name: str) -> list:
        return getattr(self.data, self._attribute(collection_name))

    def _find(self, collection_name: str, entity_id: str) -> Optional[Any]:
        for item in self._items(collection_name):
            if item.id == entity_id:
                return item
        return None

    def _replace_item(self, collection_name: str, entity: Any) -> None:
        items = [entity if item.id == entity.id else item for item in self._items(collection_name)]
        setattr(self.data, self._attribute(collection_name), items)

    def _remove_item(self, collection_name: str, entity_id: str) -> Optional[Any]:
        removed = self._find(collection_name, entity_id)
        if removed is not None:
            items = [item for item in self._items(collection_name) if item.id != entity_id]
            setattr(self.data, self._attribute(collection_name), items)
        return removed

    def _add(self, collection_name: str, entity: Any) -> Any:
        with self._lock:
            setattr(self.data, self._attribute(collection_name), [entity, *self._items(collection_name)])
            self._commit()
        logger.debug("Added %s %s", collection_name, entity.id)
        self._push_entity(collection_name, entity)
        return entity

    def _update(self, collection_name: str, entity_id: str, fields: dict[str, Any]) -> Optional[Any]:
        with self._lock:
            existing = self._find(collection_name, entity_id)
            if existing is None:
                logger.debug("Ignoring update of unknown %s %s", collection_name, entity_id)
                return None
            merged = replace(existing, **fields)
            self._replace_item(collection_name, merged)
            self._commit()
        self._push_entity(collection_name, merged)
        return merged

    def _delete(self, collection_name: str, entity_id: str) -> Optional[Any]:
        with self._lock:
            removed = self._remove_item(collection_name, entity_id)
            if removed is None:
                return None
            self._commit()
        self._push_removal(collection_name, entity_id)
        return removed

    def _commit(self) -> None:
        self.flush()

    def _push_entity(self, collection_name: str, entity: Any) -> None:
        self._push(self.sync.push_entity, collection_name, entity)

    def _push_removal(self, collection_name: str, entity_id: str) -> None:
        self._push(self.sync.push_removal, collection_name, entity_id)

    def _push_cash(self) -> None:
        self._push(self.sync.push_cash_balance, self.data.cash_balance)

    def _push(self, method, *args: Any) -> None:
        try:
            method(*args)
        except Exception:
            logger.exception("Remote sync call %s failed", getattr(method, "__name__", method))
