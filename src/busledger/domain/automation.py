"""Automation domain service.

Turns active recurring charge templates into expense items. Weekly and
monthly tasks remember the day they last fired and stay quiet until their
window has elapsed; the monthly window is a fixed 30 days, not a calendar
month. Daily tasks fire on every call and one-entry-per-date upstream keeps
them from being counted twice for a day.
"""

import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional

from busledger.domain.entities import (
    AutomationTask,
    DailyEntry,
    DayType,
    ExpenseItem,
    Frequency,
    expense_category_label,
)
from busledger.domain.ledger import LedgerStore
from busledger.domain.revenue import build_daily_entry
from busledger.utils.ids import new_id

logger = logging.getLogger(__name__)

RECURRENCE_WINDOWS = {
    Frequency.WEEKLY: timedelta(days=7),
    Frequency.MONTHLY: timedelta(days=30),
}


def new_automation(
    category: str,
    amount: Decimal,
    frequency: Frequency = Frequency.DAILY,
    name: Optional[str] = None,
    subcategory: Optional[str] = None,
    liters: Optional[Decimal] = None,
    comment: str = "",
    is_active: bool = True,
) -> AutomationTask:
    """Create an automation task; the name defaults to the category label."""
    return AutomationTask(
        id=new_id(),
        name=name or expense_category_label(category),
        category=category,
        amount=amount,
        frequency=Frequency(frequency),
        is_active=is_active,
        comment=comment,
        subcategory=subcategory,
        liters=liters or None,
    )


def is_due(task: AutomationTask, now: datetime) -> bool:
    """Tell whether a task should fire at ``now``.

    Inactive tasks are never due. The elapsed time is measured from midnight
    of the day the task last fired.
    """
    if not task.is_active:
        return False
    if task.frequency == Frequency.DAILY:
        return True
    if task.last_triggered is None:
        return True
    last = datetime.combine(task.last_triggered, time.min, tzinfo=now.tzinfo)
    return now - last >= RECURRENCE_WINDOWS[task.frequency]


def expense_from_task(task: AutomationTask) -> ExpenseItem:
    """Materialize a task as an automated expense item."""
    return ExpenseItem(
        id=new_id(),
        category=task.category,
        subcategory=task.subcategory,
        amount=task.amount,
        liters=task.liters,
        comment=task.comment or task.name,
        is_automated=True,
        automation_id=task.id,
    )


class AutomationEngine:
    """Service materializing recurring charges."""

    def __init__(self, store: LedgerStore):
        """Initialize automation engine.

        Args:
            store: Ledger store holding the automation tasks
        """
        self.store = store

    def trigger_due_automations(self, now: Optional[datetime] = None) -> list[ExpenseItem]:
        """Materialize every active task that is due at ``now``.

        Weekly and monthly tasks get ``last_triggered`` set to the day of
        ``now``; daily tasks are not stamped.

        Args:
            now: Reference time, defaults to the current local time

        Returns:
            One automated expense item per due task
        """
        now = now or datetime.now()
        triggered: list[ExpenseItem] = []
        with self.store.lock:
            for task in self.store.automations:
                if not is_due(task, now):
                    continue
                triggered.append(expense_from_task(task))
                if task.frequency != Frequency.DAILY:
                    self.store.update_automation(task.id, last_triggered=now.date())
        if triggered:
            logger.info("Triggered %d automation(s)", len(triggered))
        return triggered

    def draft_expenses(self, target_date: Optional[date] = None) -> list[ExpenseItem]:
        """Propose every active daily automation as an expense.

        The proposal is the same whatever the target date; nothing is
        written to the store.
        """
        return [
            expense_from_task(task)
            for task in self.store.automations
            if task.is_active and task.frequency == Frequency.DAILY
        ]

    def draft_daily_entry(self, target_date: date) -> DailyEntry:
        """Return the entry to edit for a date.

        The existing entry for the date is returned as is; otherwise a new,
        unsaved normal-day entry pre-filled with the daily automations.
        """
        existing = self.store.find_entry_by_date(target_date)
        if existing is not None:
            return existing
        return build_daily_entry(target_date, DayType.NORMAL, expenses=self.draft_expenses(target_date))

    def record_due_automations(
        self, target_date: Optional[date] = None, now: Optional[datetime] = None
    ) -> Optional[DailyEntry]:
        """Book due automations as expenses of the entry for ``target_date``.

        The entry for the date is created if there is none. Daily tasks
        already booked on that entry are skipped, so repeated calls for the
        same day do not double-count them. The cash balance follows through
        the store. Nothing is triggered or stamped when the day is recorded
        as inactive.

        Returns:
            The entry holding the new expenses, or None when nothing was booked
        """
        now = now or datetime.now()
        target_date = target_date or now.date()
        with self.store.lock:
            entry = self.store.find_entry_by_date(target_date)
            if entry is not None and entry.day_type == DayType.INACTIVE:
                logger.info("Entry for %s is inactive; automations left pending", target_date)
                return None
            booked = {item.automation_id for item in entry.expenses} if entry is not None else set()
            due = [
                item
                for item in self.trigger_due_automations(now)
                if not (item.automation_id in booked and self._is_daily(item.automation_id))
            ]
            if not due:
                return None
            if entry is None:
                return self.store.add_daily_entry(build_daily_entry(target_date, DayType.NORMAL, expenses=due))
            return self.store.update_daily_entry(entry.id, expenses=entry.expenses + tuple(due))

    def _is_daily(self, automation_id: Optional[str]) -> bool:
        task = self.store.get_automation(automation_id) if automation_id else None
        return task is not None and task.frequency == Frequency.DAILY
