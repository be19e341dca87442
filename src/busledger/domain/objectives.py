"""Objective lifecycle and reminder notifications."""

import logging
import math
import threading
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from busledger.domain.entities import (
    Notification,
    NotificationType,
    Objective,
    ObjectiveStatus,
)
from busledger.domain.ledger import LedgerStore
from busledger.utils.ids import new_id

logger = logging.getLogger(__name__)

DEFAULT_REMINDER_DAYS = 7
UPCOMING_ALERT_DAYS = 7
DEFAULT_INTERVAL_SECONDS = 5 * 60
SECONDS_PER_DAY = 86400


def new_objective(
    title: str,
    target_date: date,
    description: str = "",
    amount: Optional[Decimal] = None,
    reminder_days: int = DEFAULT_REMINDER_DAYS,
) -> Objective:
    """Create a pending objective."""
    return Objective(
        id=new_id(),
        title=title,
        description=description,
        target_date=target_date,
        amount=amount or None,
        status=ObjectiveStatus.PENDING,
        reminder_days=reminder_days or DEFAULT_REMINDER_DAYS,
    )


def days_until(target_date: date, now: datetime) -> int:
    """Whole days from ``now`` to midnight of ``target_date``, rounded up."""
    target = datetime.combine(target_date, time.min, tzinfo=now.tzinfo)
    return math.ceil((target - now).total_seconds() / SECONDS_PER_DAY)


def reminder_message(objective: Objective, diff_days: int) -> str:
    """Reminder text; the trailing ``[id]`` ties it to its objective."""
    return (
        f'Reminder: "{objective.title}" due on {objective.target_date.isoformat()} '
        f"(in {diff_days} day(s)) [{objective.id}]"
    )


def references_objective(notification: Notification, objective_id: str) -> bool:
    return notification.type == NotificationType.OBJECTIVE and objective_id in notification.message


@dataclass(frozen=True)
class Alerts:
    """What the alert badge counts."""

    unread_notifications: tuple[Notification, ...]
    late_objectives: tuple[Objective, ...]
    upcoming_objectives: tuple[Objective, ...]

    @property
    def total(self) -> int:
        return len(self.unread_notifications) + len(self.late_objectives) + len(self.upcoming_objectives)


class ObjectiveLifecycle:
    """Service keeping objective status and reminders up to date."""

    def __init__(self, store: LedgerStore):
        """Initialize objective lifecycle.

        Args:
            store: Ledger store holding objectives and notifications
        """
        self.store = store

    def reconcile_objectives(self, now: Optional[datetime] = None) -> list[Notification]:
        """Re-evaluate every objective that is not done.

        Objectives past their target date become late. Objectives whose
        target date is within their reminder window get one unread reminder;
        an existing objective notification for the same id, read or not,
        prevents another one. Done objectives are never touched. Safe to call
        repeatedly.

        Args:
            now: Reference time, defaults to the current local time

        Returns:
            Notifications created by this call
        """
        now = now or datetime.now()
        created: list[Notification] = []
        with self.store.lock:
            for objective in self.store.objectives:
                if objective.status == ObjectiveStatus.DONE:
                    continue

                diff_days = days_until(objective.target_date, now)
                if diff_days < 0 and objective.status != ObjectiveStatus.LATE:
                    self.store.update_objective(objective.id, status=ObjectiveStatus.LATE)
                    logger.info("Objective %s is late", objective.id)

                window = objective.reminder_days or DEFAULT_REMINDER_DAYS
                if 0 <= diff_days <= window and not self._already_notified(objective.id):
                    notification = Notification(
                        id=new_id(),
                        type=NotificationType.OBJECTIVE,
                        message=reminder_message(objective, diff_days),
                        date=now,
                        read=False,
                    )
                    self.store.add_notification(notification)
                    created.append(notification)
        return created

    def mark_done(self, objective_id: str) -> Optional[Objective]:
        """Complete an objective; done is terminal."""
        return self.store.update_objective(objective_id, status=ObjectiveStatus.DONE)

    def alerts(self, now: Optional[datetime] = None) -> Alerts:
        """Collect unread notifications, late objectives and pending objectives due within a week."""
        now = now or datetime.now()
        objectives = self.store.objectives
        return Alerts(
            unread_notifications=tuple(n for n in self.store.notifications if not n.read),
            late_objectives=tuple(o for o in objectives if o.status == ObjectiveStatus.LATE),
            upcoming_objectives=tuple(
                o
                for o in objectives
                if o.status == ObjectiveStatus.PENDING
                and 0 <= days_until(o.target_date, now) <= UPCOMING_ALERT_DAYS
            ),
        )

    def run_periodically(
        self,
        stop_event: threading.Event,
        interval: float = DEFAULT_INTERVAL_SECONDS,
    ) -> None:
        """Reconcile now and then every ``interval`` seconds until ``stop_event`` is set."""
        while not stop_event.is_set():
            created = self.reconcile_objectives()
            if created:
                logger.info("Created %d objective reminder(s)", len(created))
            stop_event.wait(interval)

    def _already_notified(self, objective_id: str) -> bool:
        return any(references_objective(n, objective_id) for n in self.store.notifications)
