"""Domain model entities for busledger.

These are pure data classes representing the ledger of a single vehicle,
independent of how the aggregate is persisted or mirrored to the remote
store. Entities are immutable; the ledger store replaces them wholesale on
every update.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class DayType(str, Enum):
    """Kind of operating day recorded by a daily entry."""

    NORMAL = "normal"
    MAINTENANCE = "maintenance"
    INACTIVE = "inactive"


class SupplierType(str, Enum):
    """Kind of supplier a debt is owed to."""

    MECHANIC = "mechanic"
    WHOLESALER = "wholesaler"
    OTHER = "other"


class DebtStatus(str, Enum):
    """Settlement status of a supplier debt."""

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class ProvisionalDebtStatus(str, Enum):
    """Lifecycle status of an anticipated liability."""

    PROVISIONAL = "provisional"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Frequency(str, Enum):
    """Recurrence of an automation task."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ObjectiveStatus(str, Enum):
    """Objective state; DONE is terminal."""

    PENDING = "pending"
    DONE = "done"
    LATE = "late"


class NotificationType(str, Enum):
    """Source of a notification."""

    REMINDER = "reminder"
    AUTOMATION = "automation"
    OBJECTIVE = "objective"
    DEBT = "debt"


# (value, label, carries liters)
EXPENSE_CATEGORIES: tuple[tuple[str, str, bool], ...] = (
    ("carburant", "Fuel", True),
    ("huile_moteur", "Engine oil", True),
    ("huile_boite", "Gearbox oil", True),
    ("huile_frein", "Brake fluid", True),
    ("huile_direction", "Steering fluid", True),
    ("huile_differentiel", "Differential oil", True),
    ("salaire_chauffeur", "Driver salary", False),
    ("salaire_controleur", "Conductor salary", False),
    ("salaire_collaborateur", "Collaborator salary", False),
    ("police_jc", "Police (JC)", False),
    ("assurance", "Insurance", False),
    ("patente", "Business licence", False),
    ("lavage", "Washing", False),
    ("parking", "Parking", False),
    ("autre", "Other", False),
)

BREAKDOWN_CATEGORIES: tuple[str, ...] = (
    "Engine",
    "Brakes",
    "Transmission",
    "Suspension",
    "Steering",
    "Electrical",
    "Cooling",
    "Tyres / Wheels",
    "Bodywork",
    "Air conditioning",
    "Other",
)


def expense_category_label(category: str) -> str:
    """Return the display label for an expense category value."""
    for value, label, _ in EXPENSE_CATEGORIES:
        if value == category:
            return label
    return category


@dataclass(frozen=True)
class ExpenseItem:
    """Categorized expense attached to a daily entry."""

    id: str
    category: str
    amount: Decimal
    comment: str = ""
    subcategory: Optional[str] = None
    liters: Optional[Decimal] = None
    is_automated: bool = False
    automation_id: Optional[str] = None


@dataclass(frozen=True)
class BreakdownItem:
    """Mechanical breakdown and its repair cost."""

    id: str
    category: str
    part_changed: str
    cause: str
    amount: Decimal


@dataclass(frozen=True)
class DailyEntry:
    """One day of activity.

    ``net_revenue`` is derived from the other fields; build entries with
    :func:`busledger.domain.revenue.build_daily_entry` rather than by hand.
    """

    id: str
    date: date
    day_type: DayType
    revenue: Decimal
    expenses: tuple[ExpenseItem, ...]
    breakdowns: tuple[BreakdownItem, ...]
    comment: str
    net_revenue: Decimal


@dataclass(frozen=True)
class Debt:
    """Supplier debt domain entity."""

    id: str
    supplier: str
    supplier_type: SupplierType
    part: str
    amount: Decimal
    remaining_amount: Decimal
    date_created: date
    date_due: Optional[date]
    status: DebtStatus
    notes: str = ""


@dataclass(frozen=True)
class ProvisionalDebt:
    """Anticipated liability tracked apart from confirmed debts."""

    id: str
    label: str
    amount: Decimal
    date_created: date
    status: ProvisionalDebtStatus
    notes: str = ""
    original_debt_id: Optional[str] = None


@dataclass(frozen=True)
class AutomationTask:
    """Recurring charge template."""

    id: str
    name: str
    category: str
    amount: Decimal
    frequency: Frequency
    is_active: bool = True
    comment: str = ""
    subcategory: Optional[str] = None
    liters: Optional[Decimal] = None
    last_triggered: Optional[date] = None


@dataclass(frozen=True)
class Objective:
    """Savings or maintenance goal with a target date."""

    id: str
    title: str
    description: str
    target_date: date
    status: ObjectiveStatus = ObjectiveStatus.PENDING
    reminder_days: int = 7
    amount: Optional[Decimal] = None


@dataclass(frozen=True)
class Notification:
    """Notification domain entity."""

    id: str
    type: NotificationType
    message: str
    date: datetime
    read: bool = False


@dataclass(frozen=True)
class Staff:
    """Crew contact details."""

    driver_name: str = ""
    driver_phone: str = ""
    controller_name: str = ""
    controller_phone: str = ""
    collaborator_name: str = ""
    collaborator_phone: str = ""


@dataclass(frozen=True)
class Settings:
    """Vehicle, staff and currency metadata."""

    staff: Staff = field(default_factory=Staff)
    currency: str = "Fr"
    vehicle_name: str = "Toyota Hiace"
    vehicle_plate: str = ""
    owner_name: str = ""


@dataclass
class AppData:
    """Aggregate root holding every collection and the cash balance.

    Collections are ordered most-recent-first.
    """

    daily_entries: list[DailyEntry] = field(default_factory=list)
    debts: list[Debt] = field(default_factory=list)
    provisional_debts: list[ProvisionalDebt] = field(default_factory=list)
    automations: list[AutomationTask] = field(default_factory=list)
    objectives: list[Objective] = field(default_factory=list)
    notifications: list[Notification] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)
    cash_balance: Decimal = Decimal("0")


# Remote collection names and the AppData attribute each one fills
DAILY_ENTRIES = "dailyEntries"
DEBTS = "debts"
PROVISIONAL_DEBTS = "provisionalDebts"
AUTOMATIONS = "automations"
OBJECTIVES = "objectives"
NOTIFICATIONS = "notifications"

COLLECTION_ATTRIBUTES: dict[str, str] = {
    DAILY_ENTRIES: "daily_entries",
    DEBTS: "debts",
    PROVISIONAL_DEBTS: "provisional_debts",
    AUTOMATIONS: "automations",
    OBJECTIVES: "objectives",
    NOTIFICATIONS: "notifications",
}

# Singleton documents
SETTINGS_DOC = "settings"
CASH_DOC = "cash"
