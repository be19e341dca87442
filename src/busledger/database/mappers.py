"""Mapper functions to convert between domain entities and stored documents.

Documents use the camelCase layout shared with the remote store, so the same
functions serve the local state blob and the sync adapter. Parsing is
forgiving: missing fields take defaults and non-numeric amounts become zero.
Entries and objectives without a valid date are rejected with ValueError.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Optional

from busledger.domain import entities as domain
from busledger.utils.amount_parser import coerce_amount
from busledger.utils.date_parser import parse_iso_date, parse_timestamp

Document = dict[str, Any]
NumberConverter = Callable[[Optional[Decimal]], Any]


def number_to_document(value: Optional[Decimal]) -> Optional[int | float]:
    """Convert a Decimal into a JSON number, keeping integers integral."""
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def amount_to_string(value: Optional[Decimal]) -> Optional[str]:
    """Convert a Decimal into its exact string form."""
    return str(value) if value is not None else None


def _optional_amount(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return coerce_amount(value)


def _required_date(doc: Document, key: str) -> date:
    value = parse_iso_date(doc.get(key))
    if value is None:
        raise ValueError(f"Missing {key} in document {doc.get('id')}")
    return value


def _date_to_document(value: Optional[date]) -> str:
    return value.isoformat() if value is not None else ""


def _compact(doc: Document) -> Document:
    """Drop keys whose value is None (the remote store rejects undefined fields)."""
    return {key: value for key, value in doc.items() if value is not None}


def expense_to_document(item: domain.ExpenseItem, number: NumberConverter = number_to_document) -> Document:
    """Convert ExpenseItem entity to a document."""
    return _compact(
        {
            "id": item.id,
            "category": item.category,
            "subcategory": item.subcategory,
            "amount": number(item.amount),
            "liters": number(item.liters),
            "comment": item.comment,
            "isAutomated": item.is_automated or None,
            "automationId": item.automation_id,
        }
    )


def expense_to_domain(doc: Document) -> domain.ExpenseItem:
    """Convert a document to ExpenseItem entity."""
    return domain.ExpenseItem(
        id=str(doc["id"]),
        category=doc.get("category") or "autre",
        subcategory=doc.get("subcategory"),
        amount=coerce_amount(doc.get("amount")),
        liters=_optional_amount(doc.get("liters")),
        comment=doc.get("comment") or "",
        is_automated=bool(doc.get("isAutomated", False)),
        automation_id=doc.get("automationId"),
    )


def breakdown_to_document(item: domain.BreakdownItem, number: NumberConverter = number_to_document) -> Document:
    """Convert BreakdownItem entity to a document."""
    return {
        "id": item.id,
        "category": item.category,
        "partChanged": item.part_changed,
        "cause": item.cause,
        "amount": number(item.amount),
    }


def breakdown_to_domain(doc: Document) -> domain.BreakdownItem:
    """Convert a document to BreakdownItem entity."""
    return domain.BreakdownItem(
        id=str(doc["id"]),
        category=doc.get("category") or "Other",
        part_changed=doc.get("partChanged") or "",
        cause=doc.get("cause") or "",
        amount=coerce_amount(doc.get("amount")),
    )


def daily_entry_to_document(entry: domain.DailyEntry, number: NumberConverter = number_to_document) -> Document:
    """Convert DailyEntry entity to a document."""
    return {
        "id": entry.id,
        "date": _date_to_document(entry.date),
        "dayType": entry.day_type.value,
        "revenue": number(entry.revenue),
        "expenses": [expense_to_document(item, number) for item in entry.expenses],
        "breakdowns": [breakdown_to_document(item, number) for item in entry.breakdowns],
        "comment": entry.comment,
        "netRevenue": number(entry.net_revenue),
    }


def daily_entry_to_domain(doc: Document) -> domain.DailyEntry:
    """Convert a document to DailyEntry entity.

    The stored ``netRevenue`` is kept as is; older documents without a day
    type are treated as normal days.
    """
    return domain.DailyEntry(
        id=str(doc["id"]),
        date=_required_date(doc, "date"),
        day_type=domain.DayType(doc.get("dayType") or domain.DayType.NORMAL.value),
        revenue=coerce_amount(doc.get("revenue")),
        expenses=tuple(expense_to_domain(item) for item in doc.get("expenses") or ()),
        breakdowns=tuple(breakdown_to_domain(item) for item in doc.get("breakdowns") or ()),
        comment=doc.get("comment") or "",
        net_revenue=coerce_amount(doc.get("netRevenue")),
    )


def debt_to_document(debt: domain.Debt, number: NumberConverter = number_to_document) -> Document:
    """Convert Debt entity to a document."""
    return {
        "id": debt.id,
        "supplier": debt.supplier,
        "supplierType": debt.supplier_type.value,
        "part": debt.part,
        "amount": number(debt.amount),
        "remainingAmount": number(debt.remaining_amount),
        "dateCreated": _date_to_document(debt.date_created),
        "dateDue": _date_to_document(debt.date_due),
        "status": debt.status.value,
        "notes": debt.notes,
    }


def debt_to_domain(doc: Document) -> domain.Debt:
    """Convert a document to Debt entity."""
    return domain.Debt(
        id=str(doc["id"]),
        supplier=doc.get("supplier") or "",
        supplier_type=domain.SupplierType(doc.get("supplierType") or domain.SupplierType.OTHER.value),
        part=doc.get("part") or "",
        amount=coerce_amount(doc.get("amount")),
        remaining_amount=coerce_amount(doc.get("remainingAmount")),
        date_created=parse_iso_date(doc.get("dateCreated")),
        date_due=parse_iso_date(doc.get("dateDue")),
        status=domain.DebtStatus(doc.get("status") or domain.DebtStatus.PENDING.value),
        notes=doc.get("notes") or "",
    )


def provisional_debt_to_document(
    pd: domain.ProvisionalDebt, number: NumberConverter = number_to_document
) -> Document:
    """Convert ProvisionalDebt entity to a document."""
    return _compact(
        {
            "id": pd.id,
            "label": pd.label,
            "originalDebtId": pd.original_debt_id,
            "amount": number(pd.amount),
            "dateCreated": _date_to_document(pd.date_created),
            "status": pd.status.value,
            "notes": pd.notes,
        }
    )


def provisional_debt_to_domain(doc: Document) -> domain.ProvisionalDebt:
    """Convert a document to ProvisionalDebt entity."""
    return domain.ProvisionalDebt(
        id=str(doc["id"]),
        label=doc.get("label") or "",
        original_debt_id=doc.get("originalDebtId") or None,
        amount=coerce_amount(doc.get("amount")),
        date_created=parse_iso_date(doc.get("dateCreated")),
        status=domain.ProvisionalDebtStatus(
            doc.get("status") or domain.ProvisionalDebtStatus.PROVISIONAL.value
        ),
        notes=doc.get("notes") or "",
    )


def automation_to_document(task: domain.AutomationTask, number: NumberConverter = number_to_document) -> Document:
    """Convert AutomationTask entity to a document."""
    return _compact(
        {
            "id": task.id,
            "name": task.name,
            "category": task.category,
            "subcategory": task.subcategory,
            "amount": number(task.amount),
            "liters": number(task.liters),
            "frequency": task.frequency.value,
            "isActive": task.is_active,
            "lastTriggered": task.last_triggered.isoformat() if task.last_triggered else None,
            "comment": task.comment,
        }
    )


def automation_to_domain(doc: Document) -> domain.AutomationTask:
    """Convert a document to AutomationTask entity."""
    return domain.AutomationTask(
        id=str(doc["id"]),
        name=doc.get("name") or "",
        category=doc.get("category") or "autre",
        subcategory=doc.get("subcategory"),
        amount=coerce_amount(doc.get("amount")),
        liters=_optional_amount(doc.get("liters")),
        frequency=domain.Frequency(doc.get("frequency") or domain.Frequency.DAILY.value),
        is_active=bool(doc.get("isActive", True)),
        last_triggered=parse_iso_date(doc.get("lastTriggered")),
        comment=doc.get("comment") or "",
    )


def objective_to_document(objective: domain.Objective, number: NumberConverter = number_to_document) -> Document:
    """Convert Objective entity to a document."""
    return _compact(
        {
            "id": objective.id,
            "title": objective.title,
            "description": objective.description,
            "targetDate": _date_to_document(objective.target_date),
            "amount": number(objective.amount),
            "status": objective.status.value,
            "reminderDays": objective.reminder_days,
        }
    )


def objective_to_domain(doc: Document) -> domain.Objective:
    """Convert a document to Objective entity."""
    try:
        reminder_days = int(doc.get("reminderDays") or 7)
    except (TypeError, ValueError):
        reminder_days = 7
    return domain.Objective(
        id=str(doc["id"]),
        title=doc.get("title") or "",
        description=doc.get("description") or "",
        target_date=_required_date(doc, "targetDate"),
        amount=_optional_amount(doc.get("amount")),
        status=domain.ObjectiveStatus(doc.get("status") or domain.ObjectiveStatus.PENDING.value),
        reminder_days=reminder_days,
    )


def notification_to_document(
    notification: domain.Notification, number: NumberConverter = number_to_document
) -> Document:
    """Convert Notification entity to a document. Notifications carry no amounts."""
    return {
        "id": notification.id,
        "type": notification.type.value,
        "message": notification.message,
        "date": notification.date.isoformat(),
        "read": notification.read,
    }


def notification_to_domain(doc: Document) -> domain.Notification:
    """Convert a document to Notification entity."""
    return domain.Notification(
        id=str(doc["id"]),
        type=domain.NotificationType(doc.get("type") or domain.NotificationType.REMINDER.value),
        message=doc.get("message") or "",
        date=parse_timestamp(doc.get("date")),
        read=bool(doc.get("read", False)),
    )


def settings_to_document(settings: domain.Settings) -> Document:
    """Convert Settings entity to a document."""
    staff = settings.staff
    return {
        "staff": {
            "driverName": staff.driver_name,
            "driverPhone": staff.driver_phone,
            "controllerName": staff.controller_name,
            "controllerPhone": staff.controller_phone,
            "collaboratorName": staff.collaborator_name,
            "collaboratorPhone": staff.collaborator_phone,
        },
        "currency": settings.currency,
        "vehicleName": settings.vehicle_name,
        "vehiclePlate": settings.vehicle_plate,
        "ownerName": settings.owner_name,
    }


def settings_to_domain(doc: Document) -> domain.Settings:
    """Convert a document to Settings entity."""
    defaults = domain.Settings()
    staff_doc = doc.get("staff") or {}
    return domain.Settings(
        staff=domain.Staff(
            driver_name=staff_doc.get("driverName") or "",
            driver_phone=staff_doc.get("driverPhone") or "",
            controller_name=staff_doc.get("controllerName") or "",
            controller_phone=staff_doc.get("controllerPhone") or "",
            collaborator_name=staff_doc.get("collaboratorName") or "",
            collaborator_phone=staff_doc.get("collaboratorPhone") or "",
        ),
        currency=doc.get("currency") or defaults.currency,
        vehicle_name=doc.get("vehicleName") or defaults.vehicle_name,
        vehicle_plate=doc.get("vehiclePlate") or "",
        owner_name=doc.get("ownerName") or "",
    )


@dataclass(frozen=True)
class CollectionMapper:
    """Binds a remote collection name to its AppData attribute and converters."""

    name: str
    to_document: Callable[..., Document]
    to_domain: Callable[[Document], Any]

    @property
    def attribute(self) -> str:
        return domain.COLLECTION_ATTRIBUTES[self.name]


COLLECTIONS: dict[str, CollectionMapper] = {
    mapper.name: mapper
    for mapper in (
        CollectionMapper(domain.DAILY_ENTRIES, daily_entry_to_document, daily_entry_to_domain),
        CollectionMapper(domain.DEBTS, debt_to_document, debt_to_domain),
        CollectionMapper(domain.PROVISIONAL_DEBTS, provisional_debt_to_document, provisional_debt_to_domain),
        CollectionMapper(domain.AUTOMATIONS, automation_to_document, automation_to_domain),
        CollectionMapper(domain.OBJECTIVES, objective_to_document, objective_to_domain),
        CollectionMapper(domain.NOTIFICATIONS, notification_to_document, notification_to_domain),
    )
}


def collection_mapper(name: str) -> CollectionMapper:
    """Return the mapper for a remote collection name.

    Raises:
        ValueError: If the collection name is unknown
    """
    try:
        return COLLECTIONS[name]
    except KeyError:
        raise ValueError(f"Unknown collection '{name}'") from None


def app_data_to_document(data: domain.AppData, number: NumberConverter = number_to_document) -> Document:
    """Serialize the whole aggregate into one document.

    Args:
        data: Aggregate to serialize
        number: Amount converter; the local blob passes :func:`amount_to_string`
            while the remote store keeps JSON numbers
    """
    doc: Document = {
        mapper.name: [mapper.to_document(item, number) for item in getattr(data, mapper.attribute)]
        for mapper in COLLECTIONS.values()
    }
    doc["settings"] = settings_to_document(data.settings)
    # Kept as a string so the balance survives the round trip exactly
    doc["cashBalance"] = str(data.cash_balance)
    return doc


def app_data_to_domain(doc: Document) -> domain.AppData:
    """Rebuild the aggregate from a stored document."""
    data = domain.AppData()
    for mapper in COLLECTIONS.values():
        items = [mapper.to_domain(item) for item in doc.get(mapper.name) or ()]
        setattr(data, mapper.attribute, items)
    if doc.get("settings"):
        data.settings = settings_to_domain(doc["settings"])
    data.cash_balance = coerce_amount(doc.get("cashBalance"))
    return data
