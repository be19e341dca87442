"""Net revenue derivation.

Every code path that creates or changes a daily entry goes through
:func:`compute_net_revenue`, so the stored ``net_revenue`` never diverges
from the entry's revenue, expenses and breakdowns.
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Union

from busledger.domain.entities import BreakdownItem, DailyEntry, DayType, ExpenseItem
from busledger.utils.ids import new_id

ZERO = Decimal("0")


def sum_amounts(items: Iterable[Union[ExpenseItem, BreakdownItem]]) -> Decimal:
    """Sum the ``amount`` of expense or breakdown items."""
    return sum((item.amount for item in items), ZERO)


def compute_net_revenue(
    day_type: DayType,
    revenue: Decimal,
    expenses: Iterable[ExpenseItem],
    breakdowns: Iterable[BreakdownItem],
) -> Decimal:
    """Compute the net revenue of a day.

    Args:
        day_type: Kind of day
        revenue: Gross revenue (only counted on normal days)
        expenses: Expense items of the day
        breakdowns: Breakdown items of the day

    Returns:
        ``revenue - expenses - breakdowns`` on a normal day, the negated
        costs on a maintenance day and zero on an inactive day.
    """
    day_type = DayType(day_type)
    if day_type == DayType.INACTIVE:
        return ZERO

    costs = sum_amounts(expenses) + sum_amounts(breakdowns)
    if day_type == DayType.MAINTENANCE:
        return -costs
    return revenue - costs


def rederive(entry: DailyEntry) -> DailyEntry:
    """Return the entry with ``net_revenue`` recomputed from its contents."""
    net = compute_net_revenue(entry.day_type, entry.revenue, entry.expenses, entry.breakdowns)
    if net == entry.net_revenue:
        return entry
    return replace(entry, net_revenue=net)


def build_daily_entry(
    entry_date: date,
    day_type: DayType = DayType.NORMAL,
    revenue: Decimal = ZERO,
    expenses: Iterable[ExpenseItem] = (),
    breakdowns: Iterable[BreakdownItem] = (),
    comment: str = "",
    entry_id: Optional[str] = None,
) -> DailyEntry:
    """Create a daily entry with a derived net revenue.

    Gross revenue is only meaningful on normal days and is stored as zero
    otherwise.
    """
    day_type = DayType(day_type)
    expenses = tuple(expenses)
    breakdowns = tuple(breakdowns)
    gross = revenue if day_type == DayType.NORMAL else ZERO
    return DailyEntry(
        id=entry_id or new_id(),
        date=entry_date,
        day_type=day_type,
        revenue=gross,
        expenses=expenses,
        breakdowns=breakdowns,
        comment=comment,
        net_revenue=compute_net_revenue(day_type, gross, expenses, breakdowns),
    )
