"""Summary domain service.

Period figures for the ledger: revenue, costs, net, debt, category breakdowns
and a health score.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from busledger.domain.debts import outstanding_total, provisional_total
from busledger.domain.entities import DailyEntry, DayType
from busledger.domain.ledger import LedgerStore
from busledger.domain.revenue import sum_amounts
from busledger.utils.date_parser import get_date_range

ZERO = Decimal("0")


@dataclass(frozen=True)
class BreakdownTotal:
    """Count and cost of breakdowns in one category."""

    category: str
    count: int
    total: Decimal


@dataclass(frozen=True)
class PeriodSummary:
    """Figures for one period."""

    start_date: Optional[date]
    end_date: Optional[date]
    entry_count: int
    normal_days: int
    maintenance_days: int
    inactive_days: int
    total_revenue: Decimal
    total_expenses: Decimal
    total_breakdown_cost: Decimal
    breakdown_count: int
    total_net: Decimal
    outstanding_debt: Decimal
    provisional_debt: Decimal
    cash_balance: Decimal
    average_daily_revenue: Decimal
    average_daily_expenses: Decimal
    average_daily_net: Decimal
    expense_ratio: int
    profit_margin: int
    expenses_by_category: tuple[tuple[str, Decimal], ...]
    breakdowns_by_category: tuple[BreakdownTotal, ...]
    best_day: Optional[DailyEntry]
    worst_day: Optional[DailyEntry]
    health_score: int

    @property
    def health_label(self) -> str:
        if self.health_score >= 70:
            return "excellent"
        if self.health_score >= 40:
            return "fair"
        return "worrying"


def percentage(value: Decimal, total: Decimal) -> int:
    """Whole percentage of ``value`` in ``total``; zero when total is zero."""
    if total == 0:
        return 0
    return int((value / total * 100).to_integral_value())


def _average(total: Decimal, count: int) -> Decimal:
    return total / count if count else ZERO


def health_score(
    profit_margin: int,
    inactive_days: int,
    breakdown_count: int,
    outstanding_debt: Decimal,
    total_net: Decimal,
) -> int:
    """Score the period from 0 to 100, starting from 50."""
    score = 50
    if profit_margin >= 40:
        score += 20
    elif profit_margin >= 20:
        score += 10
    elif profit_margin < 0:
        score -= 20

    if inactive_days == 0:
        score += 10
    elif inactive_days > 3:
        score -= 15

    if breakdown_count == 0:
        score += 10
    elif breakdown_count > 3:
        score -= 10

    if outstanding_debt == 0:
        score += 10
    elif outstanding_debt > total_net * Decimal("0.5"):
        score -= 10

    return max(0, min(100, score))


class SummaryService:
    """Service for building period summaries."""

    def __init__(self, store: LedgerStore):
        """Initialize summary service.

        Args:
            store: Ledger store to summarize
        """
        self.store = store

    def filter_entries(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[DailyEntry]:
        """Return entries dated within the inclusive range (None is unbounded)."""
        return [
            entry
            for entry in self.store.daily_entries
            if (start_date is None or entry.date >= start_date)
            and (end_date is None or entry.date <= end_date)
        ]

    def summarize_period(self, period: str = "month", today: Optional[date] = None) -> PeriodSummary:
        """Summarize a named period ("week", "month" or "all").

        Raises:
            ValueError: If the period is not recognized
        """
        start_date, end_date = get_date_range(period, today)
        return self.summarize(start_date, end_date)

    def summarize(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> PeriodSummary:
        """Summarize the entries of a date range.

        Revenue, net and averages count normal days only; expenses and
        breakdowns count every day. Debt figures are not period-bound.
        """
        entries = self.filter_entries(start_date, end_date)
        normal = [e for e in entries if e.day_type == DayType.NORMAL]
        maintenance = [e for e in entries if e.day_type == DayType.MAINTENANCE]
        inactive = [e for e in entries if e.day_type == DayType.INACTIVE]

        total_revenue = sum((e.revenue for e in normal), ZERO)
        total_expenses = sum((sum_amounts(e.expenses) for e in entries), ZERO)
        total_breakdown_cost = sum((sum_amounts(e.breakdowns) for e in entries), ZERO)
        breakdown_count = sum(len(e.breakdowns) for e in entries)
        total_net = sum((e.net_revenue for e in normal), ZERO)
        outstanding = outstanding_total(self.store.debts)

        profit_margin = percentage(total_net, total_revenue)

        return PeriodSummary(
            start_date=start_date,
            end_date=end_date,
            entry_count=len(entries),
            normal_days=len(normal),
            maintenance_days=len(maintenance),
            inactive_days=len(inactive),
            total_revenue=total_revenue,
            total_expenses=total_expenses,
            total_breakdown_cost=total_breakdown_cost,
            breakdown_count=breakdown_count,
            total_net=total_net,
            outstanding_debt=outstanding,
            provisional_debt=provisional_total(self.store.provisional_debts),
            cash_balance=self.store.cash_balance,
            average_daily_revenue=_average(total_revenue, len(normal)),
            average_daily_expenses=_average(total_expenses, len(normal)),
            average_daily_net=_average(total_net, len(normal)),
            expense_ratio=percentage(total_expenses + total_breakdown_cost, total_revenue),
            profit_margin=profit_margin,
            expenses_by_category=self.expenses_by_category(entries),
            breakdowns_by_category=self.breakdowns_by_category(entries),
            best_day=max(normal, key=lambda e: e.net_revenue, default=None),
            worst_day=min(normal, key=lambda e: e.net_revenue, default=None),
            health_score=health_score(profit_margin, len(inactive), breakdown_count, outstanding, total_net),
        )

    def expenses_by_category(self, entries: Sequence[DailyEntry]) -> tuple[tuple[str, Decimal], ...]:
        """Expense totals per category, largest first."""
        totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for entry in entries:
            for expense in entry.expenses:
                totals[expense.category] += expense.amount
        return tuple(sorted(totals.items(), key=lambda item: item[1], reverse=True))

    def breakdowns_by_category(self, entries: Sequence[DailyEntry]) -> tuple[BreakdownTotal, ...]:
        """Breakdown counts and costs per category, costliest first."""
        counts: dict[str, int] = defaultdict(int)
        totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for entry in entries:
            for breakdown in entry.breakdowns:
                counts[breakdown.category] += 1
                totals[breakdown.category] += breakdown.amount
        result = [BreakdownTotal(category, counts[category], totals[category]) for category in totals]
        return tuple(sorted(result, key=lambda b: b.total, reverse=True))
