"""Daily entry commands."""

from datetime import date
from decimal import Decimal

import click

from busledger.cli.display import currency_of, format_money, short_id
from busledger.cli.error_handling import fail, handle_domain_error, parse_date_or_exit
from busledger.cli.id_resolution import resolve_id_or_exit
from busledger.domain.automation import AutomationEngine
from busledger.domain.entities import (
    BREAKDOWN_CATEGORIES,
    EXPENSE_CATEGORIES,
    DailyEntry,
    DayType,
    expense_category_label,
)
from busledger.domain.revenue import build_daily_entry, sum_amounts
from busledger.domain.summary import SummaryService
from busledger.utils.amount_parser import coerce_amount
from busledger.utils.item_parser import parse_breakdown_spec, parse_expense_spec

DAY_TYPES = [t.value for t in DayType]


def _parse_items_or_exit(ctx: click.Context, expense_specs: tuple[str, ...], breakdown_specs: tuple[str, ...]):
    try:
        expenses = tuple(parse_expense_spec(spec) for spec in expense_specs)
        breakdowns = tuple(parse_breakdown_spec(spec) for spec in breakdown_specs)
    except ValueError as e:
        handle_domain_error(ctx, e)
    return expenses, breakdowns


def _echo_entry(entry: DailyEntry, currency: str) -> None:
    click.echo(f"Entry {entry.id}")
    click.echo(f"  Date: {entry.date}")
    click.echo(f"  Day type: {entry.day_type.value}")
    click.echo(f"  Revenue: {format_money(entry.revenue, currency)}")
    if entry.expenses:
        click.echo("  Expenses:")
        for expense in entry.expenses:
            line = f"    - {expense_category_label(expense.category)}: {format_money(expense.amount, currency)}"
            if expense.liters:
                line += f" ({expense.liters} L)"
            if expense.comment:
                line += f" - {expense.comment}"
            if expense.is_automated:
                line += " [auto]"
            click.echo(line)
    if entry.breakdowns:
        click.echo("  Breakdowns:")
        for breakdown in entry.breakdowns:
            line = f"    - {breakdown.category}: {format_money(breakdown.amount, currency)}"
            if breakdown.part_changed:
                line += f" (part: {breakdown.part_changed})"
            if breakdown.cause:
                line += f" - {breakdown.cause}"
            click.echo(line)
    if entry.comment:
        click.echo(f"  Comment: {entry.comment}")
    click.echo(f"  Net revenue: {format_money(entry.net_revenue, currency)}")


@click.group()
def entry_group():
    """Record daily revenue, expenses and breakdowns."""
    pass


@entry_group.command("add")
@click.option("--date", "entry_date", help="Entry date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--type", "day_type", type=click.Choice(DAY_TYPES), default=DayType.NORMAL.value, show_default=True)
@click.option("--revenue", help="Takings of the day (ignored unless the day type is normal)")
@click.option("--expense", "expenses", multiple=True, help="Expense as 'category:amount[:liters[:comment]]'")
@click.option("--breakdown", "breakdowns", multiple=True, help="Breakdown as 'category:amount[:part[:cause]]'")
@click.option("--comment", default="", help="Free comment")
@click.option("--with-automations", is_flag=True, help="Pre-fill the active daily automations as expenses")
@click.pass_context
def add_entry(
    ctx,
    entry_date: str | None,
    day_type: str,
    revenue: str | None,
    expenses: tuple[str, ...],
    breakdowns: tuple[str, ...],
    comment: str,
    with_automations: bool,
) -> None:
    """Record the entry of a day.

    Only one entry may exist per date; use 'entry edit' to change it.

    Examples:
        busledger entry add --revenue 45000 --expense carburant:15000:20
        busledger entry add --date yesterday --type maintenance --breakdown Brakes:8000:pads:wear
    """
    store = ctx.obj["store"]
    target_date = parse_date_or_exit(ctx, entry_date, date.today())

    existing = store.find_entry_by_date(target_date)
    if existing is not None:
        fail(ctx, f"An entry already exists for {target_date} ({short_id(existing.id)}); use 'entry edit'")

    expense_items, breakdown_items = _parse_items_or_exit(ctx, expenses, breakdowns)
    if with_automations:
        expense_items = tuple(AutomationEngine(store).draft_expenses(target_date)) + expense_items

    entry = store.add_daily_entry(
        build_daily_entry(
            target_date,
            DayType(day_type),
            revenue=coerce_amount(revenue),
            expenses=expense_items,
            breakdowns=breakdown_items,
            comment=comment,
        )
    )
    currency = currency_of(ctx)
    click.echo(f"Recorded entry {short_id(entry.id)} for {entry.date}: net {format_money(entry.net_revenue, currency)}")
    click.echo(f"Cash balance: {format_money(store.cash_balance, currency)}")


@entry_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative)")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative)")
@click.pass_context
def list_entries(ctx, start_date: str | None, end_date: str | None) -> None:
    """List daily entries, newest first."""
    store = ctx.obj["store"]
    start = parse_date_or_exit(ctx, start_date)
    end = parse_date_or_exit(ctx, end_date)

    entries = SummaryService(store).filter_entries(start, end)
    if not entries:
        click.echo("No entries found.")
        return

    currency = currency_of(ctx)
    click.echo(f"{'ID':<10} {'Date':<12} {'Type':<12} {'Revenue':>14} {'Expenses':>14} {'Net':>14}")
    click.echo("-" * 80)
    for entry in entries:
        costs = sum_amounts(entry.expenses) + sum_amounts(entry.breakdowns)
        click.echo(
            f"{short_id(entry.id):<10} {str(entry.date):<12} {entry.day_type.value:<12} "
            f"{format_money(entry.revenue, currency):>14} {format_money(costs, currency):>14} "
            f"{format_money(entry.net_revenue, currency):>14}"
        )
    click.echo("-" * 80)
    total = sum((e.net_revenue for e in entries), Decimal("0"))
    click.echo(f"{'TOTAL':<10} Net: {format_money(total, currency)} | Count: {len(entries)}")


@entry_group.command("show")
@click.argument("entry_id")
@click.pass_context
def show_entry(ctx, entry_id: str) -> None:
    """Show one entry in detail."""
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.daily_entries, entry_id, "Entry")
    _echo_entry(store.get_daily_entry(resolved), currency_of(ctx))


@entry_group.command("edit")
@click.argument("entry_id")
@click.option("--type", "day_type", type=click.Choice(DAY_TYPES), help="New day type")
@click.option("--revenue", help="New revenue")
@click.option("--expense", "expenses", multiple=True, help="Replace expenses ('category:amount[:liters[:comment]]')")
@click.option("--breakdown", "breakdowns", multiple=True, help="Replace breakdowns ('category:amount[:part[:cause]]')")
@click.option("--clear-expenses", is_flag=True, help="Remove every expense")
@click.option("--clear-breakdowns", is_flag=True, help="Remove every breakdown")
@click.option("--comment", help="New comment")
@click.pass_context
def edit_entry(
    ctx,
    entry_id: str,
    day_type: str | None,
    revenue: str | None,
    expenses: tuple[str, ...],
    breakdowns: tuple[str, ...],
    clear_expenses: bool,
    clear_breakdowns: bool,
    comment: str | None,
) -> None:
    """Update an entry; the cash balance moves by the change in net revenue.

    Examples:
        busledger entry edit 3fa2 --revenue 52000
        busledger entry edit 3fa2 --type inactive --clear-expenses
    """
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.daily_entries, entry_id, "Entry")
    expense_items, breakdown_items = _parse_items_or_exit(ctx, expenses, breakdowns)

    fields = {}
    if day_type is not None:
        fields["day_type"] = DayType(day_type)
    if revenue is not None:
        fields["revenue"] = coerce_amount(revenue)
    if expense_items or clear_expenses:
        fields["expenses"] = expense_items
    if breakdown_items or clear_breakdowns:
        fields["breakdowns"] = breakdown_items
    if comment is not None:
        fields["comment"] = comment

    if not fields:
        click.echo("Nothing to update.")
        return

    before = store.get_daily_entry(resolved)
    updated = store.update_daily_entry(resolved, **fields)
    currency = currency_of(ctx)
    click.echo(
        f"Updated entry {short_id(updated.id)}: net {format_money(before.net_revenue, currency)} "
        f"-> {format_money(updated.net_revenue, currency)}"
    )


@entry_group.command("delete")
@click.argument("entry_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_entry(ctx, entry_id: str, yes: bool) -> None:
    """Delete an entry and take its net revenue back out of the cash balance."""
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.daily_entries, entry_id, "Entry")
    entry = store.get_daily_entry(resolved)

    if not yes and not click.confirm(f"Are you sure you want to delete the entry of {entry.date}?"):
        click.echo("Deletion cancelled.")
        return

    store.delete_daily_entry(resolved)
    currency = currency_of(ctx)
    click.echo(f"Deleted entry {short_id(resolved)}")
    click.echo(f"Cash balance: {format_money(store.cash_balance, currency)}")


@entry_group.command("draft")
@click.option("--date", "entry_date", help="Entry date (defaults to today)")
@click.pass_context
def draft_entry(ctx, entry_date: str | None) -> None:
    """Show the entry to fill for a day, without saving anything.

    The existing entry is shown if there is one; otherwise a new entry
    pre-filled with the active daily automations.
    """
    store = ctx.obj["store"]
    target_date = parse_date_or_exit(ctx, entry_date, date.today())
    draft = AutomationEngine(store).draft_daily_entry(target_date)
    if store.get_daily_entry(draft.id) is None:
        click.echo("Draft (not saved):")
    _echo_entry(draft, currency_of(ctx))


@entry_group.command("categories")
def list_categories() -> None:
    """List expense and breakdown categories."""
    click.echo("Expense categories:")
    for value, label, has_liters in EXPENSE_CATEGORIES:
        suffix = " (liters)" if has_liters else ""
        click.echo(f"  {value:<24} {label}{suffix}")
    click.echo("\nBreakdown categories:")
    for category in BREAKDOWN_CATEGORIES:
        click.echo(f"  {category}")


def register_commands(cli: click.Group) -> None:
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
