"""Automation (recurring charge) commands."""

from datetime import date

import click

from busledger.cli.display import currency_of, format_money, short_id
from busledger.cli.error_handling import parse_amount_or_exit, parse_date_or_exit
from busledger.cli.id_resolution import resolve_id_or_exit
from busledger.domain.automation import AutomationEngine, new_automation
from busledger.domain.entities import EXPENSE_CATEGORIES, DayType, Frequency, expense_category_label
from busledger.utils.amount_parser import coerce_amount

FREQUENCIES = [f.value for f in Frequency]
CATEGORY_VALUES = [value for value, _, _ in EXPENSE_CATEGORIES]


@click.group()
def automation_group():
    """Manage recurring charges booked as expenses."""
    pass


@automation_group.command("add")
@click.option("--category", type=click.Choice(CATEGORY_VALUES), required=True, help="Expense category")
@click.option("--amount", required=True, help="Amount charged each time")
@click.option("--frequency", type=click.Choice(FREQUENCIES), default=Frequency.DAILY.value, show_default=True)
@click.option("--name", help="Display name (defaults to the category label)")
@click.option("--liters", help="Liters, for fuel and oil categories")
@click.option("--comment", default="", help="Comment copied onto each expense")
@click.pass_context
def add_automation(
    ctx,
    category: str,
    amount: str,
    frequency: str,
    name: str | None,
    liters: str | None,
    comment: str,
) -> None:
    """Create a recurring charge.

    Examples:
        busledger automation add --category salaire_chauffeur --amount 5000
        busledger automation add --category assurance --amount 30000 --frequency monthly
    """
    store = ctx.obj["store"]
    parsed_amount = parse_amount_or_exit(ctx, amount)

    task = store.add_automation(
        new_automation(
            category,
            parsed_amount,
            frequency=Frequency(frequency),
            name=name,
            liters=coerce_amount(liters) if liters else None,
            comment=comment,
        )
    )
    click.echo(
        f"Created automation {short_id(task.id)}: {task.name} - "
        f"{format_money(task.amount, currency_of(ctx))} {task.frequency.value}"
    )


@automation_group.command("list")
@click.pass_context
def list_automations(ctx) -> None:
    """List recurring charges."""
    store = ctx.obj["store"]
    tasks = store.automations
    if not tasks:
        click.echo("No automations found.")
        return

    currency = currency_of(ctx)
    click.echo(f"{'ID':<10} {'Name':<24} {'Category':<20} {'Amount':>12} {'Every':<8} {'Active':<6} {'Last run':<10}")
    click.echo("-" * 96)
    for task in tasks:
        click.echo(
            f"{short_id(task.id):<10} {task.name[:24]:<24} {expense_category_label(task.category)[:20]:<20} "
            f"{format_money(task.amount, currency):>12} {task.frequency.value:<8} "
            f"{'yes' if task.is_active else 'no':<6} {str(task.last_triggered or ''):<10}"
        )


@automation_group.command("toggle")
@click.argument("automation_id")
@click.pass_context
def toggle_automation(ctx, automation_id: str) -> None:
    """Activate or pause a recurring charge."""
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.automations, automation_id, "Automation")
    task = store.toggle_automation(resolved)
    click.echo(f"Automation {short_id(task.id)} {'activated' if task.is_active else 'paused'}")


@automation_group.command("delete")
@click.argument("automation_id")
@click.pass_context
def delete_automation(ctx, automation_id: str) -> None:
    """Delete a recurring charge."""
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.automations, automation_id, "Automation")
    store.delete_automation(resolved)
    click.echo(f"Deleted automation {short_id(resolved)}")


@automation_group.command("run")
@click.option("--date", "entry_date", help="Entry the charges are booked on (defaults to today)")
@click.pass_context
def run_automations(ctx, entry_date: str | None) -> None:
    """Book every due recurring charge on the entry of a day.

    Weekly and monthly charges fire once per 7 and 30 days; daily charges
    are booked once per entry.
    """
    store = ctx.obj["store"]
    target_date = parse_date_or_exit(ctx, entry_date, date.today())

    existing = store.find_entry_by_date(target_date)
    if existing is not None and existing.day_type == DayType.INACTIVE:
        click.echo(f"Entry for {target_date} is inactive; no automation booked.")
        return

    entry = AutomationEngine(store).record_due_automations(target_date)
    if entry is None:
        click.echo("No automation due.")
        return

    currency = currency_of(ctx)
    click.echo(f"Booked automations on entry {short_id(entry.id)} ({entry.date}): net {format_money(entry.net_revenue, currency)}")
    click.echo(f"Cash balance: {format_money(store.cash_balance, currency)}")


def register_commands(cli: click.Group) -> None:
    """Register automation commands with main CLI."""
    cli.add_command(automation_group, name="automation")
