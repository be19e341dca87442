"""Provisional debt commands."""

import click

from busledger.cli.display import currency_of, format_money, short_id
from busledger.cli.error_handling import parse_amount_or_exit
from busledger.cli.id_resolution import resolve_id_or_exit
from busledger.domain.debts import new_provisional_debt, provisional_total


@click.group()
def provisional_group():
    """Track anticipated liabilities."""
    pass


@provisional_group.command("add")
@click.option("--label", required=True, help="What the liability is for")
@click.option("--amount", required=True, help="Expected amount")
@click.option("--debt", "original_debt", help="Id of the debt this one stems from")
@click.option("--notes", default="", help="Notes")
@click.pass_context
def add_provisional(ctx, label: str, amount: str, original_debt: str | None, notes: str) -> None:
    """Record an anticipated liability."""
    store = ctx.obj["store"]
    parsed_amount = parse_amount_or_exit(ctx, amount)

    original_debt_id = None
    if original_debt:
        original_debt_id = resolve_id_or_exit(ctx, store.debts, original_debt, "Debt")

    provisional_debt = store.add_provisional_debt(
        new_provisional_debt(label, parsed_amount, original_debt_id=original_debt_id, notes=notes)
    )
    click.echo(
        f"Recorded provisional debt {short_id(provisional_debt.id)}: "
        f"{provisional_debt.label} - {format_money(provisional_debt.amount, currency_of(ctx))}"
    )


@provisional_group.command("list")
@click.pass_context
def list_provisional(ctx) -> None:
    """List provisional debts."""
    store = ctx.obj["store"]
    items = store.provisional_debts
    if not items:
        click.echo("No provisional debts found.")
        return

    currency = currency_of(ctx)
    click.echo(f"{'ID':<10} {'Label':<30} {'Amount':>14} {'Status':<12} {'Created':<10}")
    click.echo("-" * 80)
    for item in items:
        click.echo(
            f"{short_id(item.id):<10} {item.label[:30]:<30} {format_money(item.amount, currency):>14} "
            f"{item.status.value:<12} {str(item.date_created):<10}"
        )
    click.echo("-" * 80)
    click.echo(f"Provisional total: {format_money(provisional_total(items), currency)}")


@provisional_group.command("confirm")
@click.argument("provisional_id")
@click.pass_context
def confirm_provisional(ctx, provisional_id: str) -> None:
    """Mark a provisional debt as confirmed."""
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.provisional_debts, provisional_id, "Provisional debt")
    store.confirm_provisional_debt(resolved)
    click.echo(f"Provisional debt {short_id(resolved)} confirmed")


@provisional_group.command("cancel")
@click.argument("provisional_id")
@click.pass_context
def cancel_provisional(ctx, provisional_id: str) -> None:
    """Mark a provisional debt as cancelled."""
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.provisional_debts, provisional_id, "Provisional debt")
    store.cancel_provisional_debt(resolved)
    click.echo(f"Provisional debt {short_id(resolved)} cancelled")


@provisional_group.command("delete")
@click.argument("provisional_id")
@click.pass_context
def delete_provisional(ctx, provisional_id: str) -> None:
    """Delete a provisional debt."""
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.provisional_debts, provisional_id, "Provisional debt")
    store.delete_provisional_debt(resolved)
    click.echo(f"Deleted provisional debt {short_id(resolved)}")


def register_commands(cli: click.Group) -> None:
    """Register provisional debt commands with main CLI."""
    cli.add_command(provisional_group, name="provisional")
