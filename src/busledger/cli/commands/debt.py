"""Supplier debt commands."""

import click

from busledger.cli.display import currency_of, format_money, short_id
from busledger.cli.error_handling import handle_domain_error, parse_amount_or_exit, parse_date_or_exit
from busledger.cli.id_resolution import resolve_id_or_exit
from busledger.domain.debts import new_debt, outstanding_total
from busledger.domain.entities import DebtStatus, SupplierType

SUPPLIER_TYPES = [t.value for t in SupplierType]
DEBT_STATUSES = [s.value for s in DebtStatus]


@click.group()
def debt_group():
    """Track what is owed to mechanics and wholesalers."""
    pass


@debt_group.command("add")
@click.option("--supplier", required=True, help="Supplier name")
@click.option("--part", required=True, help="Part or service bought on credit")
@click.option("--amount", required=True, help="Amount owed")
@click.option("--supplier-type", type=click.Choice(SUPPLIER_TYPES), default=SupplierType.OTHER.value, show_default=True)
@click.option("--remaining", help="Amount still outstanding (defaults to the full amount)")
@click.option("--date", "date_created", help="Date the debt was taken (defaults to today)")
@click.option("--due", help="Due date")
@click.option("--notes", default="", help="Notes")
@click.pass_context
def add_debt(
    ctx,
    supplier: str,
    part: str,
    amount: str,
    supplier_type: str,
    remaining: str | None,
    date_created: str | None,
    due: str | None,
    notes: str,
) -> None:
    """Record a supplier debt.

    Examples:
        busledger debt add --supplier "Garage Ali" --part "Clutch" --amount 120000 --supplier-type mechanic
    """
    store = ctx.obj["store"]
    debt = store.add_debt(
        new_debt(
            supplier=supplier,
            part=part,
            amount=parse_amount_or_exit(ctx, amount),
            supplier_type=SupplierType(supplier_type),
            remaining_amount=parse_amount_or_exit(ctx, remaining) if remaining else None,
            date_created=parse_date_or_exit(ctx, date_created),
            date_due=parse_date_or_exit(ctx, due),
            notes=notes,
        )
    )
    click.echo(f"Recorded debt {short_id(debt.id)}: {debt.supplier} - {format_money(debt.amount, currency_of(ctx))}")


@debt_group.command("list")
@click.option("--unpaid", is_flag=True, help="Hide debts marked paid")
@click.pass_context
def list_debts(ctx, unpaid: bool) -> None:
    """List supplier debts."""
    store = ctx.obj["store"]
    debts = [d for d in store.debts if not unpaid or d.status != DebtStatus.PAID]
    if not debts:
        click.echo("No debts found.")
        return

    currency = currency_of(ctx)
    click.echo(f"{'ID':<10} {'Supplier':<20} {'Part':<20} {'Amount':>14} {'Remaining':>14} {'Status':<8} {'Due':<10}")
    click.echo("-" * 102)
    for debt in debts:
        click.echo(
            f"{short_id(debt.id):<10} {debt.supplier[:20]:<20} {debt.part[:20]:<20} "
            f"{format_money(debt.amount, currency):>14} {format_money(debt.remaining_amount, currency):>14} "
            f"{debt.status.value:<8} {str(debt.date_due or ''):<10}"
        )
    click.echo("-" * 102)
    click.echo(f"Outstanding: {format_money(outstanding_total(store.debts), currency)}")


@debt_group.command("pay")
@click.argument("debt_id")
@click.argument("amount")
@click.pass_context
def pay_debt(ctx, debt_id: str, amount: str) -> None:
    """Record a payment against a debt.

    The status becomes partial or paid from the remaining amount.
    """
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.debts, debt_id, "Debt")
    try:
        debt = store.record_debt_payment(resolved, parse_amount_or_exit(ctx, amount))
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Debt {short_id(debt.id)}: {format_money(debt.remaining_amount, currency_of(ctx))} remaining ({debt.status.value})"
    )


@debt_group.command("paid")
@click.argument("debt_id")
@click.pass_context
def mark_paid(ctx, debt_id: str) -> None:
    """Mark a debt fully paid."""
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.debts, debt_id, "Debt")
    store.mark_debt_paid(resolved)
    click.echo(f"Debt {short_id(resolved)} marked paid")


@debt_group.command("edit")
@click.argument("debt_id")
@click.option("--supplier", help="Supplier name")
@click.option("--part", help="Part or service")
@click.option("--amount", help="Amount owed")
@click.option("--remaining", help="Amount still outstanding")
@click.option("--status", type=click.Choice(DEBT_STATUSES), help="Settlement status")
@click.option("--due", help="Due date")
@click.option("--notes", help="Notes")
@click.pass_context
def edit_debt(
    ctx,
    debt_id: str,
    supplier: str | None,
    part: str | None,
    amount: str | None,
    remaining: str | None,
    status: str | None,
    due: str | None,
    notes: str | None,
) -> None:
    """Update a debt. Values are stored as given."""
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.debts, debt_id, "Debt")

    fields = {}
    if supplier is not None:
        fields["supplier"] = supplier
    if part is not None:
        fields["part"] = part
    if amount is not None:
        fields["amount"] = parse_amount_or_exit(ctx, amount)
    if remaining is not None:
        fields["remaining_amount"] = parse_amount_or_exit(ctx, remaining)
    if status is not None:
        fields["status"] = DebtStatus(status)
    if due is not None:
        fields["date_due"] = parse_date_or_exit(ctx, due)
    if notes is not None:
        fields["notes"] = notes

    if not fields:
        click.echo("Nothing to update.")
        return

    store.update_debt(resolved, **fields)
    click.echo(f"Updated debt {short_id(resolved)}")


@debt_group.command("delete")
@click.argument("debt_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_debt(ctx, debt_id: str, yes: bool) -> None:
    """Delete a debt."""
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.debts, debt_id, "Debt")
    debt = store.get_debt(resolved)

    if not yes and not click.confirm(f"Are you sure you want to delete the debt to {debt.supplier}?"):
        click.echo("Deletion cancelled.")
        return

    store.delete_debt(resolved)
    click.echo(f"Deleted debt {short_id(resolved)}")


def register_commands(cli: click.Group) -> None:
    """Register debt commands with main CLI."""
    cli.add_command(debt_group, name="debt")
