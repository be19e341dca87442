"""Cash balance commands."""

import click

from busledger.cli.display import currency_of, format_money
from busledger.cli.error_handling import parse_amount_or_exit


@click.group()
def cash_group():
    """Show and correct the cash balance."""
    pass


@cash_group.command("show")
@click.pass_context
def show_cash(ctx) -> None:
    """Show the cash balance."""
    click.echo(f"Cash balance: {format_money(ctx.obj['store'].cash_balance, currency_of(ctx))}")


@cash_group.command("set")
@click.argument("amount")
@click.pass_context
def set_cash(ctx, amount: str) -> None:
    """Set the cash balance to an absolute value."""
    balance = ctx.obj["store"].update_cash_balance(parse_amount_or_exit(ctx, amount))
    click.echo(f"Cash balance: {format_money(balance, currency_of(ctx))}")


@cash_group.command("add")
@click.argument("amount")
@click.pass_context
def add_cash(ctx, amount: str) -> None:
    """Put money into the cash balance."""
    balance = ctx.obj["store"].add_to_cash(parse_amount_or_exit(ctx, amount))
    click.echo(f"Cash balance: {format_money(balance, currency_of(ctx))}")


@cash_group.command("remove")
@click.argument("amount")
@click.pass_context
def remove_cash(ctx, amount: str) -> None:
    """Take money out of the cash balance."""
    balance = ctx.obj["store"].remove_from_cash(parse_amount_or_exit(ctx, amount))
    click.echo(f"Cash balance: {format_money(balance, currency_of(ctx))}")


def register_commands(cli: click.Group) -> None:
    """Register cash commands with main CLI."""
    cli.add_command(cash_group, name="cash")
