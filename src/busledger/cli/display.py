"""CLI display helpers."""

from decimal import Decimal
from typing import Optional

import click


def format_money(amount: Optional[Decimal], currency: str = "Fr") -> str:
    """Format an amount with thousands separators and the currency suffix."""
    if amount is None:
        return "-"
    if amount == amount.to_integral_value():
        text = f"{amount:,.0f}"
    else:
        text = f"{amount:,.2f}"
    return f"{text} {currency}"


def short_id(entity_id: str) -> str:
    """Leading part of an id, enough to type it back on the command line."""
    return entity_id[:8]


def currency_of(ctx: click.Context) -> str:
    return ctx.obj["store"].settings.currency or "Fr"
