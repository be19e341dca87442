"""CLI error reporting and parse-or-exit helpers."""

import logging
from datetime import date
from decimal import Decimal
from typing import NoReturn

import click

from busledger.domain.errors import DomainError
from busledger.utils.amount_parser import parse_amount
from busledger.utils.date_parser import parse_date

logger = logging.getLogger(__name__)


def fail(ctx: click.Context, message: str) -> NoReturn:
    """Print ``Error: <message>`` on stderr and exit with status 1."""
    logger.debug("Command %s failed: %s", ctx.info_name, message)
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> NoReturn:
    """Render a domain error and exit with failure."""
    fail(ctx, str(error))


def parse_amount_or_exit(ctx: click.Context, value: str) -> Decimal:
    try:
        return parse_amount(value)
    except ValueError as e:
        fail(ctx, f"Invalid amount format: {e}")


def parse_date_or_exit(ctx: click.Context, value: str | None, default: date | None = None) -> date | None:
    """Parse a date option; an empty value yields ``default``."""
    if not value:
        return default
    try:
        return parse_date(value)
    except ValueError as e:
        fail(ctx, f"Invalid date format: {e}")
