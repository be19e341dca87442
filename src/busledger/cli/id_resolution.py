"""Resolution of entity ids typed on the command line."""

from typing import Any, Iterable

import click

from busledger.cli.error_handling import handle_domain_error
from busledger.utils.id_resolver import resolve_id


def resolve_id_or_exit(ctx: click.Context, items: Iterable[Any], entity_id: str, kind: str) -> str:
    """Resolve a full id or unique prefix among ``items``, or exit with a CLI error."""
    try:
        return resolve_id(items, entity_id, kind)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
