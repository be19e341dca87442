"""Main CLI entry point."""

import logging

import click
from busledger.database.factories import create_sqlite_database
from busledger.domain.ledger import DEFAULT_APP_KEY, LedgerStore

# Import and register all commands at module level
from busledger.cli.commands import (
    entry,
    debt,
    provisional,
    automation,
    objective,
    notification,
    settings,
    cash,
    summary,
    sync,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BUSLEDGER_DB_PATH environment variable)",
    envvar="BUSLEDGER_DB_PATH",
)
@click.option(
    "--app-key",
    default=DEFAULT_APP_KEY,
    show_default=True,
    envvar="BUSLEDGER_APP_KEY",
    help="Identifier the ledger is stored under",
)
@click.option(
    "--bus-id",
    envvar="BUSLEDGER_BUS_ID",
    help="Mirror changes to the shared Firestore store under this vehicle id",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, app_key: str, bus_id: str | None, verbose: bool):
    """Busledger - Vehicle-for-hire ledger.

    Record daily revenue, expenses, breakdowns, supplier debts and recurring
    charges, and keep a running cash balance.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db

        remote = None
        if bus_id:
            from busledger.sync.firestore import create_firestore_sync

            remote = create_firestore_sync(bus_id=bus_id)
        ctx.obj["remote"] = remote

        store = LedgerStore.open(db, sync=remote, app_key=app_key)
        ctx.obj["store"] = store
        # Close callbacks run last-registered first: flush, then disconnect
        ctx.call_on_close(db.disconnect)
        ctx.call_on_close(store.close)


# Register all commands
entry.register_commands(cli)
debt.register_commands(cli)
provisional.register_commands(cli)
automation.register_commands(cli)
objective.register_commands(cli)
notification.register_commands(cli)
settings.register_commands(cli)
cash.register_commands(cli)
summary.register_commands(cli)
sync.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
