"""Remote sync commands."""

import threading

import click

from busledger.cli.error_handling import fail
from busledger.sync.firestore import STATUS_ERROR


def _remote_or_exit(ctx: click.Context):
    remote = ctx.obj.get("remote")
    if remote is None:
        fail(ctx, "No remote configured; pass --bus-id or set BUSLEDGER_BUS_ID")
    return remote


@click.group()
def sync_group():
    """Exchange the ledger with the shared Firestore store."""
    pass


@sync_group.command("pull")
@click.pass_context
def pull(ctx) -> None:
    """Replace local collections with the remote state."""
    remote = _remote_or_exit(ctx)
    store = ctx.obj["store"]
    remote.pull(store)
    if remote.status == STATUS_ERROR:
        fail(ctx, "Pull failed; see the log for details")
    click.echo(f"Pulled {len(store.daily_entries)} entries from bus {remote.bus_id}")


@sync_group.command("push")
@click.pass_context
def push(ctx) -> None:
    """Upload the whole local ledger."""
    remote = _remote_or_exit(ctx)
    count = remote.push_all(ctx.obj["store"])
    if remote.status == STATUS_ERROR:
        fail(ctx, "Some documents could not be written; see the log for details")
    click.echo(f"Pushed {count} document(s) to bus {remote.bus_id}")


@sync_group.command("listen")
@click.pass_context
def listen(ctx) -> None:
    """Follow remote changes until interrupted."""
    remote = _remote_or_exit(ctx)
    remote.listen(ctx.obj["store"])
    if remote.status == STATUS_ERROR:
        fail(ctx, "Could not subscribe; see the log for details")

    click.echo(f"Listening to bus {remote.bus_id}, press Ctrl+C to stop")
    stop_event = threading.Event()
    try:
        while not stop_event.wait(1):
            pass
    except KeyboardInterrupt:
        click.echo("Stopped.")
    finally:
        remote.stop()


def register_commands(cli: click.Group) -> None:
    """Register sync commands with main CLI."""
    cli.add_command(sync_group, name="sync")
