"""Objective commands."""

import threading

import click

from busledger.cli.display import currency_of, format_money, short_id
from busledger.cli.error_handling import parse_amount_or_exit, parse_date_or_exit
from busledger.cli.id_resolution import resolve_id_or_exit
from busledger.domain.objectives import DEFAULT_INTERVAL_SECONDS, DEFAULT_REMINDER_DAYS, ObjectiveLifecycle, new_objective


@click.group()
def objective_group():
    """Manage goals and their reminders."""
    pass


@objective_group.command("add")
@click.option("--title", required=True, help="Objective title")
@click.option("--target", "target_date", required=True, help="Target date (YYYY-MM-DD or relative like 'in 10 days')")
@click.option("--description", default="", help="Description")
@click.option("--amount", help="Amount to put aside")
@click.option("--reminder-days", type=int, default=DEFAULT_REMINDER_DAYS, show_default=True,
              help="Days before the target date a reminder is raised")
@click.pass_context
def add_objective(
    ctx, title: str, target_date: str, description: str, amount: str | None, reminder_days: int
) -> None:
    """Create an objective."""
    store = ctx.obj["store"]
    target = parse_date_or_exit(ctx, target_date)
    parsed_amount = parse_amount_or_exit(ctx, amount) if amount else None

    objective = store.add_objective(
        new_objective(title, target, description=description, amount=parsed_amount, reminder_days=reminder_days)
    )
    click.echo(f"Created objective {short_id(objective.id)}: {objective.title} by {objective.target_date}")


@objective_group.command("list")
@click.pass_context
def list_objectives(ctx) -> None:
    """List objectives."""
    store = ctx.obj["store"]
    objectives = sorted(store.objectives, key=lambda o: o.target_date)
    if not objectives:
        click.echo("No objectives found.")
        return

    currency = currency_of(ctx)
    click.echo(f"{'ID':<10} {'Title':<30} {'Target':<12} {'Status':<8} {'Amount':>14}")
    click.echo("-" * 78)
    for objective in objectives:
        click.echo(
            f"{short_id(objective.id):<10} {objective.title[:30]:<30} {str(objective.target_date):<12} "
            f"{objective.status.value:<8} {format_money(objective.amount, currency):>14}"
        )


@objective_group.command("done")
@click.argument("objective_id")
@click.pass_context
def complete_objective(ctx, objective_id: str) -> None:
    """Mark an objective done."""
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.objectives, objective_id, "Objective")
    ObjectiveLifecycle(store).mark_done(resolved)
    click.echo(f"Objective {short_id(resolved)} done")


@objective_group.command("delete")
@click.argument("objective_id")
@click.pass_context
def delete_objective(ctx, objective_id: str) -> None:
    """Delete an objective."""
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.objectives, objective_id, "Objective")
    store.delete_objective(resolved)
    click.echo(f"Deleted objective {short_id(resolved)}")


@objective_group.command("check")
@click.pass_context
def check_objectives(ctx) -> None:
    """Flag late objectives and raise due reminders."""
    created = ObjectiveLifecycle(ctx.obj["store"]).reconcile_objectives()
    for notification in created:
        click.echo(notification.message)
    click.echo(f"{len(created)} reminder(s) created")


@objective_group.command("watch")
@click.option("--interval", type=float, default=DEFAULT_INTERVAL_SECONDS, show_default=True,
              help="Seconds between checks")
@click.pass_context
def watch_objectives(ctx, interval: float) -> None:
    """Check objectives periodically until interrupted."""
    store = ctx.obj["store"]
    remote = ctx.obj.get("remote")
    if remote is not None:
        remote.listen(store)

    stop_event = threading.Event()
    click.echo(f"Checking objectives every {interval:g}s, press Ctrl+C to stop")
    try:
        ObjectiveLifecycle(store).run_periodically(stop_event, interval=interval)
    except KeyboardInterrupt:
        stop_event.set()
        click.echo("Stopped.")
    finally:
        if remote is not None:
            remote.stop()


def register_commands(cli: click.Group) -> None:
    """Register objective commands with main CLI."""
    cli.add_command(objective_group, name="objective")
