"""Notification commands."""

import click

from busledger.cli.id_resolution import resolve_id_or_exit
from busledger.cli.display import short_id
from busledger.domain.objectives import ObjectiveLifecycle


@click.group()
def notification_group():
    """Read and clear notifications."""
    pass


@notification_group.command("list")
@click.option("--unread", is_flag=True, help="Show unread notifications only")
@click.pass_context
def list_notifications(ctx, unread: bool) -> None:
    """List notifications, newest first."""
    store = ctx.obj["store"]
    notifications = [n for n in store.notifications if not unread or not n.read]
    if not notifications:
        click.echo("No notifications.")
        return

    for notification in notifications:
        marker = " " if notification.read else "*"
        click.echo(
            f"{marker} {short_id(notification.id):<10} {notification.date:%Y-%m-%d %H:%M} "
            f"[{notification.type.value}] {notification.message}"
        )


@notification_group.command("read")
@click.argument("notification_id")
@click.pass_context
def read_notification(ctx, notification_id: str) -> None:
    """Mark a notification read."""
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.notifications, notification_id, "Notification")
    store.mark_notification_read(resolved)
    click.echo(f"Notification {short_id(resolved)} marked read")


@notification_group.command("delete")
@click.argument("notification_id")
@click.pass_context
def delete_notification(ctx, notification_id: str) -> None:
    """Delete a notification."""
    store = ctx.obj["store"]
    resolved = resolve_id_or_exit(ctx, store.notifications, notification_id, "Notification")
    store.delete_notification(resolved)
    click.echo(f"Deleted notification {short_id(resolved)}")


@notification_group.command("clear")
@click.pass_context
def clear_notifications(ctx) -> None:
    """Delete every notification."""
    removed = ctx.obj["store"].clear_all_notifications()
    click.echo(f"Cleared {removed} notification(s)")


@notification_group.command("alerts")
@click.pass_context
def show_alerts(ctx) -> None:
    """Count unread notifications, late objectives and objectives due within a week."""
    alerts = ObjectiveLifecycle(ctx.obj["store"]).alerts()
    click.echo(f"Alerts: {alerts.total}")
    click.echo(f"  Unread notifications: {len(alerts.unread_notifications)}")
    click.echo(f"  Late objectives: {len(alerts.late_objectives)}")
    for objective in alerts.late_objectives:
        click.echo(f"    - {objective.title} (due {objective.target_date})")
    click.echo(f"  Upcoming objectives: {len(alerts.upcoming_objectives)}")
    for objective in alerts.upcoming_objectives:
        click.echo(f"    - {objective.title} (due {objective.target_date})")


def register_commands(cli: click.Group) -> None:
    """Register notification commands with main CLI."""
    cli.add_command(notification_group, name="notification")
