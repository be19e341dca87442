"""Settings commands."""

from dataclasses import replace

import click

STAFF_OPTIONS = (
    "driver_name",
    "driver_phone",
    "controller_name",
    "controller_phone",
    "collaborator_name",
    "collaborator_phone",
)


@click.group()
def settings_group():
    """Show and change vehicle, staff and currency settings."""
    pass


@settings_group.command("show")
@click.pass_context
def show_settings(ctx) -> None:
    """Show the current settings."""
    settings = ctx.obj["store"].settings
    click.echo(f"Vehicle: {settings.vehicle_name}")
    click.echo(f"Plate: {settings.vehicle_plate}")
    click.echo(f"Owner: {settings.owner_name}")
    click.echo(f"Currency: {settings.currency}")
    click.echo("Staff:")
    click.echo(f"  Driver: {settings.staff.driver_name} {settings.staff.driver_phone}".rstrip())
    click.echo(f"  Controller: {settings.staff.controller_name} {settings.staff.controller_phone}".rstrip())
    click.echo(f"  Collaborator: {settings.staff.collaborator_name} {settings.staff.collaborator_phone}".rstrip())


@settings_group.command("set")
@click.option("--currency", help="Currency suffix shown after amounts")
@click.option("--vehicle-name", help="Vehicle name")
@click.option("--vehicle-plate", help="Licence plate")
@click.option("--owner-name", help="Owner name")
@click.option("--driver-name")
@click.option("--driver-phone")
@click.option("--controller-name")
@click.option("--controller-phone")
@click.option("--collaborator-name")
@click.option("--collaborator-phone")
@click.pass_context
def set_settings(ctx, **options: str | None) -> None:
    """Change settings; options not given keep their value.

    Examples:
        busledger settings set --vehicle-plate "AB-123-CD" --driver-name "Moussa"
    """
    store = ctx.obj["store"]
    fields = {
        name: value for name, value in options.items() if value is not None and name not in STAFF_OPTIONS
    }
    staff_fields = {name: value for name, value in options.items() if value is not None and name in STAFF_OPTIONS}

    if not fields and not staff_fields:
        click.echo("Nothing to update.")
        return

    if staff_fields:
        fields["staff"] = replace(store.settings.staff, **staff_fields)
    store.update_settings(**fields)
    click.echo("Settings updated")


def register_commands(cli: click.Group) -> None:
    """Register settings commands with main CLI."""
    cli.add_command(settings_group, name="settings")
