"""Configuration management commands"""

import click
from rich.table import Table

from ..decorators import handle_errors
from ..utils.output import console, print_success, print_warning
from ...constants import PREFERENCE_KEYS, SECRET_PREFERENCE_KEYS
from ...models.config import redact


@click.group()
def config():
    """Manage the local preference store"""
    pass


@config.command()
@click.option('--show-secrets', is_flag=True, help='Print the token unredacted')
@click.pass_context
@handle_errors
def show(ctx, show_secrets):
    """Show effective settings and where they come from"""
    service = ctx.obj.config_service

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("Source", style="dim")

    for key in PREFERENCE_KEYS:
        value, source = service.lookup(key)
        if value and key in SECRET_PREFERENCE_KEYS and not show_secrets:
            value = redact(value)
        table.add_row(key, value or "[dim]not set[/dim]", source or "")

    console.print(table)


@config.command(name='set')
@click.argument('key', type=click.Choice(PREFERENCE_KEYS))
@click.argument('value')
@click.pass_context
@handle_errors
def set_value(ctx, key, value):
    """Store a setting in the preference store"""
    service = ctx.obj.config_service
    service.set(key, value)
    print_success(f"Saved {key} to {service.preferences_path}")


@config.command()
@click.argument('key', type=click.Choice(PREFERENCE_KEYS))
@click.pass_context
@handle_errors
def unset(ctx, key):
    """Remove a setting from the preference store"""
    service = ctx.obj.config_service
    if service.unset(key):
        print_success(f"Removed {key}")
    else:
        print_warning(f"{key} was not set")


@config.command()
@click.pass_context
def path(ctx):
    """Print the preference store location"""
    click.echo(str(ctx.obj.config_service.preferences_path))
