"""Delete command implementation"""

import sys

import click
from rich.prompt import Confirm

from ..decorators import module_options, handle_errors
from ..utils.output import format_delete_result, print_result_json
from ...api import resolve_module_dir
from ...api.exceptions import UserCancelledError


@click.command()
@module_options
@click.option('--yes', '-y', 'assume_yes', is_flag=True, help='Skip confirmation prompt')
@click.option('--json', 'json_output', is_flag=True, help='Print the result as JSON')
@click.pass_context
@handle_errors
def delete(ctx, directory, organization, assume_yes, json_output):
    """Delete the module described by package.json from the registry

    The whole module is removed, including every published version.
    """
    module_dir = resolve_module_dir(directory)
    deployer = ctx.obj.deployer(organization, json_output=json_output)
    descriptor = deployer.describe(module_dir)

    if not assume_yes:
        deployer.console.print(f"Delete module: [bold]{descriptor.module_path}[/bold] (all versions)")
        if not Confirm.ask("[cyan]Proceed with deletion?[/cyan]", console=deployer.console):
            raise UserCancelledError()

    result = deployer.delete(module_dir)

    if json_output:
        print_result_json(result)
    else:
        format_delete_result(result)

    if not result.is_success:
        sys.exit(1)
