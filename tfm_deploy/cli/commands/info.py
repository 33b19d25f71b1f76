"""Info command implementation"""

import click

from ..decorators import module_options, handle_errors
from ..utils.output import format_descriptor, format_json
from ...api import resolve_module_dir
from ...core import parse_module_descriptor
from ...models import ApiResult


@click.command()
@module_options
@click.option('--remote', is_flag=True, help='Also look the module up in the registry')
@click.option('--json', 'json_output', is_flag=True, help='Print as JSON')
@click.pass_context
@handle_errors
def info(ctx, directory, organization, remote, json_output):
    """Show the module that package.json describes

    Without --remote no registry credentials are needed.
    """
    module_dir = resolve_module_dir(directory)

    remote_state = {}
    if remote:
        deployer = ctx.obj.deployer(organization, json_output=json_output)
        descriptor = deployer.describe(module_dir)
        status = deployer.status(module_dir)
        remote_state = {
            "Module in registry": _describe(status["module"]),
            f"v{descriptor.version} in registry": _describe(status["version"]),
        }
    else:
        if not organization:
            organization, _ = ctx.obj.config_service.lookup("organization")
        descriptor = parse_module_descriptor(module_dir, organization or "")

    if json_output:
        data = descriptor.to_dict()
        data["registry"] = remote_state or None
        format_json(data)
    else:
        format_descriptor(descriptor, remote_state)


def _describe(result: ApiResult) -> str:
    if result.is_ok:
        return "yes"
    if result.is_not_found:
        return "no"
    return f"unknown ({result.error.message})" if result.error else "unknown"
