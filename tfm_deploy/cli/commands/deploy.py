"""Deploy command implementation"""

import sys

import click

from ..decorators import module_options, handle_errors
from ..utils.output import console, format_deploy_result, print_result_json
from ...api import resolve_module_dir
from ...models import PollConfig
from ...constants import DEFAULT_VERIFY_DELAY, DEFAULT_VERIFY_TIMEOUT


@click.command()
@module_options
@click.option('--verify-timeout', type=click.FloatRange(min=0),
              help=f'Total seconds to wait for the new version to appear '
                   f'[default: {DEFAULT_VERIFY_TIMEOUT}, or the interval if longer]')
@click.option('--verify-interval', type=click.FloatRange(min=0),
              help=f'Seconds before the first verification lookup '
                   f'[default: {DEFAULT_VERIFY_DELAY}]')
@click.option('--json', 'json_output', is_flag=True, help='Print the result as JSON')
@click.pass_context
@handle_errors
def deploy(ctx, directory, organization, verify_timeout, verify_interval, json_output):
    """Publish the module version described by package.json

    Registers the module if needed, replaces an existing record of the same
    version, uploads the packed module directory and checks that the
    registry lists the new version.

    Examples:

        # Deploy the module in the current directory
        tfm-deploy deploy

        # Deploy another directory and wait up to 30s for the registry
        tfm-deploy deploy --dir ./modules/vpc --verify-timeout 30
    """
    module_dir = resolve_module_dir(directory)
    poll_config = PollConfig.from_options(timeout=verify_timeout, interval=verify_interval)
    deployer = ctx.obj.deployer(organization, poll_config, json_output=json_output)

    descriptor = deployer.describe(module_dir)
    if not json_output:
        console.print(
            f"Deploying [bold]{descriptor.module_path}[/bold] "
            f"v{descriptor.version} from [cyan]{module_dir}[/cyan]\n"
        )

    result = deployer.deploy(module_dir)

    if json_output:
        print_result_json(result)
    else:
        console.print()
        format_deploy_result(result)

    if not result.is_success:
        sys.exit(1)
