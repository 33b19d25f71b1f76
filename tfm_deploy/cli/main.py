# tfm_deploy/cli/main.py
"""Main CLI entry point for tfm-deploy"""

import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from ..__version__ import __version__
from ..api import Deployer
from ..models import PollConfig
from ..services import ConfigService
from ..constants import APP_NAME
from .utils.output import console
from .commands import deploy, delete, info, config


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Route log records through rich on stderr

    WARNING by default, INFO with --verbose, DEBUG with --debug.
    """
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ],
        force=True
    )

    # Request lines from httpx are noise unless debugging
    http_level = logging.DEBUG if debug else logging.WARNING
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(http_level)


class Context:
    """CLI context object with lazy configuration loading

    The preference store is only read when a command asks for the registry
    configuration, so ``config`` subcommands work without credentials.
    """

    def __init__(self, transport=None, sleep=None, config_service: Optional[ConfigService] = None):
        """Initialize CLI context

        Args:
            transport: httpx transport handed to every registry client
            sleep: Awaitable sleep used by verification
            config_service: Preconfigured config service
        """
        self.verbose: bool = False
        self.debug: bool = False
        self.transport = transport
        self.sleep = sleep
        self._config_service = config_service

    @property
    def config_service(self) -> ConfigService:
        """Get config service (lazy loading)"""
        if self._config_service is None:
            self._config_service = ConfigService()
        return self._config_service

    def deployer(self,
                 organization: Optional[str] = None,
                 poll_config: Optional[PollConfig] = None,
                 json_output: bool = False) -> Deployer:
        """Build a deployer from the resolved configuration

        Args:
            organization: Organization override
            poll_config: Verification schedule
            json_output: Send progress lines to stderr so stdout stays JSON

        Raises:
            ConfigError: If token or organization are missing
        """
        registry_config = self.config_service.resolve(organization=organization)
        if self.debug:
            console.print(f"[dim]Registry: {registry_config.to_dict()}[/dim]")
            console.print(f"[dim]Settings: {registry_config.sources}[/dim]")

        return Deployer(
            registry_config,
            poll_config=poll_config,
            transport=self.transport,
            console=Console(stderr=True) if json_output else console,
            sleep=self.sleep,
        )


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Silence log output')
@click.version_option(__version__, prog_name=APP_NAME)
@click.pass_context
def cli(ctx, verbose, debug, quiet):
    """tfm-deploy - Publish modules to a private Terraform registry

    The module is described by package.json in the module directory: a name
    like "tfm-aws-vpc" publishes module "vpc" for provider "aws", and the
    package version becomes the module version.

    Credentials come from TFM_TOKEN / TFM_ORGANIZATION or from the
    preference store managed with 'tfm-deploy config'.
    """
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        logging.disable(logging.NOTSET)
        setup_logging(verbose=verbose, debug=debug)

    ctx.ensure_object(Context)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug


# Register commands
cli.add_command(deploy.deploy)
cli.add_command(delete.delete)
cli.add_command(info.info)
cli.add_command(config.config)


def main():
    """Console script entry point

    Ctrl-C exits with 130; anything that escapes the commands is printed
    and exits with 1.
    """
    try:
        cli(prog_name=APP_NAME)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {e}")
        if {'-d', '--debug'} & set(sys.argv[1:]):
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
