# tfm_deploy/cli/decorators/module.py
"""Module context decorators for CLI commands"""

import functools
import sys
from typing import Callable

import click

from ..utils.output import console, print_error
from ...api.exceptions import TfmDeployError, UserCancelledError
from ...constants import ENV_MODULE_DIR


def module_options(func: Callable) -> Callable:
    """Add the options that select the module and its organization

    ``--dir`` falls back to $TFMDIR and then to the current directory.
    """
    func = click.option(
        '--organization', '-o',
        help='Registry organization (overrides TFM_ORGANIZATION and preferences)'
    )(func)
    func = click.option(
        '--dir', 'directory',
        envvar=ENV_MODULE_DIR,
        type=click.Path(file_okay=False),
        help=f'Module directory containing package.json [env: {ENV_MODULE_DIR}]'
    )(func)
    return func


def handle_errors(func: Callable) -> Callable:
    """Turn tool errors into console messages and exit codes

    Configuration and manifest problems exit with 1, Ctrl-C with 130.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        try:
            return func(*args, **kwargs)
        except UserCancelledError:
            console.print("[yellow]Operation cancelled[/yellow]")
            sys.exit(1)
        except TfmDeployError as e:
            print_error(str(e))
            sys.exit(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            sys.exit(130)
        except (click.exceptions.Exit, click.exceptions.Abort, click.ClickException):
            raise
        except Exception as e:
            console.print(f"[red]Unexpected error:[/red] {e}")
            if ctx.obj is not None and getattr(ctx.obj, 'debug', False):
                console.print_exception()
            sys.exit(1)

    return wrapper
