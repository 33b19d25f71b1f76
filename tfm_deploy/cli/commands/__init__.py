# tfm_deploy/cli/commands/__init__.py
"""CLI commands"""

from . import deploy
from . import delete
from . import info
from . import config

__all__ = [
    "deploy",
    "delete",
    "info",
    "config",
]
