"""API layer for tfm-deploy"""

from .exceptions import (
    TfmDeployError,
    ParseError,
    ConfigError,
    ArchiveError,
    RegistryApiError,
    UserCancelledError,
)
from .deployer import Deployer, deploy, delete, resolve_module_dir

__all__ = [
    # Main classes
    "Deployer",

    # Convenience functions
    "deploy",
    "delete",
    "resolve_module_dir",

    # Exceptions
    "TfmDeployError",
    "ParseError",
    "ConfigError",
    "ArchiveError",
    "RegistryApiError",
    "UserCancelledError",
]
