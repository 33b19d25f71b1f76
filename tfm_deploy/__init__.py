"""tfm-deploy - Publish modules to a private Terraform registry.

Reads a module's provider, name and version from package.json, packs the
module directory and drives the registry API calls that register the module,
create the version, upload the archive and verify the result.
"""

from .__version__ import __version__, __version_info__, __author__, __license__

# Core API
from .api.deployer import Deployer, deploy, delete

# Data models
from .models import (
    ModuleDescriptor,
    RegistryModule,
    ModuleVersion,
    ApiOutcome,
    ApiResult,
    OperationStatus,
    DeployResult,
    DeleteResult,
    RegistryConfig,
    PollConfig,
)

# Building blocks
from .core import parse_module_descriptor, create_archive, RegistryClient
from .services import ConfigService, DeployService

# Exceptions
from .api.exceptions import (
    TfmDeployError,
    ParseError,
    ConfigError,
    ArchiveError,
    RegistryApiError,
    UserCancelledError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__license__",

    # Main classes
    "Deployer",
    "RegistryClient",
    "ConfigService",
    "DeployService",

    # Core API functions
    "deploy",
    "delete",
    "parse_module_descriptor",
    "create_archive",

    # Data models
    "ModuleDescriptor",
    "RegistryModule",
    "ModuleVersion",
    "ApiOutcome",
    "ApiResult",
    "OperationStatus",
    "DeployResult",
    "DeleteResult",
    "RegistryConfig",
    "PollConfig",

    # Exceptions
    "TfmDeployError",
    "ParseError",
    "ConfigError",
    "ArchiveError",
    "RegistryApiError",
    "UserCancelledError",
]
