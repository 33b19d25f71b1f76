"""Service layer for tfm-deploy"""

from .config_service import ConfigService
from .deploy_service import DeployService, VersionVerifier

__all__ = [
    "ConfigService",
    "DeployService",
    "VersionVerifier",
]
