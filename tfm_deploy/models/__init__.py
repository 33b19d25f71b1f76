"""Data models for tfm-deploy"""

from .module import ModuleDescriptor, RegistryModule, ModuleVersion
from .result import (
    ApiOutcome,
    ApiResult,
    ErrorDetail,
    OperationStatus,
    StepRecord,
    Result,
    DeployResult,
    DeleteResult,
)
from .config import RegistryConfig, PollConfig

__all__ = [
    # Module models
    "ModuleDescriptor",
    "RegistryModule",
    "ModuleVersion",

    # Result models
    "ApiOutcome",
    "ApiResult",
    "ErrorDetail",
    "OperationStatus",
    "StepRecord",
    "Result",
    "DeployResult",
    "DeleteResult",

    # Config models
    "RegistryConfig",
    "PollConfig",
]
