"""Exception definitions for tfm-deploy API"""

from ..constants import ErrorCode


class TfmDeployError(Exception):
    """Base exception for tfm-deploy"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ParseError(TfmDeployError):
    """Module manifest could not be turned into a descriptor"""

    def __init__(self, message: str, path: str = None):
        super().__init__(message, ErrorCode.PARSE_ERROR)
        self.path = path


class ConfigError(TfmDeployError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_ERROR)


class ArchiveError(TfmDeployError):
    """Archive creation error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.ARCHIVE_ERROR)


class RegistryApiError(TfmDeployError):
    """Registry API call failed"""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message, ErrorCode.API_ERROR)
        self.status_code = status_code


class UserCancelledError(TfmDeployError):
    """User cancelled the operation"""

    def __init__(self):
        super().__init__("Operation cancelled by user")
