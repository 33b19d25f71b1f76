"""Global constants for tfm-deploy"""

APP_NAME = "tfm-deploy"

# Module descriptor
MANIFEST_FILE = "package.json"
NAME_SEPARATOR = "-"

# Registry endpoints
DEFAULT_HOSTNAME = "app.terraform.io"
REGISTRY_API_PATH = "/api/registry/v1/modules"
MANAGEMENT_API_PATH = "/api/v2"
JSONAPI_CONTENT_TYPE = "application/vnd.api+json"
UPLOAD_CONTENT_TYPE = "application/octet-stream"

# JSON:API resource types
RESOURCE_REGISTRY_MODULE = "registry-modules"
RESOURCE_REGISTRY_MODULE_VERSION = "registry-module-versions"

# Default configuration values
DEFAULT_HTTP_TIMEOUT = 30.0  # seconds
DEFAULT_VERIFY_DELAY = 2.0  # seconds before the first verification lookup
DEFAULT_VERIFY_TIMEOUT = 2.0  # total verification wait budget
DEFAULT_VERIFY_BACKOFF = 2.0
DEFAULT_VERIFY_MAX_INTERVAL = 10.0
VERIFY_MIN_INTERVAL = 0.5

# Preference store
DEFAULT_PREFERENCES_FILE = "~/.config/tfm-deploy/preferences.yaml"
PREFERENCE_KEYS = ("token", "organization", "hostname")
SECRET_PREFERENCE_KEYS = ("token",)

# Environment variables
ENV_CONFIG_PATH = "TFM_DEPLOY_CONFIG"
ENV_TOKEN = "TFM_TOKEN"
ENV_TFE_TOKEN = "TFE_TOKEN"
ENV_ORGANIZATION = "TFM_ORGANIZATION"
ENV_HOSTNAME = "TFM_HOSTNAME"
ENV_MODULE_DIR = "TFMDIR"


# Error codes
class ErrorCode:
    PARSE_ERROR = "TD001"
    CONFIG_ERROR = "TD002"
    ARCHIVE_ERROR = "TD003"
    API_ERROR = "TD004"
    NOT_FOUND = "TD005"
    VERIFICATION_FAILED = "TD006"
    UNKNOWN_ERROR = "TD099"


# Display constants
EMOJI_SEARCH = "🔎"
EMOJI_SUCCESS = "✅"
EMOJI_ERROR = "❌"
EMOJI_ALERT = "🚨"
EMOJI_WARNING = "⚠"
EMOJI_PACKAGE = "📦"

# Messages templates
MSG_MODULE_FOUND = f"{EMOJI_SEARCH}  Module {{path}} found"
MSG_MODULE_NOT_FOUND = f"{EMOJI_SEARCH}  Module {{path}} not found"
MSG_VERSION_FOUND = f"{EMOJI_SEARCH}  Found v{{version}}"
MSG_VERSION_NOT_FOUND = f"{EMOJI_SEARCH}  Could not find v{{version}}"
MSG_MODULE_CREATED = f"{EMOJI_SUCCESS}  Created module"
MSG_MODULE_CREATE_FAILED = f"{EMOJI_ERROR}  Failed to create module"
MSG_VERSION_CREATED = f"{EMOJI_SUCCESS}  Created v{{version}}"
MSG_VERSION_CREATE_FAILED = f"{EMOJI_ERROR}  Failed to create v{{version}}"
MSG_UPLOADED = f"{EMOJI_SUCCESS}  Uploaded package"
MSG_UPLOAD_FAILED = f"{EMOJI_ERROR}  Failed to upload package"
MSG_MODULE_DELETED = f"{EMOJI_SUCCESS}  Deleted module"
MSG_MODULE_DELETE_FAILED = f"{EMOJI_ERROR}  Failed to delete module"
MSG_VERSION_DELETED = f"{EMOJI_SUCCESS}  Deleted previous v{{version}}"
MSG_VERSION_DELETE_FAILED = f"{EMOJI_ERROR}  Failed to delete v{{version}}"
MSG_DEPLOY_SUCCESS = f"{EMOJI_SUCCESS}  Successfully deployed v{{version}}"
MSG_DEPLOY_FAILED = f"{EMOJI_ERROR}  Failed to deploy v{{version}}"
MSG_UNKNOWN_ERROR = f"{EMOJI_ALERT}  An unknown error occurred"
