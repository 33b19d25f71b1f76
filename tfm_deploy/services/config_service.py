"""Configuration resolution service"""

import os
import shutil
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple, Any

import yaml

from ..api.exceptions import ConfigError
from ..models import RegistryConfig
from ..constants import (
    DEFAULT_HOSTNAME,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_PREFERENCES_FILE,
    PREFERENCE_KEYS,
    ENV_CONFIG_PATH,
    ENV_TOKEN,
    ENV_TFE_TOKEN,
    ENV_ORGANIZATION,
    ENV_HOSTNAME,
)

# Environment variables per setting, in order of precedence
ENV_SOURCES = {
    "token": (ENV_TOKEN, ENV_TFE_TOKEN),
    "organization": (ENV_ORGANIZATION,),
    "hostname": (ENV_HOSTNAME,),
}


class ConfigService:
    """Resolves registry settings from overrides, environment and preferences

    Precedence: explicit overrides, then environment variables, then the
    YAML preference store.
    """

    def __init__(self,
                 preferences_path: Optional[Path] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """Initialize config service

        Args:
            preferences_path: Preference store location
            environ: Environment mapping (defaults to os.environ)
        """
        self.environ = os.environ if environ is None else environ
        if preferences_path is None:
            preferences_path = Path(
                self.environ.get(ENV_CONFIG_PATH) or DEFAULT_PREFERENCES_FILE
            ).expanduser()
        self.preferences_path = Path(preferences_path)
        self._preferences: Optional[Dict[str, Any]] = None

    @property
    def preferences(self) -> Dict[str, Any]:
        """Get stored preferences (lazy load)"""
        if self._preferences is None:
            self._preferences = self.load_preferences()
        return self._preferences

    def load_preferences(self) -> Dict[str, Any]:
        """Load the preference store

        Returns:
            Stored preferences, empty if the store does not exist
        """
        if not self.preferences_path.exists():
            return {}

        try:
            with open(self.preferences_path, 'r') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read preferences from {self.preferences_path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Preferences file {self.preferences_path} must be a mapping")
        return data

    def save_preferences(self) -> None:
        """Write preferences back to the store"""
        self.preferences_path.parent.mkdir(parents=True, exist_ok=True)

        # Create backup
        if self.preferences_path.exists():
            backup_path = self.preferences_path.with_suffix('.yaml.bak')
            shutil.copy2(self.preferences_path, backup_path)

        with open(self.preferences_path, 'w') as f:
            yaml.safe_dump(self.preferences, f, default_flow_style=False, sort_keys=True)

        try:
            os.chmod(self.preferences_path, 0o600)
        except OSError:
            # Not every filesystem supports permission bits
            pass

    def set(self, key: str, value: str) -> None:
        """Store a preference"""
        self._check_key(key)
        self.preferences[key] = value
        self.save_preferences()

    def unset(self, key: str) -> bool:
        """Remove a preference

        Returns:
            True if the key was stored
        """
        self._check_key(key)
        if key not in self.preferences:
            return False
        del self.preferences[key]
        self.save_preferences()
        return True

    def lookup(self, key: str) -> Tuple[Optional[str], Optional[str]]:
        """Find the effective value of a setting without overrides

        Returns:
            Tuple of (value, source) where source names where it came from
        """
        for env_name in ENV_SOURCES.get(key, ()):
            value = self.environ.get(env_name)
            if value:
                return value, f"env:{env_name}"

        value = self.preferences.get(key)
        if value:
            return str(value), f"file:{self.preferences_path}"

        return None, None

    def resolve(self,
                token: Optional[str] = None,
                organization: Optional[str] = None,
                hostname: Optional[str] = None,
                timeout: Optional[float] = None) -> RegistryConfig:
        """Build the registry configuration for this run

        Args:
            token: Explicit API token
            organization: Explicit organization
            hostname: Explicit registry hostname
            timeout: HTTP timeout in seconds

        Returns:
            Resolved RegistryConfig

        Raises:
            ConfigError: If token or organization cannot be found
        """
        overrides = {"token": token, "organization": organization, "hostname": hostname}
        values: Dict[str, str] = {}
        sources: Dict[str, str] = {}

        for key in PREFERENCE_KEYS:
            if overrides.get(key):
                values[key], sources[key] = overrides[key], "option"
                continue
            value, source = self.lookup(key)
            if value:
                values[key], sources[key] = value, source

        if not values.get("token"):
            raise ConfigError(
                f"No API token configured. Set {ENV_TOKEN} or run "
                f"'tfm-deploy config set token <token>'"
            )
        if not values.get("organization"):
            raise ConfigError(
                f"No organization configured. Set {ENV_ORGANIZATION}, pass "
                f"--organization or run 'tfm-deploy config set organization <name>'"
            )

        return RegistryConfig(
            token=values["token"],
            organization=values["organization"],
            hostname=values.get("hostname") or DEFAULT_HOSTNAME,
            timeout=DEFAULT_HTTP_TIMEOUT if timeout is None else timeout,
            sources=sources,
        )

    def _check_key(self, key: str) -> None:
        if key not in PREFERENCE_KEYS:
            raise ConfigError(
                f"Unknown setting '{key}'. Valid settings: {', '.join(PREFERENCE_KEYS)}"
            )
