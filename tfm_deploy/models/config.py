"""Configuration data models"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Any

from ..constants import (
    DEFAULT_HOSTNAME,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_VERIFY_DELAY,
    DEFAULT_VERIFY_TIMEOUT,
    DEFAULT_VERIFY_BACKOFF,
    DEFAULT_VERIFY_MAX_INTERVAL,
    REGISTRY_API_PATH,
    MANAGEMENT_API_PATH,
)


@dataclass(frozen=True)
class RegistryConfig:
    """Resolved connection settings for one run"""

    token: str
    organization: str
    hostname: str = DEFAULT_HOSTNAME
    timeout: float = DEFAULT_HTTP_TIMEOUT
    sources: Dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def base_url(self) -> str:
        if self.hostname.startswith(("http://", "https://")):
            return self.hostname.rstrip("/")
        return f"https://{self.hostname}"

    @property
    def registry_url(self) -> str:
        """Read-only module registry API"""
        return self.base_url + REGISTRY_API_PATH

    @property
    def api_url(self) -> str:
        """Read-write management API"""
        return self.base_url + MANAGEMENT_API_PATH

    def to_dict(self, hide_token: bool = True) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "token": redact(self.token) if hide_token else self.token,
            "organization": self.organization,
            "hostname": self.hostname,
            "timeout": self.timeout,
        }


@dataclass(frozen=True)
class PollConfig:
    """Post-upload verification schedule

    The first lookup happens after ``initial_delay``; while the version is
    still missing, lookups repeat with the delay multiplied by ``backoff``
    (capped at ``max_interval``) until ``max_wait`` seconds have been spent.
    The defaults give a single lookup after two seconds.
    """

    initial_delay: float = DEFAULT_VERIFY_DELAY
    max_wait: float = DEFAULT_VERIFY_TIMEOUT
    backoff: float = DEFAULT_VERIFY_BACKOFF
    max_interval: float = DEFAULT_VERIFY_MAX_INTERVAL

    def __post_init__(self):
        if self.initial_delay < 0 or self.max_wait < 0:
            raise ValueError("Verification delays must not be negative")
        if self.backoff < 1:
            raise ValueError("Verification backoff must be at least 1")

    @classmethod
    def from_options(cls,
                     timeout: Optional[float] = None,
                     interval: Optional[float] = None) -> 'PollConfig':
        """Build from CLI options, keeping defaults for anything unset

        Without an explicit timeout the wait budget grows to cover the
        requested interval; an explicit timeout caps the first delay.
        """
        initial_delay = DEFAULT_VERIFY_DELAY if interval is None else interval
        if timeout is None:
            max_wait = max(DEFAULT_VERIFY_TIMEOUT, initial_delay)
        else:
            max_wait = timeout
        return cls(initial_delay=min(initial_delay, max_wait), max_wait=max_wait)


def redact(secret: Optional[str]) -> Optional[str]:
    if not secret:
        return secret
    if len(secret) <= 8:
        return "****"
    return f"{secret[:4]}...{secret[-4:]}"
