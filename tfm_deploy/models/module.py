"""Module data models"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Any


@dataclass(frozen=True)
class ModuleDescriptor:
    """Identity of the module being deployed, derived from package.json"""

    organization: str
    provider: str
    name: str
    version: str
    package_name: Optional[str] = None

    @property
    def module_path(self) -> str:
        """Get registry path (org/name/provider)"""
        return f"{self.organization}/{self.name}/{self.provider}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "organization": self.organization,
            "provider": self.provider,
            "name": self.name,
            "version": self.version,
            "package_name": self.package_name,
        }


@dataclass
class RegistryModule:
    """A module registered in the private registry"""

    organization: str
    name: str
    provider: str
    id: Optional[str] = None
    status: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_registry(cls, data: Dict[str, Any]) -> 'RegistryModule':
        """Create from a registry v1 lookup payload"""
        return cls(
            organization=data.get("namespace", ""),
            name=data.get("name", ""),
            provider=data.get("provider", ""),
            id=data.get("id"),
            status=data.get("status"),
            data=data,
        )

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'RegistryModule':
        """Create from a JSON:API ``data`` object"""
        attributes = data.get("attributes", {})
        return cls(
            organization=attributes.get("namespace", ""),
            name=attributes.get("name", ""),
            provider=attributes.get("provider", ""),
            id=data.get("id"),
            status=attributes.get("status"),
            data=data,
        )


@dataclass
class ModuleVersion:
    """A single version record of a registry module"""

    version: str
    upload_url: Optional[str] = None
    id: Optional[str] = None
    status: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_registry(cls, data: Dict[str, Any]) -> 'ModuleVersion':
        """Create from a registry v1 lookup payload"""
        return cls(
            version=data.get("version", ""),
            id=data.get("id"),
            status=data.get("status"),
            data=data,
        )

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'ModuleVersion':
        """Create from a JSON:API ``data`` object

        The upload target is only present right after creation, under
        ``links.upload``.
        """
        attributes = data.get("attributes", {})
        links = data.get("links") or {}
        return cls(
            version=attributes.get("version", ""),
            upload_url=links.get("upload"),
            id=data.get("id"),
            status=attributes.get("status"),
            data=data,
        )
