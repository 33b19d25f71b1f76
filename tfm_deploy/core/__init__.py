"""Core modules for tfm-deploy"""

from .descriptor_parser import parse_module_descriptor, split_package_name, read_manifest
from .registry_client import RegistryClient
from .archiver import create_archive, create_archive_async

__all__ = [
    "parse_module_descriptor",
    "split_package_name",
    "read_manifest",
    "RegistryClient",
    "create_archive",
    "create_archive_async",
]
