"""Deployer API for registry operations"""

import os
from pathlib import Path
from typing import Dict, Optional, Union, Any

import httpx
from rich.console import Console

from ..core import RegistryClient, parse_module_descriptor
from ..models import (
    ApiResult,
    DeployResult,
    DeleteResult,
    ModuleDescriptor,
    PollConfig,
    RegistryConfig,
)
from ..services import ConfigService, DeployService
from ..constants import ENV_MODULE_DIR
from ..utils.async_utils import run_async


class Deployer:
    """Deployer class for registry operations

    Wraps descriptor parsing, the registry client and the deploy service
    behind a synchronous interface. Each call opens and closes its own HTTP
    connections.
    """

    def __init__(self,
                 config: RegistryConfig,
                 poll_config: Optional[PollConfig] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 console: Optional[Console] = None,
                 sleep=None):
        """
        Initialize deployer

        Args:
            config: Resolved registry configuration
            poll_config: Verification schedule
            transport: Optional httpx transport
            console: Console for user-facing messages
            sleep: Awaitable sleep override for verification
        """
        self.config = config
        self.poll_config = poll_config or PollConfig()
        self.transport = transport
        self.console = console or Console()
        self.sleep = sleep

    def describe(self, directory: Union[str, Path]) -> ModuleDescriptor:
        """Parse the module descriptor of a directory

        Raises:
            ParseError: If package.json is missing or malformed
        """
        return parse_module_descriptor(directory, self.config.organization)

    def _client(self) -> RegistryClient:
        return RegistryClient(self.config, transport=self.transport, console=self.console)

    def _service(self, client: RegistryClient) -> DeployService:
        kwargs = {"sleep": self.sleep} if self.sleep else {}
        return DeployService(client, self.poll_config, console=self.console, **kwargs)

    async def deploy_async(self, directory: Union[str, Path]) -> DeployResult:
        """Publish the module in ``directory``"""
        descriptor = self.describe(directory)
        async with self._client() as client:
            return await self._service(client).deploy(descriptor, directory)

    async def delete_async(self, directory: Union[str, Path]) -> DeleteResult:
        """Delete the module in ``directory`` from the registry"""
        descriptor = self.describe(directory)
        async with self._client() as client:
            return await self._service(client).delete(descriptor)

    async def status_async(self, directory: Union[str, Path]) -> Dict[str, ApiResult]:
        """Look up the module and its current version in the registry"""
        descriptor = self.describe(directory)
        async with self._client() as client:
            module = await client.lookup_module(
                descriptor.organization, descriptor.name, descriptor.provider
            )
            version = await client.lookup_module_version(
                descriptor.organization, descriptor.name, descriptor.provider, descriptor.version
            )
        return {"module": module, "version": version}

    def deploy(self, directory: Union[str, Path]) -> DeployResult:
        """
        Publish the module in ``directory``

        Args:
            directory: Module directory holding package.json

        Returns:
            DeployResult: Deployment result

        Raises:
            ParseError: If package.json is missing or malformed
        """
        return run_async(self.deploy_async(directory))

    def delete(self, directory: Union[str, Path]) -> DeleteResult:
        """
        Delete the module in ``directory`` from the registry

        Args:
            directory: Module directory holding package.json

        Returns:
            DeleteResult: Deletion result

        Raises:
            ParseError: If package.json is missing or malformed
        """
        return run_async(self.delete_async(directory))

    def status(self, directory: Union[str, Path]) -> Dict[str, ApiResult]:
        """Look up the module and its current version in the registry"""
        return run_async(self.status_async(directory))


def resolve_module_dir(directory: Optional[Union[str, Path]] = None) -> Path:
    """Pick the module directory: explicit, then $TFMDIR, then the cwd"""
    if directory:
        return Path(directory)
    return Path(os.environ.get(ENV_MODULE_DIR) or os.getcwd())


def deploy(directory: Optional[Union[str, Path]] = None,
           organization: Optional[str] = None,
           **options: Any) -> DeployResult:
    """
    Deploy a module to the registry

    This is a convenience function that resolves the configuration, creates
    a Deployer instance and performs the deployment.

    Args:
        directory: Module directory (defaults to $TFMDIR or the cwd)
        organization: Organization override
        **options: Deployer keyword arguments (poll_config, transport, ...)

    Returns:
        DeployResult: Deployment result

    Raises:
        ConfigError: If token or organization are not configured
        ParseError: If package.json is missing or malformed
    """
    config = ConfigService().resolve(organization=organization)
    return Deployer(config, **options).deploy(resolve_module_dir(directory))


def delete(directory: Optional[Union[str, Path]] = None,
           organization: Optional[str] = None,
           **options: Any) -> DeleteResult:
    """
    Delete a module from the registry

    Args:
        directory: Module directory (defaults to $TFMDIR or the cwd)
        organization: Organization override
        **options: Deployer keyword arguments

    Returns:
        DeleteResult: Deletion result
    """
    config = ConfigService().resolve(organization=organization)
    return Deployer(config, **options).delete(resolve_module_dir(directory))
