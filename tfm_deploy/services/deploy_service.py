"""Deploy service implementation"""

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

from rich.console import Console

from ..core import RegistryClient, create_archive_async
from ..models import (
    ApiResult,
    DeployResult,
    DeleteResult,
    ModuleDescriptor,
    OperationStatus,
    PollConfig,
)
from ..constants import (
    ErrorCode,
    VERIFY_MIN_INTERVAL,
    MSG_DEPLOY_SUCCESS,
    MSG_DEPLOY_FAILED,
    MSG_UNKNOWN_ERROR,
    EMOJI_PACKAGE,
)

logger = logging.getLogger(__name__)


class VersionVerifier:
    """Polls the registry until an uploaded version shows up"""

    def __init__(self,
                 client: RegistryClient,
                 poll_config: PollConfig,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.client = client
        self.poll_config = poll_config
        self.sleep = sleep

    async def wait_for_version(self,
                               descriptor: ModuleDescriptor,
                               result: DeployResult) -> bool:
        """Sleep and look the version up until it exists or time runs out

        Args:
            descriptor: Module that was uploaded
            result: Deploy result that receives one step per lookup

        Returns:
            True if the version was found
        """
        config = self.poll_config
        waited = 0.0
        delay = min(config.initial_delay, config.max_wait)

        while True:
            logger.info("Waiting %.1fs for the registry to process the upload", delay)
            await self.sleep(delay)
            waited += delay

            lookup = await self.client.lookup_module_version(
                descriptor.organization,
                descriptor.name,
                descriptor.provider,
                descriptor.version
            )
            result.record_step("verify_version", lookup)
            result.verify_attempts += 1

            if lookup.is_ok:
                return True

            remaining = config.max_wait - waited
            if remaining <= 0:
                return False

            delay = min(
                max(delay * config.backoff, VERIFY_MIN_INTERVAL),
                config.max_interval,
                remaining
            )


class DeployService:
    """Service for publishing and removing registry modules

    Each operation is a fixed sequence of registry calls. Registry failures
    come back as ApiResult values and decide whether the sequence continues;
    anything else is caught at the operation boundary. Neither operation
    raises.
    """

    def __init__(self,
                 client: RegistryClient,
                 poll_config: Optional[PollConfig] = None,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
                 console: Optional[Console] = None):
        """Initialize deploy service

        Args:
            client: Registry client
            poll_config: Verification schedule
            sleep: Awaitable sleep used between verification lookups
            console: Console for user-facing messages
        """
        self.client = client
        self.poll_config = poll_config or PollConfig()
        self.console = console or client.console
        self.verifier = VersionVerifier(client, self.poll_config, sleep)

    async def deploy(self,
                     descriptor: ModuleDescriptor,
                     source_dir: Union[str, Path]) -> DeployResult:
        """Publish the module version described by ``descriptor``

        Args:
            descriptor: Module identity
            source_dir: Directory to archive and upload

        Returns:
            DeployResult with status and executed steps
        """
        result = DeployResult(descriptor=descriptor)
        org, name, provider, version = (
            descriptor.organization,
            descriptor.name,
            descriptor.provider,
            descriptor.version
        )

        try:
            # 1. Make sure the module exists
            lookup = await self.client.lookup_module(org, name, provider)
            result.record_step("lookup_module", lookup)

            if not lookup.is_ok:
                created = await self.client.create_module(org, name, provider)
                result.record_step("create_module", created)
                if not created.is_ok:
                    # Version calls are keyed by the descriptor, so keep going
                    result.add_warning(_failure_text("Module creation failed", created))

            # 2. Clear an existing record of this version
            existing = await self.client.lookup_module_version(org, name, provider, version)
            result.record_step("lookup_version", existing)

            if existing.is_ok:
                deleted = await self.client.delete_module_version(org, name, provider, version)
                result.record_step("delete_version", deleted)
                if not deleted.is_ok:
                    result.add_warning(_failure_text(f"Deleting v{version} failed", deleted))

            # 3. Create the version record
            created_version = await self.client.create_module_version(org, name, provider, version)
            result.record_step("create_version", created_version)

            if not created_version.is_ok:
                result.add_error(
                    ErrorCode.API_ERROR,
                    _failure_text(f"Could not create v{version}", created_version)
                )
                self.console.print(f"[red]{MSG_DEPLOY_FAILED.format(version=version)}[/red]")
                result.complete(OperationStatus.FAILED, f"Failed to deploy v{version}")
                return result

            upload_url = created_version.value.upload_url
            result.upload_url = upload_url

            # 4. Package the module
            archive = await create_archive_async(source_dir)
            result.archive_size = len(archive)
            logger.info("Packaged %s (%d bytes)", source_dir, len(archive))
            self.console.print(f"{EMOJI_PACKAGE}  Packaged {len(archive)} bytes", style="dim")

            # 5. Upload to the link of the record just created
            uploaded = await self.client.upload_archive(upload_url, archive)
            result.record_step("upload", uploaded)
            if not uploaded.is_ok:
                result.add_warning(_failure_text("Upload failed", uploaded))

            # 6. Verify
            result.verified = await self.verifier.wait_for_version(descriptor, result)

            if result.verified:
                self.console.print(f"[green]{MSG_DEPLOY_SUCCESS.format(version=version)}[/green]")
                result.complete(OperationStatus.SUCCESS, f"Successfully deployed v{version}")
            else:
                result.add_error(
                    ErrorCode.VERIFICATION_FAILED,
                    f"v{version} did not appear in the registry after upload",
                    attempts=result.verify_attempts
                )
                self.console.print(f"[red]{MSG_DEPLOY_FAILED.format(version=version)}[/red]")
                result.complete(OperationStatus.FAILED, f"Failed to deploy v{version}")

        except Exception as e:
            logger.debug("Deploy aborted", exc_info=True)
            result.add_error(
                getattr(e, "error_code", None) or ErrorCode.UNKNOWN_ERROR,
                str(e) or e.__class__.__name__
            )
            self.console.print(f"[red]{MSG_UNKNOWN_ERROR}[/red]")
            result.complete(OperationStatus.ERROR, "An unknown error occurred")

        return result

    async def delete(self, descriptor: ModuleDescriptor) -> DeleteResult:
        """Delete the module described by ``descriptor``

        Only the module is deleted; its versions go with it on the server.

        Args:
            descriptor: Module identity

        Returns:
            DeleteResult with status
        """
        result = DeleteResult(descriptor=descriptor)

        try:
            deleted = await self.client.delete_module(
                descriptor.organization,
                descriptor.name,
                descriptor.provider
            )
            result.record_step("delete_module", deleted)

            if deleted.is_ok:
                result.complete(OperationStatus.SUCCESS, f"Deleted {descriptor.module_path}")
            else:
                result.add_error(
                    ErrorCode.API_ERROR,
                    _failure_text(f"Could not delete {descriptor.module_path}", deleted)
                )
                result.complete(OperationStatus.FAILED, f"Failed to delete {descriptor.module_path}")

        except Exception as e:
            logger.debug("Delete aborted", exc_info=True)
            result.add_error(ErrorCode.UNKNOWN_ERROR, str(e) or e.__class__.__name__)
            self.console.print(f"[red]{MSG_UNKNOWN_ERROR}[/red]")
            result.complete(OperationStatus.ERROR, "An unknown error occurred")

        return result


def _failure_text(prefix: str, api_result: ApiResult) -> str:
    if api_result.error:
        return f"{prefix}: {api_result.error.message}"
    return prefix
