"""Terraform private registry client"""

import json
import logging
from typing import Any, Callable, Dict, Optional, TypeVar

import httpx
from rich.console import Console

from ..constants import (
    ErrorCode,
    JSONAPI_CONTENT_TYPE,
    UPLOAD_CONTENT_TYPE,
    RESOURCE_REGISTRY_MODULE,
    RESOURCE_REGISTRY_MODULE_VERSION,
    MSG_MODULE_FOUND,
    MSG_MODULE_NOT_FOUND,
    MSG_VERSION_FOUND,
    MSG_VERSION_NOT_FOUND,
    MSG_MODULE_CREATED,
    MSG_MODULE_CREATE_FAILED,
    MSG_VERSION_CREATED,
    MSG_VERSION_CREATE_FAILED,
    MSG_UPLOADED,
    MSG_UPLOAD_FAILED,
    MSG_MODULE_DELETED,
    MSG_MODULE_DELETE_FAILED,
    MSG_VERSION_DELETED,
    MSG_VERSION_DELETE_FAILED,
)
from ..models import ApiResult, RegistryConfig, RegistryModule, ModuleVersion

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RegistryClient:
    """Client for the registry lookup API and the management API

    Every method returns an ApiResult. HTTP and transport failures are
    logged, reported on the console and turned into an ERROR result; a 404
    from a lookup is a NOT_FOUND result.
    """

    def __init__(self,
                 config: RegistryConfig,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 console: Optional[Console] = None):
        """
        Initialize registry client

        Args:
            config: Resolved registry configuration
            transport: Optional httpx transport (tests inject a MockTransport)
            console: Console for user-facing progress lines
        """
        self.config = config
        self.console = console or Console()

        self._api = httpx.AsyncClient(
            headers={"Authorization": f"Bearer {config.token}"},
            timeout=httpx.Timeout(config.timeout),
            transport=transport,
        )
        # Upload URLs are pre-signed; the bearer token must not leak to them
        self._upload = httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout),
            transport=transport,
        )

    async def __aenter__(self) -> 'RegistryClient':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        """Close HTTP connections"""
        await self._api.aclose()
        await self._upload.aclose()

    # URL helpers
    def _registry_url(self, *segments: str) -> str:
        return "/".join([self.config.registry_url, *segments])

    def _api_url(self, *segments: str) -> str:
        return "/".join([self.config.api_url, *segments])

    # Lookups
    async def lookup_module(self,
                            org: str,
                            name: str,
                            provider: str) -> ApiResult[RegistryModule]:
        """Look a module up in the registry"""
        path = f"{org}/{name}/{provider}"
        result = await self._request(
            "GET",
            self._registry_url(org, name, provider),
            decode=RegistryModule.from_registry,
            lookup=True,
        )

        if result.is_ok:
            self.console.print(MSG_MODULE_FOUND.format(path=path))
        else:
            self.console.print(MSG_MODULE_NOT_FOUND.format(path=path))
        return result

    async def lookup_module_version(self,
                                    org: str,
                                    name: str,
                                    provider: str,
                                    version: str) -> ApiResult[ModuleVersion]:
        """Look a single module version up in the registry"""
        result = await self._request(
            "GET",
            self._registry_url(org, name, provider, version),
            decode=ModuleVersion.from_registry,
            lookup=True,
        )

        if result.is_ok:
            self.console.print(MSG_VERSION_FOUND.format(version=version))
        else:
            self.console.print(MSG_VERSION_NOT_FOUND.format(version=version))
        return result

    # Management
    async def create_module(self,
                            org: str,
                            name: str,
                            provider: str) -> ApiResult[RegistryModule]:
        """Register a new module in the organization"""
        payload = {
            "data": {
                "type": RESOURCE_REGISTRY_MODULE,
                "attributes": {"name": name, "provider": provider}
            }
        }
        result = await self._request(
            "POST",
            self._api_url("organizations", org, "registry-modules"),
            json_body=payload,
            decode=lambda body: RegistryModule.from_api(body.get("data") or {}),
        )

        if result.is_ok:
            self.console.print(f"[green]{MSG_MODULE_CREATED}[/green]")
        else:
            self.console.print(f"[red]{MSG_MODULE_CREATE_FAILED}[/red]")
        return result

    async def create_module_version(self,
                                    org: str,
                                    name: str,
                                    provider: str,
                                    version: str) -> ApiResult[ModuleVersion]:
        """Create a version record and obtain its upload URL"""
        payload = {
            "data": {
                "type": RESOURCE_REGISTRY_MODULE_VERSION,
                "attributes": {"version": version}
            }
        }
        result = await self._request(
            "POST",
            self._api_url("registry-modules", org, name, provider, "versions"),
            json_body=payload,
            decode=lambda body: ModuleVersion.from_api(body.get("data") or {}),
        )

        if result.is_ok and not result.value.upload_url:
            logger.error("Version %s was created without an upload link", version)
            result = ApiResult.failed(
                f"Registry returned no upload link for v{version}",
                status_code=result.status_code,
            )

        if result.is_ok:
            self.console.print(f"[green]{MSG_VERSION_CREATED.format(version=version)}[/green]")
        else:
            self.console.print(f"[red]{MSG_VERSION_CREATE_FAILED.format(version=version)}[/red]")
        return result

    async def delete_module(self,
                            org: str,
                            name: str,
                            provider: str) -> ApiResult[None]:
        """Delete a module with all of its versions"""
        result = await self._request(
            "POST",
            self._api_url("registry-modules", "actions", "delete", org, name, provider),
        )

        if result.is_ok:
            self.console.print(f"[green]{MSG_MODULE_DELETED}[/green]")
        else:
            self.console.print(f"[red]{MSG_MODULE_DELETE_FAILED}[/red]")
        return result

    async def delete_module_version(self,
                                    org: str,
                                    name: str,
                                    provider: str,
                                    version: str) -> ApiResult[None]:
        """Delete one version of a module"""
        result = await self._request(
            "POST",
            self._api_url("registry-modules", "actions", "delete", org, name, provider, version),
        )

        if result.is_ok:
            self.console.print(f"[green]{MSG_VERSION_DELETED.format(version=version)}[/green]")
        else:
            self.console.print(f"[red]{MSG_VERSION_DELETE_FAILED.format(version=version)}[/red]")
        return result

    async def upload_archive(self, url: str, data: bytes) -> ApiResult[None]:
        """Upload archive bytes to a pre-signed upload URL"""
        try:
            response = await self._upload.put(
                url,
                content=data,
                headers={"Content-Type": UPLOAD_CONTENT_TYPE},
            )
            response.raise_for_status()
            result = ApiResult.ok(status_code=response.status_code)
        except httpx.HTTPStatusError as e:
            logger.error("Upload failed with HTTP %s", e.response.status_code)
            logger.debug("Upload response: %s", e.response.text)
            result = ApiResult.failed(
                f"Upload failed with HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            )
        except httpx.HTTPError as e:
            logger.error("Upload failed: %s", e)
            result = ApiResult.failed(f"Upload failed: {e}")

        if result.is_ok:
            self.console.print(f"[green]{MSG_UPLOADED}[/green]")
        else:
            self.console.print(f"[red]{MSG_UPLOAD_FAILED}[/red]")
        return result

    async def _request(self,
                       method: str,
                       url: str,
                       json_body: Optional[Dict[str, Any]] = None,
                       decode: Optional[Callable[[Dict[str, Any]], T]] = None,
                       lookup: bool = False) -> ApiResult[T]:
        """Issue an authenticated request and classify the outcome

        Args:
            method: HTTP method
            url: Absolute URL
            json_body: JSON:API document to send
            decode: Builds the result value from the decoded response body
            lookup: Treat 404 as NOT_FOUND instead of an error
        """
        headers = {}
        content = None
        if json_body is not None:
            headers["Content-Type"] = JSONAPI_CONTENT_TYPE
            content = json.dumps(json_body)
        elif method != "GET":
            headers["Content-Type"] = JSONAPI_CONTENT_TYPE

        try:
            response = await self._api.request(method, url, content=content, headers=headers)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, url, e)
            return ApiResult.failed(f"{method} {url} failed: {e}")

        if response.status_code == 404 and lookup:
            logger.debug("%s %s: not found", method, url)
            return ApiResult.not_found()

        if response.is_error:
            detail = _first_error(response)
            logger.error("%s %s returned HTTP %s", method, url, response.status_code)
            logger.debug("Error payload: %s", detail)
            return ApiResult.failed(
                _error_message(detail) or f"HTTP {response.status_code}",
                status_code=response.status_code,
                code=ErrorCode.NOT_FOUND if response.status_code == 404 else ErrorCode.API_ERROR,
                url=url,
            )

        if decode is None:
            return ApiResult.ok(status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            logger.error("%s %s returned an undecodable body: %s", method, url, e)
            return ApiResult.failed(
                f"Undecodable response from {url}",
                status_code=response.status_code,
            )

        if not isinstance(body, dict):
            logger.error("%s %s returned a non-object body", method, url)
            return ApiResult.failed(
                f"Unexpected response from {url}",
                status_code=response.status_code,
            )

        logger.debug("%s %s: %s", method, url, body)
        try:
            value = decode(body)
        except (AttributeError, KeyError, TypeError) as e:
            logger.error("%s %s returned an unexpected document: %s", method, url, e)
            return ApiResult.failed(
                f"Unexpected response from {url}",
                status_code=response.status_code,
            )
        return ApiResult.ok(value, status_code=response.status_code)


def _first_error(response: httpx.Response) -> Any:
    """Return the first JSON:API error object, or the raw text"""
    try:
        body = response.json()
    except ValueError:
        return response.text
    errors = body.get("errors") if isinstance(body, dict) else None
    if isinstance(errors, list) and errors:
        return errors[0]
    return body


def _error_message(detail: Any) -> Optional[str]:
    if isinstance(detail, dict):
        title = detail.get("title")
        text = detail.get("detail")
        if title and text:
            return f"{title}: {text}"
        return title or text
    if isinstance(detail, str) and detail:
        return detail[:200]
    return None
