import io
import json
from pathlib import Path
from typing import Dict, List, Set, Tuple

import httpx
import pytest
from rich.console import Console

from tfm_deploy.models import RegistryConfig

REGISTRY_PREFIX = "/api/registry/v1/modules/"
API_PREFIX = "/api/v2/"
UPLOAD_HOST = "uploads.example.test"


class FakeRegistry:
    """In-memory stand-in for the registry and management APIs

    ``calls`` records every request as a short label, in order.
    """

    def __init__(self) -> None:
        self.modules: Set[Tuple[str, str, str]] = set()
        self.versions: Set[Tuple[str, str, str, str]] = set()
        self.pending: Dict[str, Tuple[str, str, str, str]] = {}
        self.calls: List[str] = []
        self.requests: List[httpx.Request] = []
        self.uploads: List[Tuple[str, bytes]] = []
        self.upload_count = 0

        self.fail_module_lookup = False
        self.fail_create_module = False
        self.fail_create_version = False
        self.fail_delete_version = False
        self.fail_delete_module = False
        self.fail_upload = False
        self.omit_upload_link = False
        self.malformed_version_document = False
        # Uploaded versions stay hidden for this many version lookups
        self.hidden_lookups = 0

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def add_module(self, org: str, name: str, provider: str) -> None:
        self.modules.add((org, name, provider))

    def add_version(self, org: str, name: str, provider: str, version: str) -> None:
        self.add_module(org, name, provider)
        self.versions.add((org, name, provider, version))

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.url.host == UPLOAD_HOST:
            return self._upload(request)
        if path.startswith(REGISTRY_PREFIX):
            return self._lookup(path[len(REGISTRY_PREFIX):].split("/"))
        if path.startswith(API_PREFIX):
            return self._manage(request, path[len(API_PREFIX):].split("/"))

        self.calls.append(f"{request.method} unknown")
        return httpx.Response(400, json={"errors": [{"title": "unexpected request"}]})

    def _lookup(self, parts: List[str]) -> httpx.Response:
        if len(parts) == 3:
            self.calls.append("GET module")
            if self.fail_module_lookup:
                return httpx.Response(500, json={"errors": ["Internal Server Error"]})
            org, name, provider = parts
            if (org, name, provider) in self.modules:
                return httpx.Response(200, json={
                    "id": f"{org}/{name}/{provider}",
                    "namespace": org,
                    "name": name,
                    "provider": provider,
                })
            return httpx.Response(404, json={"errors": ["Not Found"]})

        self.calls.append("GET version")
        key = tuple(parts)
        if key in self.versions:
            if self.hidden_lookups > 0:
                self.hidden_lookups -= 1
                return httpx.Response(404, json={"errors": ["Not Found"]})
            return httpx.Response(200, json={"id": "/".join(parts), "version": parts[3]})
        return httpx.Response(404, json={"errors": ["Not Found"]})

    def _manage(self, request: httpx.Request, parts: List[str]) -> httpx.Response:
        if parts[:2] == ["registry-modules", "actions"]:
            target = parts[3:]
            if len(target) == 4:
                self.calls.append("POST delete version")
                if self.fail_delete_version:
                    return _api_error(500)
                self.versions.discard(tuple(target))
                return httpx.Response(204)

            self.calls.append("POST delete module")
            if self.fail_delete_module:
                return _api_error(404)
            key = tuple(target)
            self.modules.discard(key)
            self.versions = {v for v in self.versions if v[:3] != key}
            return httpx.Response(204)

        if parts[0] == "organizations":
            self.calls.append("POST create module")
            if self.fail_create_module:
                return _api_error(422)
            body = json.loads(request.content)
            attributes = body["data"]["attributes"]
            self.add_module(parts[1], attributes["name"], attributes["provider"])
            return httpx.Response(201, json={"data": {
                "id": "mod-123",
                "type": "registry-modules",
                "attributes": {
                    "name": attributes["name"],
                    "provider": attributes["provider"],
                    "namespace": parts[1],
                    "status": "pending",
                },
            }})

        if parts[0] == "registry-modules" and parts[-1] == "versions":
            self.calls.append("POST create version")
            if self.malformed_version_document:
                return httpx.Response(201, json={"data": ["registry-module-versions"]})
            if self.fail_create_version:
                return _api_error(422)
            _, org, name, provider, _ = parts
            version = json.loads(request.content)["data"]["attributes"]["version"]
            self.upload_count += 1
            upload_url = f"https://{UPLOAD_HOST}/object/upload-{self.upload_count}"
            self.pending[upload_url] = (org, name, provider, version)
            links = {} if self.omit_upload_link else {"upload": upload_url}
            return httpx.Response(201, json={"data": {
                "id": f"modver-{self.upload_count}",
                "type": "registry-module-versions",
                "attributes": {"version": version, "status": "pending"},
                "links": links,
            }})

        self.calls.append(f"{request.method} unknown")
        return _api_error(400)

    def _upload(self, request: httpx.Request) -> httpx.Response:
        self.calls.append("PUT upload")
        url = str(request.url)
        self.uploads.append((url, request.content))
        if self.fail_upload:
            return httpx.Response(500, text="upload failed")
        key = self.pending.pop(url, None)
        if key is None:
            return httpx.Response(403, text="expired upload url")
        self.versions.add(key)
        return httpx.Response(200)


def _api_error(status: int) -> httpx.Response:
    return httpx.Response(status, json={"errors": [{
        "status": str(status),
        "title": "request failed",
        "detail": f"simulated {status}",
    }]})


class RecordingSleep:
    """Awaitable sleep that records delays instead of waiting"""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def registry_config() -> RegistryConfig:
    return RegistryConfig(token="secret-token-value", organization="acme")


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=120)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


def write_module(directory: Path, name: str = "tfm-aws-vpc", version: str = "1.2.0") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "package.json").write_text(json.dumps({"name": name, "version": version}))
    (directory / "main.tf").write_text('resource "aws_vpc" "this" {}\n')
    (directory / "modules").mkdir(exist_ok=True)
    (directory / "modules" / "outputs.tf").write_text('output "id" { value = 1 }\n')
    return directory


@pytest.fixture
def module_dir(tmp_path: Path) -> Path:
    return write_module(tmp_path / "module")


def console_text(console: Console) -> str:
    return console.file.getvalue()
