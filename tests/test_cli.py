import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from conftest import FakeRegistry, RecordingSleep, write_module
from tfm_deploy.__version__ import __version__
from tfm_deploy.cli.main import Context, cli
from tfm_deploy.services import ConfigService

CREDENTIALS = {"TFM_TOKEN": "secret-token-value", "TFM_ORGANIZATION": "acme"}


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_context(registry: FakeRegistry, sleep: RecordingSleep, tmp_path: Path):
    def make(environ=None) -> Context:
        service = ConfigService(
            tmp_path / "prefs.yaml",
            environ=CREDENTIALS if environ is None else environ,
        )
        return Context(transport=registry.transport, sleep=sleep, config_service=service)

    return make


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_deploy_success(runner: CliRunner, make_context, registry: FakeRegistry,
                        module_dir: Path, sleep: RecordingSleep) -> None:
    result = runner.invoke(cli, ["deploy", "--dir", str(module_dir)], obj=make_context())

    assert result.exit_code == 0, result.output
    assert "Deploying acme/vpc/aws v1.2.0" in result.output
    assert "Module acme/vpc/aws not found" in result.output
    assert "Successfully deployed v1.2.0" in result.output
    assert "Deploy Result" in result.output
    assert sleep.delays == [2.0]
    assert registry.versions == {("acme", "vpc", "aws", "1.2.0")}


def test_deploy_failure_exits_nonzero(runner: CliRunner, make_context,
                                      registry: FakeRegistry, module_dir: Path) -> None:
    registry.fail_create_version = True

    result = runner.invoke(cli, ["deploy", "--dir", str(module_dir)], obj=make_context())

    assert result.exit_code == 1
    assert "Deploy Error" in result.output
    assert "PUT upload" not in registry.calls


def test_deploy_json_output(runner: CliRunner, make_context, module_dir: Path) -> None:
    result = runner.invoke(cli, ["deploy", "--dir", str(module_dir), "--json"],
                           obj=make_context())

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["status"] == "success"
    assert data["module"]["name"] == "vpc"
    assert data["verified"] is True
    assert [step["name"] for step in data["steps"]] == [
        "lookup_module",
        "create_module",
        "lookup_version",
        "create_version",
        "upload",
        "verify_version",
    ]


def test_deploy_verification_options(runner: CliRunner, make_context,
                                     registry: FakeRegistry, module_dir: Path,
                                     sleep: RecordingSleep) -> None:
    registry.hidden_lookups = 1

    result = runner.invoke(cli, [
        "deploy", "--dir", str(module_dir),
        "--verify-timeout", "10", "--verify-interval", "1",
    ], obj=make_context())

    assert result.exit_code == 0, result.output
    assert sleep.delays == [1.0, 2.0]


def test_deploy_uses_module_dir_from_environment(runner: CliRunner, make_context,
                                                 registry: FakeRegistry,
                                                 tmp_path: Path) -> None:
    directory = write_module(tmp_path / "elsewhere", name="tfm-google-network", version="0.1.0")

    result = runner.invoke(cli, ["deploy"], obj=make_context(), env={"TFMDIR": str(directory)})

    assert result.exit_code == 0, result.output
    assert registry.versions == {("acme", "network", "google", "0.1.0")}


def test_deploy_organization_option(runner: CliRunner, make_context,
                                    registry: FakeRegistry, module_dir: Path) -> None:
    result = runner.invoke(cli, ["deploy", "--dir", str(module_dir), "-o", "other"],
                           obj=make_context())

    assert result.exit_code == 0, result.output
    assert ("other", "vpc", "aws") in registry.modules


def test_deploy_without_manifest(runner: CliRunner, make_context, registry: FakeRegistry,
                                 tmp_path: Path) -> None:
    result = runner.invoke(cli, ["deploy", "--dir", str(tmp_path)], obj=make_context())

    assert result.exit_code == 1
    assert "No package.json found" in result.output
    assert registry.calls == []


def test_deploy_without_token(runner: CliRunner, make_context, registry: FakeRegistry,
                              module_dir: Path) -> None:
    context = make_context(environ={"TFM_ORGANIZATION": "acme"})

    result = runner.invoke(cli, ["deploy", "--dir", str(module_dir)], obj=context)

    assert result.exit_code == 1
    assert "No API token configured" in result.output
    assert registry.calls == []


def test_delete_with_yes(runner: CliRunner, make_context, registry: FakeRegistry,
                         module_dir: Path) -> None:
    registry.add_version("acme", "vpc", "aws", "1.2.0")

    result = runner.invoke(cli, ["delete", "--dir", str(module_dir), "--yes"],
                           obj=make_context())

    assert result.exit_code == 0, result.output
    assert registry.calls == ["POST delete module"]
    assert "Delete Result" in result.output
    assert registry.versions == set()


def test_delete_declined(runner: CliRunner, make_context, registry: FakeRegistry,
                         module_dir: Path) -> None:
    result = runner.invoke(cli, ["delete", "--dir", str(module_dir)],
                           obj=make_context(), input="n\n")

    assert result.exit_code == 1
    assert "Operation cancelled" in result.output
    assert registry.calls == []


def test_delete_failure_exits_nonzero(runner: CliRunner, make_context,
                                      registry: FakeRegistry, module_dir: Path) -> None:
    registry.fail_delete_module = True

    result = runner.invoke(cli, ["delete", "--dir", str(module_dir), "-y", "--json"],
                           obj=make_context())

    assert result.exit_code == 1
    assert json.loads(result.stdout)["status"] == "failed"


def test_info_with_remote_state(runner: CliRunner, make_context, registry: FakeRegistry,
                                module_dir: Path) -> None:
    registry.add_module("acme", "vpc", "aws")

    result = runner.invoke(cli, ["info", "--dir", str(module_dir), "--remote"],
                           obj=make_context())

    assert result.exit_code == 0, result.output
    assert "acme/vpc/aws" in result.output
    assert "Module in registry" in result.output
    assert "v1.2.0 in registry" in result.output
    assert registry.calls == ["GET module", "GET version"]


def test_info_is_local_by_default(runner: CliRunner, make_context, registry: FakeRegistry,
                                  module_dir: Path) -> None:
    result = runner.invoke(cli, ["info", "--dir", str(module_dir)], obj=make_context())

    assert result.exit_code == 0, result.output
    assert "tfm-aws-vpc" in result.output
    assert registry.calls == []


def test_config_set_and_unset(runner: CliRunner, make_context, tmp_path: Path) -> None:
    context = make_context(environ={})
    store = tmp_path / "prefs.yaml"

    result = runner.invoke(cli, ["config", "set", "organization", "acme"], obj=context)
    assert result.exit_code == 0, result.output
    assert yaml.safe_load(store.read_text()) == {"organization": "acme"}

    result = runner.invoke(cli, ["config", "unset", "organization"], obj=context)
    assert result.exit_code == 0, result.output
    assert "Removed organization" in result.output
    assert yaml.safe_load(store.read_text()) == {}


def test_config_set_rejects_unknown_key(runner: CliRunner, make_context) -> None:
    result = runner.invoke(cli, ["config", "set", "colour", "blue"], obj=make_context())

    assert result.exit_code == 2


def test_config_show_redacts_token(runner: CliRunner, make_context) -> None:
    result = runner.invoke(cli, ["config", "show"], obj=make_context())

    assert result.exit_code == 0, result.output
    assert "secret-token-value" not in result.output
    assert "secr...alue" in result.output
    assert "env:TFM_ORGANIZATION" in result.output


def test_config_path(runner: CliRunner, make_context, tmp_path: Path) -> None:
    result = runner.invoke(cli, ["config", "path"], obj=make_context())

    assert result.exit_code == 0
    assert result.output.strip() == str(tmp_path / "prefs.yaml")


def test_deploy_interval_without_timeout_is_honoured(runner: CliRunner, make_context,
                                                     module_dir: Path,
                                                     sleep: RecordingSleep) -> None:
    result = runner.invoke(cli, ["deploy", "--dir", str(module_dir), "--verify-interval", "5"],
                           obj=make_context())

    assert result.exit_code == 0, result.output
    assert sleep.delays == [5.0]


def test_info_works_without_credentials(runner: CliRunner, make_context,
                                        registry: FakeRegistry, module_dir: Path) -> None:
    result = runner.invoke(cli, ["info", "--dir", str(module_dir), "-o", "acme", "--json"],
                           obj=make_context(environ={}))

    assert result.exit_code == 0, result.output
    assert '"acme"' in result.output
    assert registry.calls == []


def test_info_without_organization_shows_module(runner: CliRunner, make_context,
                                                module_dir: Path) -> None:
    result = runner.invoke(cli, ["info", "--dir", str(module_dir)],
                           obj=make_context(environ={}))

    assert result.exit_code == 0, result.output
    assert "tfm-aws-vpc" in result.output
    assert "not set" in result.output


def test_delete_prompt_keeps_json_stdout_clean(runner: CliRunner, make_context,
                                               registry: FakeRegistry,
                                               module_dir: Path) -> None:
    result = runner.invoke(cli, ["delete", "--dir", str(module_dir), "--json"],
                           obj=make_context(), input="y\n")

    assert result.exit_code == 0, result.output
    assert "Proceed with deletion?" not in result.stdout
    assert json.loads(result.stdout)["status"] == "success"
    assert registry.calls == ["POST delete module"]
