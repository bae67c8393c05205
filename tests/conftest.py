"""Shared pytest fixtures and test helpers for eggctl tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from eggctl.config.settings import EggSettings
from eggctl.domain.egg import Egg, Package, VariableDeclaration
from eggctl.infrastructure.loader import parse_egg

WriteJson = Callable[[str, dict[str, Any]], Path]


@pytest.fixture(autouse=True)
def _no_ambient_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's eggctl.toml or EGGCTL_* env vars out of the tests."""
    monkeypatch.delenv("EGGCTL_CONFIG", raising=False)
    for name in ("EGGCTL_JSON_OUTPUT", "EGGCTL_QUIET", "EGGCTL_VERBOSE", "EGGCTL_LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> EggSettings:
    return EggSettings.from_cli(start=tmp_path)


@pytest.fixture
def write_json(tmp_path: Path) -> WriteJson:
    """Write a JSON document into tmp_path and return its path."""

    def _write(name: str, data: dict[str, Any]) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Sample documents (shaped like the panel API and billing records)
# ---------------------------------------------------------------------------


def egg_variable(
    env_variable: str,
    *,
    name: str | None = None,
    default: str = "",
    rules: str = "required|string",
    description: str = "",
) -> dict[str, Any]:
    return {
        "object": "egg_variable",
        "attributes": {
            "name": name or env_variable.replace("_", " ").title(),
            "description": description,
            "env_variable": env_variable,
            "default_value": default,
            "rules": rules,
        },
    }


def egg_document(*variables: dict[str, Any], **attributes: Any) -> dict[str, Any]:
    attrs: dict[str, Any] = {
        "id": 3,
        "nest": 1,
        "name": "Paper",
        "docker_image": "ghcr.io/pterodactyl/yolks:java_17",
        "startup": "java -Xms128M -Xmx{{SERVER_MEMORY}}M -jar {{SERVER_JARFILE}}",
        "relationships": {"variables": {"object": "list", "data": list(variables)}},
    }
    attrs.update(attributes)
    return {"object": "egg", "attributes": attrs}


def package_document(**meta: Any) -> dict[str, Any]:
    base: dict[str, Any] = {
        "nest_id": 1,
        "egg_id": 3,
        "pack_id": None,
        "location_id": 2,
        "dedicated_ip": False,
        "port_range": "25565,25570",
        "image": "",
        "startup": "",
        "memory": 1024,
        "swap": 0,
        "io": 500,
        "cpu": 100,
        "disk": 5120,
        "databases": 0,
        "allocations": 2,
    }
    base.update(meta)
    return {"id": 7, "name": "Paper 1GB", "meta": base}


@pytest.fixture
def egg_data() -> dict[str, Any]:
    return egg_document(
        egg_variable(
            "SERVER_JARFILE",
            name="Server Jar File",
            default="server.jar",
            rules=r"required|regex:/^([\w\d._-]+)(\.jar)$/",
            description="The name of the server jarfile to run the server with.",
        ),
        egg_variable(
            "MINECRAFT_VERSION",
            name="Minecraft Version",
            default="latest",
            rules="nullable|string|max:20",
            description="The version of Minecraft to download.",
        ),
        egg_variable(
            "BUILD_NUMBER",
            name="Build Number",
            default="latest",
            rules="required|string|max:20",
            description="The build number for the Paper release.",
        ),
    )


@pytest.fixture
def package_data() -> dict[str, Any]:
    return package_document(minecraft_version_display="1")


@pytest.fixture
def egg(egg_data: dict[str, Any]) -> Egg:
    return parse_egg(egg_data)


@pytest.fixture
def package(package_data: dict[str, Any]) -> Package:
    return Package.model_validate(package_data)


@pytest.fixture
def jarfile() -> VariableDeclaration:
    return VariableDeclaration(
        name="Server Jar File",
        env_variable="SERVER_JARFILE",
        default_value="server.jar",
        rules="required|string",
    )


@pytest.fixture
def client_data() -> dict[str, Any]:
    return {"id": 42, "email": "ada@example.com", "first_name": "Ada", "last_name": "Lovelace"}


@pytest.fixture
def user_data() -> dict[str, Any]:
    return {"object": "user", "attributes": {"id": 11, "username": "ada@example.com"}}


@pytest.fixture
def docs(
    write_json: WriteJson,
    egg_data: dict[str, Any],
    package_data: dict[str, Any],
    client_data: dict[str, Any],
    user_data: dict[str, Any],
) -> dict[str, Path]:
    """All sample documents written to disk, keyed by kind."""
    return {
        "egg": write_json("egg.json", egg_data),
        "package": write_json("package.json", package_data),
        "client": write_json("client.json", client_data),
        "user": write_json("user.json", user_data),
        "vars": write_json(
            "vars.json",
            {
                "server_name": "Survival",
                "server_description": "Main world",
                "configoptions": {"build_number": "410"},
                "minecraft_version": "1.20.4",
            },
        ),
        "saved": write_json("saved.json", {"server_jarfile": "paper.jar"}),
    }
