"""Tests for panel API payload assembly."""

from __future__ import annotations

from typing import Any

import pytest

from eggctl.domain.egg import ClientRecord, Egg, Package, PanelUser, ServiceVars
from eggctl.domain.payloads import (
    add_server_parameters,
    add_user_parameters,
    edit_server_build_parameters,
    edit_server_parameters,
    edit_server_startup_parameters,
    feature_limits,
    is_empty,
    override,
    parse_port_range,
)
from tests.conftest import package_document


def _package(**meta: Any) -> Package:
    return Package.model_validate(package_document(**meta))


@pytest.fixture
def service_vars() -> ServiceVars:
    return ServiceVars.model_validate(
        {
            "server_name": "Survival",
            "server_description": "Main world",
            "configoptions": {"build_number": "410"},
            "server_jarfile": "paper.jar",
        }
    )


@pytest.fixture
def user() -> PanelUser:
    return PanelUser(id=11)


class TestIsEmpty:
    @pytest.mark.parametrize("value", [None, "", "0", 0, 0.0, False, [], {}])
    def test_empty(self, value: Any) -> None:
        assert is_empty(value) is True

    @pytest.mark.parametrize("value", ["1", "a", 5, True, ["x"], " "])
    def test_not_empty(self, value: Any) -> None:
        assert is_empty(value) is False


class TestOverride:
    def test_package_value_used_when_set(self) -> None:
        assert override("custom:latest", "egg:default") == "custom:latest"

    @pytest.mark.parametrize("value", [None, ""])
    def test_egg_value_used_otherwise(self, value: Any) -> None:
        assert override(value, "egg:default") == "egg:default"


class TestPortRange:
    def test_example(self) -> None:
        assert parse_port_range("25565,25570") == ["25565", "25570"]

    def test_single_and_ranges(self) -> None:
        assert parse_port_range("25565") == ["25565"]
        assert parse_port_range("25565-25570, 27015") == ["25565-25570", "27015"]


class TestFeatureLimits:
    @pytest.mark.parametrize("value", [0, "0", False, "", None])
    def test_falsy_becomes_null(self, value: Any) -> None:
        limits = feature_limits(_package(databases=value, allocations=value).meta)
        assert limits == {"databases": None, "allocations": None}

    def test_absent_becomes_null(self) -> None:
        document = package_document()
        del document["meta"]["databases"]
        package = Package.model_validate(document)
        assert feature_limits(package.meta)["databases"] is None

    @pytest.mark.parametrize("value", [3, "3"])
    def test_set_value_is_passed_through(self, value: Any) -> None:
        assert feature_limits(_package(databases=value).meta)["databases"] == value


class TestAddUser:
    def test_maps_client_fields(self) -> None:
        client = ClientRecord(id=42, email="ada@example.com", first_name="Ada", last_name="Lovelace")
        assert add_user_parameters(client) == {
            "username": "ada@example.com",
            "email": "ada@example.com",
            "first_name": "Ada",
            "last_name": "Lovelace",
            "external_id": 42,
        }


class TestAddServer:
    def test_full_payload(self, egg: Egg, service_vars: ServiceVars, user: PanelUser) -> None:
        package = _package(databases=0, allocations=2)
        params = add_server_parameters(service_vars, package, user, egg)
        assert params == {
            "name": "Survival",
            "description": "Main world",
            "user": 11,
            "nest": 1,
            "egg": 3,
            "pack": None,
            "docker_image": "ghcr.io/pterodactyl/yolks:java_17",
            "startup": egg.startup,
            "limits": {"memory": 1024, "swap": 0, "io": 500, "cpu": 100, "disk": 5120},
            "feature_limits": {"databases": None, "allocations": 2},
            "deploy": {
                "locations": [2],
                "dedicated_ip": False,
                "port_range": ["25565", "25570"],
            },
            "environment": {
                "SERVER_JARFILE": "paper.jar",
                "MINECRAFT_VERSION": "latest",
                "BUILD_NUMBER": "410",
            },
            "start_on_completion": True,
        }

    def test_package_image_and_startup_override(
        self, egg: Egg, service_vars: ServiceVars, user: PanelUser
    ) -> None:
        package = _package(image="custom/java:21", startup="./start.sh")
        params = add_server_parameters(service_vars, package, user, egg)
        assert params["docker_image"] == "custom/java:21"
        assert params["startup"] == "./start.sh"

    def test_preresolved_environment_is_used(
        self, egg: Egg, service_vars: ServiceVars, user: PanelUser
    ) -> None:
        params = add_server_parameters(service_vars, _package(), user, egg, {"ONLY": "this"})
        assert params["environment"] == {"ONLY": "this"}

    def test_package_meta_variable_override(self, egg: Egg, user: PanelUser) -> None:
        params = add_server_parameters(
            ServiceVars(server_name="s"), _package(server_jarfile="custom.jar"), user, egg
        )
        assert params["environment"]["SERVER_JARFILE"] == "custom.jar"


class TestEditServer:
    def test_details_only(self, service_vars: ServiceVars, user: PanelUser) -> None:
        assert edit_server_parameters(service_vars, user) == {
            "name": "Survival",
            "description": "Main world",
            "user": 11,
        }


class TestEditBuild:
    def test_limits_only(self) -> None:
        params = edit_server_build_parameters(_package(databases="2", allocations=""))
        assert params == {
            "limits": {"memory": 1024, "swap": 0, "io": 500, "cpu": 100, "disk": 5120},
            "feature_limits": {"databases": "2", "allocations": None},
        }


class TestEditStartup:
    def test_payload(self, egg: Egg, service_vars: ServiceVars) -> None:
        params = edit_server_startup_parameters(service_vars, _package(pack_id=5), egg)
        assert params["egg"] == 3
        assert params["pack"] == 5
        assert params["image"] == egg.docker_image
        assert params["startup"] == egg.startup
        assert params["skip_scripts"] is False
        assert params["environment"]["BUILD_NUMBER"] == "410"

    def test_saved_fields_used_when_nothing_submitted(self, egg: Egg) -> None:
        params = edit_server_startup_parameters(
            ServiceVars(), _package(), egg, {"server_jarfile": "saved.jar"}
        )
        assert params["environment"]["SERVER_JARFILE"] == "saved.jar"

    def test_submitted_value_beats_saved(self, egg: Egg, service_vars: ServiceVars) -> None:
        params = edit_server_startup_parameters(
            service_vars, _package(), egg, {"server_jarfile": "saved.jar"}
        )
        assert params["environment"]["SERVER_JARFILE"] == "paper.jar"

    def test_package_image_override(self, egg: Egg) -> None:
        params = edit_server_startup_parameters(ServiceVars(), _package(image="img:1"), egg)
        assert params["image"] == "img:1"
