"""Tests for egg, package, and form value models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from eggctl.domain.egg import Egg, Package, ServiceVars, VariableDeclaration
from tests.conftest import package_document


class TestVariableDeclaration:
    def test_key_is_lower_case(self) -> None:
        decl = VariableDeclaration(name="Jar", env_variable="SERVER_JARFILE")
        assert decl.key == "server_jarfile"

    def test_required(self) -> None:
        assert VariableDeclaration(name="a", env_variable="A", rules="required|int").is_required()
        assert not VariableDeclaration(name="a", env_variable="A", rules="nullable").is_required()

    def test_required_with_custom_prefix(self) -> None:
        decl = VariableDeclaration(name="a", env_variable="A", rules="must|int")
        assert decl.is_required("must")
        assert not decl.is_required()

    def test_frozen(self) -> None:
        decl = VariableDeclaration(name="a", env_variable="A")
        with pytest.raises(ValidationError):
            decl.name = "b"  # type: ignore[misc]


class TestPackageMeta:
    def test_extra_keys_are_kept(self) -> None:
        package = Package.model_validate(package_document(server_jarfile="custom.jar"))
        meta = package.meta.as_dict()
        assert meta["server_jarfile"] == "custom.jar"
        assert meta["memory"] == 1024
        assert "missing" not in meta

    def test_missing_required_field(self) -> None:
        document = package_document()
        del document["meta"]["memory"]
        with pytest.raises(ValidationError):
            Package.model_validate(document)

    @pytest.mark.parametrize("port_range", ["25565", "25565,25570", "25565-25570,27015", ""])
    def test_valid_port_ranges(self, port_range: str) -> None:
        assert Package.model_validate(package_document(port_range=port_range))

    @pytest.mark.parametrize("port_range", ["abc", "25565;25570", "25565-", "25565,,25570"])
    def test_invalid_port_ranges(self, port_range: str) -> None:
        with pytest.raises(ValidationError, match="port range"):
            Package.model_validate(package_document(port_range=port_range))


class TestServiceVars:
    def test_service_fields_exclude_configoptions_and_none(self) -> None:
        service_vars = ServiceVars.model_validate(
            {"configoptions": {"a": 1}, "server_name": "s", "server_jarfile": "p.jar"}
        )
        assert service_vars.service_fields() == {"server_name": "s", "server_jarfile": "p.jar"}

    def test_empty(self) -> None:
        assert ServiceVars().service_fields() == {}


class TestEgg:
    def test_duplicate_env_variable_rejected(self) -> None:
        declarations = (
            VariableDeclaration(name="Jar", env_variable="SERVER_JARFILE"),
            VariableDeclaration(name="Jar again", env_variable="SERVER_JARFILE"),
        )
        with pytest.raises(ValidationError, match="declared more than once"):
            Egg(variables=declarations)

    def test_names_differing_in_case_are_distinct(self) -> None:
        egg = Egg(
            variables=(
                VariableDeclaration(name="a", env_variable="PORT"),
                VariableDeclaration(name="b", env_variable="Port"),
            )
        )
        assert len(egg.variables) == 2
