"""Pydantic models for eggs, packages, clients, and panel users.

An egg is the panel's provisioning template: it declares the environment
variables a server type needs, plus the default docker image and startup
command.  A package bundles an egg with fixed resource limits and
per-variable overrides stored as loose ``meta`` entries.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_PORT_ENTRY_RE = re.compile(r"^\d{1,5}(-\d{1,5})?$")

REQUIRED_PREFIX = "required"


class VariableDeclaration(BaseModel):
    """One environment variable declared by an egg."""

    model_config = {"frozen": True}

    name: str
    env_variable: str
    description: str = ""
    default_value: str = ""
    rules: str = ""

    @property
    def key(self) -> str:
        """Lower-cased variable name used by every input source."""
        return self.env_variable.lower()

    def is_required(self, prefix: str = REQUIRED_PREFIX) -> bool:
        """Whether the rule expression starts with *prefix*."""
        return self.rules.startswith(prefix)


class Egg(BaseModel):
    """A provisioning definition for a server type."""

    model_config = {"frozen": True}

    id: int | None = None
    nest: int | None = None
    name: str = ""
    docker_image: str = ""
    startup: str = ""
    variables: tuple[VariableDeclaration, ...] = ()

    @field_validator("variables")
    @classmethod
    def _unique_env_variables(
        cls, value: tuple[VariableDeclaration, ...]
    ) -> tuple[VariableDeclaration, ...]:
        seen: set[str] = set()
        for declaration in value:
            if declaration.env_variable in seen:
                msg = f"env_variable {declaration.env_variable!r} is declared more than once"
                raise ValueError(msg)
            seen.add(declaration.env_variable)
        return value


class PackageMeta(BaseModel):
    """Static per-package settings.

    Known keys are typed; anything else (per-variable overrides such as
    ``server_jarfile`` and display flags such as ``server_jarfile_display``)
    is kept as an extra field and read back through :meth:`as_dict`.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    nest_id: int | str
    egg_id: int | str
    pack_id: int | str | None = None
    location_id: int | str
    dedicated_ip: bool | int | str = False
    port_range: str = ""
    image: str | None = None
    startup: str | None = None
    memory: int | str
    swap: int | str
    io: int | str
    cpu: int | str
    disk: int | str
    databases: int | str | bool | None = None
    allocations: int | str | bool | None = None

    @field_validator("port_range")
    @classmethod
    def _check_port_range(cls, value: str) -> str:
        if not value:
            return value
        for entry in value.split(","):
            if not _PORT_ENTRY_RE.match(entry.strip()):
                msg = f"invalid port range entry {entry!r} (expected PORT or PORT-PORT)"
                raise ValueError(msg)
        return value

    def as_dict(self) -> dict[str, Any]:
        """All meta entries (typed and extra) as a plain dict."""
        return self.model_dump(mode="python")


class Package(BaseModel):
    """A sellable product bundling an egg with limits and overrides."""

    model_config = {"frozen": True}

    id: int | None = None
    name: str = ""
    meta: PackageMeta


class ClientRecord(BaseModel):
    """The billing client a panel user is created for."""

    model_config = {"frozen": True}

    id: int | str
    email: str
    first_name: str = ""
    last_name: str = ""


class PanelUser(BaseModel):
    """A user account that already exists on the panel."""

    model_config = {"frozen": True}

    id: int
    username: str | None = None
    email: str | None = None


class ServiceVars(BaseModel):
    """Submitted form values for one request.

    ``configoptions`` holds admin-chosen configurable options; every other
    key is a service field (server name, description, per-variable values).
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    configoptions: dict[str, Any] = Field(default_factory=dict)
    server_id: str | None = None
    server_name: str | None = None
    server_description: str | None = None

    def service_fields(self) -> dict[str, Any]:
        """Everything except ``configoptions``, including extra keys."""
        data = self.model_dump(mode="python", exclude={"configoptions"})
        return {k: v for k, v in data.items() if v is not None}
