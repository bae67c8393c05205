"""Request payloads for the panel's application API.

One pure function per remote operation.  Each returns a plain dict that
the panel client sends verbatim as the request body.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from eggctl.domain.sources import DEFAULT_PRECEDENCE, resolve_from_vars

if TYPE_CHECKING:
    from collections.abc import Sequence

    from eggctl.domain.egg import (
        ClientRecord,
        Egg,
        Package,
        PackageMeta,
        PanelUser,
        ServiceVars,
    )
    from eggctl.domain.sources import SourceTier


def is_empty(value: Any) -> bool:
    """Emptiness as the billing side stores it: ``None``, ``""``, ``"0"``, 0, False, [], {}."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == "" or value == "0"
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def override(package_value: Any, egg_value: Any) -> Any:
    """Use the package's value when it is set, else the egg's."""
    return egg_value if is_empty(package_value) else package_value


def parse_port_range(port_range: str) -> list[str]:
    """Split a comma-separated port range string into its entries.

    >>> parse_port_range("25565,25570-25580")
    ['25565', '25570-25580']
    """
    return [entry.strip() for entry in port_range.split(",")]


def limits(meta: PackageMeta) -> dict[str, Any]:
    return {
        "memory": meta.memory,
        "swap": meta.swap,
        "io": meta.io,
        "cpu": meta.cpu,
        "disk": meta.disk,
    }


def feature_limits(meta: PackageMeta) -> dict[str, Any]:
    """Secondary limits; a falsy package value becomes ``None``, never ``0``."""
    return {
        "databases": None if is_empty(meta.databases) else meta.databases,
        "allocations": None if is_empty(meta.allocations) else meta.allocations,
    }


def deploy(meta: PackageMeta) -> dict[str, Any]:
    return {
        "locations": [meta.location_id],
        "dedicated_ip": meta.dedicated_ip,
        "port_range": parse_port_range(meta.port_range),
    }


def add_user_parameters(client: ClientRecord) -> dict[str, Any]:
    """Parameters for creating the panel user that owns the server."""
    return {
        "username": client.email,
        "email": client.email,
        "first_name": client.first_name,
        "last_name": client.last_name,
        "external_id": client.id,
    }


def add_server_parameters(
    service_vars: ServiceVars,
    package: Package,
    panel_user: PanelUser,
    egg: Egg,
    environment: Mapping[str, Any] | None = None,
    *,
    precedence: Sequence[SourceTier | str] = DEFAULT_PRECEDENCE,
) -> dict[str, Any]:
    """Parameters for creating a server.

    *environment* may be passed in when it has already been resolved;
    otherwise it is resolved from *service_vars* and *package*.
    """
    meta = package.meta
    if environment is None:
        environment = resolve_from_vars(service_vars, package, egg, precedence=precedence)
    return {
        "name": service_vars.server_name,
        "description": service_vars.server_description,
        "user": panel_user.id,
        "nest": meta.nest_id,
        "egg": meta.egg_id,
        "pack": meta.pack_id,
        "docker_image": override(meta.image, egg.docker_image),
        "startup": override(meta.startup, egg.startup),
        "limits": limits(meta),
        "feature_limits": feature_limits(meta),
        "deploy": deploy(meta),
        "environment": dict(environment),
        "start_on_completion": True,
    }


def edit_server_parameters(service_vars: ServiceVars, panel_user: PanelUser) -> dict[str, Any]:
    """Parameters for editing a server's details."""
    return {
        "name": service_vars.server_name,
        "description": service_vars.server_description,
        "user": panel_user.id,
    }


def edit_server_build_parameters(package: Package) -> dict[str, Any]:
    """Parameters for editing a server's build limits."""
    return {
        "limits": limits(package.meta),
        "feature_limits": feature_limits(package.meta),
    }


def edit_server_startup_parameters(
    service_vars: ServiceVars,
    package: Package,
    egg: Egg,
    saved_service_fields: Mapping[str, Any] | None = None,
    environment: Mapping[str, Any] | None = None,
    *,
    precedence: Sequence[SourceTier | str] = DEFAULT_PRECEDENCE,
) -> dict[str, Any]:
    """Parameters for editing a server's startup configuration.

    Previously saved service fields fill in any variable the request
    does not submit a new value for.
    """
    meta = package.meta
    if environment is None:
        environment = resolve_from_vars(
            service_vars, package, egg, saved_service_fields, precedence=precedence
        )
    return {
        "egg": meta.egg_id,
        "pack": meta.pack_id,
        "image": override(meta.image, egg.docker_image),
        "startup": override(meta.startup, egg.startup),
        "environment": dict(environment),
        "skip_scripts": False,
    }
