"""Typed payload contracts for the panel API request bodies.

Every assembled payload is validated against its contract before it
leaves the service layer, so a renamed or reshaped key fails fast in
tests instead of at the panel.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class _Strict(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class Limits(_Strict):
    memory: int | str
    swap: int | str
    io: int | str
    cpu: int | str
    disk: int | str


class FeatureLimits(_Strict):
    databases: int | str | bool | None
    allocations: int | str | bool | None


class Deploy(_Strict):
    locations: list[int | str]
    dedicated_ip: bool | int | str
    port_range: list[str]


class AddUserPayload(_Strict):
    """Body for ``POST /api/application/users``."""

    username: str
    email: str
    first_name: str
    last_name: str
    external_id: int | str


class AddServerPayload(_Strict):
    """Body for ``POST /api/application/servers``."""

    name: str | None
    description: str | None
    user: int
    nest: int | str
    egg: int | str
    pack: int | str | None
    docker_image: str
    startup: str
    limits: Limits
    feature_limits: FeatureLimits
    deploy: Deploy
    environment: dict[str, Any]
    start_on_completion: Literal[True]


class EditServerPayload(_Strict):
    """Body for ``PATCH /api/application/servers/{id}/details``."""

    name: str | None
    description: str | None
    user: int


class EditBuildPayload(_Strict):
    """Body for ``PATCH /api/application/servers/{id}/build``."""

    limits: Limits
    feature_limits: FeatureLimits


class EditStartupPayload(_Strict):
    """Body for ``PATCH /api/application/servers/{id}/startup``."""

    egg: int | str
    pack: int | str | None
    image: str
    startup: str
    environment: dict[str, Any]
    skip_scripts: Literal[False]
