"""Load eggs, packages, clients, users, and form values from JSON files.

Eggs and users may be given either flat or in the panel API's envelope
shape, where the payload sits under ``attributes`` and an egg's variables
sit under ``attributes.relationships.variables.data[].attributes``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from eggctl.domain.egg import (
    ClientRecord,
    Egg,
    Package,
    PanelUser,
    ServiceVars,
    VariableDeclaration,
)

logger = logging.getLogger(__name__)


class LoaderError(ValueError):
    """An input document is missing, unreadable, or not a JSON object."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def read_document(path: Path | str) -> dict[str, Any]:
    """Read a JSON object from *path*."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LoaderError(path, exc.strerror or "cannot be read") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise LoaderError(path, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    if not isinstance(data, dict):
        raise LoaderError(path, "expected a JSON object")
    logger.debug("Loaded %s (%d keys)", path, len(data))
    return data


def _unwrap(data: dict[str, Any]) -> dict[str, Any]:
    """Strip the panel API's ``{"object": ..., "attributes": {...}}`` envelope."""
    attributes = data.get("attributes")
    if isinstance(attributes, dict):
        return attributes
    return data


def _variable(data: dict[str, Any]) -> VariableDeclaration:
    attrs = _unwrap(data)
    default = attrs.get("default_value")
    return VariableDeclaration.model_validate(
        {
            "name": attrs.get("name") or attrs.get("env_variable"),
            "env_variable": attrs.get("env_variable"),
            "description": attrs.get("description") or "",
            "default_value": "" if default is None else str(default),
            "rules": attrs.get("rules") or "",
        }
    )


def parse_egg(data: dict[str, Any]) -> Egg:
    """Build an :class:`Egg` from a flat or API-shaped mapping."""
    attrs = _unwrap(data)
    raw_variables: Any = attrs.get("variables")
    if raw_variables is None:
        relationships = attrs.get("relationships") or {}
        raw_variables = (relationships.get("variables") or {}).get("data", [])
    elif isinstance(raw_variables, dict):
        raw_variables = raw_variables.get("data", [])

    return Egg(
        id=attrs.get("id"),
        nest=attrs.get("nest"),
        name=attrs.get("name") or "",
        docker_image=attrs.get("docker_image") or "",
        startup=attrs.get("startup") or "",
        variables=tuple(_variable(v) for v in raw_variables),
    )


def parse_panel_user(data: dict[str, Any]) -> PanelUser:
    return PanelUser.model_validate(_unwrap(data))


def load_egg(path: Path | str) -> Egg:
    return parse_egg(read_document(path))


def load_package(path: Path | str) -> Package:
    return Package.model_validate(read_document(path))


def load_client(path: Path | str) -> ClientRecord:
    return ClientRecord.model_validate(read_document(path))


def load_panel_user(path: Path | str) -> PanelUser:
    return parse_panel_user(read_document(path))


def load_service_vars(path: Path | str | None) -> ServiceVars:
    """Submitted form values; no file means nothing was submitted."""
    if path is None:
        return ServiceVars()
    return ServiceVars.model_validate(read_document(path))


def load_saved_fields(path: Path | str | None) -> dict[str, Any] | None:
    """Previously saved service fields, or None when there are none."""
    if path is None:
        return None
    return read_document(path)
