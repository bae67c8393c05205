"""Display strings for service fields.

The field builder never formats user-facing text itself; it asks a
``localize(key, *args)`` callable.  :class:`Localizer` is the default
implementation backed by an English catalog with optional overrides.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

ENGLISH: dict[str, str] = {
    "service_fields.server_id": "Server ID",
    "service_fields.server_name": "Server Name",
    "service_fields.server_description": "Server Description",
    "service_fields.optional": "(optional) {0}",
    "service_fields.tooltip.server_id": (
        "The ID of an existing server on the panel to attach this service to."
    ),
    "service_fields.tooltip.server_name": "The name of the server as shown on the panel.",
    "service_fields.tooltip.server_description": (
        "A short description of the server as shown on the panel."
    ),
}


class Localize(Protocol):
    def __call__(self, key: str, *args: object) -> str: ...


class Localizer:
    """Look up a catalog string and substitute positional arguments.

    Unknown keys return the key itself so a missing translation is
    visible rather than blank.
    """

    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        self._strings = {**ENGLISH, **(overrides or {})}

    def __call__(self, key: str, *args: object) -> str:
        template = self._strings.get(key)
        if template is None:
            return key
        return template.format(*args) if args else template
