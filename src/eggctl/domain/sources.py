"""Layered value sources and environment resolution.

Each egg variable is resolved by asking an ordered list of sources for
its lower-cased key; the first source that answers wins, otherwise the
egg's declared default is used.  Standard tiers, highest first:

  1. config_options         admin-chosen configurable options
  2. service_fields         values submitted with this request
  3. saved_service_fields   values persisted on an existing service
  4. package_meta           static package overrides

The output mapping is keyed by the variable's declared name in its
original case, which is what the panel API expects.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Final, Protocol

if TYPE_CHECKING:
    from eggctl.domain.egg import Egg, Package, ServiceVars, VariableDeclaration

logger = logging.getLogger(__name__)


class _Missing:
    """Sentinel type for "this source has no value for the key"."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()


class SourceTier(StrEnum):
    """Named precedence tiers for variable values."""

    CONFIG_OPTIONS = "config_options"
    SERVICE_FIELDS = "service_fields"
    SAVED_SERVICE_FIELDS = "saved_service_fields"
    PACKAGE_META = "package_meta"


DEFAULT_PRECEDENCE: tuple[SourceTier, ...] = (
    SourceTier.CONFIG_OPTIONS,
    SourceTier.SERVICE_FIELDS,
    SourceTier.SAVED_SERVICE_FIELDS,
    SourceTier.PACKAGE_META,
)

DEFAULT_ORIGIN = "default"


class ValueSource(Protocol):
    """Anything that can answer "what is the value for *key*?"."""

    name: str

    def get(self, key: str) -> Any:
        """Return the value for *key*, or :data:`MISSING`."""
        ...


class MappingSource:
    """A :class:`ValueSource` backed by a plain mapping.

    Keys are folded to lower case so lookups are case-insensitive.  When
    two keys fold to the same name, the one already in lower case wins;
    otherwise the first one seen is kept.  ``None`` values are treated as
    absent, empty strings are real values.
    """

    def __init__(self, name: str, values: Mapping[str, Any] | None = None) -> None:
        self.name = name
        self._values: dict[str, Any] = {}
        for raw_key, value in (values or {}).items():
            if value is None:
                continue
            key = str(raw_key)
            folded = key.lower()
            if folded in self._values and key != folded:
                continue
            self._values[folded] = value

    def get(self, key: str) -> Any:
        return self._values.get(key.lower(), MISSING)

    def __contains__(self, key: str) -> bool:
        return key.lower() in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"MappingSource({self.name!r}, {len(self._values)} keys)"


def lookup(key: str, sources: Iterable[ValueSource]) -> tuple[Any, str | None]:
    """Find *key* in *sources*, returning ``(value, source_name)``.

    Returns ``(MISSING, None)`` if no source answers.
    """
    for source in sources:
        value = source.get(key)
        if value is not MISSING:
            return value, source.name
    return MISSING, None


def trace_environment(
    declarations: Iterable[VariableDeclaration] | None,
    sources: Sequence[ValueSource] = (),
) -> tuple[dict[str, Any], dict[str, str]]:
    """Resolve every variable and report which source supplied each value.

    Returns ``(environment, origins)`` where *origins* maps each declared
    name to a source name, or ``"default"`` for the egg default.
    """
    environment: dict[str, Any] = {}
    origins: dict[str, str] = {}
    for declaration in declarations or ():
        value, origin = lookup(declaration.key, sources)
        if value is MISSING or origin is None:
            value, origin = declaration.default_value, DEFAULT_ORIGIN
        environment[declaration.env_variable] = value
        origins[declaration.env_variable] = origin
        logger.debug("Resolved %s from %s", declaration.env_variable, origin)
    return environment, origins


def resolve_environment(
    declarations: Iterable[VariableDeclaration] | None,
    sources: Sequence[ValueSource] = (),
) -> dict[str, Any]:
    """Compute one value per declared variable.

    Every declaration yields exactly one entry; a variable no source
    answers for falls back to its declared default.
    """
    return trace_environment(declarations, sources)[0]


def build_sources(
    *,
    config_options: Mapping[str, Any] | None = None,
    service_fields: Mapping[str, Any] | None = None,
    saved_service_fields: Mapping[str, Any] | None = None,
    package_meta: Mapping[str, Any] | None = None,
    precedence: Sequence[SourceTier | str] = DEFAULT_PRECEDENCE,
) -> list[MappingSource]:
    """Wrap the standard input mappings as sources in *precedence* order.

    Tiers left out of *precedence* are not consulted at all.
    """
    by_tier: dict[SourceTier, Mapping[str, Any] | None] = {
        SourceTier.CONFIG_OPTIONS: config_options,
        SourceTier.SERVICE_FIELDS: service_fields,
        SourceTier.SAVED_SERVICE_FIELDS: saved_service_fields,
        SourceTier.PACKAGE_META: package_meta,
    }
    return [MappingSource(str(tier), by_tier[SourceTier(tier)]) for tier in precedence]


def sources_from_vars(
    service_vars: ServiceVars | None,
    package: Package | None,
    saved_service_fields: Mapping[str, Any] | None = None,
    *,
    precedence: Sequence[SourceTier | str] = DEFAULT_PRECEDENCE,
) -> list[MappingSource]:
    """Build the standard source list from submitted vars and a package."""
    return build_sources(
        config_options=service_vars.configoptions if service_vars else None,
        service_fields=service_vars.service_fields() if service_vars else None,
        saved_service_fields=saved_service_fields,
        package_meta=package.meta.as_dict() if package else None,
        precedence=precedence,
    )


def resolve_from_vars(
    service_vars: ServiceVars | None,
    package: Package | None,
    egg: Egg | None,
    saved_service_fields: Mapping[str, Any] | None = None,
    *,
    precedence: Sequence[SourceTier | str] = DEFAULT_PRECEDENCE,
) -> dict[str, Any]:
    """Resolve an egg's environment straight from submitted vars."""
    sources = sources_from_vars(
        service_vars, package, saved_service_fields, precedence=precedence
    )
    return resolve_environment(egg.variables if egg else None, sources)
