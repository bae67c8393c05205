"""Editable service fields for add/edit forms.

Produces plain :class:`Field` data in display order; turning it into
markup is the renderer's job.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field as PydanticField

from eggctl.domain.egg import REQUIRED_PREFIX
from eggctl.domain.language import Localizer
from eggctl.domain.sources import resolve_environment

if TYPE_CHECKING:
    from eggctl.domain.egg import PackageMeta, VariableDeclaration
    from eggctl.domain.language import Localize
    from eggctl.domain.sources import ValueSource

DISPLAY_FLAG_SUFFIX = "_display"

# (key, shown to non-admins)
STATIC_FIELDS: tuple[tuple[str, bool], ...] = (
    ("server_id", False),
    ("server_name", True),
    ("server_description", True),
)


class Field(BaseModel):
    """One input field as shown to a user."""

    model_config = {"frozen": True}

    key: str
    label: str
    value: Any = ""
    tooltip: str = ""
    required: bool = True


class VisibilityPolicy(BaseModel):
    """Which egg variables a viewer may see.

    Admins see every variable.  Everyone else only sees variables whose
    display flag is explicitly true.
    """

    model_config = {"frozen": True}

    is_admin_view: bool = False
    display_flags: dict[str, bool] = PydanticField(default_factory=dict)

    def is_visible(self, key: str) -> bool:
        return self.is_admin_view or self.display_flags.get(key) is True

    @classmethod
    def from_package(
        cls,
        meta: PackageMeta | Mapping[str, Any] | None,
        *,
        admin: bool = False,
        suffix: str = DISPLAY_FLAG_SUFFIX,
    ) -> VisibilityPolicy:
        """Derive display flags from ``<key>_display`` package meta entries.

        A flag is on only when its value equals 1 (``"1"``, ``1``, ``1.0``,
        ``"1.0"``, ``True``).
        """
        if meta is None:
            entries: Mapping[str, Any] = {}
        elif isinstance(meta, Mapping):
            entries = meta
        else:
            entries = meta.as_dict()

        flags: dict[str, bool] = {}
        for name, value in entries.items():
            if not name.endswith(suffix) or name == suffix:
                continue
            flags[name[: -len(suffix)].lower()] = _is_flag_on(value)
        return cls(is_admin_view=admin, display_flags=flags)


def _is_flag_on(value: Any) -> bool:
    """Loose equality with ``"1"``: numeric values compare as numbers."""
    if isinstance(value, bool):
        return value
    text = str(value).strip()
    try:
        return float(text) == 1
    except ValueError:
        return text == "1"


def static_fields(
    values: Mapping[str, Any] | None,
    *,
    admin: bool,
    localize: Localize,
) -> list[Field]:
    """Server id (admins only), server name, and server description."""
    values = values or {}
    fields: list[Field] = []
    for key, public in STATIC_FIELDS:
        if not public and not admin:
            continue
        value = values.get(key)
        fields.append(
            Field(
                key=key,
                label=localize(f"service_fields.{key}"),
                value="" if value is None else value,
                tooltip=localize(f"service_fields.tooltip.{key}"),
            )
        )
    return fields


def variable_field(
    declaration: VariableDeclaration,
    value: Any,
    *,
    localize: Localize,
    required_prefix: str = REQUIRED_PREFIX,
) -> Field:
    """Build the field for one egg variable."""
    required = declaration.is_required(required_prefix)
    label = (
        declaration.name
        if required
        else localize("service_fields.optional", declaration.name)
    )
    return Field(
        key=declaration.key,
        label=label,
        value=value,
        tooltip=declaration.description,
        required=required,
    )


def build_fields(
    declarations: Iterable[VariableDeclaration] | None,
    resolved: Mapping[str, Any] | None,
    policy: VisibilityPolicy,
    static_values: Mapping[str, Any] | None = None,
    localize: Localize | None = None,
    *,
    sources: Sequence[ValueSource] = (),
    required_prefix: str = REQUIRED_PREFIX,
) -> list[Field]:
    """Ordered field list: static fields, then visible egg variables.

    When *resolved* is None the variable values are resolved here from
    *sources* using the standard precedence rules.
    """
    localize = localize or Localizer()
    declarations = list(declarations or ())
    if resolved is None:
        resolved = resolve_environment(declarations, sources)

    fields = static_fields(static_values, admin=policy.is_admin_view, localize=localize)
    for declaration in declarations:
        if not policy.is_visible(declaration.key):
            continue
        value = resolved.get(declaration.env_variable, declaration.default_value)
        fields.append(
            variable_field(
                declaration,
                value,
                localize=localize,
                required_prefix=required_prefix,
            )
        )
    return fields
