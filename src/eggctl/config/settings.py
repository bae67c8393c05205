"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs    CLI flags passed by Click
  2. Env vars       ``EGGCTL_*`` prefix, ``__`` for nested sections
  3. TOML file      ``eggctl.toml`` discovered via walk-up
  4. Code defaults  baked into the section models
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from eggctl.config.discovery import TomlConfigError, find_config, read_toml
from eggctl.config.models import FormConfig, LanguageConfig, ResolutionConfig

__all__ = ["EggSettings", "TomlConfigError", "TomlSettingsSource"]

logger = logging.getLogger(__name__)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings read from one ``eggctl.toml`` file.

    Top-level keys that are not settings fields are ignored.
    """

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        known = settings_cls.model_fields
        data = read_toml(toml_path)
        self._data = {k: v for k, v in data.items() if k in known}
        ignored = sorted(set(data) - set(self._data))
        if ignored:
            logger.debug("Ignoring unknown config keys in %s: %s", toml_path, ", ".join(ignored))

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


# The TOML path chosen by from_cli(), read back in settings_customise_sources().
_pending = threading.local()


class EggSettings(BaseSettings):
    """Settings for the whole eggctl CLI.

    Built once by the root group and handed to every command through
    :class:`~eggctl.commands._context.AppContext`.  ``resolution``
    controls which input tiers are consulted and in what order,
    ``form`` the display-flag and required-rule conventions, and
    ``language`` the field label strings.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "EGGCTL_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- global CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- eggctl.toml sections ---
    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)
    form: FormConfig = Field(default_factory=FormConfig)
    language: LanguageConfig = Field(default_factory=LanguageConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """CLI flags, then env vars, then the TOML file; no dotenv or secrets."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_pending, "toml_path", None)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | Path | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> EggSettings:
        """Construct settings from a CLI invocation.

        An explicit *config_path* must exist.  Without one, ``eggctl.toml``
        is discovered by walking up from *start* (default: cwd).
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {toml_path}"
                raise TomlConfigError(msg)
        else:
            toml_path = find_config(start)

        _pending.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _pending.toml_path = None
