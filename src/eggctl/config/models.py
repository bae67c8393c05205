"""Pydantic configuration models with code-baked defaults.

Defaults live here; eggctl.toml only needs the keys it overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from eggctl.domain.sources import DEFAULT_PRECEDENCE, SourceTier

# --- eggctl.toml sections ---


class ResolutionConfig(BaseModel):
    """[resolution] section."""

    model_config = {"frozen": True}

    precedence: tuple[SourceTier, ...] = DEFAULT_PRECEDENCE

    @field_validator("precedence")
    @classmethod
    def _no_duplicate_tiers(cls, value: tuple[SourceTier, ...]) -> tuple[SourceTier, ...]:
        if len(set(value)) != len(value):
            msg = "precedence lists the same tier more than once"
            raise ValueError(msg)
        return value


class FormConfig(BaseModel):
    """[form] section."""

    model_config = {"frozen": True}

    display_flag_suffix: str = "_display"
    required_prefix: str = "required"

    @field_validator("display_flag_suffix", "required_prefix")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "must not be blank"
            raise ValueError(msg)
        return value


class LanguageConfig(BaseModel):
    """[language] section."""

    model_config = {"frozen": True}

    strings: dict[str, str] = Field(default_factory=dict)

