"""Tests for the config section models."""

import pytest
from pydantic import ValidationError

from eggctl.config.models import FormConfig, LanguageConfig, ResolutionConfig
from eggctl.domain.sources import DEFAULT_PRECEDENCE, SourceTier


class TestResolutionConfig:
    def test_default(self) -> None:
        assert ResolutionConfig().precedence == DEFAULT_PRECEDENCE

    def test_subset(self) -> None:
        config = ResolutionConfig(precedence=("package_meta", "service_fields"))
        assert config.precedence == (SourceTier.PACKAGE_META, SourceTier.SERVICE_FIELDS)

    def test_duplicates_rejected(self) -> None:
        with pytest.raises(ValidationError, match="more than once"):
            ResolutionConfig(precedence=("package_meta", "package_meta"))

    def test_unknown_tier_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ResolutionConfig(precedence=("somewhere",))


class TestFormConfig:
    def test_defaults(self) -> None:
        assert FormConfig() == FormConfig(display_flag_suffix="_display", required_prefix="required")

    @pytest.mark.parametrize("field", ["display_flag_suffix", "required_prefix"])
    def test_blank_rejected(self, field: str) -> None:
        with pytest.raises(ValidationError, match="must not be blank"):
            FormConfig.model_validate({field: " "})


def test_language_strings_default_empty() -> None:
    assert LanguageConfig().strings == {}
