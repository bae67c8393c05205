"""BaseService, the shared foundation for eggctl services.

Every service receives the resolved :class:`EggSettings` at construction
time and reads precedence, form, and language options from it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from eggctl.domain.language import Localizer

if TYPE_CHECKING:
    from eggctl.config.settings import EggSettings
    from eggctl.domain.sources import SourceTier


class BaseService:
    """Base for service-layer classes.

    Usage::

        class ProvisionService(BaseService):
            def resolve(self, egg_path: Path, ...) -> ServiceResult:
                ...
    """

    def __init__(self, settings: EggSettings) -> None:
        self._settings = settings
        self._localizer = Localizer(settings.language.strings)

    @property
    def precedence(self) -> tuple[SourceTier, ...]:
        return self._settings.resolution.precedence

    @property
    def localize(self) -> Localizer:
        return self._localizer
