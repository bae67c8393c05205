"""AppContext, the object every eggctl command receives.

The root group builds one from the resolved settings and stores it as
``ctx.obj``; commands take it with ``@click.pass_obj``.  It sets up
logging, owns the :class:`ProvisionService`, and writes results.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from eggctl.config.logging import configure_logging
from eggctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from eggctl.config.settings import EggSettings
    from eggctl.services.provision import ProvisionService
    from eggctl.services.result import ServiceResult


class AppContext:
    """Shared state for one CLI invocation."""

    def __init__(self, settings: EggSettings) -> None:
        self.settings = settings
        self._service: ProvisionService | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def service(self) -> ProvisionService:
        """The provisioning service, built on first use."""
        if self._service is None:
            from eggctl.services.provision import ProvisionService

            self._service = ProvisionService(self.settings)
        return self._service

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Write *result* and set the exit status.

        A successful result goes to stdout and rule warnings go to stderr,
        so a payload can be piped straight into another tool.  With
        ``--json`` the warnings are part of the envelope and are not
        repeated.  A failed result goes to stderr and exits with status 1.
        """
        output_settings = self.output_settings
        text = format_result(result, settings=output_settings)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if output_settings.json_output or output_settings.quiet:
            return
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
