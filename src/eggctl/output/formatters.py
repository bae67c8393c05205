"""Output mode dispatch for ServiceResult.

``--json`` dumps the envelope as-is for machines; ``--quiet`` prints a
single status line; the default is a Rich rendering for humans.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from eggctl.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from eggctl.services.result import ServiceResult


class OutputSettings(BaseModel):
    """How a result should be written, taken from the global CLI flags."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display according to *settings*."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
