"""Standalone command: resolve an egg's environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from eggctl.commands._base import EggCommand, input_file

if TYPE_CHECKING:
    from eggctl.commands._context import AppContext


@click.command(
    cls=EggCommand,
    examples="""\
  eggctl resolve --egg egg.json --package package.json
  eggctl resolve --egg egg.json --package package.json --vars order.json
  eggctl resolve --egg egg.json --package package.json --saved service.json
  eggctl --json resolve --egg egg.json --package package.json""",
)
@input_file("--egg", "egg_path", required=True, help_text="Egg JSON document.")
@input_file("--package", "package_path", required=True, help_text="Package JSON document.")
@input_file("--vars", "vars_path", help_text="Submitted form values (with configoptions).")
@input_file("--saved", "saved_path", help_text="Service fields saved on an existing service.")
@click.pass_obj
def resolve(
    app: AppContext,
    egg_path: Path,
    package_path: Path,
    vars_path: Path | None,
    saved_path: Path | None,
) -> None:
    """Resolve one value per egg variable from all input sources."""
    app.emit(
        app.service.resolve(
            egg_path,
            package_path,
            vars_path=vars_path,
            saved_path=saved_path,
        )
    )
