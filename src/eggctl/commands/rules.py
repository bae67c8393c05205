"""Standalone command: show egg variable rules and check values against them."""

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
  eggctl rules --egg egg.json
  eggctl rules --egg egg.json --package package.json --vars order.json""",
)
@input_file("--egg", "egg_path", required=True, help_text="Egg JSON document.")
@input_file("--package", "package_path", help_text="Package JSON document; enables checking.")
@input_file("--vars", "vars_path", help_text="Submitted form values (with configoptions).")
@input_file("--saved", "saved_path", help_text="Service fields saved on an existing service.")
@click.pass_obj
def rules(
    app: AppContext,
    egg_path: Path,
    package_path: Path | None,
    vars_path: Path | None,
    saved_path: Path | None,
) -> None:
    """Show each variable's rules; with --package, check resolved values."""
    if package_path is None and (vars_path or saved_path):
        raise click.UsageError("--vars and --saved require --package.")
    app.emit(
        app.service.rules(
            egg_path,
            package_path=package_path,
            vars_path=vars_path,
            saved_path=saved_path,
        )
    )
