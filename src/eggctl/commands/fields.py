"""Standalone command: list the form fields for adding/editing a service."""

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
  eggctl fields --egg egg.json --package package.json
  eggctl fields --egg egg.json --package package.json --admin
  eggctl --json fields --egg egg.json --package package.json --vars order.json""",
)
@input_file("--egg", "egg_path", required=True, help_text="Egg JSON document.")
@input_file("--package", "package_path", required=True, help_text="Package JSON document.")
@input_file("--vars", "vars_path", help_text="Submitted form values (with configoptions).")
@input_file("--saved", "saved_path", help_text="Service fields saved on an existing service.")
@click.option("--admin", is_flag=True, help="Show the admin view (all variables, server id).")
@click.pass_obj
def fields(
    app: AppContext,
    egg_path: Path,
    package_path: Path,
    vars_path: Path | None,
    saved_path: Path | None,
    admin: bool,
) -> None:
    """List the fields shown when adding or editing a service."""
    app.emit(
        app.service.fields(
            egg_path,
            package_path,
            vars_path=vars_path,
            saved_path=saved_path,
            admin=admin,
        )
    )
