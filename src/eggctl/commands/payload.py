"""Command group: panel API request bodies."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from eggctl.commands._base import EggGroup, input_file

if TYPE_CHECKING:
    from eggctl.commands._context import AppContext

_PAYLOAD_EXAMPLES = """\
  eggctl payload add-user --client client.json
  eggctl payload add-server --egg egg.json --package package.json --user user.json --vars order.json
  eggctl payload edit-server --user user.json --vars order.json
  eggctl payload edit-build --package package.json
  eggctl payload edit-startup --egg egg.json --package package.json --saved service.json"""


@click.group(cls=EggGroup, examples=_PAYLOAD_EXAMPLES)
def payload() -> None:
    """Build request bodies for the panel's application API."""


@payload.command(
    "add-user",
    examples="""\
  eggctl payload add-user --client client.json""",
)
@input_file("--client", "client_path", required=True, help_text="Billing client JSON document.")
@click.pass_obj
def add_user(app: AppContext, client_path: Path) -> None:
    """Body for creating the panel user behind a client."""
    app.emit(app.service.add_user(client_path))


@payload.command(
    "add-server",
    examples="""\
  eggctl payload add-server --egg egg.json --package package.json --user user.json
  eggctl --json payload add-server --egg egg.json --package package.json \\
      --user user.json --vars order.json""",
)
@input_file("--egg", "egg_path", required=True, help_text="Egg JSON document.")
@input_file("--package", "package_path", required=True, help_text="Package JSON document.")
@input_file("--user", "user_path", required=True, help_text="Panel user JSON document.")
@input_file("--vars", "vars_path", help_text="Submitted form values (with configoptions).")
@click.pass_obj
def add_server(
    app: AppContext,
    egg_path: Path,
    package_path: Path,
    user_path: Path,
    vars_path: Path | None,
) -> None:
    """Body for creating a server."""
    app.emit(app.service.add_server(egg_path, package_path, user_path, vars_path=vars_path))


@payload.command(
    "edit-server",
    examples="""\
  eggctl payload edit-server --user user.json --vars order.json""",
)
@input_file("--user", "user_path", required=True, help_text="Panel user JSON document.")
@input_file("--vars", "vars_path", help_text="Submitted form values.")
@click.pass_obj
def edit_server(app: AppContext, user_path: Path, vars_path: Path | None) -> None:
    """Body for editing a server's name, description, and owner."""
    app.emit(app.service.edit_server(user_path, vars_path=vars_path))


@payload.command(
    "edit-build",
    examples="""\
  eggctl payload edit-build --package package.json""",
)
@input_file("--package", "package_path", required=True, help_text="Package JSON document.")
@click.pass_obj
def edit_build(app: AppContext, package_path: Path) -> None:
    """Body for editing a server's resource limits."""
    app.emit(app.service.edit_build(package_path))


@payload.command(
    "edit-startup",
    examples="""\
  eggctl payload edit-startup --egg egg.json --package package.json
  eggctl payload edit-startup --egg egg.json --package package.json --saved service.json""",
)
@input_file("--egg", "egg_path", required=True, help_text="Egg JSON document.")
@input_file("--package", "package_path", required=True, help_text="Package JSON document.")
@input_file("--vars", "vars_path", help_text="Submitted form values (with configoptions).")
@input_file("--saved", "saved_path", help_text="Service fields saved on an existing service.")
@click.pass_obj
def edit_startup(
    app: AppContext,
    egg_path: Path,
    package_path: Path,
    vars_path: Path | None,
    saved_path: Path | None,
) -> None:
    """Body for editing a server's image, startup command, and environment."""
    app.emit(
        app.service.edit_startup(
            egg_path,
            package_path,
            vars_path=vars_path,
            saved_path=saved_path,
        )
    )
