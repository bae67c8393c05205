"""Subcommand modules for eggctl.

Provides register_commands() which uses deferred imports to keep
``eggctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the payload group and the standalone commands on the root group."""
    from eggctl.commands.fields import fields
    from eggctl.commands.payload import payload
    from eggctl.commands.resolve import resolve
    from eggctl.commands.rules import rules

    cli.add_command(resolve)
    cli.add_command(fields)
    cli.add_command(rules)
    cli.add_command(payload)
