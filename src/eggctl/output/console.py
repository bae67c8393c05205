"""Rich console and theme for eggctl output.

Renderers draw on a console backed by a StringIO buffer and return the
captured text, so ``format_result()`` always produces a plain string.
Rich drops color codes by itself when the output is not a terminal
(pipes, CliRunner).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.text import Text
from rich.theme import Theme

from eggctl.domain.sources import DEFAULT_ORIGIN

EGG_THEME = Theme(
    {
        "egg.ok": "bold green",
        "egg.error": "bold red",
        "egg.warning": "bold yellow",
        "egg.op": "bold cyan",
        "egg.key": "dim",
        "egg.var": "bold blue",
        "egg.optional": "dim italic",
        "egg.origin": "magenta",
        "egg.default": "dim",
    }
)

DEFAULT_WIDTH = 120


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """A themed console writing into a fresh StringIO buffer.

    *width* defaults to a fixed 120 columns so table layout does not
    depend on the caller's terminal.
    """
    return Console(
        file=StringIO(),
        theme=EGG_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    """Everything written to a console made by :func:`create_console`."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        msg = "console was not created by create_console()"
        raise TypeError(msg)
    return buffer.getvalue()


def origin_text(origin: str) -> Text:
    """A value's source tier, dimmed when the egg default was used."""
    style = "egg.default" if origin == DEFAULT_ORIGIN else "egg.origin"
    return Text(origin, style=style)
