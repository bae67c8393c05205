"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from eggctl.output.console import create_console, get_output, origin_text

if TYPE_CHECKING:
    from rich.console import Console

    from eggctl.services.result import ServiceResult

Renderer = Callable[["ServiceResult", "Console"], None]


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="egg.ok"), Text(f"  {result.op}", style="egg.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    if isinstance(value, (dict, list)):
        value = json.dumps(value, separators=(",", ":"))
    console.print(Text.assemble((f"  {key}: ", "egg.key"), str(value)))


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if isinstance(value, dict):
            console.print(f"    {key}:")
            for inner_key, inner_value in value.items():
                console.print(f"      {inner_key}: {inner_value}", markup=False)
        else:
            console.print(f"    {key}: {value}", markup=False)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="egg.error")
    op = Text(f"  {result.op}", style="egg.op")
    console.print(label, op, Text("—"), Text(msg))

    if err and err.code == "VALIDATION_FAILED":
        for key, problems in err.detail.get("errors", {}).items():
            for problem in problems:
                console.print(Text(f"  {key}", style="egg.var"), Text(problem))
    elif verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}", markup=False)


# ── Operation renderers ───────────────────────────────────────────────


def _render_environment(result: ServiceResult, console: Console) -> None:
    """Render resolved variables with the source each value came from."""
    environment: dict[str, Any] = result.data.get("environment", {})
    origins: dict[str, str] = (result.meta or {}).get("origins", {})

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Variable", style="egg.var", no_wrap=True)
    table.add_column("Value")
    table.add_column("Source")
    for name, value in environment.items():
        table.add_row(name, Text(str(value)), origin_text(origins.get(name, "")))

    console.print(table)
    console.print(f"\n{result.data.get('count', len(environment))} variables")


def _render_fields(result: ServiceResult, console: Console) -> None:
    """Render form fields in display order."""
    items: list[dict[str, Any]] = result.data.get("items", [])

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Key", style="egg.var", no_wrap=True)
    table.add_column("Label")
    table.add_column("Value")
    table.add_column("Tooltip", style="dim")
    for item in items:
        label_style = "" if item.get("required", True) else "egg.optional"
        table.add_row(
            str(item.get("key", "")),
            Text(str(item.get("label", "")), style=label_style),
            Text(str(item.get("value", ""))),
            Text(str(item.get("tooltip", ""))),
        )

    console.print(table)
    view = "admin" if result.data.get("admin") else "client"
    console.print(f"\n{result.data.get('count', len(items))} fields ({view} view)")


def _render_rules(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, rules in result.data.get("rules", {}).items():
        console.print(Text.assemble((f"  {key}: ", "egg.var"), " | ".join(rules) or "(none)"))


def _render_payload(result: ServiceResult, console: Console) -> None:
    """Render a panel API request body as indented JSON."""
    _status_line(console, result)
    console.print(json.dumps(result.data.get("payload", {}), indent=2), markup=False)


def _render_generic(result: ServiceResult, console: Console) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Renderer] = {
    "resolve": _render_environment,
    "fields": _render_fields,
    "rules": _render_rules,
    "add_user": _render_payload,
    "add_server": _render_payload,
    "edit_server": _render_payload,
    "edit_build": _render_payload,
    "edit_startup": _render_payload,
}
