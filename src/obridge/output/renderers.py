"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers
are dispatched by ``result.op`` in :func:`render_result`; unknown ops
fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from obridge.output.console import create_console, get_output

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from obridge.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    if verbose:
        _render_meta(console, result)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    data = result.data
    if result.op == "link":
        return "\n".join(c["path"] for c in data.get("changes", []))
    if result.op == "run":
        return "\n".join(c["path"] for c in data.get("link", {}).get("changes", []))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="ob.ok")
    op = Text(f"  {result.op}", style="ob.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="ob.key")
    if key in ("path", "snapshot"):
        v = Text(str(value), style="ob.path")
    elif key == "name":
        v = Text(str(value), style="ob.name")
    elif isinstance(value, int) and not isinstance(value, bool):
        v = Text(str(value), style="ob.count")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _flag(value: bool) -> Text:
    return Text("yes", style="ob.flag.on") if value else Text("no", style="ob.flag.off")


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _changes_table(changes: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Document", style="ob.path")
    table.add_column("Links", style="ob.count", justify="right")
    table.add_column("Targets")
    for change in changes:
        table.add_row(change["path"], str(change["links"]), ", ".join(change["targets"]))
    return table


def _entries_table(title: str, entries: list[dict[str, Any]], *, aliases: bool) -> Table:
    table = Table(title=title, show_header=True, pad_edge=False, expand=False)
    table.add_column("Name", style="ob.name")
    table.add_column("Link target")
    table.add_column("Body linked")
    if aliases:
        table.add_column("Aliases")
    for entry in entries:
        row: list[Any] = [
            entry["name"],
            _flag(entry["can_link_from_outside"]),
            _flag(entry["can_be_linked"]),
        ]
        if aliases:
            row.append(", ".join(entry.get("aliases", [])))
        table.add_row(*row)
    return table


# ── Op renderers ──────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


def _render_scan(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    for key in ("documents", "records", "aliases"):
        _field(console, key, data.get(key, 0))
    if verbose:
        _field(console, "snapshot", data.get("snapshot", ""))


def _render_link_body(data: dict[str, Any], console: Console, *, verbose: bool) -> None:
    verb = "would add" if data.get("dry_run") else "added"
    console.print(
        f"  [ob.count]{data.get('links_added', 0)}[/ob.count] link(s) {verb} in "
        f"[ob.count]{data.get('documents', 0)}[/ob.count] document(s)"
    )
    changes = data.get("changes", [])
    if changes:
        console.print(_changes_table(changes))
    if verbose:
        _field(console, "aliases", data.get("aliases", 0))
        for path in data.get("skipped", []):
            console.print(Text(f"  skipped: {path}", style="dim"))


def _render_link(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _render_link_body(result.data, console, verbose=verbose)


def _render_run(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    scan = result.data.get("scan", {})
    console.print(
        f"  scanned [ob.count]{scan.get('documents', 0)}[/ob.count] document(s), "
        f"{scan.get('records', 0)} with aliases"
    )
    _render_link_body(result.data.get("link", {}), console, verbose=verbose)


def _render_exclusion_change(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    data = result.data
    if data.get("changed"):
        _status_line(console, result)
    else:
        console.print(Text("NO CHANGE", style="ob.warning"), Text(f"  {result.op}", style="ob.op"))
    console.print(f"  {data.get('message', '')}")
    entry = data.get("entry")
    if verbose and entry:
        _field(console, "can_link_from_outside", entry["can_link_from_outside"])
        _field(console, "can_be_linked", entry["can_be_linked"])


def _render_set_flags(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    entry = result.data["entry"]
    _field(console, "name", entry["name"])
    _field(console, "can_link_from_outside", entry["can_link_from_outside"])
    _field(console, "can_be_linked", entry["can_be_linked"])


def _render_exclusions(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    files, dirs = data.get("files", []), data.get("dirs", [])
    with_aliases = any("aliases" in e for e in (*files, *dirs))
    if not files and not dirs:
        console.print("  Nothing is excluded.")
    if files:
        console.print(_entries_table("Excluded files", files, aliases=with_aliases))
    if dirs:
        console.print(_entries_table("Excluded directories", dirs, aliases=with_aliases))
    _field(console, "add_alias_to_self", data.get("add_alias_to_self", False))


def _render_self_link(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    state = "on" if result.data.get("add_alias_to_self") else "off"
    suffix = "" if result.data.get("changed") else " (unchanged)"
    console.print(f"  self-linking is {state}{suffix}")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="ob.error")
    op = Text(f"  {result.op}", style="ob.op")
    console.print(label, op, Text(" — "), msg)
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="ob.key"))
        for key, value in err.detail.items():
            console.print(f"    {key}: {value}")


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "scan": _render_scan,
    "link": _render_link,
    "run": _render_run,
    "exclude": _render_exclusion_change,
    "unexclude": _render_exclusion_change,
    "set_flags": _render_set_flags,
    "exclusions": _render_exclusions,
    "self_link": _render_self_link,
}
