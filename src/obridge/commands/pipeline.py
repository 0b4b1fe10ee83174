"""Commands: scan the vault for aliases and link their mentions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from obridge.commands._base import BridgeCommand

if TYPE_CHECKING:
    from obridge.commands._context import AppContext


@click.command(
    cls=BridgeCommand,
    examples="""\
  obridge run
  obridge --json run
  obridge -q run            # print rewritten paths only""",
)
@click.pass_obj
def run(app: AppContext) -> None:
    """Scan for aliases, then link every mention (scan + link)."""
    from obridge.services.bridge import BridgeService

    try:
        result = BridgeService(app.vault).run()
    except OSError as exc:
        app.abort("run", exc)
        return
    app.emit(result)


@click.command(
    cls=BridgeCommand,
    examples="""\
  obridge scan
  obridge -v scan           # include the snapshot path and timings""",
)
@click.pass_obj
def scan(app: AppContext) -> None:
    """Collect declared aliases into the snapshot."""
    from obridge.services.bridge import BridgeService

    try:
        result = BridgeService(app.vault).scan()
    except OSError as exc:
        app.abort("scan", exc)
        return
    app.emit(result)


@click.command(
    cls=BridgeCommand,
    examples="""\
  obridge link
  obridge link --dry-run    # show what would be linked""",
)
@click.option("--dry-run", is_flag=True, help="Show changes without writing.")
@click.pass_obj
def link(app: AppContext, dry_run: bool) -> None:
    """Link alias mentions using the last snapshot."""
    from obridge.services.bridge import BridgeService

    try:
        result = BridgeService(app.vault).link(dry_run=dry_run)
    except OSError as exc:
        app.abort("link", exc)
        return
    app.emit(result)
