"""Built-in notification plugins.

:class:`LogNotices` records every notice in the structured log.
:class:`EchoNotices` prints notices to stderr for interactive use;
the CLI registers it unless ``--quiet`` or ``--json`` is set.
"""

from __future__ import annotations

import click
import pluggy
import structlog

hookimpl = pluggy.HookimplMarker("obridge")


class LogNotices:
    """Send notices to the ``obridge.notice`` logger."""

    def __init__(self) -> None:
        self._log = structlog.get_logger("obridge.notice")

    @hookimpl
    def notify(self, message: str) -> None:
        self._log.info("notice", message=message)


class EchoNotices:
    """Echo notices to stderr so piped stdout stays clean."""

    @hookimpl
    def notify(self, message: str) -> None:
        click.echo(message, err=True)
