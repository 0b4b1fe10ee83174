"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Provides lazy Vault initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
import structlog

from obridge.output.formatters import OutputSettings, format_result
from obridge.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from obridge.config.settings import BridgeSettings
    from obridge.infrastructure.vault import Vault


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The vault is created on first use so ``--help`` and ``--version``
    never touch the filesystem.
    """

    def __init__(self, settings: BridgeSettings) -> None:
        self.settings = settings
        self._vault: Vault | None = None

        from obridge.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from obridge.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def vault(self) -> Vault:
        """The vault instance (created lazily on first access)."""
        if self._vault is None:
            from obridge.infrastructure.vault import Vault
            from obridge.plugins.builtins.notices import EchoNotices, LogNotices
            from obridge.plugins.manager import PluginManager

            plugins = PluginManager()
            plugins.register_plugin(LogNotices(), name="log-notices")
            if not (self.settings.quiet or self.settings.json_output):
                plugins.register_plugin(EchoNotices(), name="echo-notices")
            plugins.discover_and_load()
            self._vault = Vault(self.settings, plugins=plugins)
        return self._vault

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout; warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def abort(self, op: str, exc: OSError) -> None:
        """Report a document store failure that ended a run, then exit 1.

        Documents rewritten before the failure keep their new content.
        """
        structlog.get_logger("obridge.bridge").error(
            "bridge.aborted",
            op=op,
            error=str(exc),
            path=getattr(exc, "filename", None),
        )
        self.emit(ServiceResult.failure(op, ErrorCode.STORE_ERROR, f"Vault access failed: {exc}"))
