"""Output mode dispatch for ServiceResult.

Humans get Rich renderers, machines get ``--json``, scripts get
``--quiet``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from obridge.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from obridge.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """How a result should be printed."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
