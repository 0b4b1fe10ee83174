"""Pluggy hook specifications for obridge pipeline events.

``notify`` is the user-notification surface: fire-and-forget status
messages such as "Scan complete!". The ``post_*`` hooks fire after each
pipeline stage finishes successfully.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("obridge")


class ObridgeHookSpec:
    """Hook specifications for the obridge plugin system."""

    @hookspec
    def notify(self, message: str) -> None:
        """Show a status message to the user. No acknowledgment."""

    @hookspec
    def post_scan(self, records: int, snapshot_path: str) -> None:
        """Called after the snapshot has been persisted."""

    @hookspec
    def post_link(self, links_added: int, documents: list[str]) -> None:
        """Called after a link pass; *documents* are the rewritten paths."""
