"""Subcommand modules for obridge.

Provides register_commands(), which uses deferred imports to keep
``obridge --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every command on the root CLI group."""
    from obridge.commands.exclude import exclude, exclusions, self_link, set_flags, unexclude
    from obridge.commands.pipeline import link, run, scan

    cli.add_command(run)
    cli.add_command(scan)
    cli.add_command(link)

    cli.add_command(exclude)
    cli.add_command(unexclude)
    cli.add_command(exclusions)
    cli.add_command(set_flags)
    cli.add_command(self_link)
