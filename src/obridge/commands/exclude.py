"""Commands: manage which documents and directories take part in linking."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from obridge.commands._base import BridgeCommand

if TYPE_CHECKING:
    from obridge.commands._context import AppContext

_outside_option = click.option(
    "--outside/--no-outside",
    "can_link_from_outside",
    default=None,
    help="Allow (or forbid) other documents to link here.",
)
_linked_option = click.option(
    "--linked/--no-linked",
    "can_be_linked",
    default=None,
    help="Allow (or forbid) links being added to this body.",
)


@click.command(
    cls=BridgeCommand,
    examples="""\
  obridge exclude notes/Private.md
  obridge exclude archive/
  obridge exclude --name "Daily Template"
  obridge exclude glossary/ --outside        # still a link target, body untouched""",
)
@click.argument("target")
@click.option("--name", "by_name", is_flag=True, help="Treat TARGET as a document name.")
@_outside_option
@_linked_option
@click.pass_obj
def exclude(
    app: AppContext,
    target: str,
    by_name: bool,
    can_link_from_outside: bool | None,
    can_be_linked: bool | None,
) -> None:
    """Exclude a file or directory from linking."""
    from obridge.services.exclude import ExcludeService

    app.emit(
        ExcludeService(app.vault).exclude(
            target,
            by_name=by_name,
            can_link_from_outside=can_link_from_outside,
            can_be_linked=can_be_linked,
        )
    )


@click.command(
    cls=BridgeCommand,
    examples="""\
  obridge unexclude notes/Private.md
  obridge unexclude archive/
  obridge unexclude --name 'Daily Template'""",
)
@click.argument("target")
@click.option("--name", "by_name", is_flag=True, help="Treat TARGET as a document name.")
@click.pass_obj
def unexclude(app: AppContext, target: str, by_name: bool) -> None:
    """Remove a file or directory exclusion."""
    from obridge.services.exclude import ExcludeService

    app.emit(ExcludeService(app.vault).unexclude(target, by_name=by_name))


@click.command(
    cls=BridgeCommand,
    examples="""\
  obridge exclusions
  obridge exclusions --aliases
  obridge --json exclusions""",
)
@click.option("--aliases", "with_aliases", is_flag=True, help="Show the names each entry covers.")
@click.pass_obj
def exclusions(app: AppContext, with_aliases: bool) -> None:
    """List excluded files and directories."""
    from obridge.services.exclude import ExcludeService

    try:
        result = ExcludeService(app.vault).list_exclusions(with_aliases=with_aliases)
    except OSError as exc:
        app.abort("exclusions", exc)
        return
    app.emit(result)


@click.command(
    "set-flags",
    cls=BridgeCommand,
    examples="""\
  obridge set-flags Private --outside
  obridge set-flags archive/ --dir --no-outside --linked""",
)
@click.argument("name")
@click.option("--dir", "directory", is_flag=True, help="NAME is a directory entry.")
@_outside_option
@_linked_option
@click.pass_obj
def set_flags(
    app: AppContext,
    name: str,
    directory: bool,
    can_link_from_outside: bool | None,
    can_be_linked: bool | None,
) -> None:
    """Change the link flags of an excluded entry."""
    from obridge.services.exclude import ExcludeService

    if can_link_from_outside is None and can_be_linked is None:
        raise click.UsageError("Pass at least one of --outside/--no-outside, --linked/--no-linked.")
    app.emit(
        ExcludeService(app.vault).set_flags(
            name,
            directory=directory,
            can_link_from_outside=can_link_from_outside,
            can_be_linked=can_be_linked,
        )
    )


@click.command(
    "self-link",
    cls=BridgeCommand,
    examples="""\
  obridge self-link
  obridge self-link --on
  obridge self-link --off""",
)
@click.option("--on/--off", "enabled", default=None, help="Enable or disable self-links.")
@click.pass_obj
def self_link(app: AppContext, enabled: bool | None) -> None:
    """Show or set whether a document may link to itself."""
    from obridge.services.exclude import ExcludeService

    app.emit(ExcludeService(app.vault).self_link(enabled))
