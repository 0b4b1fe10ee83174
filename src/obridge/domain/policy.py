"""Exclusion policy — per-document and per-directory link rules.

Each excluded entity carries two independent flags:

- ``can_link_from_outside``: whether the entity's names may be used as
  link *targets* inside other documents.
- ``can_be_linked``: whether the entity's *own body* may be rewritten.

An entity absent from the policy is fully includable. A freshly
excluded entity has both flags off. File entries match on the
document name exactly; directory entries match on a path prefix.

Everything here is pure: the policy is passed in explicitly and the
mutators return a new policy instead of touching shared state.
"""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel, Field


class ExcludedEntity(BaseModel):
    """A document name or directory prefix with its link flags."""

    model_config = {"frozen": True, "populate_by_name": True}

    name: str
    can_link_from_outside: bool = Field(default=False, alias="canLinkFromOutside")
    can_be_linked: bool = Field(default=False, alias="canBeLinked")


class ExclusionPolicy(BaseModel):
    """The full set of excluded files and directories."""

    model_config = {"frozen": True, "populate_by_name": True}

    excluded_files: tuple[ExcludedEntity, ...] = Field(default=(), alias="excludedFiles")
    excluded_dirs: tuple[ExcludedEntity, ...] = Field(default=(), alias="excludedDirs")


class BridgeState(ExclusionPolicy):
    """Persisted configuration: the policy plus the self-link switch.

    Serialized with camelCase keys::

        {"excludedFiles": [...], "excludedDirs": [...], "addAliasToSelf": false}
    """

    add_alias_to_self: bool = Field(default=False, alias="addAliasToSelf")

    @property
    def policy(self) -> ExclusionPolicy:
        """The exclusion part of the state, detached from the switch."""
        return ExclusionPolicy(
            excluded_files=self.excluded_files,
            excluded_dirs=self.excluded_dirs,
        )


_P = TypeVar("_P", bound=ExclusionPolicy)

# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def file_entry(policy: ExclusionPolicy, name: str) -> ExcludedEntity | None:
    """Return the file entry for *name*, if any."""
    for entity in policy.excluded_files:
        if entity.name == name:
            return entity
    return None


def dir_entries(policy: ExclusionPolicy, path: str) -> list[ExcludedEntity]:
    """Return every directory entry whose name is a prefix of *path*."""
    return [entity for entity in policy.excluded_dirs if path.startswith(entity.name)]


def is_excluded_file(policy: ExclusionPolicy, name: str) -> bool:
    """Whether a document named *name* has a file entry."""
    return file_entry(policy, name) is not None


def is_excluded_dir(policy: ExclusionPolicy, path: str) -> bool:
    """Whether *path* falls under an excluded directory prefix."""
    return bool(dir_entries(policy, path))


def _matching(policy: ExclusionPolicy, name: str, path: str) -> list[ExcludedEntity]:
    entries = dir_entries(policy, path)
    entry = file_entry(policy, name)
    if entry is not None:
        entries.append(entry)
    return entries


def can_be_target(policy: ExclusionPolicy, name: str, path: str) -> bool:
    """Whether a document may be offered as a link target elsewhere.

    False as soon as any matching entry has ``can_link_from_outside`` off.
    """
    return all(entity.can_link_from_outside for entity in _matching(policy, name, path))


def can_rewrite(policy: ExclusionPolicy, name: str, path: str) -> bool:
    """Whether a document's own body may receive links.

    False as soon as any matching entry has ``can_be_linked`` off.
    """
    return all(entity.can_be_linked for entity in _matching(policy, name, path))


# ---------------------------------------------------------------------------
# Mutators: return (changed, new_policy)
# ---------------------------------------------------------------------------


def exclude_file(policy: _P, name: str) -> tuple[bool, _P]:
    """Add a default file entry for *name* unless one exists."""
    if is_excluded_file(policy, name):
        return False, policy
    entries = (*policy.excluded_files, ExcludedEntity(name=name))
    return True, policy.model_copy(update={"excluded_files": entries})


def unexclude_file(policy: _P, name: str) -> tuple[bool, _P]:
    """Remove the file entry for *name*, if present."""
    if not is_excluded_file(policy, name):
        return False, policy
    entries = tuple(e for e in policy.excluded_files if e.name != name)
    return True, policy.model_copy(update={"excluded_files": entries})


def exclude_dir(policy: _P, path: str) -> tuple[bool, _P]:
    """Add a default directory entry for *path* unless it is already covered."""
    if is_excluded_dir(policy, path):
        return False, policy
    entries = (*policy.excluded_dirs, ExcludedEntity(name=path))
    return True, policy.model_copy(update={"excluded_dirs": entries})


def unexclude_dir(policy: _P, path: str) -> tuple[bool, _P]:
    """Remove the directory entry named exactly *path*, if present."""
    if not any(e.name == path for e in policy.excluded_dirs):
        return False, policy
    entries = tuple(e for e in policy.excluded_dirs if e.name != path)
    return True, policy.model_copy(update={"excluded_dirs": entries})


def set_flags(
    policy: _P,
    name: str,
    *,
    directory: bool = False,
    can_link_from_outside: bool | None = None,
    can_be_linked: bool | None = None,
) -> tuple[bool, _P]:
    """Update the flags of an existing entry.

    Returns ``(False, policy)`` when no entry is named *name*. Flags left
    as ``None`` keep their current value.
    """
    field = "excluded_dirs" if directory else "excluded_files"
    current: tuple[ExcludedEntity, ...] = getattr(policy, field)
    if not any(e.name == name for e in current):
        return False, policy

    changes: dict[str, bool] = {}
    if can_link_from_outside is not None:
        changes["can_link_from_outside"] = can_link_from_outside
    if can_be_linked is not None:
        changes["can_be_linked"] = can_be_linked

    entries = tuple(e.model_copy(update=changes) if e.name == name else e for e in current)
    return True, policy.model_copy(update={field: entries})
