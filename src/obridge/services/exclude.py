"""ExcludeService — edit the persisted exclusion policy.

Every mutation loads the current state, applies a pure policy function,
and saves the result immediately. Files are keyed by document name and
directories by path prefix, as decided by :meth:`Vault.classify`.
"""

from __future__ import annotations

from typing import Any

from obridge.domain.aliases import aliases_for_document
from obridge.domain.policy import (
    BridgeState,
    exclude_dir,
    exclude_file,
    set_flags,
    unexclude_dir,
    unexclude_file,
)
from obridge.infrastructure.state import InvalidStateError
from obridge.infrastructure.vault import EntryKind, VaultEntry
from obridge.services.base import BaseService
from obridge.services.result import ErrorCode, ServiceResult


class ExcludeService(BaseService):
    """Add, remove, inspect and tune exclusion entries."""

    def exclude(
        self,
        target: str,
        *,
        by_name: bool = False,
        can_link_from_outside: bool | None = None,
        can_be_linked: bool | None = None,
    ) -> ServiceResult:
        """Exclude a file or directory.

        With *by_name*, *target* is taken as a document name and need not
        exist on disk. Optional flags are applied to the new entry.
        """
        op = "exclude"
        entry = self._resolve(op, target, by_name=by_name)
        if isinstance(entry, ServiceResult):
            return entry
        state = self._load(op)
        if isinstance(state, ServiceResult):
            return state

        key = entry.policy_name
        is_dir = entry.kind is EntryKind.DIRECTORY
        changed, state = exclude_dir(state, key) if is_dir else exclude_file(state, key)
        data: dict[str, Any] = {"name": key, "kind": str(entry.kind), "changed": changed}
        if not changed:
            label = "Directory" if is_dir else "File"
            data["message"] = f"{label}: {key} is already excluded."
            return ServiceResult(ok=True, op=op, data=data)

        if can_link_from_outside is not None or can_be_linked is not None:
            _, state = set_flags(
                state,
                key,
                directory=is_dir,
                can_link_from_outside=can_link_from_outside,
                can_be_linked=can_be_linked,
            )
        self._vault.state.save(state)

        warnings: list[str] = []
        data["message"] = f"Excluded {key}."
        self._vault.notify(data["message"], warnings)
        data["entry"] = _find_entry(state, key, directory=is_dir)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def unexclude(self, target: str, *, by_name: bool = False) -> ServiceResult:
        """Remove the exclusion entry for a file or directory."""
        op = "unexclude"
        entry = self._resolve(op, target, by_name=by_name, must_exist=False)
        if isinstance(entry, ServiceResult):
            return entry
        state = self._load(op)
        if isinstance(state, ServiceResult):
            return state

        key = entry.policy_name
        if entry.kind is EntryKind.DIRECTORY:
            changed, state = unexclude_dir(state, key)
        else:
            changed, state = unexclude_file(state, key)
        if not changed:
            return ServiceResult.failure(op, ErrorCode.NOT_FOUND, f"{key} is not excluded")

        self._vault.state.save(state)
        warnings: list[str] = []
        message = f"Included {key} again."
        self._vault.notify(message, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"name": key, "kind": str(entry.kind), "changed": True, "message": message},
            warnings=warnings,
        )

    def set_flags(
        self,
        name: str,
        *,
        directory: bool = False,
        can_link_from_outside: bool | None = None,
        can_be_linked: bool | None = None,
    ) -> ServiceResult:
        """Change the flags of an existing entry, keyed exactly as listed."""
        op = "set_flags"
        state = self._load(op)
        if isinstance(state, ServiceResult):
            return state

        found, state = set_flags(
            state,
            name,
            directory=directory,
            can_link_from_outside=can_link_from_outside,
            can_be_linked=can_be_linked,
        )
        if not found:
            kind = "directory" if directory else "file"
            return ServiceResult.failure(
                op, ErrorCode.NOT_FOUND, f"No excluded {kind} named {name!r}"
            )

        self._vault.state.save(state)
        return ServiceResult(
            ok=True,
            op=op,
            data={"entry": _find_entry(state, name, directory=directory)},
        )

    def list_exclusions(self, *, with_aliases: bool = False) -> ServiceResult:
        """List every entry, optionally with the names each one covers."""
        op = "exclusions"
        state = self._load(op)
        if isinstance(state, ServiceResult):
            return state

        files = [e.model_dump() for e in state.excluded_files]
        dirs = [e.model_dump() for e in state.excluded_dirs]
        if with_aliases:
            declared = {
                doc.path: (doc.name, self._vault.read_declared_aliases(doc))
                for doc in self._vault.list_documents()
            }
            for item in files:
                item["aliases"] = [
                    alias
                    for name, aliases in declared.values()
                    if name == item["name"]
                    for alias in aliases_for_document(name, aliases)
                ]
            for item in dirs:
                item["aliases"] = [
                    alias
                    for path, (name, aliases) in declared.items()
                    if path.startswith(item["name"])
                    for alias in aliases_for_document(name, aliases)
                ]

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "files": files,
                "dirs": dirs,
                "add_alias_to_self": state.add_alias_to_self,
            },
        )

    def self_link(self, enabled: bool | None = None) -> ServiceResult:
        """Show, or set, whether documents may link to themselves."""
        op = "self_link"
        state = self._load(op)
        if isinstance(state, ServiceResult):
            return state

        changed = enabled is not None and enabled != state.add_alias_to_self
        if changed:
            state = state.model_copy(update={"add_alias_to_self": enabled})
            self._vault.state.save(state)
        return ServiceResult(
            ok=True,
            op=op,
            data={"add_alias_to_self": state.add_alias_to_self, "changed": changed},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load(self, op: str) -> BridgeState | ServiceResult:
        try:
            return self._vault.state.load()
        except InvalidStateError as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_STATE, str(exc), path=str(exc.path))

    def _resolve(
        self,
        op: str,
        target: str,
        *,
        by_name: bool,
        must_exist: bool = True,
    ) -> VaultEntry | ServiceResult:
        if by_name:
            return VaultEntry(kind=EntryKind.FILE, path=f"{target}.md")
        try:
            return self._vault.classify(target)
        except FileNotFoundError:
            if not must_exist:
                # Removing an entry for something already deleted from disk.
                kind = EntryKind.DIRECTORY if target.endswith("/") else EntryKind.FILE
                return VaultEntry(kind=kind, path=target)
            return ServiceResult.failure(
                op, ErrorCode.NOT_FOUND, f"No file or directory at {target}"
            )
        except ValueError:
            return ServiceResult.failure(
                op, ErrorCode.OUTSIDE_VAULT, f"{target} is outside the vault"
            )


def _find_entry(state: BridgeState, name: str, *, directory: bool) -> dict[str, Any]:
    entries = state.excluded_dirs if directory else state.excluded_files
    return next(e.model_dump() for e in entries if e.name == name)
