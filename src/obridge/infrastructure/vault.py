"""Vault — the document store every service works against.

The Vault lists documents, reads and writes their text, extracts their
declared aliases, and forwards notifications to plugins. It is the
single dependency injected into every service.

Documents are addressed by vault-relative POSIX path; a document's
display name is its file name without extension.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Any

from obridge.domain.frontmatter import read_aliases
from obridge.infrastructure.filesystem import (
    DocumentAccessError,
    find_documents,
    read_text,
    to_vault_path,
    write_text,
)
from obridge.infrastructure.state import StateStore
from obridge.plugins.manager import PluginManager

if TYPE_CHECKING:
    from obridge.config.settings import BridgeSettings

logger = logging.getLogger(__name__)


class EntryKind(StrEnum):
    """What a vault path points at."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class Document:
    """A document in the vault, identified by its vault-relative path."""

    path: str
    kind: EntryKind = EntryKind.FILE

    @property
    def name(self) -> str:
        """Display name: the file name without its extension."""
        return PurePosixPath(self.path).stem


@dataclass(frozen=True)
class VaultEntry:
    """A classified vault path, as used by exclusion commands."""

    kind: EntryKind
    path: str

    @property
    def policy_name(self) -> str:
        """The key an exclusion entry uses for this entry.

        Files are keyed by document name, directories by path prefix
        (with a trailing slash so ``notes/`` does not cover ``notes2/``).
        """
        if self.kind is EntryKind.FILE:
            return PurePosixPath(self.path).stem
        return self.path.rstrip("/") + "/"


class Vault:
    """File-backed document store with plugin notifications."""

    def __init__(self, settings: BridgeSettings, plugins: PluginManager | None = None) -> None:
        self._settings = settings
        self._root = settings.vault_root
        self.state = StateStore(settings.state_path)
        self.plugins = plugins or PluginManager()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def settings(self) -> BridgeSettings:
        return self._settings

    # ------------------------------------------------------------------
    # Document store
    # ------------------------------------------------------------------

    def list_documents(self) -> list[Document]:
        """All documents, sorted by vault-relative path.

        Raises:
            DocumentAccessError: If a listed file (a symlink, say) resolves
                outside the vault.
        """
        paths = find_documents(
            self._root,
            extensions=self._settings.scan.extensions,
            skip_dirs=self._settings.vault.skip_dirs,
        )
        documents: list[Document] = []
        for path in paths:
            try:
                documents.append(Document(path=to_vault_path(self._root, path)))
            except ValueError as exc:
                raise DocumentAccessError(path, "resolves outside the vault") from exc
        return documents

    def read_body(self, doc: Document) -> str:
        """Full text of *doc*, front matter included."""
        return read_text(self._abspath(doc))

    def write_body(self, doc: Document, text: str) -> None:
        """Replace the full text of *doc*."""
        write_text(self._abspath(doc), text)
        logger.debug("Wrote %s", doc.path)

    def read_declared_aliases(self, doc: Document) -> list[str]:
        """Aliases declared in *doc*'s front matter (``[]`` if none)."""
        return read_aliases(self.read_body(doc))

    def classify(self, target: str | Path) -> VaultEntry:
        """Resolve a user-supplied path to a file or directory entry.

        Relative paths are taken relative to the vault root.

        Raises:
            FileNotFoundError: If nothing exists at *target*.
            ValueError: If *target* lies outside the vault.
        """
        path = Path(target)
        if not path.is_absolute():
            path = self._root / path
        if path.is_dir():
            kind = EntryKind.DIRECTORY
        elif path.is_file():
            kind = EntryKind.FILE
        else:
            raise FileNotFoundError(str(target))
        return VaultEntry(kind=kind, path=to_vault_path(self._root, path))

    def _abspath(self, doc: Document) -> Path:
        return self._root.joinpath(*PurePosixPath(doc.path).parts)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def notify(self, message: str, warnings: list[str] | None = None) -> None:
        """Fire-and-forget user notification via the ``notify`` hook."""
        self.dispatch("notify", warnings, message=message)

    def dispatch(self, hook_name: str, warnings: list[str] | None = None, **kwargs: Any) -> None:
        """Dispatch a plugin hook; failures become *warnings* entries.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        problem = self.plugins.dispatch(hook_name, **kwargs)
        if problem and warnings is not None:
            warnings.append(problem)
