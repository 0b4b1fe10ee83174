"""Filesystem operations for vault documents.

INVARIANT: Files are truth. The snapshot and settings under the state
directory are the only other durable artifacts.

This module handles raw file I/O, path normalization, and document
discovery. Parsing lives in :mod:`obridge.domain.frontmatter`.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath


class DocumentAccessError(OSError):
    """A document that exists but cannot be used as vault text.

    Raised for files that are not valid UTF-8 and for paths that resolve
    outside the vault. Being an ``OSError``, it aborts a run like any
    other store failure.
    """

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.filename = str(path)


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def read_text(path: Path) -> str:
    """Read a document, preserving its line endings.

    Raises:
        DocumentAccessError: If the file is not valid UTF-8.
    """
    try:
        with path.open(encoding="utf-8", newline="") as fh:
            return fh.read()
    except UnicodeDecodeError as exc:
        raise DocumentAccessError(path, f"not valid UTF-8 ({exc.reason})") from exc


def write_text(path: Path, content: str) -> None:
    """Overwrite a document, preserving the line endings in *content*."""
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(content)


# ---------------------------------------------------------------------------
# Path handling
# ---------------------------------------------------------------------------


def to_vault_path(vault_root: Path, path: Path) -> str:
    """Vault-relative POSIX path of *path* (``notes/Apple.md``).

    Raises:
        ValueError: If *path* is outside the vault.
    """
    resolved = path if path.is_absolute() else vault_root / path
    relative = resolved.resolve().relative_to(vault_root.resolve())
    return PurePosixPath(*relative.parts).as_posix()


def find_documents(
    vault_root: Path,
    *,
    extensions: list[str],
    skip_dirs: list[str],
) -> list[Path]:
    """Discover every document under *vault_root*.

    Skips any path with a component in *skip_dirs*. Results are sorted
    by vault-relative path, which is the store iteration order.
    """
    suffixes = {ext.lower() for ext in extensions}
    skipped = set(skip_dirs)

    results: list[Path] = []
    for path in vault_root.rglob("*"):
        if not path.is_file():
            continue
        relative = path.relative_to(vault_root)
        if any(part in skipped for part in relative.parts[:-1]):
            continue
        if path.suffix.lower() in suffixes:
            results.append(path)

    return sorted(results, key=lambda p: p.relative_to(vault_root).as_posix())
