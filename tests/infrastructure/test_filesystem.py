"""Tests for filesystem operations — discovery, path handling, raw I/O."""

from __future__ import annotations

from pathlib import Path

import pytest

from obridge.infrastructure.filesystem import (
    DocumentAccessError,
    find_documents,
    read_text,
    to_vault_path,
    write_text,
)


class TestFindDocuments:
    def test_sorted_by_vault_path(self, tmp_path: Path) -> None:
        for rel in ("b.md", "a/z.md", "a/b.md", "A.md"):
            (tmp_path / rel).parent.mkdir(parents=True, exist_ok=True)
            (tmp_path / rel).write_text("x")
        found = find_documents(tmp_path, extensions=[".md"], skip_dirs=[])
        assert [p.relative_to(tmp_path).as_posix() for p in found] == [
            "A.md",
            "a/b.md",
            "a/z.md",
            "b.md",
        ]

    def test_filters_extensions(self, tmp_path: Path) -> None:
        (tmp_path / "note.md").write_text("x")
        (tmp_path / "image.png").write_bytes(b"\x89PNG")
        (tmp_path / "UPPER.MD").write_text("x")
        found = find_documents(tmp_path, extensions=[".md"], skip_dirs=[])
        assert sorted(p.name for p in found) == ["UPPER.MD", "note.md"]

    def test_skips_dirs(self, tmp_path: Path) -> None:
        (tmp_path / ".obsidian").mkdir()
        (tmp_path / ".obsidian" / "workspace.md").write_text("x")
        (tmp_path / "notes").mkdir()
        (tmp_path / "notes" / "keep.md").write_text("x")
        found = find_documents(tmp_path, extensions=[".md"], skip_dirs=[".obsidian"])
        assert [p.name for p in found] == ["keep.md"]

    def test_skip_dir_name_only_matches_directories(self, tmp_path: Path) -> None:
        (tmp_path / ".git.md").write_text("x")
        found = find_documents(tmp_path, extensions=[".md"], skip_dirs=[".git.md"])
        assert [p.name for p in found] == [".git.md"]

    def test_empty_vault(self, tmp_path: Path) -> None:
        assert find_documents(tmp_path, extensions=[".md"], skip_dirs=[]) == []


class TestVaultPath:
    def test_relative_posix(self, tmp_path: Path) -> None:
        assert to_vault_path(tmp_path, tmp_path / "a" / "b.md") == "a/b.md"

    def test_relative_input(self, tmp_path: Path) -> None:
        assert to_vault_path(tmp_path, Path("a/b.md")) == "a/b.md"

    def test_outside_vault(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            to_vault_path(tmp_path / "vault", tmp_path / "elsewhere.md")


class TestRawIO:
    def test_line_endings_preserved(self, tmp_path: Path) -> None:
        path = tmp_path / "crlf.md"
        write_text(path, "a\r\nb\r\n")
        assert path.read_bytes() == b"a\r\nb\r\n"
        assert read_text(path) == "a\r\nb\r\n"

    def test_invalid_utf8_names_the_file(self, tmp_path: Path) -> None:
        path = tmp_path / "Latin.md"
        path.write_bytes("café Apple\n".encode("latin-1"))
        with pytest.raises(DocumentAccessError) as excinfo:
            read_text(path)
        assert isinstance(excinfo.value, OSError)
        assert excinfo.value.filename == str(path)
        assert "not valid UTF-8" in str(excinfo.value)
