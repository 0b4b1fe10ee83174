"""Tests for ExcludeService — editing the persisted exclusion policy."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from obridge.domain.policy import ExcludedEntity
from obridge.infrastructure.vault import Vault
from obridge.services.exclude import ExcludeService
from tests.conftest import RecordingNotices, write_doc


@pytest.fixture
def service(vault: Vault, vault_root: Path) -> ExcludeService:
    write_doc(vault_root, "notes/Secret.md", aliases=["Hidden"])
    write_doc(vault_root, "archive/Old.md", aliases=["Ancient"])
    write_doc(vault_root, "archive/Older.md")
    return ExcludeService(vault)


class TestExclude:
    def test_file_keyed_by_name(self, service: ExcludeService, vault: Vault) -> None:
        result = service.exclude("notes/Secret.md")
        assert result.ok
        assert result.data["name"] == "Secret"
        assert result.data["kind"] == "file"
        assert result.data["changed"] is True
        assert vault.state.load().excluded_files == (ExcludedEntity(name="Secret"),)

    def test_directory_keyed_by_prefix(self, service: ExcludeService, vault: Vault) -> None:
        result = service.exclude("archive")
        assert result.data["name"] == "archive/"
        assert result.data["kind"] == "directory"
        assert vault.state.load().excluded_dirs == (ExcludedEntity(name="archive/"),)

    def test_saved_immediately(self, service: ExcludeService, vault: Vault) -> None:
        service.exclude("notes/Secret.md")
        payload = json.loads(vault.state.settings_path.read_text(encoding="utf-8"))
        assert payload["excludedFiles"] == [
            {"name": "Secret", "canLinkFromOutside": False, "canBeLinked": False}
        ]

    def test_already_excluded(self, service: ExcludeService) -> None:
        service.exclude("notes/Secret.md")
        result = service.exclude("notes/Secret.md")
        assert result.ok
        assert result.data["changed"] is False
        assert result.data["message"] == "File: Secret is already excluded."

    def test_directory_covered_by_parent(self, service: ExcludeService, vault: Vault) -> None:
        (vault.root / "archive" / "deep").mkdir()
        service.exclude("archive")
        result = service.exclude("archive/deep")
        assert result.data["changed"] is False
        assert result.data["message"] == "Directory: archive/deep/ is already excluded."

    def test_with_flags(self, service: ExcludeService) -> None:
        result = service.exclude("notes/Secret.md", can_link_from_outside=True)
        assert result.data["entry"] == {
            "name": "Secret",
            "can_link_from_outside": True,
            "can_be_linked": False,
        }

    def test_by_name_need_not_exist(self, service: ExcludeService, vault: Vault) -> None:
        result = service.exclude("Daily Template", by_name=True)
        assert result.ok
        assert vault.state.load().excluded_files[0].name == "Daily Template"

    def test_missing_path(self, service: ExcludeService) -> None:
        result = service.exclude("nope.md")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_outside_vault(self, service: ExcludeService, tmp_path: Path) -> None:
        outside = tmp_path / "outside.md"
        outside.write_text("x")
        result = service.exclude(str(outside))
        assert result.error is not None
        assert result.error.code == "OUTSIDE_VAULT"

    def test_notice(self, service: ExcludeService, notices: RecordingNotices) -> None:
        service.exclude("notes/Secret.md")
        assert notices.messages == ["Excluded Secret."]


class TestUnexclude:
    def test_file(
        self, service: ExcludeService, vault: Vault, notices: RecordingNotices
    ) -> None:
        service.exclude("notes/Secret.md")
        result = service.unexclude("notes/Secret.md")
        assert result.ok
        assert vault.state.load().excluded_files == ()
        assert notices.messages[-1] == "Included Secret again."

    def test_directory(self, service: ExcludeService, vault: Vault) -> None:
        service.exclude("archive")
        assert service.unexclude("archive/").ok
        assert vault.state.load().excluded_dirs == ()

    def test_deleted_directory(self, service: ExcludeService, vault: Vault) -> None:
        service.exclude("archive")
        for child in (vault.root / "archive").iterdir():
            child.unlink()
        (vault.root / "archive").rmdir()
        assert service.unexclude("archive/").ok

    def test_not_excluded(self, service: ExcludeService) -> None:
        result = service.unexclude("notes/Secret.md")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_subdirectory_of_entry_is_not_removed(
        self, service: ExcludeService, vault: Vault
    ) -> None:
        service.exclude("archive")
        (vault.root / "archive" / "deep").mkdir()
        result = service.unexclude("archive/deep")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"


class TestSetFlags:
    def test_updates_entry(self, service: ExcludeService, vault: Vault) -> None:
        service.exclude("notes/Secret.md")
        result = service.set_flags("Secret", can_be_linked=True)
        assert result.data["entry"]["can_be_linked"] is True
        assert vault.state.load().excluded_files[0].can_be_linked is True

    def test_directory_entry(self, service: ExcludeService, vault: Vault) -> None:
        service.exclude("archive")
        service.set_flags("archive/", directory=True, can_link_from_outside=True)
        assert vault.state.load().excluded_dirs[0].can_link_from_outside is True

    def test_unknown_entry(self, service: ExcludeService) -> None:
        result = service.set_flags("Ghost", can_be_linked=True)
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"


class TestListExclusions:
    def test_empty(self, service: ExcludeService) -> None:
        result = service.list_exclusions()
        assert result.data == {"files": [], "dirs": [], "add_alias_to_self": False}

    def test_with_aliases(self, service: ExcludeService) -> None:
        service.exclude("notes/Secret.md")
        service.exclude("archive")
        result = service.list_exclusions(with_aliases=True)
        assert result.data["files"][0]["aliases"] == ["Secret", "Hidden"]
        assert result.data["dirs"][0]["aliases"] == ["Old", "Ancient", "Older"]


class TestSelfLink:
    def test_show(self, service: ExcludeService) -> None:
        result = service.self_link()
        assert result.data == {"add_alias_to_self": False, "changed": False}

    def test_toggle(self, service: ExcludeService, vault: Vault) -> None:
        assert service.self_link(True).data["changed"] is True
        assert vault.state.load().add_alias_to_self is True
        assert service.self_link(True).data["changed"] is False

    def test_invalid_state(self, service: ExcludeService, vault: Vault) -> None:
        vault.state.state_dir.mkdir()
        vault.state.settings_path.write_text("[]", encoding="utf-8")
        result = service.self_link()
        assert result.error is not None
        assert result.error.code == "INVALID_STATE"
