"""Shared pytest fixtures and test helpers for obridge tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pluggy
import pytest
from click.testing import CliRunner

from obridge.config.settings import BridgeSettings
from obridge.infrastructure.vault import Vault
from obridge.plugins.manager import PluginManager
from obridge.services.telemetry import disable_telemetry

hookimpl = pluggy.HookimplMarker("obridge")


class RecordingNotices:
    """Plugin that records every notice and pipeline event."""

    def __init__(self) -> None:
        self.messages: list[str] = []
        self.scans: list[int] = []
        self.links: list[tuple[int, list[str]]] = []

    @hookimpl
    def notify(self, message: str) -> None:
        self.messages.append(message)

    @hookimpl
    def post_scan(self, records: int, snapshot_path: str) -> None:
        self.scans.append(records)

    @hookimpl
    def post_link(self, links_added: int, documents: list[str]) -> None:
        self.links.append((links_added, documents))


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's OBRIDGE_* environment out of tests."""
    monkeypatch.delenv("OBRIDGE_CONFIG", raising=False)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Iterator[None]:
    """`-v` invocations enable telemetry for the whole context."""
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def vault_root(tmp_path: Path) -> Path:
    """Empty vault directory."""
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture
def notices() -> RecordingNotices:
    return RecordingNotices()


@pytest.fixture
def vault(vault_root: Path, notices: RecordingNotices) -> Iterator[Vault]:
    """Vault on a temp directory with a recording notification plugin."""
    plugins = PluginManager()
    plugins.register_plugin(notices, name="recording")
    settings = BridgeSettings.from_cli(vault_root=vault_root)
    yield Vault(settings, plugins=plugins)


@pytest.fixture
def _isolated_vault(vault_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp vault so the CLI operates on it.

    Use via ``@pytest.mark.usefixtures("_isolated_vault")`` on command
    test classes.
    """
    monkeypatch.chdir(vault_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_doc(
    root: Path,
    relpath: str,
    body: str = "",
    *,
    aliases: list[str] | None = None,
    frontmatter: str | None = None,
) -> Path:
    """Write a markdown document, optionally with front matter.

    *aliases* renders a YAML ``aliases:`` list; *frontmatter* supplies
    raw YAML instead.
    """
    path = root / relpath
    path.parent.mkdir(parents=True, exist_ok=True)
    if aliases is not None:
        lines = "".join(f"  - {alias}\n" for alias in aliases)
        frontmatter = f"aliases:\n{lines}"
    if frontmatter is not None:
        content = f"---\n{frontmatter.rstrip(chr(10))}\n---\n{body}"
    else:
        content = body
    path.write_text(content, encoding="utf-8")
    return path


def read_doc(root: Path, relpath: str) -> str:
    return (root / relpath).read_text(encoding="utf-8")
