"""Tests for PluginManager — discovery, registration, and hook dispatch."""

from __future__ import annotations

import pluggy
import pytest

from obridge.plugins.builtins.notices import EchoNotices, LogNotices
from obridge.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("obridge")


class _DummyPlugin:
    """Minimal plugin for registration tests."""

    def __init__(self) -> None:
        self.seen: list[tuple[int, list[str]]] = []

    @hookimpl
    def post_link(self, links_added: int, documents: list[str]) -> None:
        self.seen.append((links_added, documents))


class _FailingPlugin:
    @hookimpl
    def notify(self, message: str) -> None:
        raise RuntimeError(message)


class TestPluginManager:
    @pytest.mark.parametrize(
        ("hook_name", "kwargs"),
        [
            ("notify", {"message": "Scan complete!"}),
            ("post_scan", {"records": 1, "snapshot_path": "snapshot.json"}),
            ("post_link", {"links_added": 0, "documents": []}),
        ],
    )
    def test_hookspecs_dispatch_without_plugins(self, hook_name, kwargs):
        assert PluginManager().dispatch(hook_name, **kwargs) is None

    def test_register_plugin(self):
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin(), name="dummy")
        assert "dummy" in pm.list_plugin_names()

    def test_register_plugin_default_name(self):
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin())
        assert "_DummyPlugin" in pm.list_plugin_names()

    def test_discover_keeps_registered_plugins(self):
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin(), name="dummy")
        assert "dummy" in pm.discover_and_load()


class TestDispatch:
    def test_calls_plugins(self):
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin)
        assert pm.dispatch("post_link", links_added=2, documents=["Notes.md"]) is None
        assert plugin.seen == [(2, ["Notes.md"])]

    def test_failure_becomes_warning(self):
        pm = PluginManager()
        pm.register_plugin(_FailingPlugin())
        assert pm.dispatch("notify", message="hi") == "Plugin hook notify failed"

    def test_unknown_hook(self):
        pm = PluginManager()
        with pytest.raises(AttributeError):
            pm.dispatch("no_such_hook")


class TestBuiltinNotices:
    def test_echo_writes_stderr(self, capsys: pytest.CaptureFixture[str]):
        pm = PluginManager()
        pm.register_plugin(EchoNotices())
        pm.dispatch("notify", message="Scan complete!")
        captured = capsys.readouterr()
        assert captured.err == "Scan complete!\n"
        assert captured.out == ""

    def test_log_notices(self):
        pm = PluginManager()
        pm.register_plugin(LogNotices())
        assert pm.dispatch("notify", message="Scan complete!") is None
