"""Tests for the config section models."""

import pytest
from pydantic import ValidationError

from obridge.config.models import ScanConfig, VaultConfig


class TestVaultConfig:
    def test_defaults(self) -> None:
        config = VaultConfig()
        assert config.state_dir == ".obridge"
        assert ".obsidian" in config.skip_dirs
        assert ".obridge" in config.skip_dirs

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            VaultConfig().name = "other"  # type: ignore[misc]


class TestScanConfig:
    def test_defaults(self) -> None:
        assert ScanConfig().extensions == [".md"]

    def test_override(self) -> None:
        assert ScanConfig(extensions=[".txt"]).extensions == [".txt"]
