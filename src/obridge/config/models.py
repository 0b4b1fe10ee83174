"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, obridge.toml only contains
overrides. A vault needs no config file at all.

Link policy (exclusions, self-linking) is *not* configured here: it is
mutable state owned by :mod:`obridge.infrastructure.state` and edited
through the ``exclude`` family of commands.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class VaultConfig(BaseModel):
    """[vault] section."""

    model_config = {"frozen": True}

    name: str = "my-vault"
    state_dir: str = ".obridge"
    skip_dirs: list[str] = Field(
        default_factory=lambda: [".obridge", ".obsidian", ".git", ".trash"],
    )


class ScanConfig(BaseModel):
    """[scan] section."""

    model_config = {"frozen": True}

    extensions: list[str] = Field(default_factory=lambda: [".md"])
