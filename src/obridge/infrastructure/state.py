"""Persisted pipeline state under the vault's state directory.

Three files live in ``<vault>/<state_dir>/``:

- ``snapshot.json``: the alias snapshot, overwritten by every scan.
- ``settings.json``: exclusion policy + ``addAliasToSelf``, saved on
  every mutation.
- ``bridge.lock``: present while a scan or link pass is in flight.
"""

from __future__ import annotations

import json
import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from obridge.domain.aliases import SNAPSHOT_ADAPTER, AliasRecord
from obridge.domain.policy import BridgeState

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

SNAPSHOT_FILE = "snapshot.json"
SETTINGS_FILE = "settings.json"
LOCK_FILE = "bridge.lock"


class StateError(Exception):
    """Base class for persisted-state problems."""


class InvalidStateError(StateError):
    """A state file exists but cannot be decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Invalid state file {path}: {reason}")
        self.path = path


class RunInFlightError(StateError):
    """Another scan or link pass holds the run lock."""

    def __init__(self, lock_path: Path) -> None:
        super().__init__(f"A bridge run is already in progress ({lock_path})")
        self.lock_path = lock_path


def _write_atomic(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    tmp.write_text(content, encoding="utf-8")
    os.replace(tmp, path)


class StateStore:
    """Load and save the snapshot and persisted settings."""

    def __init__(self, state_dir: Path) -> None:
        self.state_dir = state_dir

    @property
    def snapshot_path(self) -> Path:
        return self.state_dir / SNAPSHOT_FILE

    @property
    def settings_path(self) -> Path:
        return self.state_dir / SETTINGS_FILE

    @property
    def lock_path(self) -> Path:
        return self.state_dir / LOCK_FILE

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def load(self) -> BridgeState:
        """Load persisted settings merged over the defaults.

        Raises:
            InvalidStateError: If the file is not valid settings JSON.
        """
        path = self.settings_path
        if not path.is_file():
            return BridgeState()
        try:
            return BridgeState.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as exc:
            raise InvalidStateError(path, str(exc)) from exc

    def save(self, state: BridgeState) -> None:
        """Persist *state*, replacing the previous settings file."""
        payload = state.model_dump(mode="json", by_alias=True)
        _write_atomic(self.settings_path, json.dumps(payload, indent=2) + "\n")
        logger.debug("Saved settings to %s", self.settings_path)

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def load_snapshot(self) -> list[AliasRecord] | None:
        """Load the snapshot, or None if no scan has run yet.

        Raises:
            InvalidStateError: If the file is not a valid snapshot.
        """
        path = self.snapshot_path
        if not path.is_file():
            return None
        try:
            return SNAPSHOT_ADAPTER.validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as exc:
            raise InvalidStateError(path, str(exc)) from exc

    def save_snapshot(self, records: list[AliasRecord]) -> Path:
        """Persist *records*, overwriting any previous snapshot."""
        payload = SNAPSHOT_ADAPTER.dump_python(records, mode="json")
        _write_atomic(self.snapshot_path, json.dumps(payload, indent=2, ensure_ascii=False) + "\n")
        logger.debug("Saved snapshot with %d records to %s", len(records), self.snapshot_path)
        return self.snapshot_path

    # ------------------------------------------------------------------
    # Run lock
    # ------------------------------------------------------------------

    @contextmanager
    def run_lock(self) -> Iterator[None]:
        """Hold the in-flight lock for the duration of the block.

        Raises:
            RunInFlightError: If the lock file already exists.
        """
        self.state_dir.mkdir(parents=True, exist_ok=True)
        try:
            with self.lock_path.open("x", encoding="utf-8") as fh:
                fh.write(str(os.getpid()))
        except FileExistsError as exc:
            raise RunInFlightError(self.lock_path) from exc
        try:
            yield
        finally:
            self.lock_path.unlink(missing_ok=True)
