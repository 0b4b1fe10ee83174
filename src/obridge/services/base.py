"""BaseService: what every obridge service is built on.

Every service receives a :class:`Vault` at construction time, loads the
persisted state from ``vault.state`` at the start of each operation and
passes the exclusion policy explicitly to the domain functions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from obridge.infrastructure.vault import Vault


class BaseService:
    """Base for service-layer classes.

    Usage::

        class BridgeService(BaseService):
            def scan(self) -> ServiceResult:
                state = self._vault.state.load()
                ...
    """

    def __init__(self, vault: Vault) -> None:
        self._vault = vault
