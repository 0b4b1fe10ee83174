"""BridgeService — the scan and link pipeline.

Two stages sharing one persisted snapshot:

    SCAN:  list documents -> filter by policy -> read aliases -> save snapshot
    LINK:  load snapshot -> build alias table -> rewrite bodies -> notify

``run()`` executes both back to back. Every public entry point holds
the vault's run lock, so a second invocation while one is in flight
fails fast with ``IN_FLIGHT`` instead of racing on document writes.

Store failures (``OSError``) are not caught here: they abort the run and
leave already rewritten documents as they are.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from obridge.domain.aliases import build_alias_table, scan_records
from obridge.domain.frontmatter import split_frontmatter
from obridge.domain.links import apply_pattern, compile_alias_pattern
from obridge.domain.policy import can_rewrite
from obridge.infrastructure.state import InvalidStateError, RunInFlightError
from obridge.services.base import BaseService
from obridge.services.result import ErrorCode, ServiceResult
from obridge.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    import re
    from collections.abc import Callable

    from obridge.domain.aliases import AliasTable
    from obridge.domain.policy import BridgeState

logger = logging.getLogger(__name__)


class BridgeService(BaseService):
    """Scans the vault for aliases and links their plain-text mentions."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def scan(self) -> ServiceResult:
        """Rebuild and persist the alias snapshot."""
        return self._guarded("scan", self._scan)

    @traced
    def link(self, *, dry_run: bool = False) -> ServiceResult:
        """Rewrite every eligible body against the persisted snapshot.

        With *dry_run*, report what would change without writing.
        """
        return self._guarded("link", lambda state: self._link(state, dry_run=dry_run))

    @traced
    def run(self) -> ServiceResult:
        """Scan, then link: the single "scan and link" action."""

        def _both(state: BridgeState) -> ServiceResult:
            scanned = self._scan(state)
            linked = self._link(state, dry_run=False)
            if not linked.ok:
                return linked.model_copy(update={"op": "run"})
            return ServiceResult(
                ok=True,
                op="run",
                data={"scan": scanned.data, "link": linked.data},
                warnings=[*scanned.warnings, *linked.warnings],
            )

        return self._guarded("run", _both)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _guarded(self, op: str, stage: Callable[[BridgeState], ServiceResult]) -> ServiceResult:
        try:
            state = self._vault.state.load()
        except InvalidStateError as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_STATE, str(exc), path=str(exc.path))
        try:
            with self._vault.state.run_lock():
                return stage(state)
        except RunInFlightError as exc:
            return ServiceResult.failure(op, ErrorCode.IN_FLIGHT, str(exc), lock=str(exc.lock_path))

    def _scan(self, state: BridgeState) -> ServiceResult:
        warnings: list[str] = []
        with trace_span("list_documents"):
            documents = self._vault.list_documents()

        with trace_span("collect_aliases") as span:
            records = scan_records(documents, state.policy, self._vault.read_declared_aliases)
            if span:
                span.annotate("records", len(records))

        snapshot_path = self._vault.state.save_snapshot(records)
        logger.info("Scanned %d documents, %d declare aliases", len(documents), len(records))

        self._vault.notify("Scan complete!", warnings)
        self._vault.dispatch(
            "post_scan", warnings, records=len(records), snapshot_path=str(snapshot_path)
        )
        return ServiceResult(
            ok=True,
            op="scan",
            data={
                "documents": len(documents),
                "records": len(records),
                "aliases": sum(len(r.aliases) for r in records),
                "snapshot": str(snapshot_path),
            },
            warnings=warnings,
        )

    def _link(self, state: BridgeState, *, dry_run: bool) -> ServiceResult:
        op = "link"
        try:
            snapshot = self._vault.state.load_snapshot()
        except InvalidStateError as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_STATE, str(exc), path=str(exc.path))
        if snapshot is None:
            return ServiceResult.failure(
                op, ErrorCode.NO_SNAPSHOT, "No alias snapshot found; run 'obridge scan' first"
            )

        warnings: list[str] = []
        policy = state.policy
        documents = self._vault.list_documents()

        with trace_span("build_alias_table") as span:
            table = build_alias_table(snapshot, policy, documents)
            if span:
                span.annotate("aliases", len(table))

        matchers = _MatcherCache(table, add_alias_to_self=state.add_alias_to_self)
        changes: list[dict[str, Any]] = []
        skipped: list[str] = []
        links_added = 0

        with trace_span("rewrite_documents"):
            for doc in documents:
                if not can_rewrite(policy, doc.name, doc.path):
                    skipped.append(doc.path)
                    continue

                pairs, pattern = matchers.for_document(doc.name)
                if pattern is None:
                    continue

                text = self._vault.read_body(doc)
                prefix, body = split_frontmatter(text)
                rewritten = apply_pattern(body, pattern, pairs)
                if not rewritten.changed:
                    continue

                if not dry_run:
                    self._vault.write_body(doc, prefix + rewritten.body)
                count = len(rewritten.insertions)
                links_added += count
                changes.append(
                    {
                        "path": doc.path,
                        "links": count,
                        "targets": sorted({i.target for i in rewritten.insertions}),
                    }
                )
                logger.debug("Linked %d mention(s) in %s", count, doc.path)

        if not dry_run:
            self._vault.notify(f"Bridging complete! {links_added} links added.", warnings)
            self._vault.dispatch(
                "post_link",
                warnings,
                links_added=links_added,
                documents=[c["path"] for c in changes],
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "aliases": len(table),
                "documents": len(changes),
                "links_added": links_added,
                "changes": changes,
                "skipped": skipped,
                "dry_run": dry_run,
            },
            warnings=warnings,
        )


class _MatcherCache:
    """Compiled alias patterns, shared across documents where possible.

    With self-linking off, a document whose name is a link target needs
    a pattern without its own aliases; those are compiled on demand and
    cached per name. Every other document reuses the full pattern.
    """

    def __init__(self, table: AliasTable, *, add_alias_to_self: bool) -> None:
        self._pairs = table.as_dict()
        self._targets = set(self._pairs.values())
        self._add_alias_to_self = add_alias_to_self
        self._full = compile_alias_pattern(list(self._pairs))
        self._per_name: dict[str, tuple[dict[str, str], re.Pattern[str] | None]] = {}

    def for_document(self, name: str) -> tuple[dict[str, str], re.Pattern[str] | None]:
        if self._add_alias_to_self or name not in self._targets:
            return self._pairs, self._full
        if name not in self._per_name:
            pairs = {alias: target for alias, target in self._pairs.items() if target != name}
            self._per_name[name] = (pairs, compile_alias_pattern(list(pairs)))
        return self._per_name[name]
