"""Alias records, the snapshot, and the alias table.

The scanner turns every includable document that declares aliases into
an :class:`AliasRecord`. The ordered list of records is the *snapshot*,
persisted between runs. The linker folds the snapshot into an
:class:`AliasTable` mapping each alias to its canonical document name.

Snapshot wire format (one entry per record)::

    {"fileName": "Pie", "fullFilePath": "food/Pie.md",
     "data": {"aliases": ["Apple Pie"]}}
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, Protocol

from pydantic import (
    BaseModel,
    Field,
    TypeAdapter,
    field_validator,
    model_serializer,
    model_validator,
)

from obridge.domain.policy import ExclusionPolicy, can_be_target

logger = logging.getLogger(__name__)


class Named(Protocol):
    """Anything with a display name and a vault-relative path."""

    @property
    def name(self) -> str: ...

    @property
    def path(self) -> str: ...


class AliasRecord(BaseModel):
    """Aliases declared by one document."""

    model_config = {"frozen": True}

    name: str = Field(min_length=1)
    path: str
    aliases: tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _from_snapshot_shape(cls, value: Any) -> Any:
        if isinstance(value, dict) and "fileName" in value:
            data = value.get("data") or {}
            return {
                "name": value["fileName"],
                "path": value.get("fullFilePath", ""),
                "aliases": data.get("aliases", ()),
            }
        return value

    @field_validator("aliases")
    @classmethod
    def _dedupe(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(value))

    @model_serializer
    def _to_snapshot_shape(self) -> dict[str, Any]:
        return {
            "fileName": self.name,
            "fullFilePath": self.path,
            "data": {"aliases": list(self.aliases)},
        }


SNAPSHOT_ADAPTER: TypeAdapter[list[AliasRecord]] = TypeAdapter(list[AliasRecord])


class AliasTable:
    """Insertion-ordered ``alias -> canonical name`` mapping.

    Re-setting an existing alias overwrites its target but keeps its
    original position, like a plain ``dict``.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def set(self, alias: str, name: str) -> None:
        self._entries[alias] = name

    def setdefault(self, alias: str, name: str) -> None:
        self._entries.setdefault(alias, name)

    def as_dict(self) -> dict[str, str]:
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"AliasTable({self._entries!r})"


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


def scan_records(
    documents: Iterable[Named],
    policy: ExclusionPolicy,
    read_aliases: Callable[[Named], list[str]],
) -> list[AliasRecord]:
    """Build the snapshot from *documents*, in their given order.

    Documents the policy bars as link targets are skipped before their
    metadata is read. Documents without declared aliases produce no
    record; they stay linkable by bare name through the identity step of
    :func:`build_alias_table`.
    """
    records: list[AliasRecord] = []
    for doc in documents:
        if not can_be_target(policy, doc.name, doc.path):
            logger.debug("Skipping excluded document %s", doc.path)
            continue
        aliases = read_aliases(doc)
        if aliases:
            records.append(AliasRecord(name=doc.name, path=doc.path, aliases=tuple(aliases)))
    return records


# ---------------------------------------------------------------------------
# Table building
# ---------------------------------------------------------------------------


def build_alias_table(
    snapshot: Iterable[AliasRecord],
    policy: ExclusionPolicy,
    documents: Iterable[Named] | None = None,
) -> AliasTable:
    """Fold *snapshot* into an alias table.

    For each record (in order) that the policy allows as a target, every
    alias is mapped to the record's name, then the name to itself. When
    the same alias appears in two records, the later record wins.

    If *documents* (the current store listing) is given, records whose
    path is no longer listed are dropped as stale, and every listed,
    allowed document whose name is still unmapped gets an identity entry.
    """
    listed = list(documents) if documents is not None else None
    live_paths = {doc.path for doc in listed} if listed is not None else None

    table = AliasTable()
    for record in snapshot:
        if not can_be_target(policy, record.name, record.path):
            continue
        if live_paths is not None and record.path not in live_paths:
            logger.debug("Dropping stale snapshot record %s", record.path)
            continue
        for alias in record.aliases:
            table.set(alias, record.name)
        table.set(record.name, record.name)

    for doc in listed or ():
        if can_be_target(policy, doc.name, doc.path):
            table.setdefault(doc.name, doc.name)

    return table


def aliases_for_document(name: str, declared: Iterable[str]) -> list[str]:
    """All names a document answers to: its own name first, then its aliases."""
    names = [name]
    names.extend(alias for alias in declared if alias not in names)
    return names
