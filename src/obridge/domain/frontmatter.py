"""Front matter splitting and alias extraction.

A document may open with a YAML block fenced by ``---`` lines. The block
is machine-readable and must never be rewritten, so the splitter keeps
it as raw text (byte-for-byte) instead of re-rendering parsed YAML.

Pure functions, no filesystem access.
"""

from __future__ import annotations

from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

FRONTMATTER_DELIMITER = "---"
BOM = "\ufeff"

# Obsidian accepts both spellings, in any case.
_ALIAS_KEYS = frozenset({"aliases", "alias"})


def _new_yaml() -> YAML:
    """Create a fresh safe YAML loader.

    A new instance per call avoids carrying parser state across
    documents (ruamel.yaml's YAML object is stateful).
    """
    return YAML(typ="safe", pure=True)


def split_frontmatter(content: str) -> tuple[str, str]:
    """Split *content* into ``(prefix, body)``.

    The prefix runs from the opening ``---`` line through the matching
    closing ``---`` line, including that line's newline. If the content
    does not open with a delimiter, or the block is never closed, the
    prefix is empty and the whole content is body. A leading byte-order
    mark is allowed before the opening delimiter and stays in the prefix.

    ``prefix + body == content`` always holds.
    """
    lines = content.splitlines(keepends=True)
    if not lines or lines[0].lstrip(BOM).strip() != FRONTMATTER_DELIMITER:
        return "", content

    offset = len(lines[0])
    for line in lines[1:]:
        offset += len(line)
        if line.strip() == FRONTMATTER_DELIMITER:
            return content[:offset], content[offset:]
    return "", content


def parse_frontmatter(content: str) -> dict[str, Any]:
    """Parse the YAML front matter of *content* into a dict.

    Returns an empty dict when there is no front matter, when the YAML
    is malformed, or when the block is not a mapping.
    """
    prefix, _body = split_frontmatter(content)
    if not prefix:
        return {}

    lines = prefix.splitlines()
    yaml_block = "\n".join(lines[1:-1])
    try:
        data = _new_yaml().load(yaml_block)
    except YAMLError:
        return {}
    return data if isinstance(data, dict) else {}


def parse_aliases(frontmatter: dict[str, Any]) -> list[str]:
    """Extract the declared aliases from a parsed front matter dict.

    Accepts ``aliases`` or ``alias`` (case-insensitive). A string value is
    split on commas; a list value must hold only strings. Any other shape
    is malformed and yields ``[]``. Blank entries are dropped and
    duplicates removed, keeping first-seen order.

    Examples:
        >>> parse_aliases({"aliases": ["Widget", "Gadget"]})
        ['Widget', 'Gadget']
        >>> parse_aliases({"alias": "Widget, Gadget"})
        ['Widget', 'Gadget']
        >>> parse_aliases({"aliases": {"bad": 1}})
        []
    """
    raw: Any = None
    for key, value in frontmatter.items():
        if isinstance(key, str) and key.lower() in _ALIAS_KEYS:
            raw = value
            break

    if isinstance(raw, str):
        candidates = raw.split(",")
    elif isinstance(raw, list) and all(isinstance(item, str) for item in raw):
        candidates = raw
    else:
        return []

    aliases: list[str] = []
    for candidate in candidates:
        alias = candidate.strip()
        if alias and alias not in aliases:
            aliases.append(alias)
    return aliases


def read_aliases(content: str) -> list[str]:
    """Declared aliases of a raw markdown document (``[]`` if none)."""
    return parse_aliases(parse_frontmatter(content))
