"""Wikilink rendering and alias substitution.

Pure functions, no infrastructure dependencies. The substitution engine
rewrites a document body in a single pass against one immutable copy of
the text:

- Existing ``[[...]]`` spans are consumed whole and copied through.
- Aliases are tried longest-first at each position, so ``Apple Pie``
  wins over ``Apple`` where both start.
- A match must not touch a word character, ``[``, ``]`` or ``|`` on
  either side.

Because inserted links are never re-examined and every inserted link is
itself an inviolable span on the next run, the rewrite is idempotent.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# [[Title]] or [[Title|Display Text]]; captures content between brackets.
_WIKILINK_PATTERN = re.compile(r"\[\[([^\[\]]+)\]\]")

# Characters that would break the link construct if they appeared in an alias.
_UNSAFE_ALIAS_CHARS = frozenset("[]|\n\r")

_BEFORE = r"(?<![\w\[\]|])"
_AFTER = r"(?![\w\[\]|])"


@dataclass(frozen=True)
class LinkInsertion:
    """One alias occurrence turned into a link."""

    alias: str
    target: str
    offset: int  # position of the alias in the original body


@dataclass(frozen=True)
class RewriteResult:
    """Outcome of :func:`rewrite_body`."""

    body: str
    insertions: list[LinkInsertion] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.insertions)


def render_link(target: str, alias: str | None = None) -> str:
    """Render ``[[target]]``, or ``[[target|alias]]`` when the text differs."""
    if alias is None or alias == target:
        return f"[[{target}]]"
    return f"[[{target}|{alias}]]"


def is_linkable_alias(alias: str) -> bool:
    """Whether *alias* can be wrapped in a link without breaking it."""
    return bool(alias.strip()) and not (_UNSAFE_ALIAS_CHARS & set(alias))


def compile_alias_pattern(aliases: list[str]) -> re.Pattern[str] | None:
    """Compile a combined matcher for *aliases*.

    The pattern has two named groups: ``link`` matches an existing
    wikilink span, ``alias`` matches a bare alias occurrence. Returns
    ``None`` when no alias is linkable.
    """
    usable = sorted({a for a in aliases if is_linkable_alias(a)}, key=lambda a: (-len(a), a))
    if not usable:
        return None
    alternation = "|".join(re.escape(alias) for alias in usable)
    return re.compile(
        rf"(?P<link>{_WIKILINK_PATTERN.pattern})|{_BEFORE}(?P<alias>{alternation}){_AFTER}"
    )


def rewrite_body(body: str, pairs: dict[str, str]) -> RewriteResult:
    """Replace every bare occurrence of an alias in *body* with a link.

    *pairs* maps alias text to canonical target name. Matching is
    literal and case-sensitive. Text inside existing wikilinks is never
    touched.
    """
    pattern = compile_alias_pattern(list(pairs))
    if pattern is None:
        return RewriteResult(body=body)
    return apply_pattern(body, pattern, pairs)


def apply_pattern(body: str, pattern: re.Pattern[str], pairs: dict[str, str]) -> RewriteResult:
    """Run a pattern from :func:`compile_alias_pattern` over *body*."""
    insertions: list[LinkInsertion] = []

    def _replace(match: re.Match[str]) -> str:
        alias = match.group("alias")
        if alias is None:
            return match.group(0)
        target = pairs[alias]
        insertions.append(LinkInsertion(alias=alias, target=target, offset=match.start()))
        return render_link(target, alias)

    new_body = pattern.sub(_replace, body)
    return RewriteResult(body=new_body, insertions=insertions)
