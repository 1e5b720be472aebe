"""Ordering of sources: keywords first, then plain lexicographic order."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TypeVar

from csp_manager.catalog import SOURCE_KEYWORDS
from csp_manager.quoting import quote_source

T = TypeVar("T", bound=Sequence)


def is_keyword_source(source: str) -> bool:
    """True for keywords, scheme keywords, nonces, hashes and quoted tokens."""
    return (
        source in SOURCE_KEYWORDS
        or source.startswith("'")
        or quote_source(source) != source
    )


def source_sort_key(source: str) -> tuple[int, str]:
    return (0 if is_keyword_source(source) else 1, source)


def sort_sources(sources: Iterable[str]) -> list[str]:
    return sorted(sources, key=source_sort_key)


def sort_rules(rules: Iterable[T]) -> list[T]:
    """Sort ``(source, directives)`` pairs by their source."""
    return sorted(rules, key=lambda rule: source_sort_key(rule[0]))
