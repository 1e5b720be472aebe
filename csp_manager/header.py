"""Pure-function helpers for CSP header text."""

from __future__ import annotations

from collections.abc import Iterable


def split_rules(header: str) -> list[tuple[str, list[str]]]:
    """Split a header into ``(name, [tokens])`` rules, in header order.

    Empty rules are skipped and rule names are lower-cased; tokens are kept
    as written. Repeated rule names are returned once per occurrence.

    Example:
        >>> split_rules("default-src 'self'; Script-Src 'self' https:")
        [("default-src", ["'self'"]), ("script-src", ["'self'", "https:"])]
    """
    rules: list[tuple[str, list[str]]] = []
    if not header or not header.strip():
        return rules
    for part in header.split(";"):
        tokens = part.split()
        if not tokens:
            continue
        rules.append((tokens[0].lower(), tokens[1:]))
    return rules


def join_rules(rules: Iterable[tuple[str, Iterable[str]]]) -> str:
    """Build header text from ``(name, tokens)`` rules.

    Example:
        >>> join_rules([("default-src", ["'self'"]), ("upgrade-insecure-requests", [])])
        "default-src 'self'; upgrade-insecure-requests"
    """
    return "; ".join(" ".join([name, *tokens]) for name, tokens in rules)
