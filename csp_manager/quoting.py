"""Single-quote handling for keyword sources and flag values."""

from __future__ import annotations

import re

from csp_manager.catalog import SOURCE_EXPRESSIONS

_GENERATED_SOURCE_RE = re.compile(r"^(?:nonce-|sha(?:256|384|512)-)")


def unquote(value: str) -> str:
    """Trim whitespace and strip one leading and one trailing single quote."""
    value = value.strip()
    if value.startswith("'"):
        value = value[1:]
    if value.endswith("'"):
        value = value[:-1]
    return value


def quote(value: str) -> str:
    """Wrap a value in single quotes, without doubling existing ones."""
    return f"'{unquote(value)}'"


def quote_source(source: str) -> str:
    """Quote a source if CSP requires it (keywords, nonces and hashes)."""
    if source in SOURCE_EXPRESSIONS or _GENERATED_SOURCE_RE.match(source):
        return quote(source)
    return source


def normalize_source(source: str) -> str:
    """Return the stored form of a source token.

    ``'self'`` and ``self`` name the same keyword, so quoted tokens that
    ``quote_source`` would re-quote are stored bare. Any other quoted token
    is kept verbatim since its quotes cannot be restored later.
    """
    source = source.strip()
    if source.startswith("'"):
        bare = unquote(source)
        if quote_source(bare) != bare:
            return bare
    return source
