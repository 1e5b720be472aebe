"""Source-list compaction.

``remove_redundant_sources`` reduces one directive's source list to the
smallest list that allows the same origins:

- keywords (quoted tokens) and wildcards are kept once each;
- every spelling of one host (``api.example.com``, ``https://API.example.com``,
  ``http://api.example.com``) collapses to a single canonical token;
- hosts that are strict subdomains of a wildcard's base are dropped.

A wildcard never covers its own base domain, so ``*.example.com`` and
``example.com`` are both kept. Subdomain matching is a suffix test on the
normalized host, which keeps ``other.co.uk`` and ``example.co.uk`` apart.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_PROTOCOL_RE = re.compile(r"^(https?)://", re.IGNORECASE)

WILDCARD_PREFIX = "*."


@dataclass(slots=True)
class _HostGroup:
    """Every spelling of one host seen in the input."""

    first_token: str
    bare: str | None = None
    has_http: bool = False
    has_https: bool = False

    def add(self, token: str, protocol: str | None) -> None:
        if protocol is None:
            if self.bare is None:
                self.bare = token
        elif protocol == "http":
            self.has_http = True
        else:
            self.has_https = True

    @property
    def canonical(self) -> str:
        if self.bare is not None:
            return self.bare
        if self.has_http and self.has_https:
            return strip_protocol(self.first_token)
        return self.first_token


def strip_protocol(source: str) -> str:
    return _PROTOCOL_RE.sub("", source, count=1)


def host_key(source: str) -> str:
    """Protocol-stripped, lower-cased identity of a host source."""
    return strip_protocol(source).lower()


def wildcard_base(source: str) -> str:
    return host_key(source)[len(WILDCARD_PREFIX):]


def is_wildcard(source: str) -> bool:
    return strip_protocol(source).startswith(WILDCARD_PREFIX)


def is_covered(key: str, base: str) -> bool:
    """True when ``key`` is a strict subdomain of ``base``."""
    return key.endswith("." + base) and key != base


def remove_redundant_sources(sources: str) -> str:
    """Return the minimal space-separated equivalent of ``sources``, sorted."""
    keywords: dict[str, None] = {}
    wildcards: dict[str, None] = {}
    hosts: dict[str, _HostGroup] = {}

    for token in sources.split():
        if token.startswith("'"):
            keywords.setdefault(token)
        elif is_wildcard(token):
            wildcards.setdefault(token)
        else:
            match = _PROTOCOL_RE.match(token)
            protocol = match.group(1).lower() if match else None
            group = hosts.setdefault(host_key(token), _HostGroup(first_token=token))
            group.add(token, protocol)

    bases = {wildcard_base(w) for w in wildcards}
    kept = [
        group.canonical
        for key, group in hosts.items()
        if not any(is_covered(key, base) for base in bases)
    ]
    return " ".join(sorted([*keywords, *wildcards, *kept]))
