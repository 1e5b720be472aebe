"""Directive, flag and keyword catalogs for Content-Security-Policy headers.

Closed enumerations of everything the policy store knows by name. Lookups
by string go through ``to_directive`` / ``to_flag`` so a typo fails at the
call that made it instead of surfacing as a silently ignored rule.
"""

from __future__ import annotations

import enum


class PolicyError(ValueError):
    """Base class for errors raised while building a policy."""


class UnknownDirectiveError(PolicyError):
    """Raised when a name is not part of the directive catalog."""

    def __init__(self, directive: str) -> None:
        self.directive = directive
        super().__init__(f"Unknown CSP directive: {directive!r}")


class UnknownFlagError(PolicyError):
    """Raised when a name is not part of the flag catalog."""

    def __init__(self, flag: str) -> None:
        self.flag = flag
        super().__init__(f"Unknown CSP flag: {flag!r}")


class Directive(str, enum.Enum):
    base_uri = "base-uri"
    child_src = "child-src"  # workers, <frame> and <iframe>
    connect_src = "connect-src"  # fetch, XHR, WebSocket, sendBeacon
    default_src = "default-src"  # fallback for the other fetch directives
    fenced_frame_src = "fenced-frame-src"
    font_src = "font-src"
    form_action = "form-action"
    frame_ancestors = "frame-ancestors"
    frame_src = "frame-src"
    img_src = "img-src"
    manifest_src = "manifest-src"
    media_src = "media-src"
    navigate_to = "navigate-to"
    object_src = "object-src"
    prefetch_src = "prefetch-src"  # deprecated
    report_uri = "report-uri"  # deprecated, use the report-to flag
    sandbox = "sandbox"
    script_src_attr = "script-src-attr"
    script_src_elem = "script-src-elem"
    script_src = "script-src"
    style_src_attr = "style-src-attr"
    style_src_elem = "style-src-elem"
    style_src = "style-src"
    worker_src = "worker-src"


class Flag(str, enum.Enum):
    """Policy-wide keywords that are not scoped to a directive."""

    upgrade_insecure_requests = "upgrade-insecure-requests"
    report_to = "report-to"
    plugin_types = "plugin-types"
    trusted_types = "trusted-types"
    require_trusted_types_for = "require-trusted-types-for"


class TrustedTypesElement(str, enum.Enum):
    """Sinks that ``require-trusted-types-for`` may name."""

    script = "script"
    style = "style"


# Keyword expressions that are single-quoted when serialized
SOURCE_EXPRESSIONS: frozenset[str] = frozenset({
    "self",
    "unsafe-eval",
    "wasm-unsafe-eval",
    "unsafe-inline",
    "unsafe-hashes",
    "inline-speculation-rules",
    "strict-dynamic",
    "report-sample",
    "none",
})

# Keywords that sort ahead of hosts; scheme sources are never quoted
SOURCE_KEYWORDS: frozenset[str] = SOURCE_EXPRESSIONS | frozenset({
    "*",
    "data:",
    "blob:",
    "mediastream:",
    "filesystem:",
})

DIRECTIVE_NAMES: frozenset[str] = frozenset(d.value for d in Directive)
FLAG_NAMES: frozenset[str] = frozenset(f.value for f in Flag)


def to_directive(name: str | Directive) -> Directive:
    """Resolve a directive name, raising ``UnknownDirectiveError`` on a miss."""
    if isinstance(name, Directive):
        return name
    try:
        return Directive(name)
    except ValueError:
        raise UnknownDirectiveError(name) from None


def to_flag(name: str | Flag) -> Flag:
    """Resolve a flag name, raising ``UnknownFlagError`` on a miss."""
    if isinstance(name, Flag):
        return name
    try:
        return Flag(name)
    except ValueError:
        raise UnknownFlagError(name) from None
