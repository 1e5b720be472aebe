"""In-memory Content-Security-Policy store.

``ContentSecurityPolicy`` keeps two maps: source -> directives and
flag -> values. Everything else (header text, JSON, tables) is a view
computed from them on demand.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from csp_manager.catalog import (
    DIRECTIVE_NAMES,
    FLAG_NAMES,
    Directive,
    Flag,
    UnknownDirectiveError,
    to_directive,
    to_flag,
)
from csp_manager.compaction import remove_redundant_sources
from csp_manager.config.loader import get_settings
from csp_manager.config.presets import get_preset
from csp_manager.header import join_rules, split_rules
from csp_manager.models import ViolationReport
from csp_manager.quoting import normalize_source, quote_source
from csp_manager.sorting import sort_rules
from csp_manager.validation import validate_flag_values

logger = structlog.get_logger()

Rules = list[tuple[str, list[str]]]
Flags = list[tuple[str, list[str]]]


class ContentSecurityPolicy:
    """A mutable CSP: directives per source plus policy-wide flags.

    Mutators return the policy so calls chain::

        >>> str(ContentSecurityPolicy().add("self", "script-src"))
        "script-src 'self'"

    Not thread-safe; use one instance per request or session.
    """

    def __init__(self, header: str | None = None, *, strict: bool | None = None) -> None:
        self._rules: dict[str, set[str]] = {}
        self._flags: dict[str, set[str]] = {}
        self._strict = strict
        if header:
            self.load(header)

    @classmethod
    def from_preset(cls, name: str | None = None, *, strict: bool | None = None) -> ContentSecurityPolicy:
        """Build a policy from a named preset (see ``presets.yaml``)."""
        return cls(get_preset(name), strict=strict)

    @classmethod
    def from_json(
        cls,
        data: Mapping[str, Mapping[str, Iterable[str]]],
        *,
        strict: bool | None = None,
    ) -> ContentSecurityPolicy:
        """Rebuild a policy from the shape produced by ``to_json``.

        Directive names outside the catalog are handled as ``load`` handles
        them, so anything ``load`` stored can be restored.
        """
        policy = cls(strict=strict)
        for source, directives in data.get("rules", {}).items():
            names = [d.value if isinstance(d, Directive) else d for d in directives]
            for name in names:
                policy._check_directive_name(name)
            policy._rules.setdefault(normalize_source(source), set()).update(names)
        for flag, values in data.get("flags", {}).items():
            policy.set(flag, *values)
        return policy

    @property
    def strict(self) -> bool:
        if self._strict is not None:
            return self._strict
        return get_settings().reject_unknown_directives

    # ── Mutation ─────────────────────────────────────────────────────────

    def add(self, source: str, *directives: str | Directive) -> ContentSecurityPolicy:
        """Allow ``source`` for each of ``directives``."""
        if not directives:
            return self
        names = [to_directive(d).value for d in directives]
        self._rules.setdefault(normalize_source(source), set()).update(names)
        return self

    def remove(self, source: str, *directives: str | Directive) -> ContentSecurityPolicy:
        """Remove ``source`` entirely, or only the given directives from it.

        A source whose last directive is removed stays as an empty entry.
        """
        source = normalize_source(source)
        if source not in self._rules:
            return self
        if not directives:
            del self._rules[source]
        else:
            self._rules[source].difference_update(
                d.value if isinstance(d, Directive) else d for d in directives
            )
        return self

    def set(self, flag: str | Flag, *values: str) -> ContentSecurityPolicy:
        """Set a flag, merging ``values`` into any it already has.

        Raises ``FlagValidationError`` without changing the policy when a
        value is rejected.
        """
        flag = to_flag(flag)
        self._set_validated(flag, validate_flag_values(flag, values))
        return self

    def erase(self, flag: str | Flag) -> ContentSecurityPolicy:
        """Remove a flag and all of its values."""
        self._flags.pop(to_flag(flag).value, None)
        return self

    def clear(self) -> ContentSecurityPolicy:
        """Remove all directives and flags."""
        self._rules.clear()
        self._flags.clear()
        return self

    def _set_validated(self, flag: Flag, values: list[str]) -> None:
        if not values and flag is not Flag.upgrade_insecure_requests:
            return
        self._flags.setdefault(flag.value, set()).update(values)

    # ── Bulk input ───────────────────────────────────────────────────────

    def load(self, header: str) -> ContentSecurityPolicy:
        """Merge a Content-Security-Policy header value into the policy.

        Every rule is checked before anything is applied, so an invalid
        flag value (or, in strict mode, an unknown directive) leaves the
        policy untouched.
        """
        flags: list[tuple[Flag, list[str]]] = []
        entries: list[tuple[str, str]] = []
        for name, tokens in split_rules(header):
            if name in FLAG_NAMES:
                flag = Flag(name)
                flags.append((flag, validate_flag_values(flag, tokens)))
                continue
            self._check_directive_name(name)
            entries.extend((normalize_source(token), name) for token in tokens)

        for source, directive in entries:
            self._rules.setdefault(source, set()).add(directive)
        for flag, values in flags:
            self._set_validated(flag, values)
        logger.debug("policy_loaded", rules=len(entries), flags=len(flags))
        return self

    def _check_directive_name(self, name: str) -> None:
        """Reject (strict) or log a directive name outside the catalog."""
        if name in DIRECTIVE_NAMES:
            return
        if self.strict:
            raise UnknownDirectiveError(name)
        logger.warning("unknown_directive_loaded", directive=name)

    def adjust(self, *reports: ViolationReport | Mapping[str, Any] | Any) -> ContentSecurityPolicy:
        """Allow the origins blocked in CSP violation reports.

        Reports missing the directive or blocked URL, or naming a directive
        outside the catalog, are skipped.
        """
        for raw in reports:
            report = _coerce_report(raw)
            if report is None or not report.effective_directive:
                logger.debug("violation_report_skipped", reason="missing_fields")
                continue
            source = report.blocked_source
            if source is None:
                logger.debug("violation_report_skipped", reason="missing_fields")
                continue
            if report.effective_directive not in DIRECTIVE_NAMES:
                logger.debug(
                    "violation_report_skipped",
                    reason="unknown_directive",
                    directive=report.effective_directive,
                )
                continue
            self.add(source, report.effective_directive)
            logger.debug(
                "violation_report_applied",
                source=source,
                directive=report.effective_directive,
                document_url=report.document_url,
                disposition=report.disposition,
            )
        return self

    # ── Views ────────────────────────────────────────────────────────────

    @property
    def rules(self) -> Rules:
        """``(source, directives)`` pairs, keywords first, directives sorted."""
        return sort_rules(
            (source, sorted(directives)) for source, directives in self._rules.items()
        )

    @property
    def flags(self) -> Flags:
        """``(flag, values)`` pairs ordered by flag name, values sorted."""
        return [(flag, sorted(self._flags[flag])) for flag in sorted(self._flags)]

    def to_json(self) -> dict[str, dict[str, list[str]]]:
        return {
            "rules": dict(self.rules),
            "flags": dict(self.flags),
        }

    def to_table(self) -> tuple[tuple[str, Rules], tuple[str, Flags]]:
        return (("rules", self.rules), ("flags", self.flags))

    def directives(self) -> dict[str, list[str]]:
        """Quoted sources grouped by directive, in source-sort order."""
        grouped: dict[str, list[str]] = {}
        for source, directives in self.rules:
            for directive in directives:
                grouped.setdefault(directive, []).append(quote_source(source))
        return grouped

    def to_string(self) -> str:
        """Serialize the policy as a Content-Security-Policy header value."""
        grouped = self.directives()
        rules = [
            (directive, [remove_redundant_sources(" ".join(grouped[directive]))])
            for directive in sorted(grouped)
        ]
        return join_rules([*rules, *self.flags])

    def copy(self) -> ContentSecurityPolicy:
        other = ContentSecurityPolicy(strict=self._strict)
        other._rules = {source: set(d) for source, d in self._rules.items()}
        other._flags = {flag: set(v) for flag, v in self._flags.items()}
        return other

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"ContentSecurityPolicy({self.to_string()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentSecurityPolicy):
            return NotImplemented
        return self._rules == other._rules and self._flags == other._flags

    __hash__ = None  # mutable


def _coerce_report(raw: Any) -> ViolationReport | None:
    """Turn a mapping or report-like object into a ``ViolationReport``."""
    if isinstance(raw, ViolationReport):
        return raw
    try:
        if isinstance(raw, Mapping):
            return ViolationReport.from_payload(raw)
        return ViolationReport(
            effective_directive=getattr(raw, "effectiveDirective", None)
            or getattr(raw, "effective_directive", None),
            blocked_url=getattr(raw, "blockedURL", None)
            or getattr(raw, "blocked_url", None),
        )
    except ValidationError as exc:
        logger.debug("violation_report_invalid", errors=exc.error_count())
        return None
