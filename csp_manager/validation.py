"""Per-flag value validation.

Each flag maps to one ``FlagRule`` describing how many values it takes,
which values it accepts and whether they are single-quoted on output.
Adding a flag means adding one entry to ``FLAG_RULES``.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

import structlog

from csp_manager.catalog import Flag, PolicyError, TrustedTypesElement, to_flag
from csp_manager.quoting import quote, unquote

logger = structlog.get_logger()

_REPORT_TO_RE = re.compile(r"[\w-]+", re.ASCII)
_TRUSTED_TYPE_RE = re.compile(r"[\w\-#=_/@.%]+", re.ASCII)
_TRUSTED_TYPE_KEYWORDS = frozenset({"none", "allow-duplicates"})
_TRUSTED_TYPES_ELEMENTS = frozenset(e.value for e in TrustedTypesElement)


class FlagValidationError(PolicyError):
    """Raised when a flag receives a value (or number of values) it rejects."""

    def __init__(self, flag: Flag, values: list[str], message: str) -> None:
        self.flag = flag
        self.values = values
        super().__init__(message)


def validate_report_to(value: str) -> bool:
    """Endpoint group names are word characters and hyphens."""
    return bool(_REPORT_TO_RE.fullmatch(unquote(value)))


def validate_trusted_type(value: str) -> bool:
    """Policy names, or one of the ``none`` / ``allow-duplicates`` keywords."""
    return value in _TRUSTED_TYPE_KEYWORDS or bool(_TRUSTED_TYPE_RE.fullmatch(value))


def validate_trusted_types_element(value: str) -> bool:
    return value in _TRUSTED_TYPES_ELEMENTS


@dataclass(frozen=True, slots=True)
class FlagRule:
    """Value contract of a single flag."""

    min_values: int = 0
    takes_values: bool = True
    accepts: Callable[[str], bool] | None = None
    quoted: bool = False


FLAG_RULES: dict[Flag, FlagRule] = {
    Flag.upgrade_insecure_requests: FlagRule(takes_values=False),
    Flag.report_to: FlagRule(min_values=1, accepts=validate_report_to),
    # TODO: validate MIME type syntax for plugin-types values
    Flag.plugin_types: FlagRule(),
    Flag.trusted_types: FlagRule(
        min_values=1, accepts=validate_trusted_type, quoted=True,
    ),
    Flag.require_trusted_types_for: FlagRule(
        min_values=1, accepts=validate_trusted_types_element, quoted=True,
    ),
}


def validate_flag_values(flag: str | Flag, values: Iterable[str]) -> list[str]:
    """Validate raw values for ``flag`` and return them in stored form.

    Values are unquoted before checking and re-quoted afterwards when the
    flag serializes them quoted. Raises ``FlagValidationError`` naming the
    flag and the offending values; nothing is returned on failure.
    """
    flag = to_flag(flag)
    rule = FLAG_RULES[flag]
    cleaned = [unquote(v) for v in values]

    if not rule.takes_values and cleaned:
        _reject(flag, cleaned, f"{flag.value} does not accept any values, got: {', '.join(cleaned)}")
    if len(cleaned) < rule.min_values:
        _reject(flag, cleaned, f"{flag.value} requires at least one value")

    if rule.accepts is not None:
        invalid = [v for v in cleaned if not rule.accepts(v)]
        if invalid:
            _reject(flag, invalid, f"Invalid value for {flag.value}: {', '.join(invalid)}")

    if rule.quoted:
        return [quote(v) for v in cleaned]
    return cleaned


def _reject(flag: Flag, values: list[str], message: str) -> None:
    logger.info("flag_rejected", flag=flag.value, values=values)
    raise FlagValidationError(flag, values, message)
