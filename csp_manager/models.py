"""Pydantic models for CSP violation reports."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

_HTTP_SCHEMES = ("http://", "https://")


class ViolationReport(BaseModel):
    """Body of a CSP violation report.

    Accepts Reporting API bodies (``effectiveDirective``, ``blockedURL``),
    legacy ``report-uri`` bodies (``effective-directive``, ``blocked-uri``)
    and snake_case keys.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    effective_directive: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "effectiveDirective", "effective-directive", "effective_directive",
        ),
    )
    blocked_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "blockedURL", "blocked-uri", "blockedURI", "blocked_url",
        ),
    )
    document_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("documentURL", "document-uri", "document_url"),
    )
    disposition: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ViolationReport:
        """Build a report from a body, a Reporting API envelope or a legacy wrapper."""
        if isinstance(payload.get("csp-report"), Mapping):
            payload = payload["csp-report"]
        elif isinstance(payload.get("body"), Mapping):
            payload = payload["body"]
        return cls.model_validate(payload)

    @property
    def blocked_source(self) -> str | None:
        """Source to allow for this violation.

        The hostname for HTTP(S) URLs, the raw value otherwise (``inline``,
        ``eval``, ``data``). None when the URL has no usable host.
        """
        if not self.blocked_url:
            return None
        if self.blocked_url.lower().startswith(_HTTP_SCHEMES):
            try:
                return urlsplit(self.blocked_url).hostname or None
            except ValueError:
                return None
        return self.blocked_url
