"""
Content-Security-Policy manager - model, compact and serialize CSP headers
"""

__version__ = "0.1.0"

from csp_manager.catalog import (
    Directive,
    Flag,
    PolicyError,
    UnknownDirectiveError,
    UnknownFlagError,
)
from csp_manager.compaction import remove_redundant_sources
from csp_manager.models import ViolationReport
from csp_manager.policy import ContentSecurityPolicy
from csp_manager.validation import FlagValidationError

__all__ = [
    'ContentSecurityPolicy',
    'Directive',
    'Flag',
    'FlagValidationError',
    'PolicyError',
    'UnknownDirectiveError',
    'UnknownFlagError',
    'ViolationReport',
    'remove_redundant_sources',
]
