"""
Custom logging filters for guarded_fetch.

Request logs carry endpoints and header values; this module masks the
credentials that can appear in them.
"""

import logging
import re
from typing import List, Pattern, Tuple

MASK = "***MASKED***"


class SensitiveDataFilter(logging.Filter):
    """Filter to mask credentials in log messages."""

    def __init__(self) -> None:
        super().__init__()

        self.rules: List[Tuple[Pattern[str], str]] = [
            # Authorization / Proxy-Authorization header values
            (
                re.compile(
                    r"((?:proxy-)?authorization[\"']?\s*[:=]\s*[\"']?)"
                    r"((?:basic|bearer|digest|token)\s+)?([^\s\"',}]+)",
                    re.IGNORECASE,
                ),
                rf"\1\2{MASK}",
            ),
            # Bare bearer tokens
            (re.compile(r"(bearer\s+)([A-Za-z0-9\-._~+/]+=*)", re.IGNORECASE), rf"\1{MASK}"),
            # API keys, tokens and secrets in query strings or key/value dumps
            (
                re.compile(
                    r"((?:api[_-]?key|access[_-]?token|token|secret|password)"
                    r"[\"']?\s*[:=]\s*[\"']?)([^\s\"'&,}]+)",
                    re.IGNORECASE,
                ),
                rf"\1{MASK}",
            ),
            # URLs with credentials
            (re.compile(r"(https?://[^:/@\s]+):([^@/\s]+)@", re.IGNORECASE), rf"\1:{MASK}@"),
        ]

    def mask(self, message: str) -> str:
        """Apply every masking rule to ``message``."""
        for pattern, replacement in self.rules:
            message = pattern.sub(replacement, message)
        return message

    def filter(self, record: logging.LogRecord) -> bool:
        """Mask the record's message in place; never drops a record."""
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            return True

        record.msg = self.mask(message)
        record.args = ()
        return True


__all__ = ["MASK", "SensitiveDataFilter"]
