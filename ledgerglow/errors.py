"""Exceptions raised by the upstream client and the logo store.

Services catch these and substitute fallback payloads, so they never reach
the HTTP layer.
"""

from typing import Optional


class LedgerGlowError(Exception):
    """Base class for LedgerGlow errors."""


class UpstreamError(LedgerGlowError):
    """An upstream request failed or returned something unusable."""

    def __init__(self, message: str, *, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is not None:
            return f"{base} (status={self.status_code})"
        return base


class LogoStoreError(LedgerGlowError):
    """The logo store document could not be written."""
