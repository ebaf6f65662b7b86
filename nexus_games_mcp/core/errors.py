"""
core/errors.py

Exception hierarchy for the provider layer.

Only transport and configuration problems are errors.  A post that does
not contain a download block or a requirements section is data, not a
fault, and never raises.
"""
from __future__ import annotations

from typing import Optional


class ProviderError(Exception):
    """Base class for all provider exceptions.

    The message is always ``[{provider}] {context}: {message}`` so a caller
    can tell which provider and which operation failed from the text alone.
    """

    def __init__(self, provider: str, context: str, message: str) -> None:
        self.provider = provider
        self.context = context
        self.message = message
        super().__init__(f"[{provider}] {context}: {message}")


class TransportError(ProviderError):
    """Network failure, non-2xx response or an undecodable response body."""

    def __init__(
        self,
        provider: str,
        context: str,
        message: str,
        status_code: Optional[int] = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(provider, context, message)


class ConfigurationError(ProviderError):
    """Raised by ProviderConfig.validate() before any request is made."""
