from __future__ import annotations


class TradedeskError(Exception):
    """Base class for errors raised by the dashboard service."""


class ProviderError(TradedeskError):
    status = "error"

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message


class ProviderHTTPError(ProviderError):
    def __init__(self, provider: str, status_code: int) -> None:
        super().__init__(provider, f"HTTP {status_code}")
        self.status_code = status_code


class RateLimitedError(ProviderError):
    status = "rate_limited"


class MalformedPayloadError(ProviderError):
    pass


class EmptyPayloadError(ProviderError):
    status = "empty"


class NoProviderAvailableError(TradedeskError):
    """Every provider in a fallback chain failed for one identifier."""

    def __init__(self, identifier: str, attempts: list) -> None:
        self.identifier = identifier
        self.attempts = attempts
        last = attempts[-1].reason if attempts else "no providers configured"
        self.last_reason = last
        super().__init__(f"No provider available for {identifier!r}: {last}")
