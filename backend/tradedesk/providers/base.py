"""Common shape of every market-data adapter."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from tradedesk.errors import ProviderError
from tradedesk.schemas.asset import AssetSnapshot, QuoteUpdate
from tradedesk.schemas.provider import ProviderResult

T = TypeVar("T")


class Provider(ABC, Generic[T]):
    """One external data source behind a single ``fetch`` capability.

    Subclasses implement ``_fetch``, which either returns normalized data or
    raises ``ProviderError``. ``fetch`` turns those errors into a failed
    ``ProviderResult`` so that callers only ever inspect a status.
    """

    name: str = "provider"

    def fetch(self, identifier: str) -> ProviderResult[T]:
        try:
            data = self._fetch(identifier)
        except ProviderError as exc:
            return ProviderResult(
                provider=self.name,
                identifier=identifier,
                status=exc.status,
                reason=exc.message,
            )
        return ProviderResult(provider=self.name, identifier=identifier, data=data)

    @abstractmethod
    def _fetch(self, identifier: str) -> T:
        """Fetch and normalize data for ``identifier``."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(name='{self.name}')>"


class SnapshotQuoteProvider(Provider[QuoteUpdate]):
    """Refresh adapter reusing a full-snapshot provider.

    Only the price fields are carried into the update; identity fields of
    the displayed snapshot are left as they are.
    """

    def __init__(self, inner: Provider[AssetSnapshot]) -> None:
        self.inner = inner
        self.name = inner.name

    def _fetch(self, identifier: str) -> QuoteUpdate:
        snapshot = self.inner._fetch(identifier)
        return QuoteUpdate(
            price=snapshot.price,
            change=snapshot.change,
            change_percent=snapshot.change_percent,
            volume=snapshot.volume,
            market_cap=snapshot.market_cap,
        )
