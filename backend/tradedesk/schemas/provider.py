from typing import Generic, Literal, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

ProviderStatus = Literal["ok", "error", "rate_limited", "empty"]


class ProviderResult(BaseModel, Generic[T]):
    provider: str
    identifier: str
    status: ProviderStatus = "ok"
    reason: Optional[str] = None
    data: Optional[T] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok" and self.data is not None
