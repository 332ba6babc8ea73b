"""Request engine contract.

Rules:
- Every method performs at most one HTTP call.
- Failures are raised as `GeocoreError` subclasses; builders convert them to
  `GeocoreResult` at their own boundary.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol, TypeVar, runtime_checkable

from geocore.core.config import GeocoreSettings
from geocore.core.session import Session

T = TypeVar("T")

Decoder = Callable[[Any], T]
Params = Mapping[str, Any]


@runtime_checkable
class GeocoreTransport(Protocol):
    session: Session
    settings: GeocoreSettings

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        params: Params | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> Any:
        """Perform the call and return the unwrapped envelope `result`."""

        ...

    async def fetch_one(
        self,
        path: str,
        decoder: Decoder[T],
        *,
        method: str = "GET",
        params: Params | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> T:
        ...

    async def fetch_many(
        self,
        path: str,
        decoder: Decoder[T],
        *,
        method: str = "GET",
        params: Params | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> list[T]:
        ...

    async def upload_post(
        self,
        path: str,
        decoder: Decoder[T],
        *,
        field_name: str,
        file_name: str,
        mime_type: str,
        contents: bytes,
        params: Params | None = None,
    ) -> T:
        ...

    async def download(self, url: str) -> bytes:
        ...
