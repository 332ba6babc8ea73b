"""Builder base and behavior shared by object and relationship binaries."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Self

from geocore.core.domain.base import GeocoreBinaryDataInfo
from geocore.core.errors import UnexpectedResponse
from geocore.core.interfaces.transport import GeocoreTransport
from geocore.core.query.components import BinarySpec
from geocore.core.result import GeocoreResult, as_result


def downgrade_url(url: str) -> str:
    """Rewrite an `https` URL to `http`; other URLs are returned unchanged."""

    if url.startswith("https"):
        return "http" + url[len("https"):]
    return url


@dataclass(frozen=True)
class Builder:
    """Immutable builder bound to a transport.

    Setters return a new builder; the receiver is never modified.
    """

    transport: GeocoreTransport = field(repr=False, compare=False)


class BinaryMixin(ABC):
    """`with_key` / `with_mime_type` / `with_data` plus URL and image helpers.

    Hosts provide a `payload: BinarySpec` field and a `binary()` operation.
    """

    payload: BinarySpec
    transport: GeocoreTransport

    def with_key(self, key: str) -> Self:
        return replace(self, payload=replace(self.payload, key=key))  # type: ignore[type-var]

    def with_mime_type(self, mime_type: str) -> Self:
        return replace(self, payload=replace(self.payload, mime_type=mime_type))  # type: ignore[type-var]

    def with_data(self, data: bytes) -> Self:
        return replace(self, payload=replace(self.payload, data=data))  # type: ignore[type-var]

    @abstractmethod
    async def binary(self) -> GeocoreResult[GeocoreBinaryDataInfo]:
        """Metadata of the binary stored under the current key."""

    @as_result
    async def url(self) -> str:
        info = (await self.binary()).unwrap()
        if info.url is None:
            raise UnexpectedResponse("url is nil")
        if self.transport.settings.downgrade_binary_urls:
            return downgrade_url(info.url)
        return info.url

    @as_result
    async def image(self) -> bytes:
        url = (await self.url()).unwrap()
        return await self.transport.download(url)
