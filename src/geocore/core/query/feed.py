from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Mapping, Self

from geocore.core.dates import to_epoch_millis
from geocore.core.domain.feed import GeocoreFeed
from geocore.core.errors import InvalidParameter
from geocore.core.query.object import ObjectOperation
from geocore.core.result import as_result


@dataclass(frozen=True)
class FeedOperation(ObjectOperation):
    type: str | None = None
    id_specifier: str | None = None
    content: Mapping[str, Any] | None = None

    def with_type(self, type: str) -> Self:
        return replace(self, type=type)

    def with_id_specifier(self, id_specifier: str) -> Self:
        return replace(self, id_specifier=id_specifier)

    def with_content(self, content: Mapping[str, Any]) -> Self:
        return replace(self, content=dict(content))

    def query_params(self) -> dict[str, Any]:
        params = super().query_params()
        if self.type is not None:
            params["type"] = self.type
        if self.id_specifier is not None:
            params["spec"] = self.id_specifier
        return params

    @as_result
    async def post(self) -> GeocoreFeed:
        if self.target.id is None or self.content is None:
            raise InvalidParameter("Expecting id, content")
        return await self.transport.fetch_one(
            self.target.sub_path("/feed"),
            GeocoreFeed.from_json,
            method="POST",
            params=self.query_params() or None,
            body=dict(self.content),
        )


@dataclass(frozen=True)
class FeedQuery(FeedOperation):
    """Feed entries of an object, filtered by epoch-millisecond bounds.

    A complete `starting_at` / `ending_at` window wins over the open-ended
    `not_earlier_than` / `earlier_than` bounds.
    """

    earliest: int | None = None
    latest: int | None = None
    start: int | None = None
    end: int | None = None
    page_number: int | None = None
    number_per_page: int | None = None

    def not_earlier_than(self, date: datetime) -> Self:
        return replace(self, earliest=to_epoch_millis(date))

    def earlier_than(self, date: datetime) -> Self:
        return replace(self, latest=to_epoch_millis(date))

    def starting_at(self, date: datetime) -> Self:
        return replace(self, start=to_epoch_millis(date))

    def ending_at(self, date: datetime) -> Self:
        return replace(self, end=to_epoch_millis(date))

    def page(self, page: int) -> Self:
        return replace(self, page_number=page)

    def per_page(self, per_page: int) -> Self:
        return replace(self, number_per_page=per_page)

    def query_params(self) -> dict[str, Any]:
        params = super().query_params()
        if self.start is not None and self.end is not None:
            params["from_timestamp"] = str(self.start)
            params["to_timestamp"] = str(self.end)
        elif self.earliest is not None:
            params["from_timestamp"] = str(self.earliest)
        elif self.latest is not None:
            params["to_timestamp"] = str(self.latest)
        if self.page_number is not None:
            params["page"] = self.page_number
        if self.number_per_page is not None:
            params["num"] = self.number_per_page
        return params

    @as_result
    async def all(self) -> list[GeocoreFeed]:
        return await self.transport.fetch_many(
            self.target.sub_path("/feed"), GeocoreFeed.from_json, params=self.query_params() or None
        )
