from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar

from pydantic import Field

from geocore.core.dates import as_utc, utcnow
from geocore.core.domain.base import GeocoreDate, register_entity
from geocore.core.domain.tag import GeocoreTag, GeocoreTaggable
from geocore.core.result import GeocoreResult

if TYPE_CHECKING:
    from geocore.core.domain.place import GeocorePlace
    from geocore.core.query.event import EventQuery
    from geocore.core.services.geocore import Geocore


@register_entity("event")
class GeocoreEvent(GeocoreTaggable):
    SERVICE: ClassVar[str] = "/events"

    time_start: GeocoreDate = Field(default=None, alias="timeStart")
    time_end: GeocoreDate = Field(default=None, alias="timeEnd")

    @classmethod
    def new_query(cls, geocore: Geocore) -> EventQuery:
        return geocore.events()

    def query(self, geocore: Geocore) -> EventQuery:
        return super().query(geocore)  # type: ignore[return-value]

    @classmethod
    async def all(cls, geocore: Geocore) -> GeocoreResult[list[GeocoreEvent]]:
        return await geocore.events().all()

    async def places(self, geocore: Geocore) -> GeocoreResult[list[GeocorePlace]]:
        return await self.query(geocore).places()

    async def tags_of(self, geocore: Geocore) -> GeocoreResult[list[GeocoreTag]]:
        return await self.query(geocore).tags_of()

    def currently_open(self, now: datetime | None = None) -> bool:
        if self.time_start is None or self.time_end is None:
            return False
        now = as_utc(now) if now is not None else utcnow()
        return self.time_start <= now <= self.time_end
