from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from geocore.core.domain.event import GeocoreEvent
from geocore.core.domain.place import GeocorePlace, GeocorePlaceEvent
from geocore.core.domain.tag import GeocoreTag
from geocore.core.query.components import GeoFilter, ObjectTarget
from geocore.core.query.place import CenterMixin
from geocore.core.query.taggable import TaggableOperation, TaggableQuery
from geocore.core.result import as_result


@dataclass(frozen=True)
class EventOperation(TaggableOperation):
    target: ObjectTarget = field(default_factory=lambda: ObjectTarget("/events"))


@dataclass(frozen=True)
class EventQuery(TaggableQuery, CenterMixin):
    ENTITY: ClassVar[type[GeocoreEvent]] = GeocoreEvent

    target: ObjectTarget = field(default_factory=lambda: ObjectTarget("/events"))
    geo: GeoFilter = field(default_factory=GeoFilter)

    @as_result
    async def places(self) -> list[GeocorePlace]:
        return await self.transport.fetch_many(self.target.sub_path("/places"), GeocorePlace.from_json)

    @as_result
    async def tags_of(self) -> list[GeocoreTag]:
        return await self.transport.fetch_many(self.target.sub_path("/tags"), GeocoreTag.from_json)

    @as_result
    async def place_relationships(self) -> list[GeocorePlaceEvent]:
        return await self.transport.fetch_many(
            self.target.sub_path("/places/relationships"), GeocorePlaceEvent.from_json
        )

    @as_result
    async def nearest(self) -> list[GeocoreEvent]:
        return await self.transport.fetch_many(
            "/events/search/nearest",
            GeocoreEvent.from_json,
            params={**self.query_params(), **self.geo.center_params()},
        )
