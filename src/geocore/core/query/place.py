"""Place operations, queries and geospatial searches."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Self

from geocore.core.domain.event import GeocoreEvent
from geocore.core.domain.item import GeocoreItem
from geocore.core.domain.place import (
    GeocorePlace,
    GeocorePlaceCheckin,
    GeocorePlaceEvent,
    GeocorePlacesSmallestBound,
)
from geocore.core.query.components import GeoFilter, ObjectTarget
from geocore.core.query.taggable import TaggableOperation, TaggableQuery
from geocore.core.result import as_result


class CenterMixin:
    """Search center; hosts provide `geo: GeoFilter`."""

    geo: GeoFilter

    def _geo(self, **changes: Any) -> Self:
        return replace(self, geo=replace(self.geo, **changes))  # type: ignore[type-var]

    def with_center(self, latitude: float, longitude: float) -> Self:
        return self._geo(latitude=latitude, longitude=longitude)


class GeoMixin(CenterMixin):
    def with_radius(self, radius: float) -> Self:
        return self._geo(radius=radius)

    def with_rectangle(
        self,
        min_latitude: float,
        min_longitude: float,
        max_latitude: float,
        max_longitude: float,
    ) -> Self:
        return self._geo(
            min_latitude=min_latitude,
            min_longitude=min_longitude,
            max_latitude=max_latitude,
            max_longitude=max_longitude,
        )


@dataclass(frozen=True)
class PlaceOperation(TaggableOperation):
    target: ObjectTarget = field(default_factory=lambda: ObjectTarget("/places"))

    @as_result
    async def checkin(self, checkin: GeocorePlaceCheckin, unrestricted: bool = False) -> GeocorePlaceCheckin:
        path = self.target.sub_path("/checkins")
        params = {"unrestricted": "true"} if unrestricted else None
        return await self.transport.fetch_one(
            path, GeocorePlaceCheckin.from_json, method="POST", params=params, body=checkin.to_dict()
        )


@dataclass(frozen=True)
class PlaceQuery(TaggableQuery, GeoMixin):
    ENTITY: ClassVar[type[GeocorePlace]] = GeocorePlace

    target: ObjectTarget = field(default_factory=lambda: ObjectTarget("/places"))
    geo: GeoFilter = field(default_factory=GeoFilter)
    checkinable: bool = False
    valid_items: bool = False
    event_details: bool = False

    def only_checkinable(self) -> Self:
        return replace(self, checkinable=True)

    def only_valid_items(self) -> Self:
        return replace(self, valid_items=True)

    def with_event_details(self) -> Self:
        return replace(self, event_details=True)

    def query_params(self) -> dict[str, Any]:
        params = super().query_params()
        if self.event_details:
            params["event_detail"] = "true"
        if self.checkinable:
            params["checkinable"] = "true"
        return params

    async def _search(self, path: str, geo_params: dict[str, Any]) -> list[GeocorePlace]:
        return await self.transport.fetch_many(
            path, GeocorePlace.from_json, params={**self.query_params(), **geo_params}
        )

    @as_result
    async def nearest(self) -> list[GeocorePlace]:
        return await self._search("/places/search/nearest", self.geo.center_params())

    @as_result
    async def smallest_bounds(self) -> GeocorePlacesSmallestBound:
        return await self.transport.fetch_one(
            "/places/search/smallestbounds",
            GeocorePlacesSmallestBound.from_json,
            params={**self.query_params(), **self.geo.center_params()},
        )

    @as_result
    async def within_circle(self) -> list[GeocorePlace]:
        return await self._search("/places/search/within/circle", self.geo.circle_params())

    @as_result
    async def intersects_circle(self) -> list[GeocorePlace]:
        return await self._search("/places/search/intersects/circle", self.geo.circle_params())

    @as_result
    async def within_rectangle(self) -> list[GeocorePlace]:
        return await self._search("/places/search/within/rect", self.geo.rectangle_params())

    @as_result
    async def intersects_rectangle(self) -> list[GeocorePlace]:
        return await self._search("/places/search/intersects/rect", self.geo.rectangle_params())

    @as_result
    async def events(self) -> list[GeocoreEvent]:
        return await self.transport.fetch_many(self.target.sub_path("/events"), GeocoreEvent.from_json)

    @as_result
    async def event_relationships(self) -> list[GeocorePlaceEvent]:
        return await self.transport.fetch_many(
            self.target.sub_path("/events/relationships"), GeocorePlaceEvent.from_json
        )

    @as_result
    async def items(self) -> list[GeocoreItem]:
        path = self.target.sub_path("/items")
        params = self.query_params()
        if self.valid_items:
            params["valid_only"] = "true"
        return await self.transport.fetch_many(path, GeocoreItem.from_json, params=params or None)
