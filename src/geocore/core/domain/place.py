"""Places, check-ins and place-event relationships."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Annotated, Any, ClassVar

from pydantic import Field, PrivateAttr

from geocore.core.dates import from_epoch_millis, to_epoch_millis
from geocore.core.domain.base import (
    GeocoreModel,
    GeocorePoint,
    Lenient,
    OptFloat,
    OptInt,
    OptStr,
    register_entity,
)
from geocore.core.domain.event import GeocoreEvent
from geocore.core.domain.object import GeocoreRelationship
from geocore.core.domain.tag import GeocoreTaggable
from geocore.core.errors import InvalidParameter
from geocore.core.result import Failure, GeocoreResult, Success

if TYPE_CHECKING:
    from geocore.core.query.place import PlaceQuery
    from geocore.core.services.geocore import Geocore


class GeocorePlacesSmallestBound(GeocoreModel):
    """Smallest rectangle enclosing the places around a point."""

    min_latitude: OptFloat = Field(default=None, alias="min_lat")
    min_longitude: OptFloat = Field(default=None, alias="min_lon")
    max_latitude: OptFloat = Field(default=None, alias="max_lat")
    max_longitude: OptFloat = Field(default=None, alias="max_lon")

    def _complete(self) -> bool:
        return None not in (self.min_latitude, self.min_longitude, self.max_latitude, self.max_longitude)

    def center(self) -> tuple[float, float] | None:
        if not self._complete():
            return None
        return (
            (self.max_latitude + self.min_latitude) / 2,  # type: ignore[operator]
            (self.max_longitude + self.min_longitude) / 2,  # type: ignore[operator]
        )

    def span(self) -> tuple[float, float] | None:
        if not self._complete():
            return None
        return (
            abs(self.max_latitude - self.min_latitude),  # type: ignore[operator]
            abs(self.max_longitude - self.min_longitude),  # type: ignore[operator]
        )


@register_entity("place")
class GeocorePlace(GeocoreTaggable):
    SERVICE: ClassVar[str] = "/places"

    short_name: OptStr = Field(default=None, alias="shortName")
    short_description: OptStr = Field(default=None, alias="shortDescription")
    point: Annotated[GeocorePoint | None, Lenient] = None
    distance_limit: OptFloat = Field(default=None, alias="distanceLimit")
    prefetched_events: Annotated[list[GeocoreEvent] | None, Lenient] = Field(default=None, alias="events", exclude=True)

    _pending_tags: list[str] = PrivateAttr(default_factory=list)

    @classmethod
    def new_query(cls, geocore: Geocore) -> PlaceQuery:
        return geocore.places()

    def query(self, geocore: Geocore) -> PlaceQuery:
        return super().query(geocore)  # type: ignore[return-value]

    @classmethod
    async def all(cls, geocore: Geocore) -> GeocoreResult[list[GeocorePlace]]:
        return await geocore.places().all()

    def tag(self, tag_ids_or_names: list[str]) -> GeocorePlace:
        """Queue tags (ids prefixed `TAG-` or names) to attach on the next `save`."""

        self._pending_tags.extend(tag_ids_or_names)
        return self

    async def save(self, geocore: Geocore) -> GeocoreResult[GeocorePlace]:
        operation = geocore.place_operation()
        if self._pending_tags:
            operation = operation.tag(self._pending_tags)
        result = await operation.save(self, GeocorePlace.from_json)
        if not result.failed:
            self._pending_tags.clear()
        return result

    async def events(self, geocore: Geocore) -> GeocoreResult[list[GeocoreEvent]]:
        """Events at this place; served from the payload when it embedded them."""

        if self.prefetched_events is not None:
            return Success(self.prefetched_events)
        result = await self.query(geocore).events()
        if not result.failed:
            self.prefetched_events = result.value
        return result

    async def checkin(
        self,
        geocore: Geocore,
        latitude: float,
        longitude: float,
        unrestricted: bool = False,
    ) -> GeocoreResult[GeocorePlaceCheckin]:
        if self.id is None:
            return Failure(InvalidParameter("Expecting id"))
        checkin = GeocorePlaceCheckin(
            user_id=geocore.session.user_id,
            place_id=self.id,
            latitude=latitude,
            longitude=longitude,
            accuracy=0,
        )
        return await geocore.place_operation().with_id(self.id).checkin(checkin, unrestricted=unrestricted)


class GeocorePlaceCheckin(GeocoreModel):
    """A user's check-in at a place.

    On the wire every number is a decimal string; `timestamp` is epoch
    milliseconds.
    """

    user_id: OptStr = Field(default=None, alias="userId")
    place_id: OptStr = Field(default=None, alias="placeId")
    timestamp: OptInt = None
    latitude: OptFloat = None
    longitude: OptFloat = None
    accuracy: OptFloat = None

    @property
    def date(self) -> datetime | None:
        if self.timestamp is None:
            return None
        return from_epoch_millis(self.timestamp)

    def set_date(self, value: datetime) -> None:
        self.timestamp = to_epoch_millis(value)

    def to_dict(self) -> dict[str, Any]:
        dumped: dict[str, Any] = {}
        if self.user_id is not None:
            dumped["userId"] = self.user_id
        if self.place_id is not None:
            dumped["placeId"] = self.place_id
        if self.timestamp is not None:
            dumped["timestamp"] = str(self.timestamp)
        if self.latitude is not None and self.longitude is not None:
            dumped["latitude"] = str(self.latitude)
            dumped["longitude"] = str(self.longitude)
        if self.accuracy is not None:
            dumped["accuracy"] = str(self.accuracy)
        return dumped


class PlaceEventKey(GeocoreModel):
    place: Annotated[GeocorePlace | None, Lenient] = None
    event: Annotated[GeocoreEvent | None, Lenient] = None


@register_entity("place_event")
class GeocorePlaceEvent(GeocoreRelationship):
    pk: Annotated[PlaceEventKey | None, Lenient] = None

    @property
    def place(self) -> GeocorePlace | None:
        return self.pk.place if self.pk else None

    @property
    def event(self) -> GeocoreEvent | None:
        return self.pk.event if self.pk else None
