"""Relationship builders.

A relationship is addressed by an ordered pair of ids and, for typed
relationships, a kind:

    /users/USE-1/places/PLA-2/FOLLOWER   (typed)
    /users/USE-1/places/PLA-2            (pair, bulk listing)
    /users/USE-1/places                  (all of user USE-1)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar, Mapping, Self

from geocore.core.domain.base import GenericResult, GeocoreBinaryDataInfo
from geocore.core.domain.event import GeocoreEvent
from geocore.core.domain.item import GeocoreItem
from geocore.core.domain.object import GeocoreRelationship
from geocore.core.domain.place import GeocorePlace, GeocorePlaceEvent
from geocore.core.domain.user import (
    GeocoreUser,
    GeocoreUserEvent,
    GeocoreUserItem,
    GeocoreUserPlace,
    UserEventRelationshipType,
    UserPlaceRelationshipType,
)
from geocore.core.errors import InvalidParameter
from geocore.core.query.base import BinaryMixin, Builder
from geocore.core.query.components import BinarySpec, RelationshipTarget, TagFilter
from geocore.core.query.taggable import TagFilterMixin
from geocore.core.result import GeocoreResult, as_result

RELATIONSHIP_OUTPUT_FORMAT = {"output_format": "json.relationship"}


@dataclass(frozen=True)
class RelationshipOperation(Builder):
    target: RelationshipTarget = field(default_factory=lambda: RelationshipTarget("/objs"))

    def _target(self, **changes: Any) -> Self:
        return replace(self, target=replace(self.target, **changes))

    def with_object1_id(self, id: str | None) -> Self:
        return self._target(id1=id)

    def with_object2_id(self, id: str | None) -> Self:
        return self._target(id2=id)

    def with_custom_data(self, custom_data: Mapping[str, str | None]) -> Self:
        return self._target(custom_data=dict(custom_data))

    def path(self) -> str:
        return self.target.path()

    def query_params(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True)
class RelationshipQuery(RelationshipOperation, TagFilterMixin):
    ENTITY: ClassVar[type[GeocoreRelationship]] = GeocoreRelationship
    LISTING_PARAMS: ClassVar[Mapping[str, str]] = {}

    tags: TagFilter = field(default_factory=TagFilter)

    def query_params(self) -> dict[str, Any]:
        return self.tags.query_params()

    @as_result
    async def all(self) -> list[Any]:
        if self.target.id1 is None:
            raise InvalidParameter("Expecting id")
        params = {**self.query_params(), **self.LISTING_PARAMS}
        return await self.transport.fetch_many(self.target.pair_path(), self.ENTITY.from_json, params=params or None)


class RelationshipTypeMixin:
    target: RelationshipTarget

    def with_relationship_type(self, kind: Enum) -> Self:
        return replace(self, target=replace(self.target, kind=kind.value))  # type: ignore[type-var]


@dataclass(frozen=True)
class TypedRelationshipOperation(RelationshipOperation, RelationshipTypeMixin):
    ENTITY: ClassVar[type[GeocoreRelationship]] = GeocoreRelationship

    @as_result
    async def save(self) -> Any:
        self.target.require_typed()
        return await self.transport.fetch_one(
            self.path(), self.ENTITY.from_json, method="POST", body=self.target.body()
        )

    @as_result
    async def delete(self) -> Any:
        self.target.require_typed()
        return await self.transport.fetch_one(self.path(), self.ENTITY.from_json, method="DELETE")

    async def leave_as(self, kind: Enum) -> GeocoreResult[Any]:
        return await self.with_relationship_type(kind).delete()


@dataclass(frozen=True)
class TypedRelationshipQuery(RelationshipQuery, RelationshipTypeMixin):
    @as_result
    async def get(self) -> Any:
        self.target.require_typed()
        return await self.transport.fetch_one(self.path(), self.ENTITY.from_json)


# user <-> event


@dataclass(frozen=True)
class UserEventOperation(TypedRelationshipOperation):
    ENTITY: ClassVar[type[GeocoreRelationship]] = GeocoreUserEvent

    target: RelationshipTarget = field(default_factory=lambda: RelationshipTarget("/users", "/events"))

    def with_user(self, user: GeocoreUser) -> Self:
        return self.with_object1_id(user.id)

    def with_event(self, event: GeocoreEvent) -> Self:
        return self.with_object2_id(event.id)

    async def organize(self) -> GeocoreResult[GeocoreUserEvent]:
        return await self.with_relationship_type(UserEventRelationshipType.ORGANIZER).save()

    async def perform(self) -> GeocoreResult[GeocoreUserEvent]:
        return await self.with_relationship_type(UserEventRelationshipType.PERFORMER).save()

    async def participate(self) -> GeocoreResult[GeocoreUserEvent]:
        return await self.with_relationship_type(UserEventRelationshipType.PARTICIPANT).save()

    async def attend(self) -> GeocoreResult[GeocoreUserEvent]:
        return await self.with_relationship_type(UserEventRelationshipType.ATTENDANT).save()


@dataclass(frozen=True)
class UserEventQuery(TypedRelationshipQuery):
    ENTITY: ClassVar[type[GeocoreRelationship]] = GeocoreUserEvent

    target: RelationshipTarget = field(default_factory=lambda: RelationshipTarget("/users", "/events"))

    def with_user(self, user: GeocoreUser) -> Self:
        return self.with_object1_id(user.id)

    def with_event(self, event: GeocoreEvent) -> Self:
        return self.with_object2_id(event.id)

    async def organization(self) -> GeocoreResult[GeocoreUserEvent]:
        return await self.with_relationship_type(UserEventRelationshipType.ORGANIZER).get()

    async def performance(self) -> GeocoreResult[GeocoreUserEvent]:
        return await self.with_relationship_type(UserEventRelationshipType.PERFORMER).get()

    async def participation(self) -> GeocoreResult[GeocoreUserEvent]:
        return await self.with_relationship_type(UserEventRelationshipType.PARTICIPANT).get()

    async def attendance(self) -> GeocoreResult[GeocoreUserEvent]:
        return await self.with_relationship_type(UserEventRelationshipType.ATTENDANT).get()


# user <-> place


@dataclass(frozen=True)
class UserPlaceOperation(TypedRelationshipOperation):
    ENTITY: ClassVar[type[GeocoreRelationship]] = GeocoreUserPlace

    target: RelationshipTarget = field(default_factory=lambda: RelationshipTarget("/users", "/places"))

    def with_user(self, user: GeocoreUser) -> Self:
        return self.with_object1_id(user.id)

    def with_place(self, place: GeocorePlace) -> Self:
        return self.with_object2_id(place.id)

    async def follow(self) -> GeocoreResult[GeocoreUserPlace]:
        return await self.with_relationship_type(UserPlaceRelationshipType.FOLLOWER).save()

    async def unfollow(self) -> GeocoreResult[GeocoreUserPlace]:
        return await self.leave_as(UserPlaceRelationshipType.FOLLOWER)


@dataclass(frozen=True)
class UserPlaceQuery(TypedRelationshipQuery):
    ENTITY: ClassVar[type[GeocoreRelationship]] = GeocoreUserPlace
    LISTING_PARAMS: ClassVar[Mapping[str, str]] = RELATIONSHIP_OUTPUT_FORMAT

    target: RelationshipTarget = field(default_factory=lambda: RelationshipTarget("/users", "/places"))

    def with_user(self, user: GeocoreUser) -> Self:
        return self.with_object1_id(user.id)

    def with_place(self, place: GeocorePlace) -> Self:
        return self.with_object2_id(place.id)

    async def as_follower(self) -> GeocoreResult[GeocoreUserPlace]:
        return await self.with_relationship_type(UserPlaceRelationshipType.FOLLOWER).get()


# user <-> item


@dataclass(frozen=True)
class UserItemOperation(RelationshipOperation):
    target: RelationshipTarget = field(default_factory=lambda: RelationshipTarget("/users", "/items"))

    def with_user(self, user: GeocoreUser) -> Self:
        return self.with_object1_id(user.id)

    def with_item(self, item: GeocoreItem) -> Self:
        return self.with_object2_id(item.id)

    @as_result
    async def adjust_amount(self, amount: int) -> GeocoreUserItem:
        user_id, item_id = self.target.require_ids()
        sign = "+" if amount > 0 else "-"
        return await self.transport.fetch_one(
            f"/users/{user_id}/items/{item_id}/amount/{sign}{abs(amount)}",
            GeocoreUserItem.from_json,
            method="POST",
        )


@dataclass(frozen=True)
class UserItemQuery(RelationshipQuery):
    ENTITY: ClassVar[type[GeocoreRelationship]] = GeocoreUserItem
    LISTING_PARAMS: ClassVar[Mapping[str, str]] = RELATIONSHIP_OUTPUT_FORMAT

    target: RelationshipTarget = field(default_factory=lambda: RelationshipTarget("/users", "/items"))

    def with_user(self, user: GeocoreUser) -> Self:
        return self.with_object1_id(user.id)

    def with_item(self, item: GeocoreItem) -> Self:
        return self.with_object2_id(item.id)


# place <-> event


@dataclass(frozen=True)
class PlaceEventOperation(RelationshipOperation):
    target: RelationshipTarget = field(default_factory=lambda: RelationshipTarget("/places", "/events"))

    def with_place(self, place: GeocorePlace) -> Self:
        return self.with_object1_id(place.id)

    def with_event(self, event: GeocoreEvent) -> Self:
        return self.with_object2_id(event.id)

    @as_result
    async def save(self) -> GeocorePlaceEvent:
        self.target.require_ids()
        return await self.transport.fetch_one(
            self.target.pair_path(), GeocorePlaceEvent.from_json, method="POST", body=self.target.body()
        )

    @as_result
    async def delete(self) -> GeocorePlaceEvent:
        self.target.require_ids()
        return await self.transport.fetch_one(self.target.pair_path(), GeocorePlaceEvent.from_json, method="DELETE")


@dataclass(frozen=True)
class PlaceEventQuery(RelationshipQuery):
    ENTITY: ClassVar[type[GeocoreRelationship]] = GeocorePlaceEvent

    target: RelationshipTarget = field(default_factory=lambda: RelationshipTarget("/places", "/events"))

    def with_place(self, place: GeocorePlace) -> Self:
        return self.with_object1_id(place.id)

    def with_event(self, event: GeocoreEvent) -> Self:
        return self.with_object2_id(event.id)

    @as_result
    async def get(self) -> GeocorePlaceEvent:
        self.target.require_ids()
        return await self.transport.fetch_one(self.target.pair_path(), GeocorePlaceEvent.from_json)

    @as_result
    async def all(self) -> list[GeocorePlaceEvent]:
        if self.target.id1 is None:
            raise InvalidParameter("Expecting id")
        return await self.transport.fetch_many(
            f"/places/{self.target.id1}/events/relationships",
            GeocorePlaceEvent.from_json,
            params=self.query_params() or None,
        )


# binaries


@dataclass(frozen=True)
class RelationshipBinaryOperation(RelationshipOperation, BinaryMixin):
    """Binary attachments of a relationship: `/objs/relationship/{id1}/{id2}/bins/{key}`."""

    payload: BinarySpec = field(default_factory=BinarySpec)

    def _bins_path(self) -> str:
        id1, id2 = self.target.require_ids()
        return f"/objs/relationship/{id1}/{id2}/bins"

    @as_result
    async def upload(self) -> GeocoreBinaryDataInfo:
        if self.payload.key is None or self.payload.data is None:
            raise InvalidParameter("Expecting ids, key and data")
        return await self.transport.upload_post(
            f"{self._bins_path()}/{self.payload.key}",
            GeocoreBinaryDataInfo.from_json,
            field_name="data",
            file_name="data",
            mime_type=self.payload.mime_type,
            contents=self.payload.data,
        )

    @as_result
    async def binaries(self) -> list[str]:
        keys = await self.transport.fetch_many(self._bins_path(), GenericResult.from_json)
        return [generic.json for generic in keys if isinstance(generic.json, str)]

    @as_result
    async def binary(self) -> GeocoreBinaryDataInfo:
        if self.payload.key is None:
            raise InvalidParameter("Expecting ids and key")
        return await self.transport.fetch_one(
            f"{self._bins_path()}/{self.payload.key}", GeocoreBinaryDataInfo.from_json
        )
