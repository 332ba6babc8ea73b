from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Iterable, Self

from geocore.core.domain.event import GeocoreEvent
from geocore.core.domain.place import GeocorePlace
from geocore.core.domain.tag import GeocoreTag
from geocore.core.domain.user import GeocoreUser, GeocoreUserEvent, GeocoreUserItem, GeocoreUserPlace
from geocore.core.errors import InvalidParameter
from geocore.core.query.components import ObjectTarget
from geocore.core.query.relationship import UserEventQuery, UserItemQuery, UserPlaceQuery
from geocore.core.query.taggable import TaggableOperation, TaggableQuery
from geocore.core.result import Failure, GeocoreResult, as_result


@dataclass(frozen=True)
class UserOperation(TaggableOperation):
    """Registration of new users, optionally joining groups."""

    target: ObjectTarget = field(default_factory=lambda: ObjectTarget("/users"))
    group_ids: tuple[str, ...] = ()

    def add_to_groups(self, group_ids: Iterable[str]) -> Self:
        return replace(self, group_ids=tuple(group_ids))

    def query_params(self) -> dict[str, Any]:
        params = super().query_params()
        if self.group_ids:
            params["group_ids"] = ",".join(self.group_ids)
        params["project_id"] = self.transport.session.project_id
        return {key: value for key, value in params.items() if value is not None}

    @as_result
    async def register(self, user: GeocoreUser) -> GeocoreUser:
        return await self.transport.fetch_one(
            "/register",
            GeocoreUser.from_json,
            method="POST",
            params=self.query_params() or None,
            body=user.to_dict(),
        )


@dataclass(frozen=True)
class UserTagOperation(TaggableOperation):
    target: ObjectTarget = field(default_factory=lambda: ObjectTarget("/users"))

    @as_result
    async def update(self) -> list[GeocoreTag]:
        params = self.query_params()
        if not params:
            raise InvalidParameter("Expecting tag parameters")
        # an empty body keeps the parameters in the query string
        return await self.transport.fetch_many(
            self.target.sub_path("/tags"), GeocoreTag.from_json, method="POST", params=params, body={}
        )


@dataclass(frozen=True)
class UserQuery(TaggableQuery):
    ENTITY: ClassVar[type[GeocoreUser]] = GeocoreUser

    target: ObjectTarget = field(default_factory=lambda: ObjectTarget("/users"))
    alternate_id_index: int | None = None

    def for_alternate_id_index(self, index: int) -> Self:
        return replace(self, alternate_id_index=index)

    def query_params(self) -> dict[str, Any]:
        params = super().query_params()
        if self.alternate_id_index is not None:
            params["alt"] = self.alternate_id_index
        return params

    async def event_relationships(self, event: GeocoreEvent | None = None) -> GeocoreResult[list[GeocoreUserEvent]]:
        if self.target.id is None:
            return Failure(InvalidParameter("Expecting id"))
        query = UserEventQuery(self.transport).with_object1_id(self.target.id)
        if event is not None:
            query = query.with_event(event)
        return await query.all()

    async def place_relationships(self, place: GeocorePlace | None = None) -> GeocoreResult[list[GeocoreUserPlace]]:
        if self.target.id is None:
            return Failure(InvalidParameter("Expecting id"))
        query = UserPlaceQuery(self.transport).with_object1_id(self.target.id)
        if place is not None:
            query = query.with_place(place)
        return await query.all()

    async def item_relationships(self) -> GeocoreResult[list[GeocoreUserItem]]:
        if self.target.id is None:
            return Failure(InvalidParameter("Expecting id"))
        return await UserItemQuery(self.transport).with_object1_id(self.target.id).all()
