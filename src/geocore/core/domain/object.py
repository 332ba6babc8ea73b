"""Base Geocore entity and relationship record.

Network helpers on entities take the `Geocore` façade explicitly; nothing is
read from global state. Every read goes to the network (no client cache).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Self

from pydantic import Field

from geocore.core.domain.base import (
    CustomData,
    GeocoreBinaryDataInfo,
    GeocoreDate,
    GeocoreModel,
    JsonData,
    OptInt,
    OptStr,
    register_entity,
)
from geocore.core.errors import InvalidParameter
from geocore.core.result import Failure, GeocoreResult

if TYPE_CHECKING:
    from geocore.core.query.object import ObjectQuery
    from geocore.core.services.geocore import Geocore


@register_entity("object")
class GeocoreObject(GeocoreModel):
    """Base of all objects managed by Geocore."""

    SERVICE: ClassVar[str] = "/objs"

    sid: OptInt = None
    id: OptStr = None
    name: OptStr = None
    description: OptStr = None
    create_time: GeocoreDate = Field(default=None, alias="createTime")
    update_time: GeocoreDate = Field(default=None, alias="updateTime")
    upvotes: OptInt = None
    downvotes: OptInt = None
    custom_data: CustomData = Field(default=None, alias="customData")
    json_data: JsonData = Field(default=None, alias="jsonData")

    # custom data

    def add_custom_data(self, key: str, value: str) -> Self:
        if self.custom_data is None:
            self.custom_data = {}
        self.custom_data[key] = value
        return self

    def get_custom_data(self, key: str) -> str | None:
        if self.custom_data is None:
            return None
        return self.custom_data.get(key)

    def update_custom_data(self, key: str, value: str | None) -> bool:
        """Set `key` to `value`; returns whether anything changed.

        A None value never removes an existing entry.
        """

        if value is None:
            return False
        if self.custom_data is None:
            self.custom_data = {}
        if self.custom_data.get(key) == value:
            return False
        self.custom_data[key] = value
        return True

    # queries and operations

    @classmethod
    def new_query(cls, geocore: Geocore) -> ObjectQuery:
        return geocore.objects()

    def query(self, geocore: Geocore) -> ObjectQuery:
        query = self.new_query(geocore)
        if self.id is not None:
            query = query.with_id(self.id)
        return query

    @classmethod
    async def get(cls, geocore: Geocore, id: str) -> GeocoreResult[Self]:
        return await cls.new_query(geocore).with_id(id).get()

    async def save(self, geocore: Geocore) -> GeocoreResult[Self]:
        return await geocore.object_operation(self.SERVICE).save(self, type(self).from_json)

    async def delete(self, geocore: Geocore) -> GeocoreResult[Self]:
        return await geocore.object_operation(self.SERVICE).delete(self, type(self).from_json)

    async def delete_custom_data(self, geocore: Geocore, key: str) -> GeocoreResult[GeocoreObject]:
        if self.id is None:
            return Failure(InvalidParameter("Expecting id, custom data key"))
        return await geocore.object_operation().with_id(self.id).with_custom_data_key(key).delete_custom_data()

    # binaries

    async def upload(
        self,
        geocore: Geocore,
        key: str,
        data: bytes,
        mime_type: str = "application/octet-stream",
    ) -> GeocoreResult[GeocoreBinaryDataInfo]:
        if self.id is None:
            return Failure(InvalidParameter("Unsaved object cannot upload binaries"))
        return await (
            geocore.binaries().with_id(self.id).with_key(key).with_mime_type(mime_type).with_data(data).upload()
        )

    async def binaries(self, geocore: Geocore) -> GeocoreResult[list[str]]:
        if self.id is None:
            return Failure(InvalidParameter("Unsaved object doesn't have binaries"))
        return await geocore.binaries().with_id(self.id).binaries()

    async def binary(self, geocore: Geocore, key: str) -> GeocoreResult[GeocoreBinaryDataInfo]:
        if self.id is None:
            return Failure(InvalidParameter("Unsaved object doesn't have binaries"))
        return await geocore.binaries().with_id(self.id).with_key(key).binary()

    async def url(self, geocore: Geocore, key: str) -> GeocoreResult[str]:
        if self.id is None:
            return Failure(InvalidParameter("Unsaved object doesn't have binaries"))
        return await geocore.binaries().with_id(self.id).with_key(key).url()

    async def image(self, geocore: Geocore, key: str) -> GeocoreResult[bytes]:
        if self.id is None:
            return Failure(InvalidParameter("Unsaved object doesn't have binaries"))
        return await geocore.binaries().with_id(self.id).with_key(key).image()


class GeocoreRelationship(GeocoreModel):
    """Association between two entities, carrying its own custom data."""

    update_time: GeocoreDate = Field(default=None, alias="updateTime")
    custom_data: CustomData = Field(default=None, alias="customData")

    def to_dict(self) -> dict[str, Any]:
        dumped = super().to_dict()
        if dumped.get("pk") == {}:
            del dumped["pk"]
        return dumped
