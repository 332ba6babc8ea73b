"""Object operations, queries and binary attachments."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, ClassVar, Self, TypeVar

from geocore.core.dates import parse_geocore_date, utcnow
from geocore.core.domain.base import GenericResult, GeocoreBinaryDataInfo
from geocore.core.domain.object import GeocoreObject
from geocore.core.errors import InvalidParameter, UnexpectedResponse
from geocore.core.query.base import BinaryMixin, Builder
from geocore.core.query.components import BinarySpec, ListingFilter, ObjectTarget
from geocore.core.result import as_result

T = TypeVar("T")


@dataclass(frozen=True)
class ObjectOperation(Builder):
    target: ObjectTarget = field(default_factory=lambda: ObjectTarget("/objs"))

    def with_id(self, id: str) -> Self:
        return replace(self, target=replace(self.target, id=id))

    def with_custom_data_key(self, key: str) -> Self:
        return replace(self, target=replace(self.target, custom_data_key=key))

    def having_custom_data(self, value: str, key: str) -> Self:
        return replace(self, target=replace(self.target, custom_data_key=key, custom_data_value=value))

    def path(self) -> str:
        return self.target.path()

    def query_params(self) -> dict[str, Any]:
        return {}

    @as_result
    async def save(self, obj: GeocoreObject, decoder: Callable[[Any], T]) -> T:
        """Create `obj`, or update it when it already carries a `sid`."""

        target = self.target
        if obj.sid is not None:
            target = replace(target, id=str(obj.sid))
        return await self.transport.fetch_one(
            target.path(),
            decoder,
            method="POST",
            params=self.query_params() or None,
            body=obj.to_dict(),
        )

    @as_result
    async def delete(self, obj: GeocoreObject, decoder: Callable[[Any], T]) -> T:
        if obj.id is None:
            raise InvalidParameter("Unsaved object cannot be deleted")
        return await self.transport.fetch_one(
            replace(self.target, id=obj.id).path(), decoder, method="DELETE"
        )

    @as_result
    async def delete_custom_data(self) -> GeocoreObject:
        if self.target.id is None or self.target.custom_data_key is None:
            raise InvalidParameter("Expecting id, custom data key")
        path = replace(self.target, service="/objs").sub_path(f"/customData/{self.target.custom_data_key}")
        return await self.transport.fetch_one(path, GeocoreObject.from_json, method="DELETE")


class ListingMixin:
    """Paging, ordering and date filters; hosts provide `listing: ListingFilter`."""

    listing: ListingFilter

    def _listing(self, **changes: Any) -> Self:
        return replace(self, listing=replace(self.listing, **changes))  # type: ignore[type-var]

    def with_name(self, name: str) -> Self:
        return self._listing(name=name)

    def updated_after(self, date: datetime) -> Self:
        return self._listing(updated_after=date)

    def page(self, page: int) -> Self:
        return self._listing(page=page)

    def per_page(self, per_page: int) -> Self:
        return self._listing(per_page=per_page)

    def unlimited(self) -> Self:
        return self._listing(unlimited=True)

    def order_by_recently_created(self) -> Self:
        return self._listing(recent_created=True)

    def order_by_recently_updated(self) -> Self:
        return self._listing(recent_updated=True)

    def only_associated_with_unending_event(self, now: datetime | None = None) -> Self:
        # reference time is fixed here so later compiles stay identical
        return self._listing(unending_event_at=now or utcnow())


@dataclass(frozen=True)
class ObjectQuery(ObjectOperation, ListingMixin):
    ENTITY: ClassVar[type[GeocoreObject]] = GeocoreObject

    listing: ListingFilter = field(default_factory=ListingFilter)

    def query_params(self) -> dict[str, Any]:
        return {**self.target.query_params(), **self.listing.query_params()}

    @as_result
    async def get(self) -> Any:
        self.target.require_id()
        return await self.transport.fetch_one(
            self.path(), self.ENTITY.from_json, params=self.query_params() or None
        )

    @as_result
    async def all(self) -> list[Any]:
        return await self.transport.fetch_many(
            self.path(), self.ENTITY.from_json, params=self.query_params() or None
        )

    @as_result
    async def last_update(self) -> datetime:
        generic = await self.transport.fetch_one(f"{self.target.service}/lastUpdate", GenericResult.from_json)
        raw = generic.json.get("lastUpdate") if isinstance(generic.json, dict) else None
        if not isinstance(raw, str):
            raise UnexpectedResponse("Unable to find lastUpdate in response")
        parsed = parse_geocore_date(raw)
        if parsed is None:
            raise UnexpectedResponse(f"Unable to convert lastUpdate to a date: {raw}")
        return parsed


@dataclass(frozen=True)
class ObjectBinaryOperation(ObjectOperation, BinaryMixin):
    """Binary attachments of an object: `/objs/{id}/bins/{key}`."""

    payload: BinarySpec = field(default_factory=BinarySpec)

    @as_result
    async def upload(self) -> GeocoreBinaryDataInfo:
        if self.target.id is None or self.payload.key is None or self.payload.data is None:
            raise InvalidParameter("Expecting both key and data")
        return await self.transport.upload_post(
            f"/objs/{self.target.id}/bins/{self.payload.key}",
            GeocoreBinaryDataInfo.from_json,
            field_name="data",
            file_name="data",
            mime_type=self.payload.mime_type,
            contents=self.payload.data,
        )

    @as_result
    async def binaries(self) -> list[str]:
        path = replace(self.target, service="/objs").sub_path("/bins")
        keys = await self.transport.fetch_many(path, GenericResult.from_json)
        return [generic.json for generic in keys if isinstance(generic.json, str)]

    @as_result
    async def binary(self) -> GeocoreBinaryDataInfo:
        if self.payload.key is None:
            raise InvalidParameter("Expecting key")
        path = replace(self.target, service="/objs").sub_path(f"/bins/{self.payload.key}/url")
        return await self.transport.fetch_one(path, GeocoreBinaryDataInfo.from_json)
