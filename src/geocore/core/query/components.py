"""Value objects composed by the builders.

Each component owns one slice of builder state and compiles it to a path or
to query parameters. Components are frozen; builders swap them with
`dataclasses.replace`, so compiling never mutates anything and compiling twice
yields the same output.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Iterable, Mapping

from geocore.core.dates import format_geocore_date
from geocore.core.errors import InvalidParameter

TAG_ID_PREFIX = "TAG-"


def partition_tags(tag_ids_or_names: Iterable[str]) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Split entries into (ids, names); ids start with `TAG-`. Order is kept."""

    ids: list[str] = []
    names: list[str] = []
    for entry in tag_ids_or_names:
        (ids if entry.startswith(TAG_ID_PREFIX) else names).append(entry)
    return tuple(ids), tuple(names)


def _joined(values: tuple[str, ...]) -> str | None:
    return ",".join(values) if values else None


def _compact(params: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


@dataclass(frozen=True)
class ObjectTarget:
    service: str
    id: str | None = None
    custom_data_key: str | None = None
    custom_data_value: str | None = None

    def path(self) -> str:
        if self.id is None:
            return self.service
        return f"{self.service}/{self.id}"

    def sub_path(self, sub: str) -> str:
        if self.id is None:
            raise InvalidParameter("Expecting id")
        return f"{self.service}/{self.id}{sub}"

    def require_id(self) -> str:
        if self.id is None:
            raise InvalidParameter("Expecting id")
        return self.id

    def query_params(self) -> dict[str, Any]:
        if self.custom_data_key is None or self.custom_data_value is None:
            return {}
        return {"custom_data_key": self.custom_data_key, "custom_data_value": self.custom_data_value}


@dataclass(frozen=True)
class ListingFilter:
    """Name, date, paging and ordering filters of collection reads."""

    name: str | None = None
    updated_after: datetime | None = None
    page: int | None = None
    per_page: int | None = None
    unlimited: bool = False
    recent_created: bool | None = None
    recent_updated: bool | None = None
    unending_event_at: datetime | None = None

    def query_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"name": self.name}
        if self.unlimited:
            params["num"] = 0
        else:
            params["page"] = self.page
            params["num"] = self.per_page
        if self.updated_after is not None:
            params["from_date"] = format_geocore_date(self.updated_after)
        params["recent_created"] = self.recent_created
        params["recent_updated"] = self.recent_updated
        if self.unending_event_at is not None:
            params["bf_ev_end"] = format_geocore_date(self.unending_event_at)
        return _compact(params)


@dataclass(frozen=True)
class TagFilter:
    tag_ids: tuple[str, ...] = ()
    tag_names: tuple[str, ...] = ()
    excluded_tag_ids: tuple[str, ...] = ()
    excluded_tag_names: tuple[str, ...] = ()
    details: bool = False

    def including(self, tag_ids_or_names: Iterable[str]) -> TagFilter:
        ids, names = partition_tags(tag_ids_or_names)
        return replace(self, tag_ids=self.tag_ids + ids, tag_names=self.tag_names + names)

    def excluding(self, tag_ids_or_names: Iterable[str]) -> TagFilter:
        ids, names = partition_tags(tag_ids_or_names)
        return replace(
            self,
            excluded_tag_ids=self.excluded_tag_ids + ids,
            excluded_tag_names=self.excluded_tag_names + names,
        )

    def query_params(self) -> dict[str, Any]:
        return _compact(
            {
                "tag_ids": _joined(self.tag_ids),
                "tag_names": _joined(self.tag_names),
                "excl_tag_ids": _joined(self.excluded_tag_ids),
                "excl_tag_names": _joined(self.excluded_tag_names),
                "tag_detail": "true" if self.details else None,
            }
        )


@dataclass(frozen=True)
class TagChanges:
    """Tags to attach to or detach from an entity being saved."""

    add_ids: tuple[str, ...] = ()
    add_names: tuple[str, ...] = ()
    remove_ids: tuple[str, ...] = ()
    remove_names: tuple[str, ...] = ()

    def tag(self, tag_ids_or_names: Iterable[str]) -> TagChanges:
        ids, names = partition_tags(tag_ids_or_names)
        return replace(self, add_ids=self.add_ids + ids, add_names=self.add_names + names)

    def untag(self, tag_ids_or_names: Iterable[str]) -> TagChanges:
        ids, names = partition_tags(tag_ids_or_names)
        return replace(self, remove_ids=self.remove_ids + ids, remove_names=self.remove_names + names)

    def query_params(self) -> dict[str, Any]:
        return _compact(
            {
                "tag_ids": _joined(self.add_ids),
                "tag_names": _joined(self.add_names),
                "del_tag_ids": _joined(self.remove_ids),
                "del_tag_names": _joined(self.remove_names),
            }
        )


@dataclass(frozen=True)
class GeoFilter:
    latitude: float | None = None
    longitude: float | None = None
    radius: float | None = None
    min_latitude: float | None = None
    min_longitude: float | None = None
    max_latitude: float | None = None
    max_longitude: float | None = None

    def center_params(self) -> dict[str, Any]:
        if self.latitude is None or self.longitude is None:
            raise InvalidParameter("Expecting center lat-lon")
        return {"lat": self.latitude, "lon": self.longitude}

    def circle_params(self) -> dict[str, Any]:
        if self.latitude is None or self.longitude is None or self.radius is None:
            raise InvalidParameter("Expecting center lat-lon, radius")
        return {"lat": self.latitude, "lon": self.longitude, "radius": self.radius}

    def rectangle_params(self) -> dict[str, Any]:
        bounds = {
            "min_lat": self.min_latitude,
            "max_lat": self.max_latitude,
            "min_lon": self.min_longitude,
            "max_lon": self.max_longitude,
        }
        if any(value is None for value in bounds.values()):
            raise InvalidParameter("Expecting min/max lat-lon")
        return bounds


@dataclass(frozen=True)
class BinarySpec:
    key: str | None = None
    mime_type: str = "application/octet-stream"
    data: bytes | None = None


@dataclass(frozen=True)
class RelationshipTarget:
    """Ordered pair of ids plus an optional relationship kind.

    Paths: `{service}/{id1}{sub_path}/{id2}/{kind}`, falling back to the pair
    form without the kind, then to `{service}/{id1}{sub_path}`, then to
    `{service}`.
    """

    service: str
    sub_path: str = ""
    id1: str | None = None
    id2: str | None = None
    kind: str | None = None
    custom_data: Mapping[str, str | None] | None = None

    def pair_path(self) -> str:
        if self.id1 is None:
            return self.service
        if self.id2 is None:
            return f"{self.service}/{self.id1}{self.sub_path}"
        return f"{self.service}/{self.id1}{self.sub_path}/{self.id2}"

    def path(self) -> str:
        if self.id1 is not None and self.id2 is not None and self.kind is not None:
            return f"{self.pair_path()}/{self.kind}"
        return self.pair_path()

    def require_ids(self, message: str = "Expecting ids") -> tuple[str, str]:
        if self.id1 is None or self.id2 is None:
            raise InvalidParameter(message)
        return self.id1, self.id2

    def require_typed(self) -> None:
        if self.id1 is None or self.id2 is None or self.kind is None:
            raise InvalidParameter("Expecting ids & relationship type")

    def body(self) -> dict[str, str]:
        if not self.custom_data:
            return {}
        return {key: value for key, value in self.custom_data.items() if value is not None}
