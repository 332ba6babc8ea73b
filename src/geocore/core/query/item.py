from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Self

from geocore.core.domain.event import GeocoreEvent
from geocore.core.domain.item import GeocoreItem
from geocore.core.query.components import ObjectTarget
from geocore.core.query.taggable import TaggableOperation, TaggableQuery
from geocore.core.result import as_result


@dataclass(frozen=True)
class ItemOperation(TaggableOperation):
    target: ObjectTarget = field(default_factory=lambda: ObjectTarget("/items"))


@dataclass(frozen=True)
class ItemQuery(TaggableQuery):
    ENTITY: ClassVar[type[GeocoreItem]] = GeocoreItem

    target: ObjectTarget = field(default_factory=lambda: ObjectTarget("/items"))
    valid_items: bool = False

    def only_valid_items(self) -> Self:
        return replace(self, valid_items=True)

    def query_params(self) -> dict[str, Any]:
        params = super().query_params()
        if self.valid_items:
            params["valid_only"] = "true"
        return params

    @as_result
    async def events(self) -> list[GeocoreEvent]:
        return await self.transport.fetch_many(self.target.sub_path("/events"), GeocoreEvent.from_json)
