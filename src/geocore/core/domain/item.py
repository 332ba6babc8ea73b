from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Annotated, ClassVar

from pydantic import Field

from geocore.core.domain.base import GeocoreDate, Lenient, OptStr, register_entity
from geocore.core.domain.tag import GeocoreTaggable
from geocore.core.result import GeocoreResult

if TYPE_CHECKING:
    from geocore.core.domain.event import GeocoreEvent
    from geocore.core.query.item import ItemQuery
    from geocore.core.services.geocore import Geocore


class ItemType(str, Enum):
    NON_CONSUMABLE = "NON_CONSUMABLE"
    CONSUMABLE = "CONSUMABLE"
    UNKNOWN = ""


@register_entity("item")
class GeocoreItem(GeocoreTaggable):
    SERVICE: ClassVar[str] = "/items"

    short_name: OptStr = Field(default=None, alias="shortName")
    short_description: OptStr = Field(default=None, alias="shortDescription")
    type: Annotated[ItemType | None, Lenient] = None
    valid_time_start: GeocoreDate = Field(default=None, alias="validTimeStart")
    valid_time_end: GeocoreDate = Field(default=None, alias="validTimeEnd")

    @classmethod
    def new_query(cls, geocore: Geocore) -> ItemQuery:
        return geocore.items()

    def query(self, geocore: Geocore) -> ItemQuery:
        return super().query(geocore)  # type: ignore[return-value]

    @classmethod
    async def all(cls, geocore: Geocore) -> GeocoreResult[list[GeocoreItem]]:
        return await geocore.items().all()

    async def events(self, geocore: Geocore) -> GeocoreResult[list[GeocoreEvent]]:
        return await self.query(geocore).events()
