from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import Field, field_validator

from geocore.core.dates import from_epoch_millis, to_epoch_millis
from geocore.core.domain.base import GeocoreModel, OptInt, OptStr, register_entity
from geocore.core.errors import InvalidParameter
from geocore.core.result import Failure, GeocoreResult

if TYPE_CHECKING:
    from geocore.core.services.geocore import Geocore

# Best-effort guess from the id prefix; ids minted under other schemes are left untyped.
_TYPE_BY_ID_PREFIX = (
    ("PRO", "jp.geocore.entity.Project"),
    ("USE", "jp.geocore.entity.User"),
    ("GRO", "jp.geocore.entity.Group"),
    ("PLA", "jp.geocore.entity.Place"),
    ("EVE", "jp.geocore.entity.Event"),
    ("ITE", "jp.geocore.entity.Item"),
    ("TAG", "jp.geocore.entity.Tag"),
)


@register_entity("feed")
class GeocoreFeed(GeocoreModel):
    """Activity feed entry attached to an object."""

    id: OptStr = None
    type: OptStr = None
    timestamp: OptInt = None
    content: dict[str, str] | None = Field(default=None, alias="objContent")

    @field_validator("content", mode="before")
    @classmethod
    def _stringify_content(cls, value: Any) -> dict[str, str] | None:
        if not isinstance(value, dict):
            return None
        return {str(k): (v if isinstance(v, str) else "") for k, v in value.items()}

    @property
    def date(self) -> datetime | None:
        if self.timestamp is None:
            return None
        return from_epoch_millis(self.timestamp)

    def set_date(self, value: datetime) -> None:
        self.timestamp = to_epoch_millis(value)

    def resolve_type(self) -> str | None:
        if self.type is not None:
            return self.type
        if self.id is None:
            return None
        for prefix, entity_type in _TYPE_BY_ID_PREFIX:
            if self.id.startswith(prefix):
                return entity_type
        return None

    async def post(self, geocore: Geocore) -> GeocoreResult[GeocoreFeed]:
        if self.id is None or self.content is None:
            return Failure(InvalidParameter("Expecting id, content"))
        operation = geocore.feed_operation().with_id(self.id).with_content(self.content)
        entity_type = self.resolve_type()
        if entity_type is not None:
            operation = operation.with_type(entity_type)
        return await operation.post()
