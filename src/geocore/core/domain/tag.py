"""Tags and taggable entities."""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from pydantic import Field

from geocore.core.domain.base import Lenient, register_entity
from geocore.core.domain.object import GeocoreObject


class TagType(str, Enum):
    SYSTEM = "SYSTEM_TAG"
    USER = "USER_TAG"
    UNKNOWN = ""


@register_entity("tag")
class GeocoreTag(GeocoreObject):
    type: Annotated[TagType | None, Lenient] = None


class GeocoreTaggable(GeocoreObject):
    """Entity that can carry tags.

    `tags` is only populated when the server includes tag details
    (see `TaggableQuery.with_tag_details`).
    """

    tags: Annotated[list[GeocoreTag] | None, Lenient] = Field(default=None, exclude=True)
