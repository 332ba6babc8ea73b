"""Geocore entities.

Importing this package registers every entity in the decoder table
(`decoder_for`).
"""

from geocore.core.domain.base import (
    CountResult,
    GenericResult,
    GeocoreBinaryDataInfo,
    GeocoreModel,
    GeocorePoint,
    decoder_for,
    register_entity,
    registered_entities,
)
from geocore.core.domain.event import GeocoreEvent
from geocore.core.domain.feed import GeocoreFeed
from geocore.core.domain.item import GeocoreItem, ItemType
from geocore.core.domain.object import GeocoreObject, GeocoreRelationship
from geocore.core.domain.place import (
    GeocorePlace,
    GeocorePlaceCheckin,
    GeocorePlaceEvent,
    GeocorePlacesSmallestBound,
)
from geocore.core.domain.tag import GeocoreTag, GeocoreTaggable, TagType
from geocore.core.domain.user import (
    GeocoreUser,
    GeocoreUserEvent,
    GeocoreUserItem,
    GeocoreUserPlace,
    UserEventRelationshipType,
    UserPlaceRelationshipType,
)

__all__ = [
    "CountResult",
    "GenericResult",
    "GeocoreBinaryDataInfo",
    "GeocoreEvent",
    "GeocoreFeed",
    "GeocoreItem",
    "GeocoreModel",
    "GeocoreObject",
    "GeocorePlace",
    "GeocorePlaceCheckin",
    "GeocorePlaceEvent",
    "GeocorePlacesSmallestBound",
    "GeocorePoint",
    "GeocoreRelationship",
    "GeocoreTag",
    "GeocoreTaggable",
    "GeocoreUser",
    "GeocoreUserEvent",
    "GeocoreUserItem",
    "GeocoreUserPlace",
    "ItemType",
    "TagType",
    "UserEventRelationshipType",
    "UserPlaceRelationshipType",
    "decoder_for",
    "register_entity",
    "registered_entities",
]
