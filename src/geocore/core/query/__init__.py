"""Immutable query/operation builders.

Builders accumulate intent through setters that return new builders, compile
it to a path and query parameters, and run it through the request engine.
Every terminal operation returns a `GeocoreResult`.
"""

from geocore.core.query.base import BinaryMixin, Builder, downgrade_url
from geocore.core.query.components import (
    TAG_ID_PREFIX,
    BinarySpec,
    GeoFilter,
    ListingFilter,
    ObjectTarget,
    RelationshipTarget,
    TagChanges,
    TagFilter,
    partition_tags,
)
from geocore.core.query.event import EventOperation, EventQuery
from geocore.core.query.feed import FeedOperation, FeedQuery
from geocore.core.query.item import ItemOperation, ItemQuery
from geocore.core.query.object import ObjectBinaryOperation, ObjectOperation, ObjectQuery
from geocore.core.query.place import PlaceOperation, PlaceQuery
from geocore.core.query.relationship import (
    PlaceEventOperation,
    PlaceEventQuery,
    RelationshipBinaryOperation,
    RelationshipOperation,
    RelationshipQuery,
    UserEventOperation,
    UserEventQuery,
    UserItemOperation,
    UserItemQuery,
    UserPlaceOperation,
    UserPlaceQuery,
)
from geocore.core.query.taggable import TaggableOperation, TaggableQuery
from geocore.core.query.user import UserOperation, UserQuery, UserTagOperation

__all__ = [
    "TAG_ID_PREFIX",
    "BinaryMixin",
    "BinarySpec",
    "Builder",
    "EventOperation",
    "EventQuery",
    "FeedOperation",
    "FeedQuery",
    "GeoFilter",
    "ItemOperation",
    "ItemQuery",
    "ListingFilter",
    "ObjectBinaryOperation",
    "ObjectOperation",
    "ObjectQuery",
    "ObjectTarget",
    "PlaceEventOperation",
    "PlaceEventQuery",
    "PlaceOperation",
    "PlaceQuery",
    "RelationshipBinaryOperation",
    "RelationshipOperation",
    "RelationshipQuery",
    "RelationshipTarget",
    "TagChanges",
    "TagFilter",
    "TaggableOperation",
    "TaggableQuery",
    "UserEventOperation",
    "UserEventQuery",
    "UserItemOperation",
    "UserItemQuery",
    "UserOperation",
    "UserPlaceOperation",
    "UserPlaceQuery",
    "UserQuery",
    "UserTagOperation",
    "downgrade_url",
    "partition_tags",
]
