"""Async Python client for the Geocore geospatial backend.

    async with Geocore() as geocore:
        (await geocore.login_with_default_user()).unwrap()
        places = await geocore.places().with_center(35.68, 139.76).nearest()
"""

from geocore.core.config import GeocoreSettings
from geocore.core.domain import (
    GeocoreEvent,
    GeocoreFeed,
    GeocoreItem,
    GeocoreObject,
    GeocorePlace,
    GeocorePlaceCheckin,
    GeocorePlaceEvent,
    GeocorePoint,
    GeocoreTag,
    GeocoreUser,
    GeocoreUserEvent,
    GeocoreUserItem,
    GeocoreUserPlace,
    UserEventRelationshipType,
    UserPlaceRelationshipType,
)
from geocore.core.errors import (
    GeocoreError,
    InvalidParameter,
    InvalidServerResponse,
    InvalidState,
    NetworkError,
    OtherError,
    ServerError,
    TokenUndefined,
    UnauthorizedAccess,
    UnexpectedResponse,
)
from geocore.core.result import Failure, GeocoreResult, Success
from geocore.core.services.geocore import Geocore

__version__ = "0.1.0"

__all__ = [
    "Failure",
    "Geocore",
    "GeocoreError",
    "GeocoreEvent",
    "GeocoreFeed",
    "GeocoreItem",
    "GeocoreObject",
    "GeocorePlace",
    "GeocorePlaceCheckin",
    "GeocorePlaceEvent",
    "GeocorePoint",
    "GeocoreResult",
    "GeocoreSettings",
    "GeocoreTag",
    "GeocoreUser",
    "GeocoreUserEvent",
    "GeocoreUserItem",
    "GeocoreUserPlace",
    "InvalidParameter",
    "InvalidServerResponse",
    "InvalidState",
    "NetworkError",
    "OtherError",
    "ServerError",
    "Success",
    "TokenUndefined",
    "UnauthorizedAccess",
    "UnexpectedResponse",
    "UserEventRelationshipType",
    "UserPlaceRelationshipType",
]
