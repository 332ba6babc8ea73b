"""Users and user relationships (events, places, items)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Annotated, ClassVar

from pydantic import Field

from geocore.core.domain.base import (
    GeocoreDate,
    GeocorePoint,
    GeocoreModel,
    Lenient,
    OptInt,
    OptStr,
    register_entity,
)
from geocore.core.domain.event import GeocoreEvent
from geocore.core.domain.item import GeocoreItem
from geocore.core.domain.object import GeocoreRelationship
from geocore.core.domain.place import GeocorePlace
from geocore.core.domain.tag import GeocoreTaggable
from geocore.core.errors import InvalidParameter
from geocore.core.result import GeocoreResult, Success

if TYPE_CHECKING:
    from geocore.core.query.user import UserQuery, UserTagOperation
    from geocore.core.services.geocore import Geocore

DEFAULT_USER_NAME = "DEFAULT"


class UserEventRelationshipType(str, Enum):
    ORGANIZER = "ORGANIZER"
    PERFORMER = "PERFORMER"
    PARTICIPANT = "PARTICIPANT"
    ATTENDANT = "ATTENDANT"
    CUSTOM01 = "CUSTOM01"
    CUSTOM02 = "CUSTOM02"
    CUSTOM03 = "CUSTOM03"
    CUSTOM04 = "CUSTOM04"
    CUSTOM05 = "CUSTOM05"
    CUSTOM06 = "CUSTOM06"
    CUSTOM07 = "CUSTOM07"
    CUSTOM08 = "CUSTOM08"
    CUSTOM09 = "CUSTOM09"
    CUSTOM10 = "CUSTOM10"


class UserPlaceRelationshipType(str, Enum):
    CREATOR = "CREATOR"
    OWNER = "OWNER"
    MANAGER = "MANAGER"
    ORGANIZER = "ORGANIZER"
    STAFF = "STAFF"
    SELLER = "SELLER"
    AGENT = "AGENT"
    REALTOR = "REALTOR"
    FOLLOWER = "FOLLOWER"
    SUPPORTER = "SUPPORTER"
    VISITOR = "VISITOR"
    CUSTOMER = "CUSTOMER"
    PLAYER = "PLAYER"
    MEMBER = "MEMBER"
    BUYER = "BUYER"
    CUSTOM01 = "CUSTOM01"
    CUSTOM02 = "CUSTOM02"
    CUSTOM03 = "CUSTOM03"
    CUSTOM04 = "CUSTOM04"
    CUSTOM05 = "CUSTOM05"
    CUSTOM06 = "CUSTOM06"
    CUSTOM07 = "CUSTOM07"
    CUSTOM08 = "CUSTOM08"
    CUSTOM09 = "CUSTOM09"
    CUSTOM10 = "CUSTOM10"


@register_entity("user")
class GeocoreUser(GeocoreTaggable):
    """A Geocore user.

    `password` is write-only: the service never returns it. The SNS and push
    helpers store their values in custom data under the `CUSTOM_DATA_*` keys.
    """

    SERVICE: ClassVar[str] = "/users"

    CUSTOM_DATA_FACEBOOK_ID: ClassVar[str] = "sns.fb.id"
    CUSTOM_DATA_FACEBOOK_NAME: ClassVar[str] = "sns.fb.name"
    CUSTOM_DATA_FACEBOOK_EMAIL: ClassVar[str] = "sns.fb.email"
    CUSTOM_DATA_TWITTER_ID: ClassVar[str] = "sns.tw.id"
    CUSTOM_DATA_TWITTER_NAME: ClassVar[str] = "sns.tw.name"
    CUSTOM_DATA_GOOGLE_PLUS_ID: ClassVar[str] = "sns.gp.id"
    CUSTOM_DATA_GOOGLE_PLUS_NAME: ClassVar[str] = "sns.gp.name"
    CUSTOM_DATA_IOS_PUSH_TOKEN: ClassVar[str] = "push.ios.token"
    CUSTOM_DATA_IOS_PUSH_LANGUAGE: ClassVar[str] = "push.ios.lang"
    CUSTOM_DATA_PUSH_ENABLED: ClassVar[str] = "push.enabled"

    email: OptStr = None
    password: OptStr = None
    alternate_id1: OptStr = Field(default=None, alias="alternateId1")
    alternate_id2: OptStr = Field(default=None, alias="alternateId2")
    alternate_id3: OptStr = Field(default=None, alias="alternateId3")
    alternate_id4: OptStr = Field(default=None, alias="alternateId4")
    alternate_id5: OptStr = Field(default=None, alias="alternateId5")
    last_location: Annotated[GeocorePoint | None, Lenient] = Field(default=None, alias="lastLocation")
    last_location_time: GeocoreDate = Field(default=None, alias="lastLocationTime")

    # default identity

    @staticmethod
    def user_id_with_suffix(suffix: str, project_id: str | None) -> str:
        """`USE<project suffix>-<suffix>` for `PRO...` projects, else `suffix`."""

        if project_id and project_id.startswith("PRO"):
            return f"USE{project_id[3:]}-{suffix}"
        return suffix

    @classmethod
    def default_id(cls, project_id: str | None, name: str = DEFAULT_USER_NAME) -> str:
        return cls.user_id_with_suffix(name, project_id)

    @staticmethod
    def default_email(name: str = DEFAULT_USER_NAME) -> str:
        return f"{name}@geocore.jp"

    @classmethod
    def default_password(cls, project_id: str | None, name: str = DEFAULT_USER_NAME) -> str:
        return cls.default_id(project_id, name)[::-1]

    @classmethod
    def default_user(cls, project_id: str | None, name: str = DEFAULT_USER_NAME) -> GeocoreUser:
        return cls(
            id=cls.default_id(project_id, name),
            name=name,
            email=cls.default_email(name),
            password=cls.default_password(project_id, name),
        )

    # SNS

    def set_facebook_user(self, id: str, name: str) -> None:
        self.add_custom_data(self.CUSTOM_DATA_FACEBOOK_ID, id).add_custom_data(self.CUSTOM_DATA_FACEBOOK_NAME, name)

    def is_facebook_user(self) -> bool:
        return self.get_custom_data(self.CUSTOM_DATA_FACEBOOK_ID) is not None

    def facebook_id(self) -> str | None:
        return self.get_custom_data(self.CUSTOM_DATA_FACEBOOK_ID)

    def facebook_name(self) -> str | None:
        return self.get_custom_data(self.CUSTOM_DATA_FACEBOOK_NAME)

    def set_twitter_user(self, id: str, name: str) -> None:
        self.add_custom_data(self.CUSTOM_DATA_TWITTER_ID, id).add_custom_data(self.CUSTOM_DATA_TWITTER_NAME, name)

    def is_twitter_user(self) -> bool:
        return self.get_custom_data(self.CUSTOM_DATA_TWITTER_ID) is not None

    def twitter_id(self) -> str | None:
        return self.get_custom_data(self.CUSTOM_DATA_TWITTER_ID)

    def twitter_name(self) -> str | None:
        return self.get_custom_data(self.CUSTOM_DATA_TWITTER_NAME)

    def set_google_plus_user(self, id: str, name: str) -> None:
        self.add_custom_data(self.CUSTOM_DATA_GOOGLE_PLUS_ID, id).add_custom_data(
            self.CUSTOM_DATA_GOOGLE_PLUS_NAME, name
        )

    def is_google_plus_user(self) -> bool:
        return self.get_custom_data(self.CUSTOM_DATA_GOOGLE_PLUS_ID) is not None

    def google_plus_id(self) -> str | None:
        return self.get_custom_data(self.CUSTOM_DATA_GOOGLE_PLUS_ID)

    def google_plus_name(self) -> str | None:
        return self.get_custom_data(self.CUSTOM_DATA_GOOGLE_PLUS_NAME)

    async def register_for_push_notifications(
        self,
        geocore: Geocore,
        token: bytes | str,
        preferred_language: str | None = None,
        enabled: bool = True,
    ) -> GeocoreResult[GeocoreUser]:
        """Store the device push token; saves only when something changed."""

        token_value = token.hex() if isinstance(token, bytes) else token
        # evaluate all three, no short-circuit
        changed = [
            self.update_custom_data(self.CUSTOM_DATA_IOS_PUSH_TOKEN, token_value),
            self.update_custom_data(self.CUSTOM_DATA_IOS_PUSH_LANGUAGE, preferred_language),
            self.update_custom_data(self.CUSTOM_DATA_PUSH_ENABLED, "true" if enabled else "false"),
        ]
        if any(changed):
            return await self.save(geocore)
        return Success(self)

    # network

    @classmethod
    def new_query(cls, geocore: Geocore) -> UserQuery:
        return geocore.users()

    def query(self, geocore: Geocore) -> UserQuery:
        return super().query(geocore)  # type: ignore[return-value]

    async def register(self, geocore: Geocore, group_ids: list[str] | None = None) -> GeocoreResult[GeocoreUser]:
        operation = geocore.user_operation()
        if group_ids:
            operation = operation.add_to_groups(group_ids)
        return await operation.register(self)

    async def event_relationships(
        self, geocore: Geocore, event: GeocoreEvent | None = None
    ) -> GeocoreResult[list[GeocoreUserEvent]]:
        return await self.query(geocore).event_relationships(event)

    async def place_relationships(
        self, geocore: Geocore, place: GeocorePlace | None = None
    ) -> GeocoreResult[list[GeocoreUserPlace]]:
        return await self.query(geocore).place_relationships(place)

    async def item_relationships(self, geocore: Geocore) -> GeocoreResult[list[GeocoreUserItem]]:
        return await self.query(geocore).item_relationships()

    def tag_operation(self, geocore: Geocore) -> UserTagOperation:
        if self.id is None:
            raise InvalidParameter("Expecting id")
        return geocore.user_tag_operation().with_id(self.id)


class UserEventKey(GeocoreModel):
    user: Annotated[GeocoreUser | None, Lenient] = None
    event: Annotated[GeocoreEvent | None, Lenient] = None
    relationship: Annotated[UserEventRelationshipType | None, Lenient] = None


@register_entity("user_event")
class GeocoreUserEvent(GeocoreRelationship):
    pk: Annotated[UserEventKey | None, Lenient] = None

    @property
    def user(self) -> GeocoreUser | None:
        return self.pk.user if self.pk else None

    @property
    def event(self) -> GeocoreEvent | None:
        return self.pk.event if self.pk else None

    @property
    def relationship_type(self) -> UserEventRelationshipType | None:
        return self.pk.relationship if self.pk else None


class UserPlaceKey(GeocoreModel):
    user: Annotated[GeocoreUser | None, Lenient] = None
    place: Annotated[GeocorePlace | None, Lenient] = None
    relationship: Annotated[UserPlaceRelationshipType | None, Lenient] = None


@register_entity("user_place")
class GeocoreUserPlace(GeocoreRelationship):
    pk: Annotated[UserPlaceKey | None, Lenient] = None

    @property
    def user(self) -> GeocoreUser | None:
        return self.pk.user if self.pk else None

    @property
    def place(self) -> GeocorePlace | None:
        return self.pk.place if self.pk else None

    @property
    def relationship_type(self) -> UserPlaceRelationshipType | None:
        return self.pk.relationship if self.pk else None


class UserItemKey(GeocoreModel):
    user: Annotated[GeocoreUser | None, Lenient] = None
    item: Annotated[GeocoreItem | None, Lenient] = None
    create_time: GeocoreDate = Field(default=None, alias="createTime")


@register_entity("user_item")
class GeocoreUserItem(GeocoreRelationship):
    """Items owned by a user; `amount` counts consumables."""

    pk: Annotated[UserItemKey | None, Lenient] = None
    amount: OptInt = None
    order_number: OptInt = Field(default=None, alias="orderNumber")

    @property
    def user(self) -> GeocoreUser | None:
        return self.pk.user if self.pk else None

    @property
    def item(self) -> GeocoreItem | None:
        return self.pk.item if self.pk else None

    @property
    def create_time(self) -> datetime | None:
        return self.pk.create_time if self.pk else None
