"""Geocore session façade.

`Geocore` is the explicitly constructed handle every operation receives: it
owns the `Session` (base URL, project, current user and token), the request
engine, and hands out builders bound to that engine.

Login state machine:
- LoggedOut (`token is None`) -> LoggedIn via `login` / `login_with_default_user`.
- LoggedIn -> LoggedOut via `logout`, synchronously, without a network call.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from geocore.adapters.http_client import RequestEngine
from geocore.core.config import GeocoreSettings
from geocore.core.domain.base import GenericResult, decoder_for
from geocore.core.domain.object import GeocoreObject
from geocore.core.domain.user import GeocoreUser
from geocore.core.errors import InvalidParameter, InvalidState, ServerError
from geocore.core.query import (
    EventOperation,
    EventQuery,
    FeedOperation,
    FeedQuery,
    ItemOperation,
    ItemQuery,
    ObjectBinaryOperation,
    ObjectOperation,
    ObjectQuery,
    ObjectTarget,
    PlaceEventOperation,
    PlaceEventQuery,
    PlaceOperation,
    PlaceQuery,
    RelationshipBinaryOperation,
    UserEventOperation,
    UserEventQuery,
    UserItemOperation,
    UserItemQuery,
    UserOperation,
    UserPlaceOperation,
    UserPlaceQuery,
    UserQuery,
    UserTagOperation,
)
from geocore.core.result import GeocoreResult, as_result
from geocore.core.session import Session

logger = logging.getLogger(__name__)

# server error code for an unknown user id
UNREGISTERED_USER_CODE = "Auth.0001"

_SERVICE_BY_KIND = {
    "object": "/objs",
    "place": "/places",
    "event": "/events",
    "item": "/items",
    "user": "/users",
    "tag": "/objs",
}
FETCHABLE_KINDS = tuple(_SERVICE_BY_KIND)


class Geocore:
    def __init__(
        self,
        settings: GeocoreSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or GeocoreSettings()
        self.session = Session.from_settings(self.settings)
        self.engine = RequestEngine(self.session, client=client, settings=self.settings)

    async def aclose(self) -> None:
        await self.engine.aclose()

    async def __aenter__(self) -> "Geocore":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # session

    @property
    def user_id(self) -> str | None:
        return self.session.user_id

    @property
    def token(self) -> str | None:
        return self.session.token

    @as_result
    async def login(self, user_id: str, password: str, alternate_id_index: int = 0) -> str:
        """Authenticate and keep the returned token for later requests."""

        project_id = self.session.project_id
        if not project_id:
            raise InvalidState("Geocore project ID is not configured")
        params: dict[str, Any] = {"id": user_id, "password": password, "project_id": project_id}
        if alternate_id_index > 0:
            params["alt"] = str(alternate_id_index)

        # credentials go out without any previous token
        self.logout()
        generic = await self.engine.fetch_one("/auth", GenericResult.from_json, method="POST", params=params)
        token = generic.json.get("token") if isinstance(generic.json, dict) else None
        if not isinstance(token, str):
            raise InvalidState("Authentication response carries no token")
        self.session.authenticate(user_id, token)
        logger.info("Logged in as %s", user_id)
        return token

    def default_user(self) -> GeocoreUser:
        return GeocoreUser.default_user(self.session.project_id, self.settings.default_user_name)

    async def login_with_default_user(self) -> GeocoreResult[str]:
        """Log in as this device's default user, registering it on first use."""

        user = self.default_user()
        user_id = GeocoreUser.default_id(self.session.project_id, self.settings.default_user_name)
        password = GeocoreUser.default_password(self.session.project_id, self.settings.default_user_name)
        result = await self.login(user_id, password)
        error = result.error
        if not (isinstance(error, ServerError) and error.code == UNREGISTERED_USER_CODE):
            return result

        logger.info("Default user %s is not registered yet, registering", user_id)
        registered = await self.user_operation().register(user)
        return await registered.then(lambda _: self.login(user_id, password))

    def logout(self) -> None:
        self.session.clear()

    @as_result
    async def fetch(self, kind: str, id: str) -> Any:
        """Fetch one entity by id, decoded by the entity registered as `kind`."""

        service = _SERVICE_BY_KIND.get(kind)
        if service is None:
            raise InvalidParameter(f"Cannot fetch {kind} by id")
        decoder = decoder_for(kind)
        return await self.engine.fetch_one(f"{service}/{id}", decoder)

    # builders

    def objects(self) -> ObjectQuery:
        return ObjectQuery(self.engine)

    def object_operation(self, service: str = GeocoreObject.SERVICE) -> ObjectOperation:
        return ObjectOperation(self.engine, target=ObjectTarget(service))

    def binaries(self) -> ObjectBinaryOperation:
        return ObjectBinaryOperation(self.engine)

    def places(self) -> PlaceQuery:
        return PlaceQuery(self.engine)

    def place_operation(self) -> PlaceOperation:
        return PlaceOperation(self.engine)

    def events(self) -> EventQuery:
        return EventQuery(self.engine)

    def event_operation(self) -> EventOperation:
        return EventOperation(self.engine)

    def items(self) -> ItemQuery:
        return ItemQuery(self.engine)

    def item_operation(self) -> ItemOperation:
        return ItemOperation(self.engine)

    def users(self) -> UserQuery:
        return UserQuery(self.engine)

    def user_operation(self) -> UserOperation:
        return UserOperation(self.engine)

    def user_tag_operation(self) -> UserTagOperation:
        return UserTagOperation(self.engine)

    def user_events(self) -> UserEventQuery:
        return UserEventQuery(self.engine)

    def user_event_operation(self) -> UserEventOperation:
        return UserEventOperation(self.engine)

    def user_places(self) -> UserPlaceQuery:
        return UserPlaceQuery(self.engine)

    def user_place_operation(self) -> UserPlaceOperation:
        return UserPlaceOperation(self.engine)

    def user_items(self) -> UserItemQuery:
        return UserItemQuery(self.engine)

    def user_item_operation(self) -> UserItemOperation:
        return UserItemOperation(self.engine)

    def place_events(self) -> PlaceEventQuery:
        return PlaceEventQuery(self.engine)

    def place_event_operation(self) -> PlaceEventOperation:
        return PlaceEventOperation(self.engine)

    def relationship_binaries(self) -> RelationshipBinaryOperation:
        return RelationshipBinaryOperation(self.engine)

    def feed(self) -> FeedQuery:
        return FeedQuery(self.engine)

    def feed_operation(self) -> FeedOperation:
        return FeedOperation(self.engine)
