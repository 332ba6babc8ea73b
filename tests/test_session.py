from __future__ import annotations

import asyncio
import json

import httpx

from geocore.adapters.http_client import ACCESS_TOKEN_HEADER
from geocore.core.domain.user import GeocoreUser
from geocore.core.errors import InvalidState, ServerError
from geocore.core.services.geocore import Geocore

from conftest import PROJECT_ID, envelope

DEFAULT_ID = "USE-TEST-1-DEFAULT"
DEFAULT_PASSWORD = DEFAULT_ID[::-1]


def test_default_user_identity():
    user = GeocoreUser.default_user(PROJECT_ID)
    assert user.id == DEFAULT_ID
    assert user.password == DEFAULT_PASSWORD
    assert user.email == "DEFAULT@geocore.jp"
    assert GeocoreUser.user_id_with_suffix("x", "OTHER") == "x"


def test_login_stores_token_and_sends_it(make_geocore):
    def respond(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/auth":
            return envelope({"token": "tok-1"})
        return envelope([])

    geocore, handler = make_geocore(respond)

    async def scenario():
        login = await geocore.login("USE-1", "secret", alternate_id_index=2)
        await geocore.places().all()
        return login

    assert asyncio.run(scenario()).value == "tok-1"
    assert (geocore.user_id, geocore.token) == ("USE-1", "tok-1")

    auth, listing = handler.requests
    assert auth.method == "POST"
    assert dict(auth.url.params) == {"id": "USE-1", "password": "secret", "project_id": PROJECT_ID, "alt": "2"}
    assert ACCESS_TOKEN_HEADER not in auth.headers
    assert listing.headers[ACCESS_TOKEN_HEADER] == "tok-1"

    geocore.logout()
    assert geocore.token is None and geocore.user_id is None


def test_login_without_project_is_invalid_state(settings):
    geocore = Geocore(settings.model_copy(update={"project_id": None}))
    result = asyncio.run(geocore.login("USE-1", "secret"))
    assert isinstance(result.error, InvalidState)


def test_login_without_token_in_response(make_geocore):
    geocore, _ = make_geocore(lambda request: envelope({}))
    result = asyncio.run(geocore.login("USE-1", "secret"))
    assert isinstance(result.error, InvalidState)
    assert geocore.token is None


def test_default_user_login_succeeds_first_time(make_geocore):
    geocore, handler = make_geocore(lambda request: envelope({"token": "tok"}))

    result = asyncio.run(geocore.login_with_default_user())

    assert result.value == "tok"
    assert handler.paths == ["/api/auth"]
    assert dict(handler.requests[0].url.params)["id"] == DEFAULT_ID


def test_default_user_registers_then_retries(make_geocore):
    auth_calls: list[int] = []

    def respond(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/auth":
            auth_calls.append(1)
            if len(auth_calls) == 1:
                return envelope(status="error", code="Auth.0001", message="Unregistered user")
            return envelope({"token": "tok-2"})
        if request.url.path == "/api/register":
            return envelope(json.loads(request.content))
        return httpx.Response(404)

    geocore, handler = make_geocore(respond)

    result = asyncio.run(geocore.login_with_default_user())

    assert result.value == "tok-2"
    assert geocore.user_id == DEFAULT_ID
    assert handler.paths == ["/api/auth", "/api/register", "/api/auth"]
    first, register, retry = handler.requests
    assert first.url.params == retry.url.params
    assert dict(register.url.params) == {"project_id": PROJECT_ID}
    assert json.loads(register.content) == GeocoreUser.default_user(PROJECT_ID).to_dict()


def test_default_user_registration_failure_wins(make_geocore):
    def respond(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/auth":
            return envelope(status="error", code="Auth.0001", message="Unregistered user")
        return envelope(status="error", code="Reg.0002", message="Duplicate")

    geocore, handler = make_geocore(respond)

    result = asyncio.run(geocore.login_with_default_user())

    assert result.error == ServerError("Reg.0002", "Duplicate")
    assert handler.paths == ["/api/auth", "/api/register"]


def test_default_user_other_login_errors_do_not_register(make_geocore):
    geocore, handler = make_geocore(lambda request: envelope(status="error", code="Auth.0002", message="Bad password"))

    result = asyncio.run(geocore.login_with_default_user())

    assert result.error == ServerError("Auth.0002", "Bad password")
    assert handler.paths == ["/api/auth"]


def test_fetch_decodes_by_kind(make_geocore):
    geocore, handler = make_geocore(lambda request: envelope({"id": "EVE-1", "name": "Fair"}))

    event = asyncio.run(geocore.fetch("event", "EVE-1"))
    relationship = asyncio.run(geocore.fetch("user_place", "X"))

    assert event.value.name == "Fair"
    assert type(event.value).__name__ == "GeocoreEvent"
    assert relationship.failed
    assert handler.paths == ["/api/events/EVE-1"]
