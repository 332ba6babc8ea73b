from __future__ import annotations

import asyncio
import json

import httpx

from geocore.core.domain.event import GeocoreEvent
from geocore.core.domain.feed import GeocoreFeed
from geocore.core.domain.place import GeocorePlace
from geocore.core.domain.user import GeocoreUser
from geocore.core.errors import InvalidParameter

from conftest import envelope


def _echo(request: httpx.Request) -> httpx.Response:
    return envelope(json.loads(request.content) if request.content else {})


def test_place_save_sends_queued_tags_once(make_geocore):
    geocore, handler = make_geocore(_echo)
    place = GeocorePlace(name="Cafe").tag(["TAG-1", "coffee"])

    async def scenario():
        await place.save(geocore)
        await place.save(geocore)

    asyncio.run(scenario())

    first, second = handler.requests
    assert (first.method, first.url.path) == ("POST", "/api/places")
    assert dict(first.url.params) == {"tag_ids": "TAG-1", "tag_names": "coffee"}
    assert json.loads(first.content) == {"name": "Cafe"}
    assert dict(second.url.params) == {}


def test_save_with_sid_updates_by_sid(make_geocore):
    geocore, handler = make_geocore(_echo)
    asyncio.run(GeocoreEvent(sid=42, id="EVE-1", name="Fair").save(geocore))
    assert handler.paths == ["/api/events/42"]


def test_delete_unsaved_object_is_rejected(make_geocore):
    geocore, handler = make_geocore(_echo)
    result = asyncio.run(GeocorePlace(name="Nowhere").delete(geocore))
    assert isinstance(result.error, InvalidParameter)
    assert handler.requests == []


def test_checkin_uses_logged_in_user(make_geocore):
    geocore, handler = make_geocore(_echo)
    geocore.session.authenticate("USE-1", "tok")

    result = asyncio.run(GeocorePlace(id="PLA-1").checkin(geocore, 35.5, 139.25, unrestricted=True))

    request = handler.requests[0]
    assert request.url.path == "/api/places/PLA-1/checkins"
    assert dict(request.url.params) == {"unrestricted": "true"}
    body = json.loads(request.content)
    assert body["userId"] == "USE-1" and body["latitude"] == "35.5"
    assert result.value.place_id == "PLA-1"


def test_place_events_are_cached(make_geocore):
    geocore, handler = make_geocore(lambda request: envelope([{"id": "EVE-1"}]))
    place = GeocorePlace(id="PLA-1")

    async def scenario():
        return await place.events(geocore), await place.events(geocore)

    first, second = asyncio.run(scenario())

    assert [e.id for e in first.value] == [e.id for e in second.value] == ["EVE-1"]
    assert handler.paths == ["/api/places/PLA-1/events"]


def test_push_registration_saves_only_on_change(make_geocore):
    geocore, handler = make_geocore(_echo)
    user = GeocoreUser(id="USE-1")

    async def scenario():
        await user.register_for_push_notifications(geocore, b"\x01\xab", preferred_language="ja")
        await user.register_for_push_notifications(geocore, b"\x01\xab", preferred_language="ja")

    asyncio.run(scenario())

    assert handler.paths == ["/api/users"]
    assert json.loads(handler.requests[0].content)["customData"] == {
        "push.ios.token": "01ab",
        "push.ios.lang": "ja",
        "push.enabled": "true",
    }


def test_user_relationships_need_id(make_geocore):
    geocore, handler = make_geocore(lambda request: envelope([]))

    missing = asyncio.run(GeocoreUser().place_relationships(geocore))
    listed = asyncio.run(GeocoreUser(id="USE-1").place_relationships(geocore, GeocorePlace(id="PLA-2")))

    assert isinstance(missing.error, InvalidParameter)
    assert listed.value == []
    assert handler.paths == ["/api/users/USE-1/places/PLA-2"]
    assert dict(handler.requests[0].url.params) == {"output_format": "json.relationship"}


def test_feed_post_infers_type(make_geocore):
    geocore, handler = make_geocore(lambda request: envelope({"id": "PLA-1", "objContent": {"msg": "hi"}}))

    result = asyncio.run(GeocoreFeed(id="PLA-1", content={"msg": "hi"}).post(geocore))

    request = handler.requests[0]
    assert request.url.path == "/api/objs/PLA-1/feed"
    assert dict(request.url.params) == {"type": "jp.geocore.entity.Place"}
    assert json.loads(request.content) == {"msg": "hi"}
    assert result.value.content == {"msg": "hi"}


def test_place_save_omits_cached_collections(make_geocore):
    geocore, handler = make_geocore(_echo)
    place = GeocorePlace.from_json(
        {"id": "PLA-1", "name": "Cafe", "events": [{"id": "EVE-1"}], "tags": [{"id": "TAG-1", "name": "coffee"}]}
    )
    assert [e.id for e in place.prefetched_events] == ["EVE-1"]

    asyncio.run(place.save(geocore))

    assert json.loads(handler.requests[0].content) == {"id": "PLA-1", "name": "Cafe"}
