from __future__ import annotations

from datetime import datetime, timezone

import pytest

from geocore.core.dates import format_geocore_date, parse_geocore_date, to_epoch_millis
from geocore.core.domain import (
    GeocoreBinaryDataInfo,
    GeocoreEvent,
    GeocoreFeed,
    GeocoreItem,
    GeocoreObject,
    GeocorePlace,
    GeocorePlaceCheckin,
    GeocoreUser,
    ItemType,
    decoder_for,
)
from geocore.core.domain.place import GeocorePlacesSmallestBound
from geocore.core.errors import InvalidParameter
from geocore.core.interfaces import FromJSON, ToMap

PLACE_FIXTURE = {
    "sid": 12,
    "id": "PLA-1",
    "name": "Cafe",
    "shortName": "cafe",
    "point": {"latitude": 35.5, "longitude": 139.7},
    "createTime": "2015/01/02 03:04:05",
    "customData": {"color": "red"},
}


def test_place_round_trip_keeps_only_present_fields():
    place = GeocorePlace.from_json(PLACE_FIXTURE)
    assert place.create_time == datetime(2015, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert place.to_dict() == PLACE_FIXTURE


def test_mismatched_json_types_become_absent():
    obj = GeocoreObject.from_json({"id": 5, "name": "x", "upvotes": "many", "createTime": "yesterday"})
    assert obj.id is None and obj.upvotes is None and obj.create_time is None
    assert obj.to_dict() == {"name": "x"}
    assert GeocoreObject.from_json(["not", "a", "map"]).to_dict() == {}


def test_custom_data_non_strings_are_dropped():
    obj = GeocoreObject.from_json({"customData": {"a": "1", "b": 2}})
    assert obj.get_custom_data("a") == "1"
    assert obj.get_custom_data("b") is None
    assert obj.to_dict() == {"customData": {"a": "1"}}
    assert obj.update_custom_data("a", "1") is False
    assert obj.update_custom_data("a", None) is False
    assert obj.update_custom_data("a", "2") is True


def test_geocore_dates():
    moment = datetime(2015, 6, 7, 8, 9, 10, tzinfo=timezone.utc)
    assert format_geocore_date(moment) == "2015/06/07 08:09:10"
    assert parse_geocore_date("2015/06/07 08:09:10") == moment
    assert parse_geocore_date("2015-06-07") is None
    assert parse_geocore_date(None) is None


def test_checkin_serializes_numbers_as_strings():
    checkin = GeocorePlaceCheckin(user_id="USE-1", place_id="PLA-1", latitude=35.5, longitude=139.25, accuracy=0)
    checkin.set_date(datetime(2015, 1, 1, tzinfo=timezone.utc))

    assert checkin.to_dict() == {
        "userId": "USE-1",
        "placeId": "PLA-1",
        "timestamp": "1420070400000",
        "latitude": "35.5",
        "longitude": "139.25",
        "accuracy": "0.0",
    }
    assert checkin.date == datetime(2015, 1, 1, tzinfo=timezone.utc)


def test_feed_type_inference():
    assert GeocoreFeed(id="PLA-1").resolve_type() == "jp.geocore.entity.Place"
    assert GeocoreFeed(id="USE-1").resolve_type() == "jp.geocore.entity.User"
    assert GeocoreFeed(id="PLA-1", type="custom").resolve_type() == "custom"
    assert GeocoreFeed(id="XYZ-1").resolve_type() is None

    feed = GeocoreFeed.from_json({"id": "EVE-1", "timestamp": 1420070400000, "objContent": {"msg": "hi", "n": 3}})
    assert feed.content == {"msg": "hi", "n": ""}
    assert to_epoch_millis(feed.date) == 1420070400000


def test_binary_info_shapes():
    assert GeocoreBinaryDataInfo.from_json("photo").key == "photo"

    info = GeocoreBinaryDataInfo.from_json(
        {"key": "photo", "url": "https://cdn/x.png", "metadata": {"contentLength": 10, "contentType": "image/png"}}
    )
    assert (info.content_length, info.content_type) == (10, "image/png")
    assert info.to_dict() == {
        "key": "photo",
        "url": "https://cdn/x.png",
        "metadata": {"contentLength": 10, "contentType": "image/png"},
    }


def test_smallest_bound_center_and_span():
    bound = GeocorePlacesSmallestBound.from_json({"min_lat": 35.0, "min_lon": 139.0, "max_lat": 36.0, "max_lon": 141.0})
    assert bound.center() == (35.5, 140.0)
    assert bound.span() == (1.0, 2.0)
    assert GeocorePlacesSmallestBound().center() is None


def test_decoder_registry():
    assert decoder_for("user")({"id": "USE-1"}) == GeocoreUser(id="USE-1")
    with pytest.raises(InvalidParameter):
        decoder_for("spaceship")


def test_event_currently_open():
    event = GeocoreEvent.from_json({"timeStart": "2015/01/01 00:00:00", "timeEnd": "2015/01/31 00:00:00"})
    assert event.currently_open(datetime(2015, 1, 15))
    assert not event.currently_open(datetime(2015, 2, 1, tzinfo=timezone.utc))
    assert not GeocoreEvent().currently_open()


def test_item_type_is_lenient():
    assert GeocoreItem.from_json({"type": "CONSUMABLE"}).type is ItemType.CONSUMABLE
    assert GeocoreItem.from_json({"type": "RENTAL"}).type is None


def test_entities_satisfy_serialization_contracts():
    for entity in (GeocorePlace, GeocoreUser, GeocoreFeed, GeocorePlaceCheckin, GeocoreBinaryDataInfo):
        assert isinstance(entity, FromJSON)
        assert isinstance(entity(), ToMap)


@pytest.mark.parametrize(
    "entity, fixture",
    [
        (
            GeocoreUser,
            {
                "id": "USE-1",
                "email": "a@geocore.test",
                "alternateId1": "device-1",
                "lastLocation": {"latitude": 35.5, "longitude": 139.7},
                "lastLocationTime": "2015/03/04 05:06:07",
                "customData": {"push.enabled": "true"},
            },
        ),
        (GeocoreEvent, {"id": "EVE-1", "timeStart": "2015/01/01 00:00:00", "timeEnd": "2015/01/31 23:59:59"}),
        (
            GeocoreItem,
            {
                "id": "ITE-1",
                "shortName": "coupon",
                "type": "CONSUMABLE",
                "validTimeStart": "2015/02/01 10:00:00",
                "validTimeEnd": "2015/02/28 10:00:00",
            },
        ),
    ],
)
def test_entity_round_trip_with_timestamps(entity, fixture):
    parsed = entity.from_json(fixture)
    assert parsed.to_dict() == fixture
    assert entity.from_json(parsed.to_dict()) == parsed


def test_round_trip_timestamps_are_utc():
    user = GeocoreUser.from_json({"lastLocationTime": "2015/03/04 05:06:07"})
    item = GeocoreItem.from_json({"validTimeEnd": "2015/02/28 10:00:00"})
    assert user.last_location_time == datetime(2015, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
    assert item.valid_time_end == datetime(2015, 2, 28, 10, 0, tzinfo=timezone.utc)


def test_json_data_is_sent_as_a_json_string():
    assert GeocoreObject(json_data={"a": 1}).to_dict() == {"jsonData": '{"a": 1}'}
    assert GeocoreObject(json_data={"名": "値"}).to_dict() == {"jsonData": '{"名": "値"}'}
    assert GeocoreObject.from_json({"jsonData": '{"a": 1}'}).to_dict() == {"jsonData": '{"a": 1}'}
