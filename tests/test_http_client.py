from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from geocore.adapters.http_client import (
    ACCESS_TOKEN_HEADER,
    encode_query,
    extract_upload,
    unwrap_envelope,
    upload_body,
)
from geocore.core.errors import (
    InvalidParameter,
    InvalidServerResponse,
    InvalidState,
    NetworkError,
    ServerError,
    ServerResponseCode,
    UnauthorizedAccess,
    UnexpectedResponse,
)
from geocore.core.interfaces import GeocoreTransport
from geocore.core.result import Failure
from geocore.core.services.geocore import Geocore

from conftest import envelope


@pytest.mark.parametrize(
    ("response", "expected"),
    [
        (httpx.Response(403), UnauthorizedAccess()),
        (httpx.Response(500), InvalidServerResponse(500)),
        (httpx.Response(404, json={"status": "success"}), InvalidServerResponse(404)),
        (httpx.Response(200, content=b""), InvalidServerResponse(ServerResponseCode.EMPTY_RESPONSE)),
        (
            httpx.Response(200, json={"status": "error", "code": "Auth.0001", "message": "no user"}),
            ServerError("Auth.0001", "no user"),
        ),
        (httpx.Response(200, json={"status": "error"}), ServerError("", "")),
    ],
)
def test_unwrap_envelope_classifies_failures(response, expected):
    with pytest.raises(type(expected)) as excinfo:
        unwrap_envelope(response)
    assert excinfo.value == expected


def test_unwrap_envelope_rejects_non_json_and_missing_status():
    with pytest.raises(UnexpectedResponse):
        unwrap_envelope(httpx.Response(200, content=b"<html>"))
    with pytest.raises(UnexpectedResponse):
        unwrap_envelope(httpx.Response(200, json={"result": 1}))


def test_unwrap_envelope_returns_result():
    assert unwrap_envelope(envelope({"id": "PLA-1"})) == {"id": "PLA-1"}
    assert unwrap_envelope(envelope(None)) is None


def test_encode_query_sorts_and_stringifies():
    pairs = encode_query({"num": 0, "lat": 35.5, "recent_created": True, "tag_ids": ["TAG-1", "TAG-2"], "x": None})
    assert pairs == [
        ("lat", "35.5"),
        ("num", "0"),
        ("recent_created", "true"),
        ("tag_ids", "TAG-1,TAG-2"),
    ]
    assert encode_query(None) == []


def test_extract_upload_requires_complete_descriptor():
    assert extract_upload({"name": "plain"}) is None
    with pytest.raises(InvalidParameter):
        extract_upload({"$fileContents": b"abc", "$fileName": "data"})

    upload = extract_upload(upload_body(contents=b"abc", file_name="a.png", field_name="data", mime_type="image/png"))
    assert upload is not None
    assert (upload.file_name, upload.field_name, upload.mime_type) == ("a.png", "data", "image/png")


def test_build_request_json_body_keeps_params_in_url(make_geocore):
    geocore, _ = make_geocore(lambda request: envelope())
    geocore.session.authenticate("USE-1", "tok-1")

    request = geocore.engine.build_request("/objs", method="POST", params={"b": "2", "a": "1"}, body={"name": "x"})

    assert request.url.path == "/api/objs"
    assert request.url.query == b"a=1&b=2"
    assert request.headers[ACCESS_TOKEN_HEADER] == "tok-1"
    assert request.headers["Content-Type"] == "application/json; charset=utf-8"
    assert json.loads(request.content) == {"name": "x"}


def test_build_request_multipart_upload(make_geocore):
    geocore, _ = make_geocore(lambda request: envelope())
    body = upload_body(contents=b"\x89PNG", file_name="data", field_name="data", mime_type="image/png")

    request = geocore.engine.build_request("/objs/OBJ-1/bins/photo", method="POST", params={"k": "v"}, body=body)
    request.read()

    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert request.url.query == b""
    assert b"\x89PNG" in request.content
    assert ACCESS_TOKEN_HEADER not in request.headers


def test_missing_base_url_is_invalid_state(settings):
    geocore = Geocore(settings.model_copy(update={"base_url": None}))
    result = asyncio.run(geocore.objects().all())
    assert isinstance(result.error, InvalidState)


def test_transport_failure_is_network_error(make_geocore):
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    geocore, handler = make_geocore(refuse)
    result = asyncio.run(geocore.objects().all())

    assert isinstance(result.error, NetworkError)
    assert len(handler.requests) == 1


def test_request_engine_is_a_transport(make_geocore):
    geocore, _ = make_geocore(lambda request: envelope())
    assert isinstance(geocore.engine, GeocoreTransport)


@pytest.mark.parametrize(
    ("status", "expected"),
    [(403, UnauthorizedAccess()), (500, InvalidServerResponse(500))],
)
def test_object_get_reports_http_failures(make_geocore, status, expected):
    geocore, handler = make_geocore(lambda request: httpx.Response(status))

    result = asyncio.run(geocore.objects().with_id("OBJ-1").get())

    assert result == Failure(expected)
    assert handler.paths == ["/api/objs/OBJ-1"]
