from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import httpx
import pytest

from geocore.core.domain.object import GeocoreObject
from geocore.core.errors import InvalidParameter, UnexpectedResponse
from geocore.core.query import BinaryMixin, BinarySpec, ObjectOperation, downgrade_url
from geocore.core.services.geocore import Geocore

from conftest import envelope


def test_downgrade_url():
    assert downgrade_url("https://cdn.geocore.test/a.png") == "http://cdn.geocore.test/a.png"
    assert downgrade_url("http://cdn.geocore.test/a.png") == "http://cdn.geocore.test/a.png"
    assert downgrade_url("ftp://x") == "ftp://x"


def _binary_server(request: httpx.Request) -> httpx.Response:
    if request.url.host == "cdn.geocore.test":
        return httpx.Response(200, content=b"image-bytes")
    if request.url.path.endswith("/url"):
        return envelope({"key": "photo", "url": "https://cdn.geocore.test/photo.png"})
    if request.method == "POST":
        return envelope("photo")
    return envelope(["photo", "thumb", 3])


def test_url_is_downgraded_and_image_downloaded(make_geocore):
    geocore, handler = make_geocore(_binary_server)
    obj = GeocoreObject(id="OBJ-1")

    async def scenario():
        return await obj.url(geocore, "photo"), await obj.image(geocore, "photo")

    url, image = asyncio.run(scenario())

    assert url.value == "http://cdn.geocore.test/photo.png"
    assert image.value == b"image-bytes"
    assert handler.paths[0] == "/api/objs/OBJ-1/bins/photo/url"
    assert str(handler.requests[-1].url) == "http://cdn.geocore.test/photo.png"
    assert "Accept" not in handler.requests[-1].headers


def test_url_kept_when_downgrade_disabled(settings):
    settings = settings.model_copy(update={"downgrade_binary_urls": False})

    async def scenario():
        client = httpx.AsyncClient(transport=httpx.MockTransport(_binary_server))
        async with client:
            geocore = Geocore(settings, client=client)
            return await geocore.binaries().with_id("OBJ-1").with_key("photo").url()

    assert asyncio.run(scenario()).value == "https://cdn.geocore.test/photo.png"


def test_missing_url_is_unexpected_response(make_geocore):
    geocore, _ = make_geocore(lambda request: envelope({"key": "photo"}))
    result = asyncio.run(geocore.binaries().with_id("OBJ-1").with_key("photo").url())
    assert result.error == UnexpectedResponse("url is nil")


def test_upload_and_list(make_geocore):
    geocore, handler = make_geocore(_binary_server)
    obj = GeocoreObject(id="OBJ-1")

    async def scenario():
        uploaded = await obj.upload(geocore, "photo", b"\x89PNG", mime_type="image/png")
        keys = await obj.binaries(geocore)
        return uploaded, keys

    uploaded, keys = asyncio.run(scenario())

    assert uploaded.value.key == "photo"
    assert keys.value == ["photo", "thumb"]
    upload = handler.requests[0]
    assert upload.url.path == "/api/objs/OBJ-1/bins/photo"
    assert upload.headers["Content-Type"].startswith("multipart/form-data")


def test_unsaved_object_has_no_binaries(make_geocore):
    geocore, handler = make_geocore(_binary_server)
    result = asyncio.run(GeocoreObject().binaries(geocore))
    assert isinstance(result.error, InvalidParameter)
    assert handler.requests == []


def test_relationship_binary_paths(make_geocore):
    geocore, handler = make_geocore(_binary_server)
    operation = geocore.relationship_binaries().with_object1_id("USE-1").with_object2_id("PLA-2")

    asyncio.run(operation.binaries())
    asyncio.run(operation.with_key("photo").binary())

    assert handler.paths == ["/api/objs/relationship/USE-1/PLA-2/bins", "/api/objs/relationship/USE-1/PLA-2/bins/photo"]


def test_binary_builders_must_implement_metadata_read(make_geocore):
    geocore, _ = make_geocore(lambda request: envelope())

    @dataclass(frozen=True)
    class IncompleteBinaryOperation(ObjectOperation, BinaryMixin):
        payload: BinarySpec = field(default_factory=BinarySpec)

    with pytest.raises(TypeError):
        IncompleteBinaryOperation(geocore.engine)
    assert geocore.binaries().with_id("OBJ-1").with_key("photo").payload.key == "photo"
