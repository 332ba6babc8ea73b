"""httpx wrapper and Geocore request engine.

Responsibility:
- `build_async_client` standardizes timeouts and headers for every call.
- `RequestEngine` is the single chokepoint that turns (path, method, query
  parameters, body) into a classified result: it injects the access token,
  detects multipart uploads and unwraps the response envelope.

Encoding rules:
- Query parameters always go to the URL, even when a JSON body is present.
- A body map carrying the `$fileContents` descriptor is sent as
  multipart/form-data instead of JSON.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, TypeVar

import httpx

from geocore.core.config import GeocoreSettings
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
from geocore.core.session import Session

logger = logging.getLogger(__name__)

T = TypeVar("T")

ACCESS_TOKEN_HEADER = "Geocore-Access-Token"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"

FILE_CONTENTS_KEY = "$fileContents"
FILE_NAME_KEY = "$fileName"
FIELD_NAME_KEY = "$fieldName"
MIME_TYPE_KEY = "$mimeType"


def build_async_client(
    settings: GeocoreSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the SDK defaults."""

    settings = settings or GeocoreSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


@dataclass(frozen=True)
class MultipartUpload:
    contents: bytes
    file_name: str
    field_name: str
    mime_type: str


def extract_upload(body: Mapping[str, Any] | None) -> MultipartUpload | None:
    """Return the multipart descriptor carried by `body`, if any.

    Raises `InvalidParameter` when file contents are present but the file
    name, field name or MIME type is missing.
    """

    if not body:
        return None
    contents = body.get(FILE_CONTENTS_KEY)
    if not isinstance(contents, (bytes, bytearray)):
        return None
    file_name = body.get(FILE_NAME_KEY)
    field_name = body.get(FIELD_NAME_KEY)
    mime_type = body.get(MIME_TYPE_KEY)
    if not (isinstance(file_name, str) and isinstance(field_name, str) and isinstance(mime_type, str)):
        raise InvalidParameter("Parameter for file upload incomplete")
    return MultipartUpload(bytes(contents), file_name, field_name, mime_type)


def upload_body(*, contents: bytes, file_name: str, field_name: str, mime_type: str) -> dict[str, Any]:
    return {
        FILE_CONTENTS_KEY: contents,
        FILE_NAME_KEY: file_name,
        FIELD_NAME_KEY: field_name,
        MIME_TYPE_KEY: mime_type,
    }


def _encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_encode_value(v) for v in value)
    return str(value)


def encode_query(params: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Flatten parameters into query pairs, sorted by key, None values dropped."""

    if not params:
        return []
    return [(key, _encode_value(params[key])) for key in sorted(params) if params[key] is not None]


def unwrap_envelope(response: httpx.Response) -> Any:
    """Classify an HTTP response and return the envelope `result`."""

    status_code = response.status_code
    if not status_code:
        raise InvalidServerResponse(ServerResponseCode.UNAVAILABLE)
    if status_code == 403:
        raise UnauthorizedAccess()
    if status_code != 200:
        raise InvalidServerResponse(status_code)

    if not response.content:
        raise InvalidServerResponse(ServerResponseCode.EMPTY_RESPONSE)
    try:
        envelope = json.loads(response.content)
    except ValueError as exc:
        raise UnexpectedResponse(f"Response is not JSON: {exc}") from exc

    if not isinstance(envelope, dict) or not isinstance(envelope.get("status"), str):
        raise UnexpectedResponse("Response envelope has no status")
    if envelope["status"] != "success":
        code = envelope.get("code")
        message = envelope.get("message")
        raise ServerError(
            code if isinstance(code, str) else "",
            message if isinstance(message, str) else "",
        )
    return envelope.get("result")


class RequestEngine:
    """Performs Geocore HTTP calls on behalf of builders and the session façade."""

    def __init__(
        self,
        session: Session,
        client: httpx.AsyncClient | None = None,
        settings: GeocoreSettings | None = None,
    ) -> None:
        self.session = session
        self.settings = settings or GeocoreSettings()
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = build_async_client(self.settings)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "RequestEngine":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def build_url(self, path: str) -> str:
        if not self.session.base_url:
            raise InvalidState("Geocore base URL is not configured")
        return self.session.base_url + path

    def build_request(
        self,
        path: str,
        *,
        method: str = "GET",
        params: Mapping[str, Any] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> httpx.Request:
        """Build the request without sending it."""

        upload = extract_upload(body)
        url = self.build_url(path)
        headers: dict[str, str] = {}
        if self.session.token:
            headers[ACCESS_TOKEN_HEADER] = self.session.token

        if upload is not None:
            # parameters are not encoded for multipart uploads
            return self.client.build_request(
                method,
                url,
                headers=headers,
                files={upload.field_name: (upload.file_name, upload.contents, upload.mime_type)},
            )

        query = encode_query(params)
        content: bytes | None = None
        if body is not None:
            content = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = JSON_CONTENT_TYPE
        elif query:
            headers["Content-Type"] = JSON_CONTENT_TYPE
        return self.client.build_request(
            method,
            url,
            params=query or None,
            headers=headers,
            content=content,
        )

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        params: Mapping[str, Any] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> Any:
        request = self.build_request(path, method=method, params=params, body=body)
        logger.debug("%s %s", request.method, request.url)
        try:
            response = await self.client.send(request)
        except httpx.HTTPError as exc:
            logger.error("Request failed for %s %s: %s", method, path, exc)
            raise NetworkError(exc) from exc

        try:
            return unwrap_envelope(response)
        except ServerError as exc:
            logger.warning("Server error for %s %s: %s", method, path, exc)
            raise

    async def fetch_one(
        self,
        path: str,
        decoder: Callable[[Any], T],
        *,
        method: str = "GET",
        params: Mapping[str, Any] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> T:
        result = await self.request(path, method=method, params=params, body=body)
        return decoder(result)

    async def fetch_many(
        self,
        path: str,
        decoder: Callable[[Any], T],
        *,
        method: str = "GET",
        params: Mapping[str, Any] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> list[T]:
        result = await self.request(path, method=method, params=params, body=body)
        if not isinstance(result, list):
            return []
        return [decoder(item) for item in result]

    async def upload_post(
        self,
        path: str,
        decoder: Callable[[Any], T],
        *,
        field_name: str,
        file_name: str,
        mime_type: str,
        contents: bytes,
        params: Mapping[str, Any] | None = None,
    ) -> T:
        body = upload_body(contents=contents, file_name=file_name, field_name=field_name, mime_type=mime_type)
        return await self.fetch_one(path, decoder, method="POST", params=params, body=body)

    async def download(self, url: str) -> bytes:
        """Fetch raw bytes from an absolute URL (binary assets, images)."""

        request = self.client.build_request("GET", url)
        # asset hosts do not serve JSON
        request.headers.pop("Accept", None)
        try:
            response = await self.client.send(request)
        except httpx.HTTPError as exc:
            raise UnexpectedResponse(f"Error downloading image: {exc}") from exc
        if not response.is_success:
            raise UnexpectedResponse(f"Error downloading image: HTTP {response.status_code}")
        return response.content
