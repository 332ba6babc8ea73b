"""Error taxonomy of the Geocore SDK.

Every failure an operation can report is one of the classes below. They are
raised internally and captured into a `Failure` at the operation boundary
(see `geocore.core.result.as_result`), so callers normally inspect them
through `GeocoreResult.error` instead of catching them.

Groups:
- Caller mistakes: `InvalidParameter` (rejected before any network call).
- Server business failures: `ServerError` (code/message verbatim).
- Transport failures: `NetworkError`.
- Contract violations: `InvalidServerResponse`, `UnexpectedResponse`,
  `InvalidState`.
"""

from __future__ import annotations

from enum import IntEnum


class ServerResponseCode(IntEnum):
    """Status codes used by `InvalidServerResponse` for locally generated errors."""

    UNAVAILABLE = -1
    UNEXPECTED_RESPONSE = -2
    EMPTY_RESPONSE = -3


class GeocoreError(Exception):
    """Base class of every error reported by the SDK."""

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class InvalidState(GeocoreError):
    """Unexpected internal state. Possibly a bug or a missing configuration."""

    def __init__(self, message: str = "Invalid state") -> None:
        super().__init__(message)
        self.message = message


class InvalidServerResponse(GeocoreError):
    """The server answered with an unexpected HTTP status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(int(status_code))
        self.status_code = int(status_code)

    def __str__(self) -> str:
        return f"Invalid server response (status {self.status_code})"


class UnexpectedResponse(GeocoreError):
    """The response could not be understood (format, missing fields)."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ServerError(GeocoreError):
    """The server returned a non-success envelope."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(code, message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class TokenUndefined(GeocoreError):
    """Token is unavailable: the SDK is not initialized or nobody is logged in."""

    def __init__(self) -> None:
        super().__init__("Token undefined")


class UnauthorizedAccess(GeocoreError):
    """Access to the resource is forbidden (HTTP 403)."""

    def __init__(self) -> None:
        super().__init__("Unauthorized access")


class InvalidParameter(GeocoreError):
    """A parameter passed to the API is missing or invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NetworkError(GeocoreError):
    """The HTTP transport failed; `cause` holds the underlying exception."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(cause)
        self.cause = cause

    def __str__(self) -> str:
        return f"Network error: {self.cause}"


class OtherError(GeocoreError):
    """Any other failure; `cause` holds the underlying exception."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(cause)
        self.cause = cause

    def __str__(self) -> str:
        return f"Error: {self.cause}"
