"""Outcome type returned by every Geocore operation.

`GeocoreResult[T]` is either `Success(data)` or `Failure(exception)`.
Dependent calls are sequenced with `then`: a `Failure` short-circuits and is
returned unchanged, so the error of the first failing step is the error of
the whole chain.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, NoReturn, ParamSpec, TypeVar, Union

from geocore.core.errors import GeocoreError, OtherError

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")
P = ParamSpec("P")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome carrying `data`."""

    data: T

    @property
    def failed(self) -> bool:
        return False

    @property
    def value(self) -> T:
        return self.data

    @property
    def error(self) -> None:
        return None

    def unwrap(self) -> T:
        return self.data

    def map(self, fn: Callable[[T], U]) -> "Success[U]":
        return Success(fn(self.data))

    async def then(self, fn: Callable[[T], Awaitable["GeocoreResult[U]"]]) -> "GeocoreResult[U]":
        return await fn(self.data)


@dataclass(frozen=True)
class Failure:
    """Failed outcome carrying a `GeocoreError`."""

    exception: GeocoreError

    @property
    def failed(self) -> bool:
        return True

    @property
    def value(self) -> None:
        return None

    @property
    def error(self) -> GeocoreError:
        return self.exception

    def unwrap(self) -> NoReturn:
        raise self.exception

    def map(self, fn: Callable[[Any], Any]) -> "Failure":
        return self

    async def then(self, fn: Callable[[Any], Awaitable[Any]]) -> "Failure":
        return self


GeocoreResult = Union[Success[T], Failure]


def as_result(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[GeocoreResult[T]]]:
    """Turn a coroutine that raises `GeocoreError` into one returning `GeocoreResult`.

    Calls of other decorated operations inside `func` use `.unwrap()`, which
    re-raises their error so it propagates unchanged to this boundary.
    """

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> GeocoreResult[T]:
        try:
            return Success(await func(*args, **kwargs))
        except GeocoreError as exc:
            return Failure(exc)
        except Exception as exc:
            logger.exception("Unexpected error in %s", func.__qualname__)
            return Failure(OtherError(exc))

    return wrapper


def success(data: T) -> GeocoreResult[T]:
    return Success(data)


def failure(error: GeocoreError) -> GeocoreResult[Any]:
    return Failure(error)
