from __future__ import annotations

import asyncio

from geocore.core.errors import InvalidParameter, OtherError, ServerError
from geocore.core.result import Failure, Success, as_result


@as_result
async def _parse(value: str) -> int:
    if not value:
        raise InvalidParameter("Expecting value")
    return int(value)


def test_as_result_captures_errors():
    assert asyncio.run(_parse("4")) == Success(4)
    assert asyncio.run(_parse("")) == Failure(InvalidParameter("Expecting value"))

    other = asyncio.run(_parse("four"))
    assert isinstance(other.error, OtherError)
    assert isinstance(other.error.cause, ValueError)


def test_then_short_circuits_on_failure():
    calls: list[int] = []

    async def _next(value: int):
        calls.append(value)
        return Success(value * 2)

    async def scenario():
        ok = await Success(3).then(_next)
        failed = await Failure(ServerError("E", "boom")).then(_next)
        return ok, failed

    ok, failed = asyncio.run(scenario())
    assert ok.value == 6
    assert failed.error == ServerError("E", "boom")
    assert calls == [3]


def test_map_and_unwrap():
    assert Success(2).map(str).unwrap() == "2"
    failure = Failure(InvalidParameter("x"))
    assert failure.map(str) is failure
    assert failure.failed and failure.value is None
