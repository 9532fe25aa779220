"""Shared testing utilities for dispatcher tests.

Exports:
    - assert_true(condition, message): explicit AssertionError helper.
    - GatedTransport: in-memory transport whose calls stay pending until the
      test releases, fails or cancels them.
    - spin(): yield to the event loop so scheduled tasks reach their await.
    - envelope(data): build a ``{code, message, data}`` raw response.
"""
from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

from crux_dispatch.base.cancellation import CancellationError, CancellationToken
from crux_dispatch.base.dto import RequestDescriptor
from crux_dispatch.base.models import RawResponse


def assert_true(condition: bool, message: str) -> None:
    """Raise AssertionError with the provided message if condition is False."""
    if not condition:
        raise AssertionError(message)


def envelope(data: Any, code: int = 0, message: str = "ok") -> RawResponse:
    return RawResponse(status_code=200, body={"code": code, "message": message, "data": data})


async def spin(times: int = 3) -> None:
    for _ in range(times):
        await asyncio.sleep(0)


class GatedTransport:
    """Transport double; every ``send`` waits on a gate the test controls.

    ``respond`` builds the response used by :meth:`release` when no explicit
    result is given. Cancelling a call's token fails its gate with
    ``CancellationError`` the same way ``HttpxTransport`` does.
    """

    def __init__(self, respond: Optional[Callable[[RequestDescriptor], RawResponse]] = None) -> None:
        self.respond = respond or (lambda d: envelope({"url": d.url}))
        self.calls: List[RequestDescriptor] = []
        self.tokens: List[CancellationToken] = []
        self._gates: List[asyncio.Future] = []
        self.closed = False

    async def send(self, descriptor: RequestDescriptor, token: CancellationToken) -> RawResponse:
        token.raise_if_cancelled()
        gate = asyncio.get_running_loop().create_future()
        self.calls.append(descriptor)
        self.tokens.append(token)
        self._gates.append(gate)

        def _on_cancel(reason: Optional[str]) -> None:
            if not gate.done():
                gate.set_exception(CancellationError(reason, url=descriptor.url))

        remove = token.add_callback(_on_cancel)
        try:
            result = await gate
        finally:
            remove()
        if isinstance(result, BaseException):
            raise result
        return result if result is not None else self.respond(descriptor)

    def release(self, index: int, result: Optional[RawResponse] = None) -> None:
        self._gates[index].set_result(result)

    def fail(self, index: int, exc: BaseException) -> None:
        self._gates[index].set_result(exc)

    async def aclose(self) -> None:
        self.closed = True


class StaticTransport:
    """Transport double that settles immediately with a fixed result."""

    def __init__(self, result: Any) -> None:
        self.result = result
        self.calls: List[RequestDescriptor] = []

    async def send(self, descriptor: RequestDescriptor, token: CancellationToken) -> RawResponse:
        self.calls.append(descriptor)
        token.raise_if_cancelled()
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result

    async def aclose(self) -> None:
        return None
