"""Transport Protocol (single-class module).

Defines the contract between the dispatcher and whatever performs the
network I/O.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..cancellation import CancellationToken
from ..dto import RequestDescriptor
from ..models import RawResponse


@runtime_checkable
class Transport(Protocol):
    """Sends one HTTP call described by a :class:`RequestDescriptor`.

    Implementations must:
    - raise ``TransportError`` for network, timeout and HTTP-status failures;
    - raise ``CancellationError`` when ``token`` is cancelled before the call
      settles, instead of returning the natural outcome;
    - never retry.
    """

    async def send(self, descriptor: RequestDescriptor, token: CancellationToken) -> RawResponse:  # pragma: no cover - interface
        """Perform the call and return the decoded response."""
        ...

    async def aclose(self) -> None:  # pragma: no cover - interface
        """Release network resources held by the transport."""
        ...
