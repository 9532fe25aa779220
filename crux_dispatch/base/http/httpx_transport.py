"""``httpx``-backed transport adapter.

Purpose:
    Perform the network call for a dispatched request on a shared
    ``httpx.AsyncClient`` and surface the outcome using the dispatch error
    taxonomy.

External dependencies:
    - ``httpx`` for the asynchronous HTTP client.

Timeout strategy:
    - Each request carries its own ``httpx.Timeout`` built by
      :func:`resolve_timeout` from the descriptor override, the transport
      default, and finally ``get_timeout_config()``. Expiry surfaces as
      ``TransportError`` with ``ErrorCode.TIMEOUT``.

Cancellation:
    - The request runs in its own task. A callback on the request's
      :class:`CancellationToken` cancels that task, and the resulting
      ``asyncio.CancelledError`` is reported as ``CancellationError``.
      Cancellation of the *calling* task is not converted and propagates.

Lifecycle & cleanup:
    - A transport created without a client owns one and closes it in
      :meth:`HttpxTransport.aclose`. An injected client is left open.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Mapping, Optional

import httpx

from ..cancellation import CancellationError, CancellationToken
from ..dto import RequestDescriptor
from ..errors import ErrorCode, TransportError, classify_exception, status_to_code
from ..models import RawResponse
from ..timeouts import resolve_timeout


class HttpxTransport:
    """Transport adapter over ``httpx.AsyncClient``."""

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout_ms: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url or "", headers=dict(headers or {}))
        self._timeout_ms = timeout_ms

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    def build_request(self, descriptor: RequestDescriptor) -> httpx.Request:
        """Translate a descriptor into an ``httpx.Request``."""
        body: dict[str, Any] = {}
        data = descriptor.data
        if isinstance(data, (bytes, str)):
            body["content"] = data
        elif data is not None:
            body["json"] = data
        return self._client.build_request(
            descriptor.method.value,
            descriptor.url or "",
            params=descriptor.params,
            headers=descriptor.headers or None,
            timeout=resolve_timeout(descriptor.timeout_ms, self._timeout_ms),
            **body,
        )

    async def send(self, descriptor: RequestDescriptor, token: CancellationToken) -> RawResponse:
        """Send ``descriptor`` and return the decoded response.

        Raises:
            CancellationError: ``token`` was cancelled before the call settled.
            TransportError: network failure, timeout, non-2xx status or an
                undecodable JSON body.
        """
        token.raise_if_cancelled()
        request = self.build_request(descriptor)
        started = time.monotonic()
        task = asyncio.ensure_future(self._client.send(request))
        remove_callback = token.add_callback(lambda _reason: task.cancel())
        try:
            response = await task
        except asyncio.CancelledError:
            if token.cancelled:
                raise CancellationError(token.reason, url=descriptor.url) from None
            raise
        except httpx.TimeoutException as exc:
            raise self._error(ErrorCode.TIMEOUT, f"request timed out: {exc}", descriptor, exc) from exc
        except httpx.HTTPError as exc:
            raise self._error(classify_exception(exc), str(exc) or type(exc).__name__, descriptor, exc) from exc
        finally:
            remove_callback()

        elapsed_ms = (time.monotonic() - started) * 1000.0
        if response.is_error:
            raise TransportError(
                code=status_to_code(response.status_code),
                message=f"HTTP {response.status_code} {response.reason_phrase}".strip(),
                url=descriptor.url,
                method=descriptor.method.value,
                status_code=response.status_code,
            )
        return RawResponse(
            status_code=response.status_code,
            body=self._decode(response, descriptor),
            headers=dict(response.headers),
            url=str(response.url),
            elapsed_ms=elapsed_ms,
        )

    def _decode(self, response: httpx.Response, descriptor: RequestDescriptor) -> Any:
        if not response.content:
            return None
        content_type = response.headers.get("content-type", "")
        if "json" not in content_type:
            return response.text
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                code=ErrorCode.DECODE,
                message=f"invalid JSON body: {exc}",
                url=descriptor.url,
                method=descriptor.method.value,
                status_code=response.status_code,
                raw=exc,
            ) from exc

    @staticmethod
    def _error(code: ErrorCode, message: str, descriptor: RequestDescriptor, exc: BaseException) -> TransportError:
        return TransportError(
            code=code,
            message=message,
            url=descriptor.url,
            method=descriptor.method.value,
            raw=exc,
        )

    async def aclose(self) -> None:
        """Close the underlying client when this transport created it."""
        if self._owns_client:
            await self._client.aclose()


__all__ = ["HttpxTransport"]
