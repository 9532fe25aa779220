"""Request dispatcher: interceptor pipeline plus url-keyed cancellation.

Purpose
-------
``Dispatcher`` wraps a :class:`Transport` with the three-scope interceptor
chain and a per-instance :class:`CancellationRegistry`. ``request()`` is the
single entry point; ``cancel_request`` and ``cancel_all_requests`` abort
in-flight calls by url.

Request lifecycle
-----------------
1. Request stages run global → instance → per-call and may replace the
   descriptor. A failing stage stops here: nothing is registered and no
   network call happens.
2. A descriptor with a url is registered (one new entry, even when another
   request for the same url is outstanding).
3. The transport call is awaited.
4. The settled outcome (success payload, after envelope unwrapping, or the
   failure) runs through response stages per-call → instance → global.
   The per-call scope is the one carried by the descriptor after the
   request stages ran.
5. The request's own registry entry is removed in a ``finally`` block, so
   cleanup happens exactly once on success, failure and cancellation alike.

Recovery contract
-----------------
A response stage's ``on_error`` handler that *returns* instead of raising
recovers the request: ``request()`` resolves with the returned value even
though the transport failed. Each recovery is logged as
``dispatch.recovered`` at WARNING level. The built-in stages never recover,
so without explicit handlers every failure reaches the caller.

Concurrency
-----------
Designed for a single asyncio event loop. Registry mutation happens only
right before and right after the transport await; no locks are needed.
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Iterable, Mapping, Optional, Union

from .cancellation import CancellationError, CancellationToken
from .cancellation_registry import CancellationRegistry
from .dto import DispatcherConfig, RequestDescriptor, unwrap_envelope
from .errors import classify_exception
from .http import HttpxTransport, Transport
from .interceptors import InterceptorChain, Outcome, ScopeInterceptors, get_global_interceptors
from .logging import LogContext, get_logger, log_event

DescriptorLike = Union[RequestDescriptor, Mapping[str, Any]]

_logger = get_logger(__name__)


class Dispatcher:
    """Orchestrates interceptors, cancellation tracking and the transport.

    Parameters
    ----------
    config:
        Instance settings. Defaults to an empty :class:`DispatcherConfig`.
    transport:
        Transport to use. When omitted an :class:`HttpxTransport` bound to
        ``config.base_url`` is created and owned (closed by :meth:`aclose`).
    global_interceptors:
        Global scope for this dispatcher. Defaults to the process-wide scope
        from :func:`get_global_interceptors`, captured at construction.
    """

    def __init__(
        self,
        config: Optional[DispatcherConfig] = None,
        *,
        transport: Optional[Transport] = None,
        global_interceptors: Optional[ScopeInterceptors] = None,
    ) -> None:
        self.config = config or DispatcherConfig()
        self._owns_transport = transport is None
        self.transport: Transport = transport or HttpxTransport(
            base_url=self.config.base_url,
            timeout_ms=self.config.timeout_ms,
        )
        self.chain = InterceptorChain(
            global_scope=global_interceptors if global_interceptors is not None else get_global_interceptors(),
            instance_scope=self.config.interceptors,
        )
        self.registry = CancellationRegistry()

    @property
    def pending_urls(self) -> tuple[str, ...]:
        """Urls of in-flight requests in registration order (duplicates kept)."""
        return self.registry.pending_urls

    def _prepare(self, descriptor: RequestDescriptor) -> RequestDescriptor:
        """Apply dispatcher defaults the transport relies on."""
        changes: dict[str, Any] = {}
        if self.config.headers:
            changes["headers"] = {**self.config.headers, **descriptor.headers}
        if descriptor.timeout_ms is None and self.config.timeout_ms is not None:
            changes["timeout_ms"] = self.config.timeout_ms
        return descriptor.with_updates(**changes) if changes else descriptor

    async def request(self, descriptor: DescriptorLike) -> Any:
        """Dispatch one request and return its (unwrapped, intercepted) payload.

        Raises:
            InterceptorError: or any other exception raised by a request
                stage; nothing was sent.
            TransportError: the call failed and no response stage recovered.
            CancellationError: the request was cancelled by url or in bulk
                and no response stage recovered.
        """
        initial = RequestDescriptor.coerce(descriptor)
        ctx = LogContext(method=initial.method.value, url=initial.url, request_id=uuid.uuid4().hex[:12])

        prepared = self._prepare(self.chain.run_request(initial, initial.interceptors, ctx))
        ctx.method, ctx.url = prepared.method.value, prepared.url
        per_call = prepared.interceptors

        token = CancellationToken()
        started = time.monotonic()
        outcome: Optional[Outcome] = None
        entry = self.registry.register(prepared.url, token.cancel) if prepared.url else None
        try:
            log_event(_logger, "dispatch.request.start", ctx, level=logging.DEBUG, pending=len(self.registry))
            try:
                raw = await self.transport.send(prepared, token)
                body = unwrap_envelope(raw.body) if self.config.unwrap_envelope else raw.body
            except Exception as exc:  # noqa: BLE001 - failures are routed through response stages
                settled = Outcome(error=exc)
            else:
                settled = Outcome(value=body)
            outcome = self.chain.run_response(settled, per_call)
            if outcome.ok and not settled.ok:
                log_event(
                    _logger,
                    "dispatch.recovered",
                    ctx,
                    level=logging.WARNING,
                    error_code=classify_exception(settled.error).value,
                )
            return outcome.unwrap()
        finally:
            if entry is not None:
                self.registry.deregister(entry)
            self._log_end(ctx, outcome, started)

    def _log_end(self, ctx: LogContext, outcome: Optional[Outcome], started: float) -> None:
        if outcome is None:
            # The awaiting task itself was cancelled mid-flight.
            status, error_code = "aborted", "cancelled"
        elif outcome.ok:
            status, error_code = "ok", None
        else:
            status = "cancelled" if isinstance(outcome.error, CancellationError) else "error"
            error_code = classify_exception(outcome.error).value
        log_event(
            _logger,
            "dispatch.request.end",
            ctx,
            outcome=status,
            error_code=error_code,
            latency_ms=round((time.monotonic() - started) * 1000.0, 3),
            pending=len(self.registry),
        )

    def cancel_request(self, urls: Union[str, Iterable[str]], reason: Optional[str] = None) -> int:
        """Cancel the earliest in-flight request for each given url.

        Urls without an in-flight request are ignored. Returns how many
        requests were signalled.
        """
        targets = [urls] if isinstance(urls, str) else list(urls)
        cancelled = sum(1 for url in targets if self.registry.cancel_one(url, reason or f"cancelled: {url}"))
        log_event(_logger, "dispatch.cancel", urls=targets, cancelled=cancelled)
        return cancelled

    def cancel_all_requests(self, reason: Optional[str] = None) -> int:
        """Cancel every request currently in flight.

        Requests dispatched after this call are unaffected. Returns the
        number of cancel handles invoked.
        """
        count = self.registry.cancel_all(reason or "cancelled: all requests")
        log_event(_logger, "dispatch.cancel_all", cancelled=count)
        return count

    async def aclose(self) -> None:
        """Cancel outstanding requests and close an owned transport."""
        self.cancel_all_requests(reason="dispatcher closed")
        if self._owns_transport:
            await self.transport.aclose()

    async def __aenter__(self) -> "Dispatcher":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


__all__ = ["Dispatcher", "DescriptorLike"]
