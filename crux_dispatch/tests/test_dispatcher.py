"""Behavioral tests for ``Dispatcher``.

Focus:
- interceptor ordering across global, instance and per-call scopes
- envelope unwrapping
- url-keyed cancellation with duplicate urls
- registry cleanup on every outcome
- explicit recovery through response ``on_error`` stages

Async scenarios are driven with ``asyncio.run`` from plain pytest tests.

# nosec B101
"""
from __future__ import annotations

import asyncio

import pytest

from crux_dispatch.base.cancellation import CancellationError
from crux_dispatch.base.dispatcher import Dispatcher
from crux_dispatch.base.dto import DispatcherConfig, RequestDescriptor
from crux_dispatch.base.errors import ErrorCode, InterceptorError, TransportError
from crux_dispatch.base.interceptors import ScopeInterceptors, set_global_interceptors
from crux_dispatch.base.models import RawResponse
from crux_dispatch.tests.utils import GatedTransport, StaticTransport, assert_true, envelope, spin


def _marker_scope(name: str, log: list[str]) -> ScopeInterceptors:
    def _req(descriptor: RequestDescriptor) -> RequestDescriptor:
        log.append(f"{name}>")
        return descriptor

    def _resp(value):
        log.append(f"<{name}")
        return value

    return ScopeInterceptors.of(on_request=_req, on_response=_resp)


def _transport_failure(url: str = "/w") -> TransportError:
    return TransportError(code=ErrorCode.NETWORK, message="connection reset", url=url, method="GET")


def test_envelope_round_trip_returns_data_only():
    transport = StaticTransport(envelope({"x": 1}))

    async def scenario():
        return await Dispatcher(transport=transport).request({"url": "/w"})

    assert asyncio.run(scenario()) == {"x": 1}


def test_unwrap_disabled_returns_full_body():
    transport = StaticTransport(envelope({"x": 1}))
    dispatcher = Dispatcher(DispatcherConfig(unwrap_envelope=False), transport=transport)

    result = asyncio.run(dispatcher.request({"url": "/w"}))
    assert result == {"code": 0, "message": "ok", "data": {"x": 1}}


def test_non_envelope_body_passes_through():
    transport = StaticTransport(RawResponse(status_code=200, body=[1, 2, 3]))
    assert asyncio.run(Dispatcher(transport=transport).request({"url": "/list"})) == [1, 2, 3]


def test_envelope_code_and_message_are_not_validated():
    body = {"code": "E_OK", "message": 404, "data": {"x": 1}}
    transport = StaticTransport(RawResponse(status_code=200, body=body))
    seen: list = []
    per_call = ScopeInterceptors.of(on_response=lambda v: seen.append(v) or v, on_response_error=seen.append)

    result = asyncio.run(Dispatcher(transport=transport).request(RequestDescriptor(url="/w", interceptors=per_call)))

    assert result == {"x": 1}
    assert seen == [{"x": 1}]


def test_request_stage_swapping_per_call_scope_swaps_response_stage():
    log: list[str] = []
    replacement = _marker_scope("Q", log)
    swap = ScopeInterceptors.of(on_request=lambda d: d.with_updates(interceptors=replacement))
    dispatcher = Dispatcher(
        DispatcherConfig(interceptors=swap),
        transport=StaticTransport(envelope("ok")),
        global_interceptors=ScopeInterceptors(),
    )

    original = ScopeInterceptors.of(on_response=lambda v: log.append("<P") or v)
    asyncio.run(dispatcher.request(RequestDescriptor(url="/w", interceptors=original)))

    assert_true(log == ["<Q"], f"observed {log}")


def test_registration_is_undone_when_start_logging_fails(monkeypatch: pytest.MonkeyPatch):
    import crux_dispatch.base.dispatcher as dispatcher_module

    real_log_event = dispatcher_module.log_event

    def _failing_start(logger, event, *args, **kwargs):
        if event == "dispatch.request.start":
            raise RuntimeError("log sink down")
        return real_log_event(logger, event, *args, **kwargs)

    monkeypatch.setattr(dispatcher_module, "log_event", _failing_start)
    transport = StaticTransport(envelope(None))
    dispatcher = Dispatcher(transport=transport)

    with pytest.raises(RuntimeError):
        asyncio.run(dispatcher.request({"url": "/w"}))
    assert dispatcher.pending_urls == ()
    assert transport.calls == []


def test_interceptor_marker_order_is_gip_then_pig():
    log: list[str] = []
    dispatcher = Dispatcher(
        DispatcherConfig(interceptors=_marker_scope("I", log)),
        transport=StaticTransport(envelope("payload")),
        global_interceptors=_marker_scope("G", log),
    )

    result = asyncio.run(dispatcher.request(RequestDescriptor(url="/w", interceptors=_marker_scope("P", log))))

    assert result == "payload"
    assert_true(log == ["G>", "I>", "P>", "<P", "<I", "<G"], f"observed {log}")


def test_process_wide_global_scope_is_captured_at_construction():
    log: list[str] = []
    set_global_interceptors(_marker_scope("G", log))
    dispatcher = Dispatcher(transport=StaticTransport(envelope(None)))
    set_global_interceptors(None)

    asyncio.run(dispatcher.request({"url": "/w"}))
    assert log == ["G>", "<G"]


def test_request_interceptor_may_replace_descriptor():
    transport = StaticTransport(envelope("ok"))
    rewrite = ScopeInterceptors.of(on_request=lambda d: d.with_updates(url="/v2" + d.url))

    asyncio.run(Dispatcher(transport=transport).request(RequestDescriptor(url="/w", interceptors=rewrite)))
    assert transport.calls[0].url == "/v2/w"


def test_request_stage_rejection_short_circuits_before_network():
    transport = StaticTransport(envelope("never"))

    def _deny(_descriptor):
        raise InterceptorError(message="not signed in")

    dispatcher = Dispatcher(DispatcherConfig(interceptors=ScopeInterceptors.of(on_request=_deny)), transport=transport)

    with pytest.raises(InterceptorError):
        asyncio.run(dispatcher.request({"url": "/w"}))
    assert transport.calls == []
    assert dispatcher.pending_urls == ()


def test_per_call_error_stage_returning_literal_recovers():
    transport = StaticTransport(_transport_failure())
    recover = ScopeInterceptors.of(on_response_error=lambda exc: "cached-weather")

    result = asyncio.run(Dispatcher(transport=transport).request(RequestDescriptor(url="/w", interceptors=recover)))
    assert result == "cached-weather"


def test_failures_propagate_without_explicit_recovery():
    dispatcher = Dispatcher(transport=StaticTransport(_transport_failure()))
    with pytest.raises(TransportError) as ei:
        asyncio.run(dispatcher.request({"url": "/w"}))
    assert ei.value.code is ErrorCode.NETWORK


def test_config_headers_and_timeout_are_applied():
    transport = StaticTransport(envelope(None))
    dispatcher = Dispatcher(
        DispatcherConfig(headers={"X-App": "demo", "Accept": "application/json"}, timeout_ms=1500),
        transport=transport,
    )
    asyncio.run(dispatcher.request({"url": "/w", "headers": {"Accept": "text/plain"}}))

    sent = transport.calls[0]
    assert sent.headers == {"X-App": "demo", "Accept": "text/plain"}
    assert sent.timeout_ms == 1500


def test_duplicate_get_cancel_request_rejects_exactly_one(gated_transport: GatedTransport):
    async def scenario():
        dispatcher = Dispatcher(transport=gated_transport)
        first = asyncio.create_task(dispatcher.request({"url": "/w", "method": "GET"}))
        second = asyncio.create_task(dispatcher.request({"url": "/w", "method": "GET"}))
        await spin()
        assert dispatcher.pending_urls == ("/w", "/w")

        assert dispatcher.cancel_request("/w") == 1
        await spin()
        gated_transport.release(1)
        results = await asyncio.gather(first, second, return_exceptions=True)
        return dispatcher, results

    dispatcher, (first_result, second_result) = asyncio.run(scenario())
    assert isinstance(first_result, CancellationError)
    assert second_result == {"url": "/w"}
    assert dispatcher.pending_urls == ()


def test_cancel_one_of_n_affects_only_earliest(gated_transport: GatedTransport):
    async def scenario():
        dispatcher = Dispatcher(transport=gated_transport)
        tasks = [asyncio.create_task(dispatcher.request({"url": "/feed"})) for _ in range(4)]
        await spin()
        dispatcher.cancel_request("/feed")
        await spin()
        cancelled_flags = [t.cancelled for t in gated_transport.tokens]
        for index in range(1, 4):
            gated_transport.release(index)
        return cancelled_flags, await asyncio.gather(*tasks, return_exceptions=True)

    flags, results = asyncio.run(scenario())
    assert flags == [True, False, False, False]
    assert isinstance(results[0], CancellationError)
    assert results[1:] == [{"url": "/feed"}] * 3


def test_cancel_request_accepts_list_of_urls(gated_transport: GatedTransport):
    async def scenario():
        dispatcher = Dispatcher(transport=gated_transport)
        tasks = [asyncio.create_task(dispatcher.request({"url": u})) for u in ("/a", "/b", "/c")]
        await spin()
        assert dispatcher.cancel_request(["/a", "/c", "/unknown"]) == 2
        gated_transport.release(1)
        return await asyncio.gather(*tasks, return_exceptions=True)

    a, b, c = asyncio.run(scenario())
    assert isinstance(a, CancellationError) and isinstance(c, CancellationError)
    assert b == {"url": "/b"}


def test_cancel_all_signals_each_in_flight_request_once_and_spares_later_ones(gated_transport: GatedTransport):
    async def scenario():
        dispatcher = Dispatcher(transport=gated_transport)
        early = [asyncio.create_task(dispatcher.request({"url": u})) for u in ("/a", "/a", "/b")]
        await spin()
        invoked = dispatcher.cancel_all_requests()
        await spin()
        late = asyncio.create_task(dispatcher.request({"url": "/a"}))
        await spin()
        gated_transport.release(3)
        early_results = await asyncio.gather(*early, return_exceptions=True)
        return invoked, early_results, await late, dispatcher

    invoked, early_results, late_result, dispatcher = asyncio.run(scenario())
    assert invoked == 3
    assert all(isinstance(r, CancellationError) for r in early_results)
    assert late_result == {"url": "/a"}
    assert dispatcher.pending_urls == ()


def test_sibling_settling_first_does_not_remove_earlier_entry(gated_transport: GatedTransport):
    async def scenario():
        dispatcher = Dispatcher(transport=gated_transport)
        first = asyncio.create_task(dispatcher.request({"url": "/w"}))
        second = asyncio.create_task(dispatcher.request({"url": "/w"}))
        await spin()
        gated_transport.release(1)
        await second
        remaining = list(dispatcher.registry)
        dispatcher.cancel_request("/w")
        with pytest.raises(CancellationError):
            await first
        return remaining, dispatcher

    remaining, dispatcher = asyncio.run(scenario())
    assert len(remaining) == 1
    assert gated_transport.tokens[0].cancelled is True
    assert gated_transport.tokens[1].cancelled is False
    assert dispatcher.pending_urls == ()


@pytest.mark.parametrize("outcome", ["success", "failure", "cancel", "recovered"])
def test_registry_is_empty_after_every_outcome(gated_transport: GatedTransport, outcome: str):
    async def scenario():
        dispatcher = Dispatcher(transport=gated_transport)
        per_call = ScopeInterceptors.of(on_response_error=lambda exc: "fallback") if outcome == "recovered" else None
        task = asyncio.create_task(dispatcher.request(RequestDescriptor(url="/w", interceptors=per_call)))
        await spin()
        assert dispatcher.pending_urls == ("/w",)
        if outcome == "success":
            gated_transport.release(0)
        elif outcome == "cancel":
            dispatcher.cancel_request("/w")
        else:
            gated_transport.fail(0, _transport_failure())
        await asyncio.gather(task, return_exceptions=True)
        return dispatcher

    dispatcher = asyncio.run(scenario())
    assert dispatcher.pending_urls == ()
    assert len(dispatcher.registry) == 0


def test_task_cancellation_mid_flight_still_cleans_up(gated_transport: GatedTransport):
    async def scenario():
        dispatcher = Dispatcher(transport=gated_transport)
        task = asyncio.create_task(dispatcher.request({"url": "/slow"}))
        await spin()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        return dispatcher

    dispatcher = asyncio.run(scenario())
    assert dispatcher.pending_urls == ()


def test_request_without_url_is_not_tracked(gated_transport: GatedTransport):
    async def scenario():
        dispatcher = Dispatcher(transport=gated_transport)
        task = asyncio.create_task(dispatcher.request({"method": "POST", "data": {"a": 1}}))
        await spin()
        tracked = len(dispatcher.registry)
        assert dispatcher.cancel_all_requests() == 0
        gated_transport.release(0, envelope("done"))
        return tracked, await task

    tracked, result = asyncio.run(scenario())
    assert tracked == 0
    assert result == "done"


def test_cancelling_twice_is_harmless(gated_transport: GatedTransport):
    async def scenario():
        dispatcher = Dispatcher(transport=gated_transport)
        task = asyncio.create_task(dispatcher.request({"url": "/w"}))
        await spin()
        dispatcher.cancel_request("/w", reason="first")
        dispatcher.cancel_request("/w", reason="second")
        with pytest.raises(CancellationError) as ei:
            await task
        return ei.value

    error = asyncio.run(scenario())
    assert error.reason == "first"
    assert error.url == "/w"


def test_aclose_cancels_pending_and_closes_owned_transport_only(gated_transport: GatedTransport):
    async def scenario():
        dispatcher = Dispatcher(transport=gated_transport)
        task = asyncio.create_task(dispatcher.request({"url": "/w"}))
        await spin()
        await dispatcher.aclose()
        return await asyncio.gather(task, return_exceptions=True)

    (result,) = asyncio.run(scenario())
    assert isinstance(result, CancellationError)
    assert gated_transport.closed is False
