"""Endpoint-binding service over a single dispatcher.

Purpose
-------
Endpoint modules call :meth:`ApiService.request` with a url, a method and one
``data`` argument regardless of the method. For ``GET`` the payload is sent
as query parameters, for every other method as the body. The service also
forwards cancellation to its dispatcher so endpoint modules can expose
``cancel_request`` / ``cancel_all_requests`` without touching the core.

Construction
------------
:func:`create_service` builds a service from :func:`get_dispatch_config`
with an instance interceptor scope that records request/response events.
Retry and payload-validation policy belong to callers of this module.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from ..base.dispatcher import Dispatcher
from ..base.dto import DispatcherConfig, HttpMethod, RequestDescriptor
from ..base.interceptors import ScopeInterceptors
from ..base.logging import LogContext, get_logger, log_event
from ..config import get_dispatch_config

_logger = get_logger(__name__)


def _log_instance_request(descriptor: RequestDescriptor) -> RequestDescriptor:
    log_event(
        _logger,
        "service.request",
        LogContext(method=descriptor.method.value, url=descriptor.url),
        level=logging.DEBUG,
    )
    return descriptor


def _log_instance_response(value: Any) -> Any:
    log_event(_logger, "service.response", level=logging.DEBUG, payload_type=type(value).__name__)
    return value


def instance_interceptors() -> ScopeInterceptors:
    """Instance scope installed by :func:`create_service` (debug logging only)."""
    return ScopeInterceptors.of(on_request=_log_instance_request, on_response=_log_instance_response)


class ApiService:
    """Thin convenience layer mapping endpoint calls onto descriptors."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self.dispatcher = dispatcher

    @staticmethod
    def build_descriptor(
        url: str,
        *,
        method: Union[HttpMethod, str] = HttpMethod.GET,
        data: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout_ms: Optional[float] = None,
        interceptors: Optional[ScopeInterceptors] = None,
    ) -> RequestDescriptor:
        """Return the descriptor :meth:`request` would dispatch.

        ``data`` becomes ``params`` for GET requests and the body otherwise.
        GET data must be a mapping; anything else fails validation with
        ``pydantic.ValidationError``.
        """
        fields: Dict[str, Any] = {
            "url": url,
            "method": method,
            "headers": dict(headers or {}),
            "timeout_ms": timeout_ms,
            "interceptors": interceptors,
        }
        descriptor = RequestDescriptor.model_validate(fields)
        if descriptor.method is HttpMethod.GET:
            return descriptor.with_updates(params=data)
        return descriptor.with_updates(data=data)

    async def request(self, url: str, **kwargs: Any) -> Any:
        """Dispatch a request built by :meth:`build_descriptor`."""
        return await self.dispatcher.request(self.build_descriptor(url, **kwargs))

    def cancel_request(self, urls: Union[str, Iterable[str]]) -> int:
        return self.dispatcher.cancel_request(urls)

    def cancel_all_requests(self) -> int:
        return self.dispatcher.cancel_all_requests()

    async def aclose(self) -> None:
        await self.dispatcher.aclose()

    async def __aenter__(self) -> "ApiService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def create_service(overrides: Optional[Dict[str, Any]] = None, *, dispatcher_kwargs: Optional[Dict[str, Any]] = None) -> ApiService:
    """Build an :class:`ApiService` from merged configuration.

    Parameters
    ----------
    overrides:
        Config keys taking precedence over file and environment values.
    dispatcher_kwargs:
        Extra keyword arguments for :class:`Dispatcher` (e.g. ``transport``).
    """
    cfg = get_dispatch_config(overrides)
    cfg.setdefault("interceptors", instance_interceptors())
    config = DispatcherConfig.from_mapping(cfg)
    return ApiService(Dispatcher(config, **(dispatcher_kwargs or {})))


__all__ = ["ApiService", "create_service", "instance_interceptors"]
