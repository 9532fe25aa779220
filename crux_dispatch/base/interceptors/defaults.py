"""Built-in global interceptor stages.

The default global scope only records debug events; it never alters the
descriptor or the payload and it propagates failures unchanged, so an
unconfigured dispatcher cannot silently turn an error into a success.
"""
from __future__ import annotations

import logging
from typing import Any

from ..logging import LogContext, get_logger, log_event
from .stage import InterceptorStage, ScopeInterceptors

_logger = get_logger(__name__)


def _log_request(descriptor: Any) -> Any:
    log_event(
        _logger,
        "dispatch.interceptor.global.request",
        LogContext(method=getattr(getattr(descriptor, "method", None), "value", None), url=getattr(descriptor, "url", None)),
        level=logging.DEBUG,
    )
    return descriptor


def _log_response(value: Any) -> Any:
    log_event(_logger, "dispatch.interceptor.global.response", level=logging.DEBUG)
    return value


def default_global_interceptors() -> ScopeInterceptors:
    """Return the built-in global scope (debug logging, no transformation)."""
    return ScopeInterceptors(
        request=InterceptorStage(on_success=_log_request),
        response=InterceptorStage(on_success=_log_response),
    )


__all__ = ["default_global_interceptors"]
