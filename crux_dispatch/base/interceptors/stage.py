"""Interceptor stage structures.

An interceptor stage is a pair of optional transforms ``(on_success,
on_error)``. Stages are grouped per scope into :class:`ScopeInterceptors`,
which holds one nullable slot for the request side and one for the response
side. An empty slot, or an empty handler inside a stage, behaves as the
identity transform (or, for ``on_error``, as "propagate the failure").

All three structures are frozen: once installed on a dispatcher (global and
instance scopes) or attached to a descriptor (per-call scope) they cannot be
altered.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional


class InterceptorScope(str, Enum):
    """Scope a stage was installed at; determines its position in the chain."""

    GLOBAL = "global"
    INSTANCE = "instance"
    PER_CALL = "per_call"


SuccessHandler = Callable[[Any], Any]
ErrorHandler = Callable[[BaseException], Any]


@dataclass(frozen=True)
class InterceptorStage:
    """A pair of transform functions applied at one point of the chain.

    Attributes:
        on_success: Receives the value flowing through the chain (a
            ``RequestDescriptor`` on the request side, the unwrapped payload on
            the response side) and returns its replacement.
        on_error: Receives a failure. On the response side, returning a value
            recovers the request (the caller receives that value); raising
            propagates. On the request side it may only translate the failure
            raised by this stage's own ``on_success``; the chain stops either way.
    """

    on_success: Optional[SuccessHandler] = None
    on_error: Optional[ErrorHandler] = None


@dataclass(frozen=True)
class ScopeInterceptors:
    """Request/response stage slots for a single scope.

    Attributes:
        request: Stage applied on the way in, before the transport call.
        response: Stage applied on the way out, after the transport settles.
    """

    request: Optional[InterceptorStage] = None
    response: Optional[InterceptorStage] = None

    @classmethod
    def of(
        cls,
        *,
        on_request: Optional[SuccessHandler] = None,
        on_request_error: Optional[ErrorHandler] = None,
        on_response: Optional[SuccessHandler] = None,
        on_response_error: Optional[ErrorHandler] = None,
    ) -> "ScopeInterceptors":
        """Build a scope from bare handlers, leaving unused slots empty."""
        request = None
        if on_request is not None or on_request_error is not None:
            request = InterceptorStage(on_request, on_request_error)
        response = None
        if on_response is not None or on_response_error is not None:
            response = InterceptorStage(on_response, on_response_error)
        return cls(request=request, response=response)


__all__ = [
    "InterceptorScope",
    "InterceptorStage",
    "ScopeInterceptors",
    "SuccessHandler",
    "ErrorHandler",
]
