"""Core dispatch layer: transport, interceptors, cancellation and dispatcher."""

from .cancellation import CancellationError, CancellationToken
from .cancellation_registry import CancellationEntry, CancellationRegistry
from .dispatcher import Dispatcher
from .dto import DispatcherConfig, Envelope, HttpMethod, RequestDescriptor
from .errors import DispatchError, ErrorCode, InterceptorError, TransportError
from .http import HttpxTransport, Transport
from .interceptors import InterceptorScope, InterceptorStage, ScopeInterceptors
from .models import RawResponse

__all__ = [
    "CancellationError",
    "CancellationToken",
    "CancellationEntry",
    "CancellationRegistry",
    "Dispatcher",
    "DispatcherConfig",
    "Envelope",
    "HttpMethod",
    "RequestDescriptor",
    "DispatchError",
    "ErrorCode",
    "InterceptorError",
    "TransportError",
    "HttpxTransport",
    "Transport",
    "InterceptorScope",
    "InterceptorStage",
    "ScopeInterceptors",
    "RawResponse",
]
