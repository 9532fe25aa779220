"""crux_dispatch package

Client-side HTTP request orchestration: a dispatcher wrapping an ``httpx``
transport with a three-scope interceptor pipeline and a url-keyed
cancellation registry.

Public API (re-exported):
    - Version: ``__version__``
    - Dispatcher: :class:`Dispatcher`, :class:`DispatcherConfig`,
      :class:`RequestDescriptor`, :class:`HttpMethod`
    - Interceptors: :class:`InterceptorStage`, :class:`ScopeInterceptors`,
      :func:`set_global_interceptors`
    - Errors: :class:`DispatchError`, :class:`TransportError`,
      :class:`InterceptorError`, :class:`CancellationError`, :class:`ErrorCode`
    - Service: :class:`ApiService`, :func:`create_service`

Example::

    async with Dispatcher(DispatcherConfig(base_url="https://api.example.com")) as d:
        weather = await d.request({"url": "/weather", "params": {"area": "x"}})
"""

from .base.cancellation import CancellationError
from .base.dispatcher import Dispatcher
from .base.dto import DispatcherConfig, HttpMethod, RequestDescriptor
from .base.errors import DispatchError, ErrorCode, InterceptorError, TransportError
from .base.interceptors import (
    InterceptorScope,
    InterceptorStage,
    ScopeInterceptors,
    set_global_interceptors,
)
from .service import ApiService, create_service

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Dispatcher",
    "DispatcherConfig",
    "HttpMethod",
    "RequestDescriptor",
    "InterceptorScope",
    "InterceptorStage",
    "ScopeInterceptors",
    "set_global_interceptors",
    "DispatchError",
    "TransportError",
    "InterceptorError",
    "CancellationError",
    "ErrorCode",
    "ApiService",
    "create_service",
]
