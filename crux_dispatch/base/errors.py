"""Unified dispatch error taxonomy public surface.

This module re-exports the implementations under
``crux_dispatch.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.dispatch_error import DispatchError, InterceptorError, TransportError
from .errors_parts.classification import classify_exception, status_to_code
from .cancellation_parts.cancellation_error import CancellationError

__all__ = [
    "ErrorCode",
    "DispatchError",
    "TransportError",
    "InterceptorError",
    "CancellationError",
    "classify_exception",
    "status_to_code",
]
