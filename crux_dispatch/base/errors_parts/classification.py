"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction and status-to-code mapping so that raw
``httpx`` failures and arbitrary interceptor exceptions can be reported with
the same taxonomy as :class:`DispatchError`.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

import httpx

from ..cancellation_parts.cancellation_error import CancellationError
from .error_code import ErrorCode
from .dispatch_error import DispatchError


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.UNAVAILABLE,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}


def status_to_code(status: int) -> ErrorCode:
    """Map an HTTP status to an ErrorCode, defaulting to ``HTTP_STATUS``."""
    return _HTTP_STATUS_MAP.get(status, ErrorCode.HTTP_STATUS)


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. DispatchError passthrough.
        2. Cancellation (cooperative or asyncio task cancellation).
        3. Timeout exceptions (stdlib, asyncio, httpx).
        4. HTTP status mapping.
        5. Other ``httpx`` transport failures map to ``NETWORK``.
        6. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, DispatchError):
        return exc.code
    if isinstance(exc, (CancellationError, asyncio.CancelledError)):
        return ErrorCode.CANCELLED
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    status = _extract_status(exc)
    if status is not None:
        return status_to_code(status)
    if isinstance(exc, httpx.TransportError):
        return ErrorCode.NETWORK
    return ErrorCode.UNKNOWN


__all__ = [
    "classify_exception",
    "status_to_code",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
