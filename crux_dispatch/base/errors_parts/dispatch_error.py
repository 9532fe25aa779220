"""
Structured dispatch error exception types.

``DispatchError`` wraps failures raised while dispatching a request with a
normalized `ErrorCode` and the request coordinates (method and url) for
structured logging. ``TransportError`` and ``InterceptorError`` narrow it to
the two failure sources the dispatcher distinguishes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass(eq=False)
class DispatchError(Exception):
    """Represents a structured dispatch failure with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        url: Request url the failure relates to, when known.
        method: HTTP method of the failed request, when known.
        status_code: HTTP status returned by the server for status failures.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    url: Optional[str] = None
    method: Optional[str] = None
    status_code: Optional[int] = None
    raw: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining method, url, code, and message."""
        return f"{self.method or '-'} {self.url or '-'} {self.code.value}: {self.message}"


@dataclass(eq=False)
class TransportError(DispatchError):
    """Network, timeout, HTTP-status or body-decoding failure of a transport call."""


@dataclass(eq=False)
class InterceptorError(DispatchError):
    """Raised by a request-side interceptor stage to reject a request explicitly.

    ``code`` defaults to :attr:`ErrorCode.INTERCEPTOR` so stages can raise
    ``InterceptorError(message="...")`` without naming a code.
    """

    code: ErrorCode = ErrorCode.INTERCEPTOR
    message: str = "request rejected by interceptor"


__all__ = ["DispatchError", "TransportError", "InterceptorError"]
