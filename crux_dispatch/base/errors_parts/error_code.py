"""
Normalized dispatch error codes (taxonomy).

Defines the `ErrorCode` enumeration attached to every dispatch failure. Values
are lowercase snake_case and are considered a stable public contract for
logging and analytics.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    CANCELLED = "cancelled"
    TIMEOUT = "timeout"
    NETWORK = "network"
    HTTP_STATUS = "http_status"
    INTERCEPTOR = "interceptor"
    DECODE = "decode"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    RATE_LIMIT = "rate_limit"
    VALIDATION = "validation"
    SERVER_ERROR = "server_error"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
