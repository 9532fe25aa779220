"""Unified timeout configuration for dispatched requests.

Centralizes the fallback timeout used when neither the request descriptor
nor the dispatcher configuration carries one. Exceeding a timeout is not
handled here: the value is forwarded to the transport, which reports expiry
as a ``TransportError`` with code ``timeout``.

Environment variables
---------------------
DISPATCH_TIMEOUT_HTTP_SECONDS
    Baseline end-to-end HTTP timeout in seconds (default 60, the same as
    ``DISPATCH_DEFAULT_TIMEOUT_MS``).
DISPATCH_TIMEOUT_CONNECT_SECONDS
    Optional tighter bound for establishing the connection.

Values are cached after the first read and refreshed when the variables
change, so tests may adjust them with ``monkeypatch.setenv``.
"""
from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional

import httpx


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        http_timeout_seconds: Fallback timeout for a whole request.
        connect_timeout_seconds: Optional connect-phase bound; ``None`` means
            the connect phase shares ``http_timeout_seconds``.
    """

    http_timeout_seconds: float = 60.0
    connect_timeout_seconds: Optional[float] = None


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float | None) -> float | None:
    """Parse an environment variable as a positive float with a fallback default."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
        return val if val > 0 else default
    except ValueError:
        return default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(
        [
            os.getenv("DISPATCH_TIMEOUT_HTTP_SECONDS", ""),
            os.getenv("DISPATCH_TIMEOUT_CONNECT_SECONDS", ""),
        ]
    )
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    _CACHED = TimeoutConfig(
        http_timeout_seconds=float(_parse_env_float("DISPATCH_TIMEOUT_HTTP_SECONDS", 60.0)),
        connect_timeout_seconds=_parse_env_float("DISPATCH_TIMEOUT_CONNECT_SECONDS", None),
    )
    _ENV_GUARD = guard
    return _CACHED


def resolve_timeout(*candidates_ms: Optional[float]) -> httpx.Timeout:
    """Build an ``httpx.Timeout`` from the first non-``None`` millisecond value.

    Candidates are checked in order (per-call override first, then the
    dispatcher default). When none is set the :func:`get_timeout_config`
    fallback applies.
    """
    cfg = get_timeout_config()
    seconds = next((ms / 1000.0 for ms in candidates_ms if ms is not None), cfg.http_timeout_seconds)
    connect = cfg.connect_timeout_seconds
    if connect is not None and connect < seconds:
        return httpx.Timeout(seconds, connect=connect)
    return httpx.Timeout(seconds)


__all__ = ["TimeoutConfig", "get_timeout_config", "resolve_timeout"]
