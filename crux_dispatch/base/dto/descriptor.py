"""
Pydantic DTO describing a single dispatched request.

Purpose
-------
``RequestDescriptor`` is the structured input of ``Dispatcher.request``:
url, method, query params, body payload, headers, an optional timeout
override and an optional per-call interceptor scope. Request-side
interceptors receive and return descriptors, typically via
:meth:`RequestDescriptor.with_updates`.

Failure modes
-------------
Construction raises ``pydantic.ValidationError`` for unknown methods or
non-positive timeouts. No I/O happens here.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, InstanceOf, field_validator

from ..interceptors.stage import ScopeInterceptors


class HttpMethod(str, Enum):
    """HTTP methods accepted by the dispatcher."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class RequestDescriptor(BaseModel):
    """Structured description of one request.

    Attributes:
        url: Request path or absolute url. Optional, but requests without a
            url are not tracked by the cancellation registry and therefore
            cannot be cancelled by url.
        method: HTTP method; lower-case input is accepted.
        params: Query string parameters.
        data: Body payload. Mappings and lists are sent as JSON, ``str`` and
            ``bytes`` as raw content.
        headers: Per-call headers merged over the dispatcher defaults.
        timeout_ms: Per-call timeout override in milliseconds.
        interceptors: Per-call interceptor scope (innermost).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    url: Optional[str] = None
    method: HttpMethod = HttpMethod.GET
    params: Optional[Dict[str, Any]] = None
    data: Any = None
    headers: Dict[str, str] = Field(default_factory=dict)
    timeout_ms: Optional[float] = Field(default=None, gt=0)
    interceptors: Optional[InstanceOf[ScopeInterceptors]] = None

    @field_validator("method", mode="before")
    @classmethod
    def _normalize_method(cls, value: Any) -> Any:
        """Accept ``"get"``/``"Get"`` style spellings."""
        return value.strip().upper() if isinstance(value, str) else value

    @classmethod
    def coerce(cls, value: "RequestDescriptor | Mapping[str, Any]") -> "RequestDescriptor":
        """Return ``value`` unchanged if already a descriptor, else validate it."""
        if isinstance(value, cls):
            return value
        return cls.model_validate(dict(value))

    def with_updates(self, **changes: Any) -> "RequestDescriptor":
        """Return a validated copy with ``changes`` applied."""
        merged = {**self.model_dump(exclude={"interceptors"}), "interceptors": self.interceptors, **changes}
        return type(self).model_validate(merged)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return a compact, JSON-friendly view without payload or interceptors."""
        return {
            "url": self.url,
            "method": self.method.value,
            "params": self.params,
            "headers": sorted(self.headers),
            "timeout_ms": self.timeout_ms,
        }


__all__ = ["HttpMethod", "RequestDescriptor"]
