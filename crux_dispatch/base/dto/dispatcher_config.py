"""Typed configuration object for dispatcher construction.

Captures the instance-level settings of a ``Dispatcher``: base address,
default timeout, default headers, the instance interceptor scope and whether
response envelopes are unwrapped. ``from_mapping`` accepts the merged dict
produced by :func:`crux_dispatch.config.get_dispatch_config`.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, InstanceOf

from ..interceptors.stage import ScopeInterceptors


class DispatcherConfig(BaseModel):
    """Instance-level dispatcher settings.

    Attributes
    ----------
    base_url:
        Base address that relative descriptor urls are resolved against.
    timeout_ms:
        Default timeout in milliseconds; a descriptor's ``timeout_ms`` wins.
        When both are unset, ``get_timeout_config()`` supplies the value.
    headers:
        Headers sent with every request of this dispatcher.
    interceptors:
        Instance interceptor scope (between global and per-call).
    unwrap_envelope:
        When ``True`` a ``{code, message, data}`` response body is reduced to
        its ``data`` member before response interceptors run.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    base_url: Optional[str] = None
    timeout_ms: Optional[float] = Field(default=None, gt=0)
    headers: Dict[str, str] = Field(default_factory=dict)
    interceptors: Optional[InstanceOf[ScopeInterceptors]] = None
    unwrap_envelope: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], **overrides: Any) -> "DispatcherConfig":
        """Validate a plain mapping (plus keyword overrides) into a config."""
        merged = {**dict(data), **{k: v for k, v in overrides.items() if v is not None}}
        return cls.model_validate(merged)


__all__ = ["DispatcherConfig"]
