"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `crux_dispatch.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .dispatch_error import DispatchError, TransportError, InterceptorError
from .classification import classify_exception

__all__ = ["ErrorCode", "DispatchError", "TransportError", "InterceptorError", "classify_exception"]
