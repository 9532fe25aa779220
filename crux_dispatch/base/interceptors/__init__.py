"""Three-scope interceptor pipeline (global, instance, per-call)."""

from .stage import InterceptorScope, InterceptorStage, ScopeInterceptors
from .chain import InterceptorChain, Outcome
from .registry import get_global_interceptors, set_global_interceptors
from .defaults import default_global_interceptors

__all__ = [
    "InterceptorScope",
    "InterceptorStage",
    "ScopeInterceptors",
    "InterceptorChain",
    "Outcome",
    "get_global_interceptors",
    "set_global_interceptors",
    "default_global_interceptors",
]
