"""Process-wide default for the global interceptor scope.

Dispatchers snapshot the global scope at construction time, so changing it
afterwards only affects dispatchers created later. Holds no request state.
"""

from __future__ import annotations

from typing import Optional

from .stage import ScopeInterceptors

_GLOBAL_SCOPE: Optional[ScopeInterceptors] = None


def set_global_interceptors(scope: Optional[ScopeInterceptors]) -> None:
    """Set the global scope used by dispatchers created from now on.

    Side effects:
        Mutates module-level state to point to the provided scope; ``None``
        restores the built-in default.
    """

    global _GLOBAL_SCOPE
    _GLOBAL_SCOPE = scope


def get_global_interceptors() -> ScopeInterceptors:
    """Return the global scope (the built-in logging stages by default)."""

    if _GLOBAL_SCOPE is not None:
        return _GLOBAL_SCOPE
    from .defaults import default_global_interceptors

    return default_global_interceptors()
