"""Cancellation error type.

Defines the public ``CancellationError`` used when an in-flight request
settles because its cancel handle was invoked.
"""

from __future__ import annotations

from typing import Optional


class CancellationError(RuntimeError):
    """Raised when a request is cancelled cooperatively.

    This specialized error distinguishes cooperative cancellation from
    transport failures, enabling targeted handling (e.g., suppress log noise
    or ignore a superseded fetch in the UI layer).
    """

    def __init__(self, reason: Optional[str] = None, *, url: Optional[str] = None) -> None:
        self.reason = reason or "request cancelled"
        self.url = url
        super().__init__(self.reason)


__all__ = ["CancellationError"]
