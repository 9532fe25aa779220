"""Cooperative cancellation token implementation.

Exposes the ``CancellationToken`` class that backs every cancel handle held by
the cancellation registry. A token is cancelled at most once; callbacks
registered with :meth:`CancellationToken.add_callback` run on that first
cancel, which is how transports abort the pending network call.
"""

from __future__ import annotations

from threading import Lock
from typing import Callable, List, Optional

from .cancellation_error import CancellationError

CancelCallback = Callable[[Optional[str]], None]


class CancellationToken:
    """A single-use cooperative cancellation token for one request.

    Thread-safe for basic ``cancel`` + ``raise_if_cancelled`` usage.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: Optional[str] = None
        self._lock = Lock()
        self._callbacks: List[CancelCallback] = []

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._reason

    def cancel(self, reason: str | None = None) -> bool:
        """Request cooperative cancellation and fire the registered callbacks.

        Returns ``True`` when this call performed the cancellation and ``False``
        when the token had already been cancelled (the handle is single-use).
        """
        with self._lock:
            if self._cancelled:
                return False
            self._cancelled = True
            self._reason = reason
            callbacks = list(self._callbacks)
            self._callbacks.clear()
        for callback in callbacks:
            callback(reason)
        return True

    def add_callback(self, callback: CancelCallback) -> Callable[[], None]:
        """Register ``callback`` to run on cancellation; returns a remover.

        When the token is already cancelled the callback runs immediately.
        """
        with self._lock:
            already = self._cancelled
            if not already:
                self._callbacks.append(callback)
        if already:
            callback(self._reason)

        def _remove() -> None:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return _remove

    def raise_if_cancelled(self) -> None:
        """Raise ``CancellationError`` if token is cancelled."""
        if self._cancelled:
            raise CancellationError(self._reason)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"CancellationToken(cancelled={self._cancelled}, reason={self._reason!r})"


__all__ = ["CancellationToken", "CancelCallback"]
