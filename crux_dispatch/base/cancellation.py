"""Cooperative cancellation primitives (public API facade).

Purpose
-------
Expose the cancellation constructs via the canonical
``crux_dispatch.base.cancellation`` import path while the concrete
implementations live under ``cancellation_parts``.

Notes
-----
- ``CancellationToken`` is the per-request cancel handle: invoking
  ``token.cancel()`` makes the pending transport call settle as cancelled.
- ``CancellationError`` is raised by the transport (and therefore by
  ``Dispatcher.request``) when a request settles through its cancel handle.
"""

from .cancellation_parts.cancellation_error import CancellationError
from .cancellation_parts.cancellation_token import CancelCallback, CancellationToken

__all__ = ["CancellationToken", "CancellationError", "CancelCallback"]
