"""HTTP transport package for the dispatcher.

Exposes the ``Transport`` protocol and its ``httpx`` implementation.
"""

from .transport import Transport
from .httpx_transport import HttpxTransport

__all__ = ["Transport", "HttpxTransport"]
