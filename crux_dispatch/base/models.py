"""
Internal transport result model.

``RawResponse`` is what a transport hands back to the dispatcher after a
successful call: the decoded body plus enough metadata for logging. It never
reaches callers directly; the dispatcher unwraps ``body``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class RawResponse:
    """Decoded response of one transport call.

    Attributes:
        status_code: HTTP status returned by the server.
        body: Decoded body (parsed JSON when the payload is JSON, text
            otherwise, ``None`` when empty).
        headers: Response headers.
        url: Final absolute url the transport reached.
        elapsed_ms: Wall-clock duration of the call.
    """

    status_code: int
    body: Any
    headers: Dict[str, str] = field(default_factory=dict)
    url: Optional[str] = None
    elapsed_ms: Optional[float] = None


__all__ = ["RawResponse"]
