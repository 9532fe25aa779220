"""Response envelope DTO.

Servers behind this client answer with ``{code, message, data}``. Only
``data`` crosses the dispatcher boundary; ``code`` and ``message`` are kept
on the model for diagnostics but are neither validated nor interpreted.
"""
from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict


class Envelope(BaseModel):
    """Transport-level response wrapper."""

    model_config = ConfigDict(extra="allow")

    code: Any = None
    message: Any = None
    data: Any = None

    @staticmethod
    def matches(body: Any) -> bool:
        """Return whether ``body`` has the envelope shape.

        A body qualifies when it is a mapping holding ``data`` together with
        ``code`` or ``message``. Anything else is passed through untouched.
        """
        return isinstance(body, Mapping) and "data" in body and ("code" in body or "message" in body)


def unwrap_envelope(body: Any) -> Any:
    """Return the envelope's ``data`` member, or ``body`` when not an envelope."""
    if not Envelope.matches(body):
        return body
    return body["data"]


__all__ = ["Envelope", "unwrap_envelope"]
