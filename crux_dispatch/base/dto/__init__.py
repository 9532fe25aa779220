"""DTO validation package for the dispatcher boundary."""

from .descriptor import HttpMethod, RequestDescriptor
from .dispatcher_config import DispatcherConfig
from .envelope import Envelope, unwrap_envelope

__all__ = [
    "HttpMethod",
    "RequestDescriptor",
    "DispatcherConfig",
    "Envelope",
    "unwrap_envelope",
]
