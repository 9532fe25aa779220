"""Service layer: endpoint binding helpers and the debugging CLI."""

from .api_service import ApiService, create_service, instance_interceptors

__all__ = ["ApiService", "create_service", "instance_interceptors"]
