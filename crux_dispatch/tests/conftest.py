"""Pytest configuration for the dispatcher test suite.

Resets process-wide state (global interceptor scope, config file cache) so
tests cannot leak configuration into each other.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from crux_dispatch.base.interceptors import set_global_interceptors
from crux_dispatch.config import reset_config_cache
from crux_dispatch.tests.utils import GatedTransport


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "DISPATCH_BASE_URL",
        "DISPATCH_TIMEOUT_MS",
        "DISPATCH_UNWRAP_ENVELOPE",
        "DISPATCH_CONFIG_FILE",
        "DISPATCH_TIMEOUT_HTTP_SECONDS",
        "DISPATCH_TIMEOUT_CONNECT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    set_global_interceptors(None)
    reset_config_cache()
    yield
    set_global_interceptors(None)
    reset_config_cache()


@pytest.fixture()
def gated_transport() -> GatedTransport:
    return GatedTransport()
