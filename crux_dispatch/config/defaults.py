"""crux_dispatch.config.defaults
=============================

Central place for small, stable default values used by the dispatcher and
the service layer. Each can be overridden through environment variables or
an external config file (see :mod:`crux_dispatch.config`).

This module intentionally avoids importing from other packages to prevent
circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Dispatcher ----
# Base address used when none is configured ("/" keeps urls relative to the host app).
DISPATCH_DEFAULT_BASE_URL = "/"
# Instance timeout applied when a descriptor carries none (milliseconds).
DISPATCH_DEFAULT_TIMEOUT_MS = 60000.0
# Reduce {code, message, data} bodies to their data member.
DISPATCH_DEFAULT_UNWRAP_ENVELOPE = True

# ---- CLI ----
DISPATCH_CLI_DEFAULT_METHOD = "GET"
