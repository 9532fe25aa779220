"""CLI action handlers.

Purpose
-------
Turn parsed arguments into an :class:`ApiService` call. Dry-run (the default)
prints the descriptor that would be dispatched; ``--execute`` performs the
request and prints the unwrapped payload as JSON on stdout.

Error semantics
---------------
- Invalid input (bad JSON, malformed header, unknown method) prints a JSON
  error object to stderr and returns ``2``.
- Dispatch failures print ``{"error": ..., "code": ...}`` to stderr and
  return ``1``.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, Optional, TextIO

from pydantic import ValidationError

from ...base.errors import CancellationError, DispatchError, classify_exception
from ...base.logging import get_logger, log_event
from ..api_service import ApiService, create_service

_logger = get_logger(__name__)


class UsageError(ValueError):
    """Raised for malformed command-line input."""


def parse_headers(values: list[str]) -> Dict[str, str]:
    """Parse ``NAME:VALUE`` strings into a header mapping."""
    headers: Dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            raise UsageError(f"malformed header: {item!r}")
        headers[name.strip()] = value.strip()
    return headers


def parse_data(raw: Optional[str]) -> Any:
    """Decode the ``--data`` JSON argument (``None`` when absent)."""
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise UsageError(f"--data is not valid JSON: {exc}") from exc


def _emit(payload: Any, stream: TextIO) -> None:
    stream.write(json.dumps(payload, ensure_ascii=False, indent=2, default=str) + "\n")


def plan_request(args: argparse.Namespace) -> Dict[str, Any]:
    """Return the dry-run plan for ``args`` without network I/O."""
    descriptor = ApiService.build_descriptor(
        args.url,
        method=args.method,
        data=parse_data(args.data),
        headers=parse_headers(args.header),
        timeout_ms=args.timeout_ms,
    )
    plan = descriptor.to_log_dict()
    plan["data"] = descriptor.data
    plan["base_url"] = args.base_url
    plan["unwrap_envelope"] = not args.raw
    return plan


async def _execute(args: argparse.Namespace, service_factory=create_service) -> Any:
    overrides: Dict[str, Any] = {"base_url": args.base_url, "timeout_ms": args.timeout_ms}
    if args.raw:
        overrides["unwrap_envelope"] = False
    async with service_factory(overrides) as service:
        return await service.request(
            args.url,
            method=args.method,
            data=parse_data(args.data),
            headers=parse_headers(args.header),
            timeout_ms=args.timeout_ms,
        )


def handle_request(
    args: argparse.Namespace,
    *,
    service_factory=create_service,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run the CLI action for ``args`` and return the process exit code."""
    out = stdout or sys.stdout
    err = stderr or sys.stderr
    try:
        if not args.execute:
            _emit({"plan": plan_request(args)}, out)
            return 0
        result = asyncio.run(_execute(args, service_factory))
    except (UsageError, ValidationError) as exc:
        _emit({"error": str(exc), "code": "usage"}, err)
        return 2
    except (DispatchError, CancellationError) as exc:
        code = classify_exception(exc).value
        log_event(_logger, "cli.request.failed", url=args.url, error_code=code)
        _emit({"error": str(exc), "code": code}, err)
        return 1
    _emit({"result": result}, out)
    return 0


__all__ = ["UsageError", "parse_headers", "parse_data", "plan_request", "handle_request"]
