"""CLI parser construction for crux-dispatch.

This module wires arguments only; handlers live in ``cli_actions`` to keep
files small and testable.
"""

from __future__ import annotations

import argparse

from ...config.defaults import DISPATCH_CLI_DEFAULT_METHOD


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI parser.

    Returns
    -------
    argparse.ArgumentParser
        Parser for a single request invocation. No I/O happens here.
    """
    p = argparse.ArgumentParser(
        prog="crux-dispatch",
        description="Dispatch a single HTTP request (safe by default: dry-run)",
    )
    p.add_argument("url", help="Request url, relative to --base-url or absolute")
    p.add_argument("--method", "-X", default=DISPATCH_CLI_DEFAULT_METHOD)
    p.add_argument("--data", "-d", default=None, help="JSON payload (query params for GET)")
    p.add_argument(
        "--header",
        "-H",
        action="append",
        default=[],
        metavar="NAME:VALUE",
        help="Extra request header; may be repeated",
    )
    p.add_argument("--base-url", default=None)
    p.add_argument("--timeout-ms", type=float, default=None)
    p.add_argument("--raw", action="store_true", help="Do not unwrap {code, message, data} envelopes")
    p.add_argument("--execute", action="store_true", help="Perform the request instead of printing the plan")
    return p


__all__ = ["build_parser"]
