"""crux-dispatch debugging CLI (package entrypoint).

Public API re-exports:
- ``main``: CLI entrypoint callable
"""

from __future__ import annotations

import sys
from typing import Optional

from .cli_actions import handle_request
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code (0 success, 1 dispatch failure, 2 usage error).
    """
    args = build_parser().parse_args(list(sys.argv[1:] if argv is None else argv))
    return handle_request(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
