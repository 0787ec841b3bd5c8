from __future__ import annotations

import sys

_verbose = False


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def is_verbose() -> bool:
    return _verbose


def log(message: str) -> None:
    # stdout is reserved for CLI output
    if _verbose:
        print(f"[crackfield] {message}", file=sys.stderr)
