from __future__ import annotations

import numpy as np

from . import debug

_seen: set[str] = set()


def log_once(key: str, message: str) -> None:
    if debug.is_verbose() and key not in _seen:
        _seen.add(key)
        debug.log(message)


def reset_once() -> None:
    _seen.clear()


def log_array(name: str, arr: np.ndarray) -> None:
    """Shape and bounding box of a coordinate array."""
    if not debug.is_verbose():
        return
    if arr.size == 0:
        debug.log(f"{name}: shape={arr.shape} empty")
        return
    finite_all = bool(np.isfinite(arr).all())
    lo = arr.min(axis=0) if arr.ndim == 2 else np.atleast_1d(arr.min())
    hi = arr.max(axis=0) if arr.ndim == 2 else np.atleast_1d(arr.max())
    bounds = " ".join(f"[{a:.6g},{b:.6g}]" for a, b in zip(lo, hi))
    debug.log(f"{name}: shape={arr.shape} finite_all={finite_all} bounds={bounds}")
