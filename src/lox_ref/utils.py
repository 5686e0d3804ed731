from __future__ import annotations

import os as _os
from typing import Optional

DEBUG_PY_TRACE_ENV = "LOX_DEBUG_PY_TRACE"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean switch from the environment."""
    raw = _os.environ.get(name)
    if raw is None:
        return default

    raw = raw.strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    return default


def parse_switch(arg: str) -> Optional[bool]:
    """Map an on/off argument to a bool; '' means toggle (None)."""
    arg = arg.strip().lower()
    if arg == "":
        return None
    if arg in _TRUTHY:
        return True
    if arg in _FALSY:
        return False
    raise ValueError(f"expected on|off, got {arg!r}")


def debug_py_trace_enabled() -> bool:
    return env_flag(DEBUG_PY_TRACE_ENV)


def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        _os.environ[DEBUG_PY_TRACE_ENV] = "1"
    else:
        _os.environ.pop(DEBUG_PY_TRACE_ENV, None)
