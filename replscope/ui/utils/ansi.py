#!/usr/bin/env python3
# replscope/ui/utils/ansi.py
from __future__ import annotations

"""
Minimal ANSI styling for shell output and log records.

Only the handful of SGR styles replscope itself uses are defined. Whether a
stream gets colors is decided once per stream by supports_color().
"""

import ctypes
import os
import re
from typing import Any, Optional


def _sgr(code: int) -> str:
    return f"\x1b[{code}m"


ANSI: dict[str, str] = {
    "reset": _sgr(0),
    "bold": _sgr(1),
    "dim": _sgr(2),
    "red": _sgr(31),
    "green": _sgr(32),
    "yellow": _sgr(33),
    "magenta": _sgr(35),
    "cyan": _sgr(36),
    "bright_black": _sgr(90),
}

# CSI sequences, e.g. colors or cursor movement pasted into a command line
_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")

_vt_state: Optional[bool] = None


def strip_ansi(text: str) -> str:
    """Return `text` without terminal escape sequences."""
    return _ESCAPE_RE.sub("", text)


def _switch_on_windows_vt() -> bool:
    # ENABLE_VIRTUAL_TERMINAL_PROCESSING on the stderr console handle
    try:
        kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
        handle = kernel32.GetStdHandle(-12)
        mode = ctypes.c_uint()
        if handle in (0, -1) or not kernel32.GetConsoleMode(handle, ctypes.byref(mode)):
            return False
        return bool(kernel32.SetConsoleMode(handle, mode.value | 0x0004))
    except (AttributeError, OSError):
        return False


def enable_windows_vt() -> bool:
    """
    True if escape sequences are interpreted by this process's console.

    Always True outside Windows. On Windows the console is switched to VT
    mode on first use; the answer is cached.
    """
    global _vt_state
    if _vt_state is None:
        if os.name != "nt" or os.environ.get("WT_SESSION"):
            _vt_state = True
        else:
            _vt_state = _switch_on_windows_vt()
    return _vt_state


def supports_color(stream: Any) -> bool:
    """Colors only for terminals, never when NO_COLOR is set."""
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty()) and enable_windows_vt()


def colorize(text: str, *styles: str) -> str:
    """Wrap `text` in the named styles; unknown names are ignored."""
    prefix = "".join(ANSI.get(style, "") for style in styles)
    if not prefix:
        return text
    return prefix + text + ANSI["reset"]
