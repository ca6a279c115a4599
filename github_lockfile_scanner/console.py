"""Colored status lines for terminal output."""

import logging
import os
import sys
import threading

logging.getLogger("httpx").setLevel(logging.ERROR)
logging.getLogger("httpcore").setLevel(logging.ERROR)

RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[0;33m"
BLUE = "\033[0;34m"
CYAN = "\033[0;36m"
RESET = "\033[0m"

_lock = threading.Lock()


def _use_color(stream) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _write(msg: str, color: str | None = None, stream=None):
    stream = stream or sys.stdout
    if color and _use_color(stream):
        msg = f"{color}{msg}{RESET}"
    with _lock:
        stream.write(f"{msg}\n")
        stream.flush()


def plain(msg: str):
    _write(msg)


def info(msg: str):
    _write(msg, CYAN)


def step(msg: str):
    _write(msg, BLUE)


def success(msg: str):
    _write(msg, GREEN)


def warning(msg: str):
    _write(msg, YELLOW)


def error(msg: str):
    """Errors go to stderr so they survive stdout redirection."""
    _write(msg, RED, stream=sys.stderr)


def found(msg: str):
    """Vulnerable package hits are red but belong to the normal report on stdout."""
    _write(msg, RED)
