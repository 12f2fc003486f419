"""Terminal acquisition and non-blocking key polling."""

from __future__ import annotations

import os
import select
import sys
import time
from typing import Any

import termios
import tty


class TerminalUnavailableError(RuntimeError):
    """Raised when the interactive view cannot attach to a terminal."""


_ESCAPES = {
    b"[A": "up",
    b"[B": "down",
    b"[C": "right",
    b"[D": "left",
    b"OA": "up",
    b"OB": "down",
    b"OC": "right",
    b"OD": "left",
}

MAX_ESCAPE = 8


def require_terminal() -> None:
    if os.name != "posix":
        raise TerminalUnavailableError("interactive mode needs a POSIX terminal")
    if not sys.stdin.isatty():
        raise TerminalUnavailableError("stdin is not attached to a terminal")
    if not sys.stdout.isatty():
        raise TerminalUnavailableError("stdout is not attached to a terminal")


class KeyPoller:
    """Puts stdin in cbreak mode and decodes single key presses."""

    def __init__(self, stream=None):
        self._stream = stream if stream is not None else sys.stdin
        self.fd: int | None = None
        self._old: Any = None

    def __enter__(self) -> KeyPoller:
        try:
            self.fd = self._stream.fileno()
            self._old = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        except (OSError, termios.error) as exc:
            raise TerminalUnavailableError(f"cannot enter cbreak mode: {exc}") from exc
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.fd is not None and self._old is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._old)

    def poll(self) -> str:
        """Return the next key name, or "" when nothing is pending."""
        if self.fd is None:
            return ""
        ready, _, _ = select.select([self.fd], [], [], 0)
        if not ready:
            return ""
        raw = os.read(self.fd, 1)
        if not raw:
            return ""
        if raw == b"\x1b":
            seq = b""
            deadline = time.time() + 0.05
            while time.time() < deadline and not escape_complete(seq):
                rdy, _, _ = select.select([self.fd], [], [], 0.005)
                if not rdy:
                    break
                chunk = os.read(self.fd, 1)
                if not chunk:
                    break
                seq += chunk
            return decode_escape(seq)
        return decode_key(raw)


def escape_complete(seq: bytes) -> bool:
    """True once *seq* (the bytes after ESC) holds a whole CSI or SS3 sequence."""
    if len(seq) >= MAX_ESCAPE:
        return True
    return len(seq) >= 2 and 0x40 <= seq[-1] <= 0x7E


def decode_escape(seq: bytes) -> str:
    return _ESCAPES.get(seq, "esc")


def decode_key(raw: bytes) -> str:
    if raw in (b"\r", b"\n"):
        return "enter"
    return raw.decode("utf-8", errors="ignore")
