"""Severity-tagged console logger."""

from __future__ import annotations

import sys
from typing import TextIO


_LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}

_RESET = "\033[0m"
_TAGS = {
    "DEBUG": ("[DEBUG]", "\033[2m"),
    "INFO": ("[INFO]", "\033[0;34m"),
    "OK": ("[OK]", "\033[0;32m"),
    "WARN": ("[WARN]", "\033[0;33m"),
    "ERROR": ("[ERROR]", "\033[0;31m"),
    "DRY": ("[DRY RUN]", "\033[1m"),
}


def _is_tty(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        return False


class Logger:
    """Console logger with level filtering and colored severity tags.

    Errors go to stderr, everything else to stdout. Colors are only used
    when the target stream is a terminal.
    """

    def __init__(
        self,
        level: str = "INFO",
        stream: TextIO | None = None,
        err_stream: TextIO | None = None,
    ) -> None:
        self._level = _LEVELS.get(level.upper(), _LEVELS["INFO"])
        self._stream = stream
        self._err_stream = err_stream

    def set_stream(self, stream: TextIO | None, err_stream: TextIO | None = None) -> None:
        self._stream = stream
        self._err_stream = err_stream

    def set_level(self, level: str) -> None:
        self._level = _LEVELS.get(level.upper(), _LEVELS["INFO"])

    def _write(self, kind: str, message: str, to_stderr: bool = False) -> None:
        if to_stderr:
            stream = self._err_stream or sys.stderr
        else:
            stream = self._stream or sys.stdout
        tag, color = _TAGS[kind]
        if _is_tty(stream):
            tag = f"{color}{tag}{_RESET}"
        print(f"{tag} {message}", file=stream)

    def debug(self, message: str) -> None:
        if self._level <= _LEVELS["DEBUG"]:
            self._write("DEBUG", message)

    def info(self, message: str) -> None:
        if self._level <= _LEVELS["INFO"]:
            self._write("INFO", message)

    def ok(self, message: str) -> None:
        if self._level <= _LEVELS["INFO"]:
            self._write("OK", message)

    def dry(self, message: str) -> None:
        if self._level <= _LEVELS["INFO"]:
            self._write("DRY", message)

    def warn(self, message: str) -> None:
        if self._level <= _LEVELS["WARN"]:
            self._write("WARN", message)

    def error(self, message: str) -> None:
        if self._level <= _LEVELS["ERROR"]:
            self._write("ERROR", message, to_stderr=True)


_LOGGER = Logger()


def get_logger() -> Logger:
    """Return the shared logger instance."""
    return _LOGGER
