# uiauto_pages/logsink.py
"""
@file logsink.py
@brief Console/file output shared by the timing and action loggers.
"""

from __future__ import annotations

import os
import threading
import warnings
from typing import Optional


class LogSink:
    """
    Writes formatted lines to stdout and/or an append-only file.

    Disabled until enable() is called. A file that cannot be written is
    reported once with a warning and then dropped from the outputs.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._console = True
        self._file_path: Optional[str] = None
        self._level = "INFO"

    def _configure_output(self, console: bool, file_path: Optional[str], level: str) -> None:
        self._console = bool(console)
        self._file_path = file_path
        self._level = level.upper()

    @property
    def level(self) -> str:
        return self._level

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def _emit(self, line: str) -> None:
        with self._lock:
            if self._console:
                print(line, flush=True)
            if self._file_path:
                self._append(line)

    def _append(self, line: str) -> None:
        path = os.path.abspath(self._file_path)
        try:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            self._file_path = None
            warnings.warn(f"{type(self).__name__}: cannot write '{path}' ({e}); file output disabled")
