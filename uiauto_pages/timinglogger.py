# uiauto_pages/timinglogger.py
"""
@file timinglogger.py
@brief Poll loop observability: one line per wait/retry event.

    TIMING_LOGGER.configure(console=False, file_path="timing.log")
    TIMING_LOGGER.enable()
    element.wait.has_text("Saved")
    # 12:01:07 [timing] wait_start     //p text timeout_s=10.0 interval_s=0.2 reverse=False
    # 12:01:08 [timing] wait_success   //p text status=success attempts=4 elapsed_s=0.61
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

from .logsink import LogSink

EVENTS = (
    "wait_start",
    "wait_success",
    "wait_timeout",
    "wait_error",
    "retry_start",
    "retry_success",
    "retry_timeout",
)


class TimingLogger(LogSink):

    def configure(self, *, console: bool = True, file_path: Optional[str] = None, level: str = "INFO") -> None:
        with self._lock:
            self._configure_output(console, file_path, level)

    def log(
        self,
        *,
        event: str,
        description: Optional[str] = None,
        status: str = "info",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Emit a poll event.

        @param event One of EVENTS
        @param description What the poll waits for
        @param status info, success or error
        @param metadata Extra key=value pairs; None values are left out
        """
        if not self._enabled:
            return

        line = f"{time.strftime('%H:%M:%S')} [timing] {event:<14}"
        if description:
            line += f" {description}"
        if status != "info":
            line += f" status={status}"
        extras = " ".join(f"{key}={value}" for key, value in (metadata or {}).items() if value is not None)
        if extras:
            line += f" {extras}"
        self._emit(line)


TIMING_LOGGER = TimingLogger()
