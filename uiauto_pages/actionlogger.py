# uiauto_pages/actionlogger.py
"""
@file actionlogger.py
@brief Records node actions (click, set_value) and retry attempts.

Two output formats:

  line   12:01:07 | INFO | click | PageElement '//button' | ok | 42ms
  jsonl  {"ts": "...", "action": "click", "selector": "//button", ...}

Values typed into inputs are shortened, and metadata keys that look like
credentials are replaced with ***.
"""

from __future__ import annotations

import json
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .logsink import LogSink

FORMATS = ("line", "jsonl")
SENSITIVE_KEYS = frozenset({"password", "passwd", "secret", "token"})
VISIBLE_VALUE_CHARS = 10


class ActionLogger(LogSink):

    def __init__(self) -> None:
        super().__init__()
        self._format = "line"
        self._run_id: Optional[str] = None
        self._sample_retry_events = 1

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        level: str = "INFO",
        format: str = "line",
        run_id: Optional[str] = None,
        sample_retry_events: int = 1,
    ) -> None:
        """
        @param format "line" or "jsonl"
        @param run_id Tag added to every event
        @param sample_retry_events Log every n-th retry attempt (the first is always logged)
        """
        fmt = (format or "line").lower()
        if fmt not in FORMATS:
            raise ValueError(f"ActionLogger format must be one of {list(FORMATS)}, got '{format}'")

        with self._lock:
            self._configure_output(console, file_path, level)
            self._format = fmt
            self._run_id = run_id
            self._sample_retry_events = max(1, int(sample_retry_events))

    def should_log_retry_attempt(self, attempt: int) -> bool:
        return attempt <= 1 or attempt % self._sample_retry_events == 0

    def log(
        self,
        action: str,
        *,
        node: Optional[str] = None,
        selector: Optional[str] = None,
        status: str = "ok",
        duration_ms: Optional[int] = None,
        attempt: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
        action_id: Optional[str] = None,
        event: str = "action",
    ) -> None:
        if not self._enabled:
            return

        record: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": self._level,
            "event": event,
            "action": action,
            "action_id": action_id,
            "node": node,
            "selector": selector,
            "status": status,
            "attempt": attempt,
            "duration_ms": duration_ms,
            "metadata": redact(action, metadata or {}),
        }
        if self._run_id:
            record["run_id"] = self._run_id
        if exception is not None:
            record["error"] = describe_exception(exception)

        if self._format == "jsonl":
            self._emit(json.dumps(record, ensure_ascii=False, default=str))
        else:
            self._emit(format_line(record))


def redact(action: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, value in metadata.items():
        if key.lower() in SENSITIVE_KEYS:
            result[key] = "***"
        elif action == "set_value" and key == "value":
            text = str(value)
            result[key] = text if len(text) <= VISIBLE_VALUE_CHARS else text[:VISIBLE_VALUE_CHARS] + "..."
        else:
            result[key] = value
    return result


def describe_exception(exception: BaseException) -> Dict[str, Optional[str]]:
    cause = exception.__cause__
    return {
        "type": type(exception).__name__,
        "message": str(exception).splitlines()[0] if str(exception) else "",
        "cause": f"{type(cause).__name__}: {cause}" if cause is not None else None,
    }


def format_line(record: Dict[str, Any]) -> str:
    target = record["node"] or ""
    if record["selector"]:
        target = f"{target} '{record['selector']}'".strip()

    parts = [time.strftime("%H:%M:%S"), record["level"], record["action"]]
    if target:
        parts.append(target)
    parts.append(record["status"])
    if record["attempt"] is not None:
        parts.append(f"attempt {record['attempt']}")
    if record["duration_ms"] is not None:
        parts.append(f"{record['duration_ms']}ms")
    parts.extend(f"{key}={value}" for key, value in record["metadata"].items())
    if record.get("error"):
        parts.append(f"{record['error']['type']}: {record['error']['message']}")
    if record.get("run_id"):
        parts.append(f"run={record['run_id']}")
    return " | ".join(parts)


ACTION_LOGGER = ActionLogger()
