"""Structured logging: stderr console and optional JSONL event log.

stdout carries MCP frames, so every console line goes to stderr.
"""

import json
import logging
import sys
import threading
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import IO, Any

from angelscript_mcp.core.config import config


def _format_duration(seconds: float) -> str:
    if seconds < 0:
        return "0s"
    if seconds >= 60:
        m = int(seconds // 60)
        s = seconds % 60
        return f"{m}m {s:.0f}s"
    if seconds >= 0.05:
        return f"{seconds:.1f}s"
    if seconds > 0:
        return "<0.1s"
    return "0s"


def _short_reason(reason: str | None, max_len: int = 80) -> str:
    """One-line short reason for console (failed call)."""
    if not reason or not reason.strip():
        return ""
    s = reason.strip().replace("\n", " ").strip()
    return s[:max_len] + "..." if len(s) > max_len else s


@dataclass
class LogEvent:
    event_type: str
    timestamp: str
    data: dict[str, Any]

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class AngelscriptLogger:
    def __init__(self, events_enabled: bool = False, level: str = "INFO"):
        self.events_enabled = events_enabled
        self.log_file = config.logs_dir / "mcp-server.log"
        self._file_lock = threading.Lock()
        self._log_file_handle: IO[str] | None = None
        self._setup_console_logger(level)

    def _setup_console_logger(self, level: str):
        self.console = logging.getLogger("angelscript_mcp")
        self.console.setLevel(logging.DEBUG)
        self._console_formatter = logging.Formatter(
            "%(asctime)s │ %(message)s", datefmt="%H:%M:%S"
        )
        if not self.console.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setLevel(getattr(logging, level, logging.INFO))
            handler.setFormatter(self._console_formatter)
            self.console.addHandler(handler)
        self._setup_third_party_console_logging()

    def _setup_third_party_console_logging(self):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.WARNING)
        handler.setFormatter(self._console_formatter)
        log = logging.getLogger("mcp")
        log.setLevel(logging.WARNING)
        log.propagate = False
        if not log.handlers:
            log.addHandler(handler)

    def _events_file(self) -> IO[str]:
        if self._log_file_handle is None:
            config.logs_dir.mkdir(parents=True, exist_ok=True)
            self._log_file_handle = open(self.log_file, "a", encoding="utf-8")
        return self._log_file_handle

    def log_event(self, event: LogEvent) -> None:
        if not self.events_enabled:
            return
        with self._file_lock:
            handle = self._events_file()
            handle.write(event.to_json() + "\n")
            handle.flush()

    def _timestamp(self) -> str:
        return datetime.now().isoformat()

    def tool_execute(self, tool_name: str, args: dict) -> float:
        """Log a tool invocation; returns the monotonic start time for tool_result."""
        event = LogEvent(
            event_type="TOOL_EXECUTE",
            timestamp=self._timestamp(),
            data={"tool": tool_name, "args": args},
        )
        self.log_event(event)
        short_args = ", ".join(f"{k}={v!r}" for k, v in (args or {}).items())
        self.console.info(f"▶ Run  {tool_name}({short_args})")
        return time.monotonic()

    def tool_result(
        self,
        tool_name: str,
        result_length: int,
        success: bool,
        *,
        started: float | None = None,
        error_reason: str | None = None,
    ) -> None:
        elapsed = (time.monotonic() - started) if started is not None else 0.0
        data: dict[str, Any] = {
            "tool": tool_name,
            "result_length": result_length,
            "success": success,
            "duration_seconds": round(elapsed, 3),
        }
        if not success and error_reason:
            data["error_reason"] = error_reason[:500]
        self.log_event(
            LogEvent(event_type="TOOL_RESULT", timestamp=self._timestamp(), data=data)
        )
        status = "[ok]" if success else f"[failed] {_short_reason(error_reason)}".rstrip()
        self.console.info(
            f"✓ Done  {tool_name}  total {_format_duration(elapsed)}  {result_length} chars  {status}"
        )

    def detail_failed(self, label: str, exception: BaseException) -> None:
        self.log_event(
            LogEvent(
                event_type="DETAIL_FAILED",
                timestamp=self._timestamp(),
                data={"label": label, "exception": repr(exception)},
            )
        )
        self.console.warning(f"⚠️ Failed to fetch details for {label}: {exception!r}")

    def error(self, message: str, *args, exception: Exception | None = None, **kwargs):
        event = LogEvent(
            event_type="ERROR",
            timestamp=self._timestamp(),
            data={
                "message": message,
                "exception": str(exception) if exception else None,
            },
        )
        self.log_event(event)

        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        if exception and "exc_info" not in log_kwargs:
            log_kwargs["exc_info"] = exception

        self.console.error(f"❌ Error: {message}", *args, **log_kwargs)

    def info(self, message: str, *args, **kwargs):
        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.info(message, *args, **log_kwargs)

    def warning(self, message: str, *args, **kwargs):
        event = LogEvent(
            event_type="WARNING",
            timestamp=self._timestamp(),
            data={"message": message[:500]},
        )
        self.log_event(event)

        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.warning(f"⚠️ {message}", *args, **log_kwargs)

    def exception(self, message: str, *args, **kwargs):
        event = LogEvent(
            event_type="ERROR",
            timestamp=self._timestamp(),
            data={"message": message[:500]},
        )
        self.log_event(event)
        self.console.exception(f"❌ {message}", *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.debug(message, *args, **log_kwargs)

    def close(self) -> None:
        with self._file_lock:
            if self._log_file_handle is not None:
                self._log_file_handle.close()
                self._log_file_handle = None


logger = AngelscriptLogger(events_enabled=config.log_events, level=config.log_level)
