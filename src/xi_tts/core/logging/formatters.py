"""
Log formatters used by the CLI handlers.

    JsonlFormatter          one JSON object per line (log file)
    ColoredConsoleFormatter `HH:MM:SS [ TAG ] (rid) message k=v 0.123s`

Console fields are colored by meaning: HTTP status by class, round-trip
seconds by speed, voice/model/format highlighted.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Dict, Optional


class Colors:
    RESET = "\033[0m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_CYAN = "\033[96m"


TAG_COLORS = {
    "SUCCESS": Colors.BRIGHT_GREEN,
    "FAIL": Colors.BRIGHT_RED,
    "ERROR": Colors.BRIGHT_RED,
    "WARN": Colors.BRIGHT_YELLOW,
    "INFO": Colors.BRIGHT_CYAN,
    "DEBUG": Colors.DIM,
}


def supports_color(stream=None) -> bool:
    """False for non-TTY streams, NO_COLOR (https://no-color.org/) or XI_TTS_NO_COLOR=1."""
    if os.getenv("XI_TTS_NO_COLOR") == "1" or os.getenv("NO_COLOR"):
        return False
    stream = stream if stream is not None else sys.stdout
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class JsonlFormatter(logging.Formatter):
    """
    Output Format:
        {"ts": "2026-01-15T14:30:05+03:00", "level": 2, "tag": "SUCCESS",
         "message": "speech_ok", "request_id": "abc123", "seconds": 0.84,
         "extra": {"status": 200, "bytes": 48213}}
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created).astimezone().isoformat(),
            "level": getattr(record, "numeric_level", 2),
            "tag": getattr(record, "tag", record.levelname),
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
        }
        for key in ("event", "seconds"):
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            payload["extra"] = extra_data
        return json.dumps(payload, ensure_ascii=False, default=str)


class ColoredConsoleFormatter(logging.Formatter):
    """
    Example:
        14:30:05 [SUCCESS] (abc123) speech_ok status=200 bytes=48213 0.840s
        14:30:07 [ FAIL  ] (abc123) api_error status=401 message=invalid key
    """

    def __init__(self, use_colors: Optional[bool] = None):
        super().__init__()
        self.use_colors = supports_color() if use_colors is None else use_colors

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{Colors.RESET}" if self.use_colors else text

    def format(self, record: logging.LogRecord) -> str:
        tag = getattr(record, "tag", record.levelname)
        rid = getattr(record, "request_id", "-")

        parts = [
            self._paint(datetime.fromtimestamp(record.created).strftime("%H:%M:%S"), Colors.DIM),
            self._paint(f"[{tag:^7}]", TAG_COLORS.get(tag, Colors.WHITE)),
        ]
        if rid != "-":
            parts.append(self._paint(f"({rid})", Colors.CYAN))
        parts.append(record.getMessage())

        event = getattr(record, "event", None)
        if event:
            parts.append(self._paint(f"event={event}", Colors.BLUE))

        for key, value in (getattr(record, "extra_data", None) or {}).items():
            parts.append(self._paint(f"{key}={value}", self._field_color(key, value)))

        seconds = getattr(record, "seconds", None)
        if seconds is not None:
            parts.append(self._paint(f"{seconds:.3f}s", self._seconds_color(seconds)))

        return " ".join(parts)

    @staticmethod
    def _seconds_color(seconds: float) -> str:
        if seconds < 1.0:
            return Colors.GREEN
        return Colors.YELLOW if seconds < 5.0 else Colors.RED

    @staticmethod
    def _field_color(key: str, value: Any) -> str:
        if key == "status" and isinstance(value, int):
            if value < 300:
                return Colors.GREEN
            return Colors.YELLOW if value < 500 else Colors.RED
        if key in ("voice", "model", "format"):
            return Colors.MAGENTA
        return Colors.DIM
