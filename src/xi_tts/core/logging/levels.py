"""
Numeric verbosity levels.

    1 MINIMAL  transport and API failures
    2 NORMAL   one line per synthesis call (default)
    3 VERBOSE  voice/model/format/chars of each request
    4 DEBUG    URL and body keys, audio conversion details

Each level maps onto the stdlib threshold installed on the console handler.
"""
from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    MINIMAL = 1
    NORMAL = 2
    VERBOSE = 3
    DEBUG = 4


LEVEL_MAP = {
    LogLevel.MINIMAL: logging.WARNING,
    LogLevel.NORMAL: logging.INFO,
    LogLevel.VERBOSE: logging.DEBUG,
    LogLevel.DEBUG: logging.DEBUG,
}

# Python level names accepted in settings.yaml / XI_TTS_LOG_LEVEL
_ALIASES = {
    "ERROR": LogLevel.MINIMAL,
    "WARNING": LogLevel.MINIMAL,
    "WARN": LogLevel.MINIMAL,
    "INFO": LogLevel.NORMAL,
}


def coerce_level(value: Any) -> LogLevel:
    """
    Accepts a LogLevel, 1-4 (int or str), a level name ("verbose") or a
    Python level name ("INFO"). Anything else falls back to NORMAL.
    """
    if isinstance(value, bool):
        return LogLevel.NORMAL
    if isinstance(value, int):
        return LogLevel(value) if 1 <= value <= 4 else LogLevel.NORMAL
    if isinstance(value, str):
        key = value.strip().upper()
        if key.isdigit():
            return coerce_level(int(key))
        if key in LogLevel.__members__:
            return LogLevel[key]
        return _ALIASES.get(key, LogLevel.NORMAL)
    return LogLevel.NORMAL
