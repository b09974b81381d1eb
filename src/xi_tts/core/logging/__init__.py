"""
xi-tts structured logging.

Library modules log through `logging.getLogger("xi-tts.<module>")` and never
touch handlers: the package logger carries only a NullHandler, so a host
application decides where records go. The `xi-tts` CLI calls
configure_logging() to get colored console lines and an optional JSONL file.

Records carry `tag`, `request_id`, `seconds` and the keyword fields passed
to the helpers, which the formatters render.

Configuration (CLI):
    XI_TTS_LOG_LEVEL=3          1-4 or a level name
    XI_TTS_LOG_DIR=logs         enables logs/xi-tts.jsonl
    XI_TTS_JSONL_FILE=run.jsonl
    XI_TTS_NO_COLOR=1

    or the `logging:` section of the settings YAML (XI_TTS_SETTINGS).

Usage:
    log = get_logger("xi-tts.client")
    success(log, "speech_ok", status=200, bytes=48213, seconds=0.84)
"""
from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from xi_tts.core.config import load_settings

from .formatters import ColoredConsoleFormatter, JsonlFormatter, supports_color
from .levels import LEVEL_MAP, LogLevel, coerce_level

PACKAGE_LOGGER = "xi-tts"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())

_request_id: ContextVar[str] = ContextVar("xi_tts_request_id", default="-")

# None until configure_logging(); unconfigured, every record reaches the
# stdlib logger and the host's own levels decide.
_level: Optional[LogLevel] = None
_installed: List[logging.Handler] = []


def get_request_id() -> str:
    return _request_id.get()


def set_request_id(rid: str) -> None:
    _request_id.set(rid)


def get_level() -> Optional[LogLevel]:
    return _level


def read_logging_config(settings_path: Optional[str] = None) -> Dict[str, Any]:
    """
    `logging:` section of the settings YAML, overridden by XI_TTS_* env vars.

    A missing or unparsable settings file contributes nothing; the CLI
    reports a broken file when it loads the client settings.
    """
    cfg: Dict[str, Any] = {}
    path = settings_path or os.getenv("XI_TTS_SETTINGS", "config/settings.yaml")
    try:
        raw = load_settings(path).raw
    except (FileNotFoundError, yaml.YAMLError):
        raw = {}
    section = raw.get("logging") if isinstance(raw, dict) else None
    if isinstance(section, dict):
        cfg.update(section)

    for key, var in (("level", "XI_TTS_LOG_LEVEL"), ("log_dir", "XI_TTS_LOG_DIR"), ("jsonl_file", "XI_TTS_JSONL_FILE")):
        if os.getenv(var):
            cfg[key] = os.environ[var]
    return cfg


def configure_logging(level: Any = None, stream=None) -> LogLevel:
    """
    Install console (and optional JSONL file) handlers on the `xi-tts`
    logger. Calling again replaces the handlers from the previous call.
    The root logger is left alone.

    Returns:
        The effective level.
    """
    global _level

    cfg = read_logging_config()
    _level = coerce_level(level if level is not None else cfg.get("level", LogLevel.NORMAL))

    pkg = logging.getLogger(PACKAGE_LOGGER)
    for handler in _installed:
        pkg.removeHandler(handler)
        handler.close()
    _installed.clear()

    console = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console.setLevel(LEVEL_MAP[_level])
    console.setFormatter(ColoredConsoleFormatter(supports_color(console.stream)))
    _installed.append(console)

    log_dir = cfg.get("log_dir")
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            Path(log_dir) / str(cfg.get("jsonl_file", "xi-tts.jsonl")),
            maxBytes=int(cfg.get("rotate_max_bytes", 10 * 1024 * 1024)),
            backupCount=int(cfg.get("rotate_backup_count", 5)),
            encoding="utf-8",
            delay=True,
        )
        file_handler.setFormatter(JsonlFormatter())
        _installed.append(file_handler)

    for handler in _installed:
        pkg.addHandler(handler)
    pkg.setLevel(logging.DEBUG)
    pkg.propagate = False
    return _level


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    return logging.getLogger(name)


def _log(logger: logging.Logger, py_level: int, tag: str, numeric_level: int, msg: str, **fields: Any) -> None:
    if _level is not None and numeric_level > _level:
        return
    logger.log(
        py_level,
        msg,
        extra={
            "tag": tag,
            "numeric_level": numeric_level,
            "request_id": get_request_id(),
            "event": fields.pop("event", None),
            "seconds": fields.pop("seconds", None),
            "extra_data": fields or None,
        },
    )


def fail(logger: logging.Logger, msg: str, **fields: Any) -> None:
    _log(logger, logging.ERROR, "FAIL", 1, msg, **fields)


def error(logger: logging.Logger, msg: str, **fields: Any) -> None:
    _log(logger, logging.ERROR, "ERROR", 1, msg, **fields)


def warn(logger: logging.Logger, msg: str, **fields: Any) -> None:
    _log(logger, logging.WARNING, "WARN", 2, msg, **fields)


def info(logger: logging.Logger, msg: str, **fields: Any) -> None:
    _log(logger, logging.INFO, "INFO", 2, msg, **fields)


def success(logger: logging.Logger, msg: str, **fields: Any) -> None:
    _log(logger, logging.INFO, "SUCCESS", 2, msg, **fields)


def verbose(logger: logging.Logger, msg: str, **fields: Any) -> None:
    _log(logger, logging.DEBUG, "INFO", 3, msg, **fields)


def debug(logger: logging.Logger, msg: str, **fields: Any) -> None:
    _log(logger, logging.DEBUG, "DEBUG", 4, msg, **fields)


__all__ = [
    "PACKAGE_LOGGER",
    "LogLevel",
    "coerce_level",
    "JsonlFormatter",
    "ColoredConsoleFormatter",
    "get_request_id",
    "set_request_id",
    "get_level",
    "read_logging_config",
    "configure_logging",
    "get_logger",
    "fail",
    "error",
    "warn",
    "info",
    "success",
    "verbose",
    "debug",
]
