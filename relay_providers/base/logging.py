"""Structured logging utilities for the adapter layer.

All adapters log through child loggers of one shared ``relay`` logger. The
shared logger is configured once with a JSON formatter on stderr; its level
comes from ``RELAY_LOG_LEVEL`` (default INFO). Child loggers propagate to it
and carry no handlers of their own.

Events are single-line JSON payloads built by :func:`log_event` so they stay
greppable in plain logs and parseable by collectors. Payloads must never
contain API keys; adapters log ``has_api_key`` booleans instead.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any

from .log_support import JsonFormatter, LogContext

ROOT_LOGGER_NAME = "relay"
_CONFIGURED_ATTR = "_relay_logger_initialized"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Map a level name to its numeric constant; unknown names give ``default``."""
    if not value:
        return default
    return _LEVELS.get(value.strip().upper(), default)


def _ensure_root_logger(json_mode: bool) -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level = _parse_level(os.getenv("RELAY_LOG_LEVEL"))
    logger.setLevel(level)
    if getattr(logger, _CONFIGURED_ATTR, False):
        return logger
    handler = logging.StreamHandler(sys.stderr)
    if json_mode:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    setattr(logger, _CONFIGURED_ATTR, True)
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME, json_mode: bool = True) -> logging.Logger:
    """Return the shared ``relay`` logger or one of its children.

    Parameters:
        name: Dotted logger name. Names outside the ``relay`` hierarchy are
            re-rooted under it (``"openai"`` becomes ``"relay.openai"``).
        json_mode: Use :class:`JsonFormatter` for the shared handler on first
            configuration; ignored afterwards.
    """
    root = _ensure_root_logger(json_mode)
    if name == ROOT_LOGGER_NAME:
        return root
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Emit a structured event.

    Parameters
    ----------
    logger: logging.Logger
        Target logger, normally obtained from :func:`get_logger`.
    event: str
        Dotted event name such as ``stream.finalize``.
    ctx: LogContext | None
        Provider/model context merged into the payload.
    level: int
        Logging level for the record; INFO unless the event reports a failure.
    **fields: Any
        Additional JSON-serializable values. ``None`` values are dropped.
    """
    if not logger.isEnabledFor(level):
        return
    payload: dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


def log_adapter_error(
    logger: logging.Logger,
    adapter: str,
    method: str,
    exc: BaseException,
    ctx: LogContext | None = None,
) -> None:
    """Log a failure tagged ``[<adapter>.<method>]`` at ERROR level.

    Used by every adapter so failures read the same regardless of provider,
    e.g. ``[OpenRouterAdapter.send_streaming] ...``.
    """
    log_event(
        logger,
        "adapter.error",
        ctx,
        level=logging.ERROR,
        tag=f"[{adapter}.{method}]",
        error_type=type(exc).__name__,
        error=str(exc),
    )


__all__ = [
    "LogContext",
    "ROOT_LOGGER_NAME",
    "get_logger",
    "log_event",
    "log_adapter_error",
]
