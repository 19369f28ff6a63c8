from __future__ import annotations

from typing import Any, Optional

from sui_readers.runtime.events import emit

from .constants import CLIENT_NAME


def emit_event(
    event_type: str,
    message: str,
    *,
    stream: Optional[str] = None,
    count: Optional[int] = None,
    level: str = "info",
    **fields: Any,
) -> None:
    """Emit structured event to runtime bus. Fails silently."""
    emit(
        event_type,
        message,
        client=CLIENT_NAME,
        stream=stream,
        count=count,
        level=level,
        **(fields or {}),
    )


def debug(message: str, *, stream: Optional[str] = None, **fields: Any) -> None:
    emit_event("message", message, stream=stream, level="debug", **fields)


def info(message: str, *, stream: Optional[str] = None, **fields: Any) -> None:
    emit_event("message", message, stream=stream, level="info", **fields)


def warn(message: str, *, stream: Optional[str] = None, **fields: Any) -> None:
    emit_event("message", message, stream=stream, level="warn", **fields)


def error(message: str, *, stream: Optional[str] = None, **fields: Any) -> None:
    emit_event("message", message, stream=stream, level="error", **fields)


def count(message: str, n: int, *, stream: Optional[str] = None, **fields: Any) -> None:
    emit_event("count", message, stream=stream, count=n, level="info", **fields)
