"""
Structured events from the GraphQL readers.

Readers report what they do (requests, pages, anchors, merge sides) as small
`RuntimeEvent` records sent to one process-wide sink. No sink installed means
events are dropped; a sink that raises is ignored.

  from sui_readers.runtime import emitting, logging_emitter

  with emitting(logging_emitter()):
      for oid, order in traverse_book(client, ch, anchor):
          ...
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, Optional

EventEmitter = Callable[["RuntimeEvent"], None]

_sink: Optional[EventEmitter] = None

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True)
class RuntimeEvent:
    """
    One reader event.

    `message` is a dotted event name (`traversal.start`, `graphql.response`),
    `client` names the emitting reader and `fields` holds its keyword details.
    """

    type: str
    message: str
    client: Optional[str] = None
    stream: Optional[str] = None
    count: Optional[int] = None
    level: str = "info"  # debug|info|warn|error
    ts: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    fields: Dict[str, Any] = field(default_factory=dict)


def set_emitter(fn: Optional[EventEmitter]) -> Optional[EventEmitter]:
    """Replace the sink (None drops events). Returns the previous one."""
    global _sink
    previous, _sink = _sink, fn
    return previous


@contextmanager
def emitting(fn: Optional[EventEmitter]) -> Iterator[None]:
    """Send events to `fn` inside the block, then restore the previous sink."""
    previous = set_emitter(fn)
    try:
        yield
    finally:
        set_emitter(previous)


def emit(
    event_type: str,
    message: str,
    *,
    client: Optional[str] = None,
    stream: Optional[str] = None,
    count: Optional[int] = None,
    level: str = "info",
    **fields: Any,
) -> None:
    sink = _sink
    if sink is None:
        return

    event = RuntimeEvent(
        type=str(event_type),
        message=str(message),
        client=client,
        stream=stream,
        count=count,
        level=str(level),
        fields=fields or {},
    )
    try:
        sink(event)
    except Exception:
        # A broken sink must not fail the read that reported to it.
        return


def logging_emitter(logger: Optional[logging.Logger] = None) -> EventEmitter:
    """Sink that writes each event as one `logging` record: `name key=value ...`."""
    log = logger or logging.getLogger("sui_readers")

    def _forward(event: RuntimeEvent) -> None:
        extra = dict(event.fields)
        if event.stream:
            extra["stream"] = event.stream
        if event.count is not None:
            extra["count"] = event.count
        details = " ".join(f"{k}={v}" for k, v in extra.items())
        log.log(_LEVELS.get(event.level, logging.INFO), "%s %s", event.message, details)

    return _forward
