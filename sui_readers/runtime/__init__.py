"""
Runtime package: the event sink shared by every reader.

Exports:
- RuntimeEvent, set_emitter, emitting, emit
- logging_emitter (sink that writes to the stdlib logging module)
"""
from __future__ import annotations

from .events import RuntimeEvent, emit, emitting, logging_emitter, set_emitter

__all__ = [
    "RuntimeEvent",
    "emit",
    "emitting",
    "logging_emitter",
    "set_emitter",
]
