"""Structured audit logging and diagnostic logging utilities."""

from .audit import AuditEvent, JsonlAuditLogger, Outcome, build_event, utc_timestamp
from .debug import configure_debug_logging

__all__ = [
    "AuditEvent",
    "JsonlAuditLogger",
    "Outcome",
    "build_event",
    "configure_debug_logging",
    "utc_timestamp",
]
