"""Pipeline engine: stage sequencing and JSON Lines I/O."""

from jsonexpand.engine.io import EventSourceError, read_events, write_events
from jsonexpand.engine.pipeline import Pipeline

__all__ = [
    "EventSourceError",
    "Pipeline",
    "read_events",
    "write_events",
]
