"""JSON Lines event source and sink.

One JSON object per line in, one per line out. Input lines are trusted no
further than "is a JSON object": anything else stops the run with the line
number, since a malformed input file is an operator problem rather than a
per-event one.
"""

from collections.abc import Iterable, Iterator
from typing import TextIO

from jsonexpand.contracts import DecodeErr, Event
from jsonexpand.core.codec import decode_json


class EventSourceError(Exception):
    """Raised when an input line cannot be turned into an event."""

    def __init__(self, line_number: int, message: str) -> None:
        self.line_number = line_number
        super().__init__(f"line {line_number}: {message}")


def read_events(stream: TextIO) -> Iterator[Event]:
    """Yield one Event per non-blank JSON Lines record.

    Args:
        stream: Text stream positioned at the first record

    Raises:
        EventSourceError: If a line is not valid JSON or not a JSON object
    """
    for line_number, line in enumerate(stream, start=1):
        text = line.strip()
        if not text:
            continue
        decoded = decode_json(text)
        if isinstance(decoded, DecodeErr):
            raise EventSourceError(line_number, decoded.detail)
        if not isinstance(decoded.value, dict):
            raise EventSourceError(line_number, f"expected a JSON object, got {type(decoded.value).__name__}")
        yield Event(decoded.value)


def write_events(events: Iterable[Event], stream: TextIO) -> int:
    """Write events as JSON Lines.

    Returns:
        Number of events written
    """
    count = 0
    for event in events:
        stream.write(event.to_json())
        stream.write("\n")
        count += 1
    return count
