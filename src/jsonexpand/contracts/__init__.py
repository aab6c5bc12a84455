"""Shared contracts: the event record, decode results and value types.

Import from here rather than the individual modules:

    from jsonexpand.contracts import Event, DecodeOk, DecodeErr, MISSING
"""

from jsonexpand.contracts.enums import DecodeFailureKind
from jsonexpand.contracts.event import TAGS_FIELD, TIMESTAMP_FIELD, Event, render_value
from jsonexpand.contracts.results import DecodeErr, DecodeOk, DecodeResult
from jsonexpand.contracts.sentinels import MISSING, MissingSentinel
from jsonexpand.contracts.types import FieldMap, FieldValue, JsonScalar, JsonValue

__all__ = [
    "MISSING",
    "TAGS_FIELD",
    "TIMESTAMP_FIELD",
    "DecodeErr",
    "DecodeFailureKind",
    "DecodeOk",
    "DecodeResult",
    "Event",
    "FieldMap",
    "FieldValue",
    "JsonScalar",
    "JsonValue",
    "MissingSentinel",
    "render_value",
]
