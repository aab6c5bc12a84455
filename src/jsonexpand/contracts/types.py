"""Semantic type aliases for values flowing through events.

Decoded JSON and event field values share one vocabulary so that every
place a decoded value flows through is typed the same way.
"""

from datetime import datetime
from typing import TypeAlias

JsonScalar: TypeAlias = str | int | float | bool | None
"""A JSON leaf value (RFC 8259 string, number, true/false, null)."""

JsonValue: TypeAlias = JsonScalar | dict[str, "JsonValue"] | list["JsonValue"]
"""Any value produced by the strict JSON decoder."""

FieldValue: TypeAlias = JsonScalar | datetime | dict[str, "FieldValue"] | list["FieldValue"]
"""Any value stored in an event field.

Identical to JsonValue except that timestamps (timezone-aware UTC datetimes)
may appear wherever a scalar may.
"""

FieldMap: TypeAlias = dict[str, FieldValue]
"""The root (or any nested) mapping of an event."""
