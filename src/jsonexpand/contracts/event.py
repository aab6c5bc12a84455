"""Event record flowing through a pipeline.

An Event is an ordered mapping of field names to values, addressed by dotted
paths ("user.profile.name"). Tags live in the ordinary "tags" field so that
they round-trip through serialisation with the rest of the event.

Ownership:
    Event(fields) deep-copies its initial mapping, so an event never aliases
    the structure it was built from. `fields` exposes the live root mapping
    for stages that merge into it in place; `to_dict()` returns a copy.

Cancellation:
    A stage cancels an event to suppress it downstream. The engine drops
    cancelled events between stages; the flag travels with clone().
"""

from __future__ import annotations

import copy
import json
import re
from collections.abc import Iterator, Mapping
from datetime import datetime
from typing import Any

from jsonexpand.contracts.sentinels import MISSING
from jsonexpand.contracts.types import FieldMap, FieldValue
from jsonexpand.core.timestamps import format_timestamp

TAGS_FIELD = "tags"
TIMESTAMP_FIELD = "@timestamp"

_SPRINTF_PATTERN = re.compile(r"%\{([^}]+)\}")


def _json_default(value: object) -> str:
    if isinstance(value, datetime):
        return format_timestamp(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def render_value(value: FieldValue) -> str:
    """Render a field value as text for sprintf and log output."""
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, dict | list):
        return json.dumps(value, default=_json_default, separators=(",", ":"))
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Event:
    """A single pipeline record: a field tree, tags and a cancel flag.

    Example:
        >>> event = Event({"message": '{"a": 1}', "host": {"name": "web-1"}})
        >>> event.get("host.name")
        'web-1'
        >>> event.set("doc.a", 1)
        >>> event.to_dict()["doc"]
        {'a': 1}
    """

    __slots__ = ("_cancelled", "_fields")

    def __init__(self, fields: Mapping[str, Any] | None = None) -> None:
        self._fields: FieldMap = copy.deepcopy(dict(fields)) if fields is not None else {}
        self._cancelled = False

    # === Field access ===

    @property
    def fields(self) -> FieldMap:
        """Live root mapping. Mutations are visible on the event."""
        return self._fields

    def _resolve_parent(self, path: str, *, create: bool) -> tuple[dict[str, Any], str] | None:
        """Find the mapping holding the last segment of path.

        A top-level key that literally contains dots wins over traversal.
        With create=True, missing or non-mapping intermediates are replaced
        by empty mappings.
        """
        if path in self._fields or "." not in path:
            return self._fields, path

        *parents, leaf = path.split(".")
        current: dict[str, Any] = self._fields
        for part in parents:
            child = current.get(part, MISSING)
            if not isinstance(child, dict):
                if not create:
                    return None
                child = {}
                current[part] = child
            current = child
        return current, leaf

    def get(self, path: str, default: Any = MISSING) -> Any:
        """Return the value at path, or default (MISSING) if absent."""
        resolved = self._resolve_parent(path, create=False)
        if resolved is None:
            return default
        parent, key = resolved
        return parent.get(key, default)

    def has(self, path: str) -> bool:
        """True if a value (including None) is stored at path."""
        return self.get(path) is not MISSING

    def set(self, path: str, value: FieldValue) -> None:
        """Store value at path, creating intermediate mappings as needed."""
        resolved = self._resolve_parent(path, create=True)
        assert resolved is not None  # create=True always resolves
        parent, key = resolved
        parent[key] = value

    def remove(self, path: str) -> Any:
        """Delete the value at path and return it (MISSING if absent)."""
        resolved = self._resolve_parent(path, create=False)
        if resolved is None:
            return MISSING
        parent, key = resolved
        return parent.pop(key, MISSING)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.has(path)

    def __getitem__(self, path: str) -> Any:
        value = self.get(path)
        if value is MISSING:
            raise KeyError(path)
        return value

    def __setitem__(self, path: str, value: FieldValue) -> None:
        self.set(path, value)

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    # === Tags ===

    @property
    def tags(self) -> list[str]:
        """Copy of the event's tags (empty when the field is absent)."""
        value = self._fields.get(TAGS_FIELD)
        if value is None:
            return []
        if isinstance(value, list):
            return [str(tag) for tag in value]
        return [str(value)]

    def tag(self, name: str) -> None:
        """Append a tag unless already present."""
        current = self._fields.get(TAGS_FIELD)
        if current is None:
            current = []
        elif not isinstance(current, list):
            current = [current]
        if name not in current:
            current.append(name)
        self._fields[TAGS_FIELD] = current

    def untag(self, name: str) -> None:
        """Remove a tag if present."""
        current = self._fields.get(TAGS_FIELD)
        if isinstance(current, list):
            while name in current:
                current.remove(name)
        elif current == name:
            self._fields[TAGS_FIELD] = []

    def has_tag(self, name: str) -> bool:
        return name in self.tags

    # === Lifecycle ===

    def cancel(self) -> None:
        """Mark the event so the engine does not emit it downstream."""
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def clone(self) -> Event:
        """Deep copy, including the cancel flag."""
        twin = Event(self._fields)
        twin._cancelled = self._cancelled
        return twin

    def to_dict(self) -> FieldMap:
        """Deep copy of the field tree."""
        return copy.deepcopy(self._fields)

    def to_json(self) -> str:
        """Serialise fields as one line of JSON, timestamps as ISO 8601 Z strings."""
        return json.dumps(self._fields, default=_json_default, ensure_ascii=False)

    # === Formatting ===

    def sprintf(self, template: str) -> str:
        """Expand %{path} references with field values.

        References to absent or null fields are left verbatim.
        """

        def _replace(match: re.Match[str]) -> str:
            value = self.get(match.group(1))
            if value is MISSING or value is None:
                return match.group(0)
            return render_value(value)

        return _SPRINTF_PATTERN.sub(_replace, template)

    # === Comparison ===

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Event):
            return self._fields == other._fields and self._cancelled == other._cancelled
        if isinstance(other, Mapping):
            return self._fields == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        flag = ", cancelled" if self._cancelled else ""
        return f"Event({self._fields!r}{flag})"
