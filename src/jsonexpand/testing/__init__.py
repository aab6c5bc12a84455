"""Test infrastructure for jsonexpand pipelines.

Factories for constructing production types with sensible defaults.
When a constructor changes, update the factory here; tests that use the
factories need no changes.

Usage:
    from jsonexpand.testing import make_event, make_json_event, make_transform
"""

from __future__ import annotations

import json
from typing import Any

from jsonexpand.contracts import Event
from jsonexpand.plugins.transforms.json_expand import JsonExpand


def make_event(fields: dict[str, Any] | None = None, *, tags: list[str] | None = None, **extra: Any) -> Event:
    """Build an Event from a dict and/or keyword fields.

    Example:
        make_event({"message": "{}"}, tags=["web"], type="nginx")
    """
    data: dict[str, Any] = dict(fields or {})
    data.update(extra)
    if tags is not None:
        data["tags"] = list(tags)
    return Event(data)


def make_json_event(payload: Any, *, source: str = "message", **extra: Any) -> Event:
    """Build an Event whose source field holds payload serialised as JSON text."""
    return make_event({source: json.dumps(payload)}, **extra)


def make_transform(source: str = "message", **options: Any) -> JsonExpand:
    """Build and register a JsonExpand transform."""
    transform = JsonExpand({"source": source, **options})
    transform.register()
    return transform


__all__ = [
    "make_event",
    "make_json_event",
    "make_transform",
]
