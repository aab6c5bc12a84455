"""JsonExpand transform: decode a JSON text field and merge or split it.

Takes a field holding JSON text and expands it into real structure:

- Merge mode (default): the decoded object's keys are merged into the event
  root, or into the mapping at `target` (created if absent). Decoded keys
  overwrite existing ones; other existing keys are kept.
- Split mode (`array_split` set): the array stored under that key in the
  decoded object becomes one new event per non-empty element. The input
  event is cancelled and never emitted.

Events whose text cannot be expanded are tagged `_jsonparsefailure`, logged
at warning level and passed on unchanged (apart from the tag). Nothing is
raised to the engine for bad data.

Example:
    transform = JsonExpand({"source": "message", "target": "doc"})
    [out] = transform.process(Event({"message": '{"x": 1}'}))
    out.get("doc")  # {"x": 1}
"""

from typing import Any

import structlog
from pydantic import Field, field_validator

from jsonexpand.contracts import (
    MISSING,
    TIMESTAMP_FIELD,
    DecodeErr,
    DecodeFailureKind,
    DecodeOk,
    DecodeResult,
    Event,
)
from jsonexpand.core.codec import decode_json
from jsonexpand.core.timestamps import parse_timestamp
from jsonexpand.plugins.base import BaseTransform
from jsonexpand.plugins.config_base import TransformConfig

logger = structlog.get_logger(__name__)

PARSE_FAILURE_TAG = "_jsonparsefailure"


class JsonExpandConfig(TransformConfig):
    """Configuration for the JSON expand transform.

    Attributes:
        source: Field holding the JSON text (required)
        target: Field to merge into; omitted means the event root
        array_split: Key of an array in the decoded JSON to split into events
    """

    source: str = Field(..., description="Field containing JSON text")
    target: str | None = Field(default=None, description="Field to expand into (default: event root)")
    array_split: str | None = Field(default=None, description="Key of an array to split into separate events")

    @field_validator("source")
    @classmethod
    def validate_source_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("source cannot be empty")
        return v

    @field_validator("target", "array_split")
    @classmethod
    def validate_optional_not_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("must be omitted or a non-empty field name")
        return v


def _is_empty(item: Any) -> bool:
    """Emptiness test for split elements: {}, [], "" and null."""
    if item is None:
        return True
    if isinstance(item, dict | list | str):
        return len(item) == 0
    return False


def _scalar_ancestor(event: Event, target: str) -> tuple[str, Any] | None:
    """Find the first ancestor of a dotted target holding a non-mapping value.

    Returns its path and value, or None.

    Absent or null ancestors are not reported; they are created as mappings.
    """
    if target in event.fields or "." not in target:
        return None
    *parents, _ = target.split(".")
    current: dict[str, Any] = event.fields
    for depth, part in enumerate(parents, start=1):
        child = current.get(part)
        if child is None:
            return None
        if not isinstance(child, dict):
            return ".".join(parents[:depth]), child
        current = child
    return None


def resolve_destination(event: Event, target: str | None) -> DecodeResult:
    """Find the mapping decoded keys are merged into.

    With no target this is the event's root mapping. Otherwise it is the
    mapping stored at target, and an empty mapping is stored there first if
    target is absent or null. A target, or any ancestor of a dotted target,
    holding another value is an error and the event is left untouched, so a
    scalar (including the source text itself) is never clobbered.

    Returns:
        DecodeOk with the live dict (merging into it mutates the event), or
        DecodeErr with kind TARGET_NOT_OBJECT
    """
    if target is None:
        return DecodeOk(event.fields)
    blocked = _scalar_ancestor(event, target)
    if blocked is not None:
        blocked_at, blocker = blocked
        return DecodeErr(
            kind=DecodeFailureKind.TARGET_NOT_OBJECT,
            detail=f"target '{target}' is under '{blocked_at}', which holds {type(blocker).__name__}, not an object",
        )
    current = event.get(target)
    if current is MISSING or current is None:
        current = {}
        event.set(target, current)
    elif not isinstance(current, dict):
        return DecodeErr(
            kind=DecodeFailureKind.TARGET_NOT_OBJECT,
            detail=f"target '{target}' holds {type(current).__name__}, not an object",
        )
    return DecodeOk(current)


def split_items(decoded: Any, key: str) -> DecodeResult:
    """Look up and validate the array to split.

    Returns:
        DecodeOk with the list of non-empty object elements, in order, or
        DecodeErr if the key is absent, not an array, or an element is
        neither empty nor an object.
    """
    if not isinstance(decoded, dict):
        return DecodeErr(
            kind=DecodeFailureKind.NOT_AN_OBJECT,
            detail=f"cannot look up '{key}' in JSON {type(decoded).__name__}",
        )
    if key not in decoded:
        return DecodeErr(kind=DecodeFailureKind.SPLIT_KEY_MISSING, detail=f"key '{key}' not found in JSON object")

    array = decoded[key]
    if not isinstance(array, list):
        return DecodeErr(
            kind=DecodeFailureKind.SPLIT_NOT_ARRAY,
            detail=f"'{key}' must be an array, got {type(array).__name__}",
        )

    items: list[dict[str, Any]] = []
    for index, item in enumerate(array):
        if _is_empty(item):
            continue
        if not isinstance(item, dict):
            return DecodeErr(
                kind=DecodeFailureKind.SPLIT_ELEMENT_NOT_OBJECT,
                detail=f"'{key}[{index}]' must be an object, got {type(item).__name__}",
            )
        items.append(item)
    return DecodeOk(items)


def coerce_timestamp(event: Event) -> DecodeResult:
    """Replace a string @timestamp with a UTC datetime.

    Returns DecodeOk(None) when there is nothing to coerce.
    """
    value = event.get(TIMESTAMP_FIELD)
    if not isinstance(value, str):
        return DecodeOk(None)
    try:
        parsed = parse_timestamp(value)
    except ValueError as e:
        return DecodeErr.from_exception(DecodeFailureKind.INVALID_TIMESTAMP, e)
    event.set(TIMESTAMP_FIELD, parsed)
    return DecodeOk(parsed)


class JsonExpand(BaseTransform):
    """Expand JSON text held in one event field.

    Config options:
        source: Required. Field holding JSON text
        target: Field to place the decoded object in (default: event root).
            Created when absent; keys already there are kept unless the
            decoded object overwrites them. A scalar target is a failure.
        array_split: Key of an array inside the decoded object. When set,
            each non-empty element becomes a new event and the input event
            is cancelled.
        type, tags, exclude_tags, add_field, remove_field, add_tag,
        remove_tag: Common stage options (see TransformConfig)

    Output per input event:
        - source absent or stage conditions not met: [event] untouched
        - decode failure: [event] tagged _jsonparsefailure
        - merge: [event] with decoded keys merged
        - split: one new event per non-empty element, input event cancelled
    """

    name = "json_expand"
    plugin_version = "1.0.0"

    def __init__(self, config: dict[str, Any]) -> None:
        """Initialize the JsonExpand transform.

        Args:
            config: Configuration dict containing source and optional settings

        Raises:
            PluginConfigError: If required config is missing or invalid
        """
        super().__init__(config)
        cfg = JsonExpandConfig.from_dict(config)
        self.init_common_options(cfg)
        self._source = cfg.source
        self._target = cfg.target
        self._array_split = cfg.array_split

    def register(self) -> None:
        logger.debug(
            "Registered json filter",
            source=self._source,
            target=self._target,
            array_split=self._array_split,
        )

    def process(self, event: Event) -> list[Event]:
        """Expand the source field of one event.

        In split mode every array element is validated before any event is
        built, so the split events are returned together in one list rather
        than handed on one at a time. A bad element therefore yields no
        split events at all.

        Args:
            event: Input event (mutated in place in merge mode)

        Returns:
            Events to pass downstream (see class docstring)
        """
        if not self.should_process(event):
            return [event]

        logger.debug("Running json filter", fields=event.fields)

        if not event.has(self._source):
            return [event]

        raw = event.get(self._source)
        # Resolved before decoding: an absent target is created even if the text is bad
        dest = resolve_destination(event, self._target)

        decoded = decode_json(raw)
        if isinstance(decoded, DecodeErr):
            return self._fail(event, raw, decoded)

        if self._array_split is not None:
            return self._split(event, raw, decoded.value, self._array_split)

        if isinstance(dest, DecodeErr):
            return self._fail(event, raw, dest)

        if not isinstance(decoded.value, dict):
            return self._fail(
                event,
                raw,
                DecodeErr(
                    kind=DecodeFailureKind.NOT_AN_OBJECT,
                    detail=f"expected a JSON object to merge, got {type(decoded.value).__name__}",
                ),
            )

        dest.value.update(decoded.value)

        # A JSON payload may carry its own @timestamp; keep it a real timestamp
        coerced = coerce_timestamp(event)
        if isinstance(coerced, DecodeErr):
            return self._fail(event, raw, coerced)

        self.filter_matched(event)
        logger.debug("Event after json filter", fields=event.fields)
        return [event]

    def _split(self, event: Event, raw: Any, decoded: Any, key: str) -> list[Event]:
        items = split_items(decoded, key)
        if isinstance(items, DecodeErr):
            return self._fail(event, raw, items)

        outputs: list[Event] = []
        for item in items.value:
            event_split = Event(item)
            coerced = coerce_timestamp(event_split)
            if isinstance(coerced, DecodeErr):
                return self._fail(event, raw, coerced)
            logger.debug("JSON array split item", value=event_split.fields)
            self.filter_matched(event_split)
            outputs.append(event_split)

        event.cancel()
        return outputs

    def _fail(self, event: Event, raw: Any, error: DecodeErr) -> list[Event]:
        event.tag(PARSE_FAILURE_TAG)
        logger.warning(
            "Trouble parsing json",
            source=self._source,
            raw=raw,
            kind=str(error.kind),
            detail=error.detail,
        )
        return [event]
