"""Status codes and kinds used across subsystem boundaries."""

from enum import StrEnum


class DecodeFailureKind(StrEnum):
    """Why expanding a JSON field failed.

    Every kind is handled the same way by the transform (tag, log, pass
    through); the kind only appears in diagnostics.
    """

    MALFORMED_JSON = "malformed_json"
    NOT_A_STRING = "not_a_string"
    NOT_AN_OBJECT = "not_an_object"
    TARGET_NOT_OBJECT = "target_not_object"
    SPLIT_KEY_MISSING = "split_key_missing"
    SPLIT_NOT_ARRAY = "split_not_array"
    SPLIT_ELEMENT_NOT_OBJECT = "split_element_not_object"
    INVALID_TIMESTAMP = "invalid_timestamp"
