"""Strict JSON decoding for field values.

Decodes RFC 8259 JSON only: no comments, no trailing commas, no single
quotes, and no NaN/Infinity constants (which Python's json module would
otherwise accept). Failures are returned as DecodeErr values, never raised.
"""

import json
from typing import Any

from jsonexpand.contracts.enums import DecodeFailureKind
from jsonexpand.contracts.results import DecodeErr, DecodeOk, DecodeResult


def _reject_nonfinite_constant(value: str) -> Any:
    """Reject NaN, Infinity and -Infinity at parse time.

    Passed to json.loads via parse_constant. These constants are not part
    of RFC 8259 and have no faithful representation in downstream sinks.

    Raises:
        ValueError: Always
    """
    raise ValueError(f"Non-standard JSON constant '{value}' is not allowed")


def decode_json(text: object) -> DecodeResult:
    """Decode JSON text into Python structures.

    Args:
        text: Field value expected to hold JSON text

    Returns:
        DecodeOk with the decoded value (dict, list, str, int, float, bool
        or None), or DecodeErr with kind NOT_A_STRING / MALFORMED_JSON
    """
    if not isinstance(text, str):
        return DecodeErr(
            kind=DecodeFailureKind.NOT_A_STRING,
            detail=f"expected JSON text, got {type(text).__name__}",
        )
    try:
        return DecodeOk(json.loads(text, parse_constant=_reject_nonfinite_constant))
    except json.JSONDecodeError as e:
        return DecodeErr(
            kind=DecodeFailureKind.MALFORMED_JSON,
            detail=f"JSON parse error at line {e.lineno} col {e.colno}: {e.msg}",
        )
    except ValueError as e:
        # _reject_nonfinite_constant
        return DecodeErr.from_exception(DecodeFailureKind.MALFORMED_JSON, e)
    except RecursionError as e:
        return DecodeErr.from_exception(DecodeFailureKind.MALFORMED_JSON, e)
