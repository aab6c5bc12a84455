"""Outcomes of the decode-and-split steps.

Decoding and array lookup return a value instead of raising, so callers
branch on the variant explicitly:

    result = decode_json(text)
    if isinstance(result, DecodeErr):
        ...  # result.kind, result.detail
    else:
        ...  # result.value

Both variants are frozen; a result is produced once and only inspected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from jsonexpand.contracts.enums import DecodeFailureKind

T = TypeVar("T")


@dataclass(frozen=True)
class DecodeOk(Generic[T]):
    """Successful decode or lookup carrying the produced value."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class DecodeErr:
    """Failed decode or lookup.

    Fields:
        kind: Failure category (see DecodeFailureKind)
        detail: Human-readable description for the diagnostic log
    """

    kind: DecodeFailureKind
    detail: str

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def from_exception(cls, kind: DecodeFailureKind, exc: BaseException) -> DecodeErr:
        """Build an error from a caught exception, keeping its type name."""
        return cls(kind=kind, detail=f"{type(exc).__name__}: {exc}")


DecodeResult = DecodeOk[Any] | DecodeErr
"""Union alias used in signatures of decode-and-split helpers."""
