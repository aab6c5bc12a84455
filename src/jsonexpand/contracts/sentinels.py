"""Sentinel distinguishing a missing event field from a stored None.

JSON null decodes to None and is a legitimate field value, so field lookups
return MISSING when the path does not exist:

    value = event.get("user.email")
    if value is MISSING:
        ...  # field absent
    elif value is None:
        ...  # field present, explicitly null
"""

from typing import Final


class MissingSentinel:
    """Sentinel class to distinguish missing fields from None values.

    This is a singleton - use the MISSING instance, not the class directly.
    Comparison should always use `is` identity, never equality.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"

    def __bool__(self) -> bool:
        return False


MISSING: Final[MissingSentinel] = MissingSentinel()
"""Singleton sentinel indicating a field was not found.

Use identity comparison: `if value is MISSING:`
"""
