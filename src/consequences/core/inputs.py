"""
User-provided input values.

An InputValue is bound to a condition or action invocation when a link is
configured. Several values may share a unique_id; order is preserved.
"""

from dataclasses import dataclass
from typing import Any, Sequence


class _Missing:
    """Sentinel for "no input with this id"."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class InputValue:
    """
    A named value handed to a condition or action.

    Attributes:
        unique_id: Identifier of the declared input (e.g., "input", "value")
        value: The value itself (already validated by the input schema)
    """

    unique_id: str
    value: Any


def first_value(inputs: Sequence[InputValue], unique_id: str, default: Any = MISSING) -> Any:
    """
    Return the value of the first input with the given id.

    Later inputs sharing the id are ignored (first match wins).

    Args:
        inputs: Input values in configuration order
        unique_id: Input id to look for
        default: Returned when no input matches (MISSING if not given)

    Returns:
        The matching value, or ``default``
    """
    for item in inputs:
        if item.unique_id == unique_id:
            return item.value
    return default
