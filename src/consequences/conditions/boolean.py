"""
Boolean conditions.

Both conditions look at the first input whose id is "input" and ignore any
later input with the same id.
"""

from typing import Sequence

from consequences.core.inputs import InputValue, first_value, MISSING
from consequences.core.interfaces import Condition

INPUT_ID = "input"


class AlwaysTrue(Condition):
    """True when the "input" value is ``True``."""

    async def evaluate(self, inputs: Sequence[InputValue]) -> bool:
        value = first_value(inputs, INPUT_ID)
        if value is MISSING:
            return False
        return value is True


class AlwaysFalse(Condition):
    """True when the "input" value is ``False``."""

    async def evaluate(self, inputs: Sequence[InputValue]) -> bool:
        value = first_value(inputs, INPUT_ID)
        if value is MISSING:
            return False
        return value is False
