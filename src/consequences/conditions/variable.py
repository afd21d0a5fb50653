"""
Conditions that inspect a variable's current value.
"""

import logging
from typing import Sequence

from consequences.core.inputs import InputValue, first_value, MISSING
from consequences.core.interfaces import Condition
from consequences.core.variables import Variable

logger = logging.getLogger(__name__)

VALUE_ID = "value"


class VariableEquals(Condition):
    """
    Check if a variable currently holds the expected value.

    The expected value is the first input with id "value". With no such
    input the condition does not hold.
    """

    def __init__(self, variable: Variable) -> None:
        self._variable = variable

    @property
    def variable(self) -> Variable:
        return self._variable

    async def evaluate(self, inputs: Sequence[InputValue]) -> bool:
        expected = first_value(inputs, VALUE_ID)
        if expected is MISSING:
            logger.warning(f"VariableEquals for {self._variable.unique_id} has no '{VALUE_ID}' input")
            return False

        actual = await self._variable.retrieve_value()
        return actual == expected

    def __repr__(self) -> str:
        return f"VariableEquals({self._variable.unique_id!r})"
