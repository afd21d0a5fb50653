"""
Actions that write to variables.
"""

import logging
from typing import Sequence

from consequences.core.inputs import InputValue, first_value, MISSING
from consequences.core.interfaces import Action
from consequences.core.variables import ReadWriteVariable
from consequences.errors import ActionFailure

logger = logging.getLogger(__name__)

VALUE_ID = "value"


class UpdateVariable(Action):
    """Store the first "value" input into a read-write variable."""

    def __init__(self, variable: ReadWriteVariable) -> None:
        if not variable.is_writable:
            raise TypeError(f"Variable {variable.unique_id} is read-only")
        self._variable = variable

    @property
    def variable(self) -> ReadWriteVariable:
        return self._variable

    async def perform(self, inputs: Sequence[InputValue]) -> None:
        new_value = first_value(inputs, VALUE_ID)
        if new_value is MISSING:
            raise ActionFailure(
                f"No '{VALUE_ID}' input to update {self._variable.unique_id}",
                action=self,
            )

        logger.debug(f"Updating {self._variable.unique_id} -> {new_value!r}")
        await self._variable.update_value(new_value)

    def __repr__(self) -> str:
        return f"UpdateVariable({self._variable.unique_id!r})"
