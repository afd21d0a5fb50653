"""Tests for the variable-backed condition and action."""

from unittest.mock import Mock

import pytest

from consequences.actions import UpdateVariable
from consequences.conditions import VariableEquals
from consequences.core.inputs import InputValue, first_value, MISSING
from consequences.core.variables import ReadOnlyVariable, ReadWriteVariable
from consequences.errors import ActionFailure


@pytest.fixture
def mode():
    return ReadWriteVariable(unique_id="house.mode", name="House Mode", starting_value="home")


class TestFirstValue:
    """Tests for first-match input lookup."""

    def test_first_match_wins(self):
        inputs = [InputValue("a", 1), InputValue("b", 2), InputValue("a", 3)]
        assert first_value(inputs, "a") == 1

    def test_missing(self):
        assert first_value([], "a") is MISSING
        assert first_value([InputValue("b", 1)], "a", default=None) is None


class TestVariableEquals:
    """Tests for VariableEquals."""

    @pytest.mark.asyncio
    async def test_matches_current_value(self, mode):
        condition = VariableEquals(mode)

        assert await condition.evaluate([InputValue("value", "home")]) is True
        assert await condition.evaluate([InputValue("value", "away")]) is False

    @pytest.mark.asyncio
    async def test_follows_updates(self, mode):
        condition = VariableEquals(mode)

        await mode.update_value("away")

        assert await condition.evaluate([InputValue("value", "away")]) is True

    @pytest.mark.asyncio
    async def test_first_value_input_wins(self, mode):
        condition = VariableEquals(mode)
        inputs = [InputValue("value", "away"), InputValue("value", "home")]

        assert await condition.evaluate(inputs) is False

    @pytest.mark.asyncio
    async def test_no_value_input(self, mode):
        """Test that a missing expected value never matches."""
        assert await VariableEquals(mode).evaluate([]) is False

    @pytest.mark.asyncio
    async def test_read_only_variable(self):
        variable = ReadOnlyVariable(unique_id="v", name="V", starting_value=3)

        assert await VariableEquals(variable).evaluate([InputValue("value", 3)]) is True


class TestUpdateVariable:
    """Tests for UpdateVariable."""

    @pytest.mark.asyncio
    async def test_updates_variable(self, mode):
        listener = Mock()
        mode.add_change_event_listener(listener)

        await UpdateVariable(mode).perform([InputValue("value", "away")])

        assert await mode.retrieve_value() == "away"
        listener.assert_called_once_with("away")

    @pytest.mark.asyncio
    async def test_missing_value_fails(self, mode):
        with pytest.raises(ActionFailure):
            await UpdateVariable(mode).perform([InputValue("other", "away")])

        assert await mode.retrieve_value() == "home"

    def test_rejects_read_only_variable(self):
        variable = ReadOnlyVariable(unique_id="v", name="V", starting_value=3)

        with pytest.raises(TypeError):
            UpdateVariable(variable)
