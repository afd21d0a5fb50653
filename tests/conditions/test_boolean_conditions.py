"""Tests for AlwaysTrue and AlwaysFalse."""

import pytest

from consequences.conditions import AlwaysFalse, AlwaysTrue
from consequences.core.inputs import InputValue


class TestAlwaysTrue:
    """Tests for AlwaysTrue.evaluate."""

    @pytest.fixture
    def condition(self):
        return AlwaysTrue()

    @pytest.mark.asyncio
    async def test_true_input(self, condition):
        """Test an input with id "input" and value True."""
        assert await condition.evaluate([InputValue("input", True)]) is True

    @pytest.mark.asyncio
    async def test_first_true_wins(self, condition):
        """Test that a later False with the same id is ignored."""
        result = await condition.evaluate([InputValue("input", True), InputValue("input", False)])
        assert result is True

    @pytest.mark.asyncio
    async def test_first_false_wins(self, condition):
        """Test that a later True with the same id is ignored."""
        result = await condition.evaluate([InputValue("input", False), InputValue("input", True)])
        assert result is False

    @pytest.mark.asyncio
    async def test_no_inputs(self, condition):
        """Test the empty input case."""
        assert await condition.evaluate([]) is False

    @pytest.mark.asyncio
    async def test_no_input_with_id(self, condition):
        """Test that inputs with other ids are ignored."""
        assert await condition.evaluate([InputValue("not-input", True)]) is False

    @pytest.mark.asyncio
    async def test_truthy_non_bool_is_not_true(self, condition):
        """Test that only the value True matches."""
        assert await condition.evaluate([InputValue("input", 1)]) is False


class TestAlwaysFalse:
    """Tests for AlwaysFalse.evaluate."""

    @pytest.fixture
    def condition(self):
        return AlwaysFalse()

    @pytest.mark.asyncio
    async def test_false_input(self, condition):
        """Test an input with id "input" and value False."""
        assert await condition.evaluate([InputValue("input", False)]) is True

    @pytest.mark.asyncio
    async def test_first_false_wins(self, condition):
        """Test that a later True with the same id is ignored."""
        result = await condition.evaluate([InputValue("input", False), InputValue("input", True)])
        assert result is True

    @pytest.mark.asyncio
    async def test_first_true_wins(self, condition):
        """Test that a later False with the same id is ignored."""
        result = await condition.evaluate([InputValue("input", True), InputValue("input", False)])
        assert result is False

    @pytest.mark.asyncio
    async def test_no_inputs(self, condition):
        """Test the empty input case."""
        assert await condition.evaluate([]) is False

    @pytest.mark.asyncio
    async def test_no_input_with_id(self, condition):
        """Test that inputs with other ids are ignored."""
        assert await condition.evaluate([InputValue("not-input", False)]) is False

    @pytest.mark.asyncio
    async def test_falsy_non_bool_is_not_false(self, condition):
        """Test that only the value False matches."""
        assert await condition.evaluate([InputValue("input", 0)]) is False
