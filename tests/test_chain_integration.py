"""
End-to-end tests: variable changes firing events that dispatch chains.
"""

import pytest

from consequences import Chain, ChainDispatcher, Event, EventBus, InputValue, Link
from consequences.actions import UpdateVariable
from consequences.conditions import VariableEquals
from consequences.core.variables import ReadOnlyVariable, ReadWriteVariable
from consequences.events import VariableValueChangedEvent


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def dispatcher(bus):
    dispatcher = ChainDispatcher()
    dispatcher.attach(bus)
    return dispatcher


class TestVariableValueChangedEvent:
    """Tests for binding variable changes to the bus."""

    @pytest.mark.asyncio
    async def test_update_publishes_event(self, bus):
        """Test that an update fires the bound event."""
        variable = ReadWriteVariable(unique_id="lux", name="Lux", starting_value=0)
        event = VariableValueChangedEvent("lux.changed", variable)
        received = []
        bus.subscribe(received.append)

        event.bind(bus)
        await variable.update_value(30)

        assert received == [event]
        assert event.last_triggered is not None
        assert event.is_bound is True

    @pytest.mark.asyncio
    async def test_unbind_stops_publishing(self, bus):
        """Test that unbinding removes the change listener."""
        variable = ReadWriteVariable(unique_id="lux", name="Lux", starting_value=0)
        event = VariableValueChangedEvent("lux.changed", variable)
        received = []
        bus.subscribe(received.append)

        event.bind(bus)
        event.unbind()
        await variable.update_value(30)

        assert received == []
        assert variable.listener_count == 0

    def test_read_only_variable_not_bound(self, bus):
        """Test that binding a read-only variable is a no-op."""
        variable = ReadOnlyVariable(unique_id="model", name="Model", starting_value="x")
        event = VariableValueChangedEvent("model.changed", variable)

        event.bind(bus)

        assert event.is_bound is False
        assert event.variable is variable

    @pytest.mark.asyncio
    async def test_rebinding_does_not_duplicate(self, bus):
        """Test that binding twice only publishes once per change."""
        variable = ReadWriteVariable(unique_id="lux", name="Lux", starting_value=0)
        event = VariableValueChangedEvent("lux.changed", variable)
        received = []
        bus.subscribe(received.append)

        event.bind(bus)
        event.bind(bus)
        await variable.update_value(1)

        assert len(received) == 1


class TestReentrantDispatch:
    """Tests for chains re-entering the engine through variables."""

    @pytest.mark.asyncio
    async def test_variable_change_dispatches_chain(self, bus, dispatcher):
        """Test that a chain's action can start another chain."""
        mode = ReadWriteVariable(unique_id="mode", name="Mode", starting_value="home")
        lights = ReadWriteVariable(unique_id="lights", name="Lights", starting_value="on")
        mode_changed = VariableValueChangedEvent("mode.changed", mode)
        mode_changed.bind(bus)

        leaving = Chain(
            starting_event=Event("leave.pressed"),
            starting_link=Link(
                "set-away",
                actions=[(UpdateVariable(mode), [InputValue("value", "away")])],
            ),
        )
        lights_off = Chain(
            starting_event=mode_changed,
            starting_link=Link(
                "check-away",
                conditional_links=[
                    (
                        VariableEquals(mode),
                        [InputValue("value", "away")],
                        Link(
                            "lights-off",
                            actions=[(UpdateVariable(lights), [InputValue("value", "off")])],
                        ),
                    )
                ],
            ),
        )
        dispatcher.register_chain(leaving)
        dispatcher.register_chain(lights_off)

        bus.publish(leaving.starting_event)
        await dispatcher.wait_idle()

        assert await mode.retrieve_value() == "away"
        assert await lights.retrieve_value() == "off"
        assert [e.chain_id for e in dispatcher.get_history()] == ["check-away", "set-away"]
        assert all(e.success for e in dispatcher.get_history())

    @pytest.mark.asyncio
    async def test_chain_updating_its_own_trigger_variable_terminates(self, bus, dispatcher):
        """Test a chain that writes the variable it is triggered by."""
        counter = ReadWriteVariable(unique_id="counter", name="Counter", starting_value=0)
        changed = VariableValueChangedEvent("counter.changed", counter)
        changed.bind(bus)

        # Only the first change (to 1) leads to another update (to 2).
        bump = Link("bump", actions=[(UpdateVariable(counter), [InputValue("value", 2)])])
        dispatcher.register_chain(
            Chain(
                starting_event=changed,
                starting_link=Link(
                    "on-change",
                    conditional_links=[(VariableEquals(counter), [InputValue("value", 1)], bump)],
                ),
            )
        )

        await counter.update_value(1)
        await dispatcher.wait_idle()

        assert await counter.retrieve_value() == 2
        history = dispatcher.get_history(chain_id="on-change")
        assert len(history) == 2
        assert history[1].links_evaluated == ["on-change", "bump"]
        assert history[0].links_evaluated == ["on-change"]
