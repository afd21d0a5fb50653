#!/usr/bin/env python3
"""
Quick example demonstrating consequences basic usage.

Run with: PYTHONPATH=src python3 example.py
"""

import asyncio
import logging

from consequences import Chain, ChainDispatcher, Event, EventBus, InputValue, Link
from consequences.actions import UpdateVariable
from consequences.conditions import AlwaysTrue, VariableEquals
from consequences.core.interfaces import Action
from consequences.core.variables import ReadWriteVariable
from consequences.events import VariableValueChangedEvent


class Say(Action):
    """Print the "message" input."""

    async def perform(self, inputs):
        for item in inputs:
            if item.unique_id == "message":
                print(f"   > {item.value}")
                return


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("consequences Example")
    print("=" * 60)

    # 1. Kernel components
    print("\n1. Creating kernel components...")
    bus = EventBus()
    dispatcher = ChainDispatcher()
    dispatcher.attach(bus)
    print("   ✓ EventBus and ChainDispatcher created")

    # 2. Variables and events
    print("\n2. Creating variables...")
    mode = ReadWriteVariable(unique_id="house.mode", name="House Mode", starting_value="home")
    lights = ReadWriteVariable(unique_id="hall.lights", name="Hall Lights", starting_value="on")
    mode_changed = VariableValueChangedEvent("house.mode.changed", mode)
    mode_changed.bind(bus)
    lights.add_change_event_listener(lambda value: print(f"   ✓ Hall lights are now {value}"))
    print(f"   ✓ {mode.name} = {await mode.retrieve_value()}")

    # 3. Chains
    print("\n3. Wiring chains...")
    leave_pressed = Event("front_door.leave_pressed")
    dispatcher.register_chain(
        Chain(
            starting_event=leave_pressed,
            starting_link=Link(
                "set-away",
                actions=[
                    (Say(), [InputValue("message", "Goodbye!")]),
                    (UpdateVariable(mode), [InputValue("value", "away")]),
                ],
            ),
        )
    )
    dispatcher.register_chain(
        Chain(
            starting_event=mode_changed,
            starting_link=Link(
                "mode-changed",
                conditional_links=[
                    (
                        VariableEquals(mode),
                        [InputValue("value", "away")],
                        Link(
                            "lights-off",
                            actions=[(UpdateVariable(lights), [InputValue("value", "off")])],
                        ),
                    ),
                    (
                        AlwaysTrue(),
                        [InputValue("input", True)],
                        Link("announce", actions=[(Say(), [InputValue("message", "Mode changed")])]),
                    ),
                ],
            ),
        )
    )
    print(f"   ✓ {len(dispatcher.all_chains())} chains registered")

    # 4. Fire the event
    print("\n4. Pressing the leave button...")
    bus.publish(leave_pressed)
    await dispatcher.wait_idle()

    # 5. History
    print("\n5. Execution history (newest first):")
    for execution in dispatcher.get_history():
        print(
            f"   - {execution.chain_id}: links={execution.links_evaluated} "
            f"actions={execution.actions_performed} success={execution.success}"
        )


if __name__ == "__main__":
    asyncio.run(main())
