"""
AddonManager: creates, restores and removes addon instances.

The manager owns the wiring between addon instances and the engine: it
registers an instance's chains with the dispatcher, binds its variable
change events to the bus, and hands it a save_data callback that writes
through to the store.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence, Tuple

from consequences.core.bus import Event, EventBus
from consequences.core.chain import Chain
from consequences.core.dispatcher import ChainDispatcher
from consequences.core.inputs import InputValue
from consequences.events import VariableValueChangedEvent
from consequences.errors import AddonError

from .base import Addon, AddonInitialiser, AddonMetadata, SaveData, validate_initialiser
from .store import AddonRecord, AddonStore

logger = logging.getLogger(__name__)


class AddonManager:
    """
    Manages addon instances on behalf of the host.

    Responsibilities:
    - Keep the available initialisers, keyed by module name
    - Create new instances and persist their records
    - Restore instances from the store on startup
    - Wire instance chains and events into the engine, and unwire on removal

    Does NOT load addon code; initialisers are handed in by the host.
    """

    def __init__(
        self,
        store: AddonStore,
        dispatcher: ChainDispatcher,
        bus: EventBus,
        initialisers: Optional[Dict[str, AddonInitialiser]] = None,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._bus = bus
        self._initialisers: Dict[str, AddonInitialiser] = {}
        self._instances: Dict[str, Addon] = {}
        self._wiring: Dict[str, Tuple[List[Chain], List[Event]]] = {}

        for module_name, initialiser in (initialisers or {}).items():
            self.register_initialiser(module_name, initialiser)

    # =========================================================================
    # Initialisers
    # =========================================================================

    def register_initialiser(self, module_name: str, initialiser: AddonInitialiser) -> None:
        """
        Make an addon available under a module name.

        Raises:
            AddonError: If the object does not look like an initialiser
        """
        if not validate_initialiser(initialiser):
            raise AddonError(f"Invalid addon initialiser for module '{module_name}'")
        self._initialisers[module_name] = initialiser
        logger.info(f"Registered addon module {module_name} ({initialiser.metadata.name})")

    def _initialiser(self, module_name: str) -> AddonInitialiser:
        initialiser = self._initialisers.get(module_name)
        if initialiser is None:
            raise AddonError(f"Unknown addon module '{module_name}'")
        return initialiser

    # =========================================================================
    # Instances
    # =========================================================================

    @property
    def instances(self) -> Dict[str, Addon]:
        return dict(self._instances)

    def get_instance(self, instance_id: str) -> Optional[Addon]:
        return self._instances.get(instance_id)

    async def create_instance(
        self,
        module_name: str,
        display_name: str,
        inputs: Sequence[InputValue] = (),
        instance_id: Optional[str] = None,
    ) -> Addon:
        """
        Create, persist and start a new addon instance.

        Args:
            module_name: Module the initialiser was registered under
            display_name: Name chosen by the user
            inputs: Validated user-provided inputs
            instance_id: Explicit id (generated if None)

        Returns:
            The started instance

        Raises:
            AddonError: Unknown module, or a second instance of an addon that
                only supports one
        """
        initialiser = self._initialiser(module_name)

        if not initialiser.metadata.supports_multiple_instances:
            if any(r.module_name == module_name for r in self._store.all_addons()):
                raise AddonError(f"Addon module '{module_name}' supports a single instance")

        record = AddonRecord(
            instance_id=instance_id or uuid.uuid4().hex,
            module_name=module_name,
            display_name=display_name,
            user_provided_inputs=list(inputs),
        )
        self._store.create_addon(record)

        try:
            addon = await self._start(record, initialiser)
        except Exception:
            self._store.remove_addon(record.instance_id)
            raise

        logger.info(f"Created addon instance {record.instance_id} ({module_name})")
        return addon

    async def restore_instances(self) -> List[Addon]:
        """
        Start every stored instance whose module is available.

        Each instance receives the last blob it saved.

        Returns:
            The started instances
        """
        restored = []
        for record in self._store.all_addons():
            if record.instance_id in self._instances:
                continue

            initialiser = self._initialisers.get(record.module_name)
            if initialiser is None:
                logger.warning(
                    f"Skipping addon instance {record.instance_id}: "
                    f"module {record.module_name} not available"
                )
                continue

            restored.append(await self._start(record, initialiser))

        logger.info(f"Restored {len(restored)} addon instance(s)")
        return restored

    async def remove_instance(self, instance_id: str) -> bool:
        """
        Stop an instance and delete its record.

        Args:
            instance_id: Instance to remove

        Returns:
            True if the instance was known, False otherwise
        """
        addon = self._instances.pop(instance_id, None)
        if addon is None:
            logger.warning(f"Cannot remove unknown addon instance {instance_id}")
            return self._store.remove_addon(instance_id)

        chains, events = self._wiring.pop(instance_id, ([], []))
        for chain in chains:
            self._dispatcher.unregister_chain(chain)
        for event in events:
            if isinstance(event, VariableValueChangedEvent):
                event.unbind()

        try:
            await addon.teardown()
        finally:
            self._store.remove_addon(instance_id)

        logger.info(f"Removed addon instance {instance_id}")
        return True

    async def _start(self, record: AddonRecord, initialiser: AddonInitialiser) -> Addon:
        """Create an instance from a record and wire it into the engine."""
        metadata = AddonMetadata(
            instance_id=record.instance_id,
            name=record.display_name,
            inputs=list(record.user_provided_inputs),
        )
        addon = await initialiser.create_instance(
            metadata,
            self._save_data_for(record.instance_id),
            record.saved_data,
        )

        # Read once; the same objects are unwired on removal.
        chains = list(addon.chains)
        events = list(addon.events)
        for event in events:
            if isinstance(event, VariableValueChangedEvent):
                event.bind(self._bus)
        for chain in chains:
            self._dispatcher.register_chain(chain)

        self._instances[record.instance_id] = addon
        self._wiring[record.instance_id] = (chains, events)
        return addon

    def _save_data_for(self, instance_id: str) -> SaveData:
        def save_data(data: Dict[str, Any]) -> None:
            self._store.save_addon_data(instance_id, data)

        return save_data
