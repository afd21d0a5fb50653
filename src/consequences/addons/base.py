"""
Addon boundary.

Addons supply the conditions, actions, variables and chain wiring the
engine runs. How addon code is discovered and imported is up to the host;
this module only defines what an addon looks like once it is available.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from consequences.core.bus import Event
from consequences.core.chain import Chain
from consequences.core.inputs import InputValue
from consequences.core.variables import Variable


SaveData = Callable[[Dict[str, Any]], None]


@dataclass(frozen=True)
class AddonInitialiserMetadata:
    """
    Information about an addon, available before any instance exists.

    Attributes:
        name: User-friendly display name
        description: User-friendly description
        supports_multiple_instances: Whether more than one instance may be
            created (e.g., one per account on the same platform)
        inputs: Declarations of the inputs presented to the user before
            creation. Their schema and validation live outside the engine.
    """

    name: str
    description: str
    supports_multiple_instances: bool
    inputs: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class AddonMetadata:
    """
    Metadata handed to a new addon instance.

    Attributes:
        instance_id: Unique id of this instance
        name: Display name chosen by the user
        inputs: Validated user-provided inputs
    """

    instance_id: str
    name: str
    inputs: List[InputValue] = field(default_factory=list)


class Addon:
    """
    Base class for addon instances.

    Subclasses override the properties for whatever they provide. The host
    registers ``chains`` with the dispatcher and binds every
    VariableValueChangedEvent in ``events`` to the event bus.
    """

    def __init__(self, metadata: AddonMetadata) -> None:
        self.metadata = metadata

    @property
    def variables(self) -> List[Variable]:
        return []

    @property
    def events(self) -> List[Event]:
        return []

    @property
    def chains(self) -> List[Chain]:
        return []

    async def teardown(self) -> None:
        """Release resources when the instance is removed."""
        pass


class AddonInitialiser(ABC):
    """
    Factory for addon instances.

    Addon authors implement ``metadata`` and ``create_instance``.
    """

    @property
    @abstractmethod
    def metadata(self) -> AddonInitialiserMetadata:
        """Information about the addon."""
        pass

    @abstractmethod
    async def create_instance(
        self,
        metadata: AddonMetadata,
        save_data: SaveData,
        saved_data: Optional[Dict[str, Any]] = None,
    ) -> Addon:
        """
        Create a new addon instance.

        Args:
            metadata: Instance metadata, including the user's inputs
            save_data: Callback that persists a blob for this instance
            saved_data: The most recent blob passed to ``save_data``, or None
                if it has never been called

        Returns:
            The new instance
        """
        pass


def validate_initialiser_metadata(obj: Any) -> bool:
    """Duck-type check for initialiser metadata."""
    return (
        isinstance(getattr(obj, "name", None), str)
        and isinstance(getattr(obj, "description", None), str)
        and isinstance(getattr(obj, "supports_multiple_instances", None), bool)
    )


def validate_initialiser(obj: Any) -> bool:
    """Duck-type check for an addon initialiser."""
    metadata = getattr(obj, "metadata", None)
    return (
        metadata is not None
        and validate_initialiser_metadata(metadata)
        and callable(getattr(obj, "create_instance", None))
    )
