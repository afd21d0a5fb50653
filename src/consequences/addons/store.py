"""
Persistence boundary for addon instances.

The engine persists nothing itself. The host provides a store keyed by
instance id; InMemoryAddonStore is the reference implementation used in
tests and demos.
"""

import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from consequences.core.inputs import InputValue
from consequences.errors import AddonError

logger = logging.getLogger(__name__)


@dataclass
class AddonRecord:
    """A stored addon instance."""

    instance_id: str
    module_name: str
    display_name: str
    user_provided_inputs: List[InputValue] = field(default_factory=list)
    saved_data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict for storage."""
        data: Dict[str, Any] = {
            "instance_id": self.instance_id,
            "module_name": self.module_name,
            "display_name": self.display_name,
            "user_provided_inputs": [
                {"unique_id": i.unique_id, "value": i.value} for i in self.user_provided_inputs
            ],
        }
        if self.saved_data is not None:
            data["saved_data"] = self.saved_data
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AddonRecord":
        """Deserialize from dict."""
        return cls(
            instance_id=data["instance_id"],
            module_name=data["module_name"],
            display_name=data["display_name"],
            user_provided_inputs=[
                InputValue(unique_id=i["unique_id"], value=i["value"])
                for i in data.get("user_provided_inputs", [])
            ],
            saved_data=data.get("saved_data"),
        )


class AddonStore(ABC):
    """
    Abstract key-value store of addon records, keyed by instance id.
    """

    @abstractmethod
    def all_addons(self) -> List[AddonRecord]:
        """Return every stored record."""
        pass

    @abstractmethod
    def get_addon(self, instance_id: str) -> Optional[AddonRecord]:
        """Return one record, or None if unknown."""
        pass

    @abstractmethod
    def create_addon(self, record: AddonRecord) -> None:
        """
        Store a new record.

        Raises:
            AddonError: If the instance id is already stored
        """
        pass

    @abstractmethod
    def save_addon_data(self, instance_id: str, saved_data: Dict[str, Any]) -> None:
        """Replace the saved blob of an instance."""
        pass

    @abstractmethod
    def remove_addon(self, instance_id: str) -> bool:
        """Delete a record. Returns False if it was not stored."""
        pass


class InMemoryAddonStore(AddonStore):
    """
    Dict-backed store.

    Records are copied on the way in and out, so callers never share
    mutable state with the store.
    """

    def __init__(self) -> None:
        self._records: Dict[str, AddonRecord] = {}

    def all_addons(self) -> List[AddonRecord]:
        return [copy.deepcopy(r) for r in self._records.values()]

    def get_addon(self, instance_id: str) -> Optional[AddonRecord]:
        record = self._records.get(instance_id)
        return copy.deepcopy(record) if record else None

    def create_addon(self, record: AddonRecord) -> None:
        if record.instance_id in self._records:
            raise AddonError(f"Addon instance '{record.instance_id}' already exists")
        self._records[record.instance_id] = copy.deepcopy(record)
        logger.debug(f"Stored addon instance {record.instance_id} ({record.module_name})")

    def save_addon_data(self, instance_id: str, saved_data: Dict[str, Any]) -> None:
        record = self._records.get(instance_id)
        if record is None:
            logger.warning(f"Cannot save data for unknown addon instance {instance_id}")
            return
        self._records[instance_id] = replace(record, saved_data=copy.deepcopy(saved_data))

    def remove_addon(self, instance_id: str) -> bool:
        return self._records.pop(instance_id, None) is not None
