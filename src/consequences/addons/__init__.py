"""
Addon boundary: what addons provide, how their instances are persisted,
and how the host wires them into the engine.
"""

from .base import (
    Addon,
    AddonInitialiser,
    AddonInitialiserMetadata,
    AddonMetadata,
    validate_initialiser,
    validate_initialiser_metadata,
)
from .store import AddonRecord, AddonStore, InMemoryAddonStore
from .manager import AddonManager

__all__ = [
    "Addon",
    "AddonInitialiser",
    "AddonInitialiserMetadata",
    "AddonMetadata",
    "validate_initialiser",
    "validate_initialiser_metadata",
    "AddonRecord",
    "AddonStore",
    "InMemoryAddonStore",
    "AddonManager",
]
