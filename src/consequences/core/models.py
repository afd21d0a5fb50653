"""
Data models for chain dispatch: configuration and execution records.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class DispatcherConfig:
    """Configuration for the ChainDispatcher."""

    version: int = 1
    history_size: int = 100  # Number of executions to keep in history
    detect_cycles: bool = True  # Fail when a link re-enters itself
    max_depth: int = 64  # Nesting limit when detect_cycles is off

    def __post_init__(self) -> None:
        if self.history_size < 1:
            raise ValueError(f"history_size must be positive, got {self.history_size}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "version": self.version,
            "history_size": self.history_size,
            "detect_cycles": self.detect_cycles,
            "max_depth": self.max_depth,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DispatcherConfig":
        """Deserialize from dict."""
        return cls(
            version=data.get("version", 1),
            history_size=data.get("history_size", 100),
            detect_cycles=data.get("detect_cycles", True),
            max_depth=data.get("max_depth", 64),
        )


@dataclass
class ChainExecution:
    """Record of a chain execution (for history/debugging)."""

    chain_id: str
    event_id: Optional[str]
    links_evaluated: List[str]
    actions_performed: int
    conditions_evaluated: int
    success: bool
    error: Optional[str]
    timestamp: datetime
    duration_ms: int
    branches_taken: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict for storage/transport."""
        return {
            "chain_id": self.chain_id,
            "event_id": self.event_id,
            "links_evaluated": list(self.links_evaluated),
            "actions_performed": self.actions_performed,
            "conditions_evaluated": self.conditions_evaluated,
            "branches_taken": self.branches_taken,
            "success": self.success,
            "error": self.error,
            "timestamp": self.timestamp.isoformat(),
            "duration_ms": self.duration_ms,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChainExecution":
        """Deserialize from dict."""
        return cls(
            chain_id=data["chain_id"],
            event_id=data.get("event_id"),
            links_evaluated=list(data.get("links_evaluated", [])),
            actions_performed=data.get("actions_performed", 0),
            conditions_evaluated=data.get("conditions_evaluated", 0),
            branches_taken=data.get("branches_taken", 0),
            success=data["success"],
            error=data.get("error"),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            duration_ms=data.get("duration_ms", 0),
        )
