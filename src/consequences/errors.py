"""
Exception hierarchy for consequences.

Failures inside a chain propagate up to the dispatch boundary, where they are
logged and recorded. Nothing here is swallowed silently.
"""

from typing import List, Optional


class ConsequencesError(Exception):
    """Base class for all consequences errors."""


class ActionFailure(ConsequencesError):
    """An action's side effect failed."""

    def __init__(
        self,
        message: str,
        action: object = None,
        link_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.action = action
        self.link_id = link_id


class ConditionFailure(ConsequencesError):
    """A condition could not be evaluated."""

    def __init__(
        self,
        message: str,
        condition: object = None,
        link_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.condition = condition
        self.link_id = link_id


class ListenerFailure(ConsequencesError):
    """
    One or more change listeners raised during notification.

    Raised after every queued round was delivered, so the failures of all
    listeners are collected in ``errors``. The variable keeps the new value.
    """

    def __init__(self, variable_id: str, errors: List[BaseException]) -> None:
        super().__init__(
            f"{len(errors)} change listener(s) failed for variable '{variable_id}'"
        )
        self.variable_id = variable_id
        self.errors = errors


class CycleDetected(ConsequencesError):
    """Link evaluation re-entered a link already on the current path."""

    def __init__(self, link_id: str, path: List[str]) -> None:
        super().__init__(f"Cycle detected at link '{link_id}': {' -> '.join(path + [link_id])}")
        self.link_id = link_id
        self.path = path


class DepthExceeded(ConsequencesError):
    """Link evaluation nested deeper than the configured ``max_depth``."""

    def __init__(self, link_id: str, path: List[str], max_depth: int) -> None:
        super().__init__(
            f"Maximum link depth {max_depth} exceeded at link '{link_id}': "
            f"{' -> '.join(path + [link_id])}"
        )
        self.link_id = link_id
        self.path = path
        self.max_depth = max_depth


class AddonError(ConsequencesError):
    """Misuse of the addon boundary (unknown module, duplicate instance, ...)."""
