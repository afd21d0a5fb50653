"""
Built-in events.
"""

from .variable_changed import VariableValueChangedEvent

__all__ = ["VariableValueChangedEvent"]
