"""
Built-in conditions.

Every condition is a deterministic function of its inputs, and looks up
inputs first-match-wins.
"""

from .boolean import AlwaysTrue, AlwaysFalse
from .variable import VariableEquals

__all__ = [
    "AlwaysTrue",
    "AlwaysFalse",
    "VariableEquals",
]
