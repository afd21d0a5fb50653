"""
Built-in actions.
"""

from .variable import UpdateVariable

__all__ = ["UpdateVariable"]
