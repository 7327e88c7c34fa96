"""
Operation library: factories of callables for Stream stages and collectors.
"""

from .logical import Logical
from .numeric import Numbers
from .objects import Objects
from .strings import Strings
from .values import Values

__all__ = ["Logical", "Numbers", "Objects", "Strings", "Values"]
