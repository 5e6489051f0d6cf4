"""
Built-in strategies.

Importing this package registers every strategy it contains.
"""

from omnievent.strategies.developer import Developer

__all__ = ["Developer"]
