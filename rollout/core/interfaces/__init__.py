"""
Core interfaces (protocols) for extensibility.
All backends must implement these protocols to be swappable.
"""

from .cache import CacheBackend
from .store import StoreBackend

__all__ = [
    "CacheBackend",
    "StoreBackend",
]
